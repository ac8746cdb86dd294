# ripple_tank/config.py
"""
Simulation parameters and reference defaults.

The reference values reproduce the published double-slit scene: a 100x100
lattice with 5 units between nodes, a wall in the middle column with a
15-row slit, and a source at the middle of the left edge.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

import numpy as np


class InvalidConfiguration(ValueError):
    """Raised when lattice or physics parameters are inconsistent."""
    pass


@dataclass(frozen=True)
class PhysicsParams:
    """
    Force model and integrator coefficients.

    Attributes:
    -----------
    k_spring : float
        Vertical spring constant between neighbors
    k_friction : float
        Quadratic drag coefficient (force = k_friction * |v|^2 against v)
    gravity : float
        Restoring coefficient pulling nodes back to y = 0 (0 disables it)
    dt : float
        Step size. 1.0 is the reference unit step.
    velocity_clamp : Optional[float]
        Cap on speed after each step. None disables the cap.
    floor_clamp : bool
        When True, nodes cannot go below y = 0 (vertical velocity is zeroed
        on contact).
    """
    k_spring: float = 0.1
    k_friction: float = 0.1
    gravity: float = 0.0
    dt: float = 1.0
    velocity_clamp: Optional[float] = None
    floor_clamp: bool = False

    def __post_init__(self):
        for name in ('k_spring', 'k_friction', 'gravity'):
            if getattr(self, name) < 0:
                raise InvalidConfiguration(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.dt <= 0:
            raise InvalidConfiguration(f"dt must be > 0, got {self.dt}")
        if self.velocity_clamp is not None and self.velocity_clamp <= 0:
            raise InvalidConfiguration(
                f"velocity_clamp must be > 0 or None, got {self.velocity_clamp}"
            )


@dataclass(frozen=True)
class DriveParams:
    """Oscillation law of the driven node: y = amplitude * sin(t / period)."""
    amplitude: float = 50.0
    period: float = 200.0

    def __post_init__(self):
        if self.period <= 0:
            raise InvalidConfiguration(f"period must be > 0, got {self.period}")

    def position(self, sim_time: float) -> float:
        return self.amplitude * np.sin(sim_time / self.period)


@dataclass(frozen=True)
class ClockParams:
    """
    External driving clock.

    The oscillation was originally keyed to a millisecond wall clock sampled
    once per display frame, so a tick advances ~16 ms by default.
    """
    ms_per_tick: float = 16.0
    start_time: float = 0.0

    def __post_init__(self):
        if self.ms_per_tick <= 0:
            raise InvalidConfiguration(f"ms_per_tick must be > 0, got {self.ms_per_tick}")


@dataclass(frozen=True)
class LatticeParams:
    """
    Grid geometry and role layout.

    None for slit_center_row, wall_column or driven_row means "middle of the
    grid" (height // 2, width // 2, height // 2).
    """
    width: int = 100
    height: int = 100
    spacing: float = 5.0
    slit_size: int = 15
    slit_center_row: Optional[int] = None
    wall_column: Optional[int] = None
    driven_row: Optional[int] = None
    driven_column: int = 0
    mass: float = 1.0

    def resolved(self) -> "LatticeParams":
        """Return a copy with the middle-of-grid defaults filled in."""
        return replace(
            self,
            slit_center_row=self.height // 2 if self.slit_center_row is None else self.slit_center_row,
            wall_column=self.width // 2 if self.wall_column is None else self.wall_column,
            driven_row=self.height // 2 if self.driven_row is None else self.driven_row,
        )


REFERENCE_LATTICE = LatticeParams().resolved()
REFERENCE_PHYSICS = PhysicsParams()
REFERENCE_DRIVE = DriveParams()
REFERENCE_CLOCK = ClockParams()


_SECTIONS = {
    'lattice': LatticeParams,
    'physics': PhysicsParams,
    'drive': DriveParams,
    'clock': ClockParams,
}


def load_params(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Build parameter dataclasses from a plain dictionary.

    Parameters:
    -----------
    mapping : Mapping[str, Any]
        Nested dict with optional sections 'lattice', 'physics', 'drive',
        'clock'. Missing sections or keys keep their defaults.

    Returns:
    --------
    Dict[str, Any]
        {'lattice': LatticeParams, 'physics': PhysicsParams,
         'drive': DriveParams, 'clock': ClockParams}

    Raises:
    -------
    InvalidConfiguration
        On unknown sections or keys
    """
    unknown = set(mapping) - set(_SECTIONS)
    if unknown:
        raise InvalidConfiguration(f"Unknown config sections: {sorted(unknown)}")

    result = {}
    for section, cls in _SECTIONS.items():
        values = dict(mapping.get(section) or {})
        allowed = {f.name for f in fields(cls)}
        bad = set(values) - allowed
        if bad:
            raise InvalidConfiguration(f"Unknown keys in '{section}': {sorted(bad)}")
        result[section] = cls(**values)
    return result
