# ripple_tank/kernel/integrate.py
"""
INTEGRATOR: Explicit Euler Step with One Degree of Freedom
==========================================================

For every FREE or BOUNDARY node, one step is:

    1. a = F / m
    2. v = v + a * dt
    3. v = (0, v.y, 0)             only vertical motion survives
    4. |v| capped at velocity_clamp (optional, off by default)
    5. p = p + v * dt
    6. y >= 0 enforced (optional floor_clamp, off by default)

With dt = 1.0 this is exactly the unit-step update of the reference scene.

advance() holds the arithmetic and works on a single node (3,) or a
whole grid (H, W, 3), so the per-node and vectorized paths share it.
"""

import numpy as np

from ..config import PhysicsParams
from ..model import Node, Y_AXIS


VERTICAL = np.array([0.0, 1.0, 0.0])


def clamp_speed(velocity: np.ndarray, max_speed: float) -> np.ndarray:
    """Scale velocities whose magnitude exceeds max_speed down to max_speed."""
    speed = np.sqrt(np.sum(velocity * velocity, axis=-1, keepdims=True))
    with np.errstate(invalid='ignore', divide='ignore'):
        scale = np.where(speed > max_speed, max_speed / speed, 1.0)
    return velocity * scale


def advance(
    position: np.ndarray,
    velocity: np.ndarray,
    force: np.ndarray,
    mass,
    physics: PhysicsParams
) -> tuple[np.ndarray, np.ndarray]:
    """
    Compute the next (position, velocity) without touching the inputs.

    Args:
        position: (3,) or (..., 3)
        velocity: same shape as position
        force: same shape as position
        mass: scalar, or array of shape position.shape[:-1]
        physics: Integrator settings (dt and the optional clamps)

    Returns:
        (new_position, new_velocity)
    """
    mass = np.asarray(mass, dtype=float)
    if mass.ndim > 0:
        mass = mass[..., np.newaxis]

    acceleration = force / mass
    velocity = velocity + acceleration * physics.dt
    velocity = velocity * VERTICAL

    if physics.velocity_clamp is not None:
        velocity = clamp_speed(velocity, physics.velocity_clamp)

    position = position + velocity * physics.dt

    if physics.floor_clamp:
        below = position[..., Y_AXIS] < 0.0
        position[..., Y_AXIS] = np.where(below, 0.0, position[..., Y_AXIS])
        velocity[..., Y_AXIS] = np.where(below, 0.0, velocity[..., Y_AXIS])

    return position, velocity


def integrate(node: Node, net_force: np.ndarray, physics: PhysicsParams) -> None:
    """
    Advance one FREE/BOUNDARY node in place.

    The node's position and velocity arrays are written into rather than
    rebound, so nodes that view lattice storage update the lattice.
    """
    position, velocity = advance(node.position, node.velocity, net_force, node.mass, physics)
    node.position[:] = position
    node.velocity[:] = velocity


def integrate_arrays(
    positions: np.ndarray,
    velocities: np.ndarray,
    masses: np.ndarray,
    forces: np.ndarray,
    mask: np.ndarray,
    physics: PhysicsParams
) -> None:
    """
    Advance every cell where mask is True, in place.

    Args:
        positions: (H, W, 3), modified in place
        velocities: (H, W, 3), modified in place
        masses: (H, W)
        forces: (H, W, 3) from lattice_forces()
        mask: (H, W) bool, True for FREE/BOUNDARY cells
        physics: Integrator settings
    """
    new_positions, new_velocities = advance(positions, velocities, forces, masses, physics)
    positions[mask] = new_positions[mask]
    velocities[mask] = new_velocities[mask]
