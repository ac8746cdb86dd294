# ripple_tank - Spring Lattice Wave Simulation
"""
RIPPLE TANK: A Double-Slit Spring Lattice
=========================================

This package simulates a 2D grid of point masses tied to their neighbors
by vertical springs. A driven node on the left edge launches waves that
pass through a slit in a wall of fixed nodes and interfere on the far side.

ARCHITECTURE:
-------------
    model.py        Node and NodeRole
    config.py       Parameter dataclasses and reference values
    kernel/         Physics core (topology, forces, integration, role dispatch)
    lattice.py      Lattice: construction, snapshot, stepping
    driver.py       Clock and batch run loop
    color.py        Displacement to brightness mapping
    viz/            Plotly / matplotlib views
    logging_config.py
"""

from .model import Node, NodeRole
from .config import (
    PhysicsParams, DriveParams, LatticeParams, ClockParams,
    InvalidConfiguration, load_params,
)
from .lattice import Lattice
from .kernel import UnknownRoleError
from .driver import SimulationClock, SimulationResult, run_simulation

__version__ = "0.1.0"

__all__ = [
    'Node', 'NodeRole',
    'PhysicsParams', 'DriveParams', 'LatticeParams', 'ClockParams',
    'InvalidConfiguration', 'load_params',
    'Lattice', 'UnknownRoleError',
    'SimulationClock', 'SimulationResult', 'run_simulation',
]
