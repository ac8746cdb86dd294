# ripple_tank/kernel - Lattice physics core
"""
KERNEL: THE LATTICE PHYSICS
===========================

Everything that decides how the lattice moves lives here:

    topology.py     Which neighbors couple (STATIC neighbors never do)
    forces.py       Spring + friction + restoring force
    integrate.py    Euler step constrained to the vertical axis
    step.py         Role dispatch for a single node

Each piece has a per-node form (used by Lattice.update_rows) and, where it
matters for speed, a whole-grid form (used by Lattice.step). Both forms
perform the same arithmetic in the same order.
"""

from .topology import NEIGHBOR_OFFSETS, neighbor_cells, coupling_masks
from .forces import spring_force, friction_force, restoring_force, net_force, lattice_forces
from .integrate import integrate, integrate_arrays
from .step import apply_step, UnknownRoleError

__all__ = [
    'NEIGHBOR_OFFSETS', 'neighbor_cells', 'coupling_masks',
    'spring_force', 'friction_force', 'restoring_force', 'net_force', 'lattice_forces',
    'integrate', 'integrate_arrays',
    'apply_step', 'UnknownRoleError',
]
