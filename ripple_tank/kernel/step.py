# ripple_tank/kernel/step.py
"""Per-node step: dispatch on role to the drive law or force + integration."""

from typing import Sequence

import numpy as np

from ..color import displacement_intensity
from ..config import DriveParams, PhysicsParams
from ..model import Node, NodeRole, Y_AXIS
from .forces import net_force
from .integrate import integrate


class UnknownRoleError(RuntimeError):
    """Raised when a node carries a role outside NodeRole. Not recoverable."""
    pass


def apply_step(
    node: Node,
    neighbor_positions: Sequence[np.ndarray],
    sim_time: float,
    physics: PhysicsParams,
    drive: DriveParams
) -> None:
    """
    Advance one node by one tick, in place.

    Args:
        node: Node to update
        neighbor_positions: Snapshot positions of its live neighbors
        sim_time: Driving clock value for this tick
        physics: Force model and integrator settings
        drive: Oscillation law for DRIVEN nodes

    Raises:
        UnknownRoleError: If node.role is not a NodeRole
    """
    role = node.role
    if role is NodeRole.STATIC:
        return
    if role is NodeRole.DRIVEN:
        node.position[Y_AXIS] = drive.position(sim_time)
    elif role is NodeRole.FREE or role is NodeRole.BOUNDARY:
        force = net_force(node.position, node.velocity, node.mass, neighbor_positions, physics)
        integrate(node, force, physics)
    else:
        raise UnknownRoleError(f"Node has unrecognized role {role!r}")

    node.intensity = float(displacement_intensity(node.position[Y_AXIS]))
