# ripple_tank/model.py
"""
LATTICE MODEL DEFINITIONS: NodeRole and Node
============================================

PURPOSE:
--------
This module defines the basic data structures of the ripple tank:
- NodeRole: the closed set of roles a lattice node can play
- Node: one point mass (position, velocity, mass, role)

PHYSICAL CONTEXT:
-----------------
Each node sits on a regular grid in the x-z plane and is tied to its
four grid neighbors by springs that only act vertically. Only the y
component of a node's position ever changes, so the whole lattice
behaves like a scalar wave field y(row, col).

Roles decide how a node is advanced each tick:

    FREE      integrates the force model
    STATIC    never moves (wall nodes)
    DRIVEN    follows a prescribed oscillation (the wave source)
    BOUNDARY  physics identical to FREE, only drawn differently (the screen)
"""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np


# Vertical axis index in a (x, y, z) position
Y_AXIS = 1


class NodeRole(Enum):
    """Role of a lattice node. Fixed for the lifetime of the node."""
    FREE = 0
    STATIC = 1
    DRIVEN = 2
    BOUNDARY = 3

    @property
    def integrates(self) -> bool:
        """True for roles that are advanced by the force model."""
        return self in (NodeRole.FREE, NodeRole.BOUNDARY)


@dataclass
class Node:
    """
    A single point mass in the lattice.

    Parameters:
    -----------
    role : NodeRole
        How this node is stepped (see NodeRole)

    position : np.ndarray
        (x, y, z) position, shape (3,). Only y is dynamically free.

    velocity : np.ndarray
        (vx, vy, vz) velocity, shape (3,). vx and vz are zeroed by the
        integrator on every step.

    mass : float
        Point mass, must be positive (reference value 1.0)

    intensity : float
        Display value in [0, 1] derived from |y|. Never read by physics.

    Examples:
    ---------
    >>> n = Node.at(NodeRole.FREE, x=5.0, z=10.0)
    >>> n.y
    0.0
    """
    role: NodeRole
    position: np.ndarray
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    mass: float = 1.0
    intensity: float = 0.0

    @classmethod
    def at(cls, role: NodeRole, x: float, z: float, mass: float = 1.0) -> "Node":
        """Create a node at rest at equilibrium height y = 0."""
        return cls(role=role, position=np.array([x, 0.0, z], dtype=float), mass=mass)

    @property
    def y(self) -> float:
        return float(self.position[Y_AXIS])

    def detached(self) -> "Node":
        """
        Return a read-only copy of this node.

        Used to hand node state to renderers: the copy shares no memory
        with the lattice and its arrays reject writes.
        """
        position = np.array(self.position, dtype=float)
        velocity = np.array(self.velocity, dtype=float)
        position.flags.writeable = False
        velocity.flags.writeable = False
        return Node(
            role=self.role,
            position=position,
            velocity=velocity,
            mass=self.mass,
            intensity=self.intensity,
        )

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return bool(
            self.role is other.role
            and np.array_equal(self.position, other.position)
            and np.array_equal(self.velocity, other.velocity)
            and self.mass == other.mass
            and self.intensity == other.intensity
        )
