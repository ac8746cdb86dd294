# ripple_tank/kernel/forces.py
"""Force model: vertical springs, quadratic drag and the restoring term."""

from typing import Sequence

import numpy as np

from ..config import PhysicsParams
from ..model import Y_AXIS
from .topology import NEIGHBOR_OFFSETS, shifted


def spring_force(
    position: np.ndarray,
    neighbor_positions: Sequence[np.ndarray],
    k_spring: float
) -> np.ndarray:
    """
    Hooke's law restricted to the vertical axis.

    Each neighbor contributes (0, -k_spring * (p.y - n.y), 0). With no
    neighbors the force is zero.

    Args:
        position: Node position, shape (3,)
        neighbor_positions: Live neighbor positions at the start of the tick
        k_spring: Spring constant

    Returns:
        Spring force, shape (3,)
    """
    force = np.zeros(3)
    for neighbor in neighbor_positions:
        force[Y_AXIS] += -k_spring * (position[Y_AXIS] - neighbor[Y_AXIS])
    return force


def friction_force(velocity: np.ndarray, k_friction: float) -> np.ndarray:
    """
    Drag opposing the velocity, quadratic in speed: -v_hat * k_friction * |v|^2.

    Zero velocity gives zero force. Accepts a single (3,) vector or any
    (..., 3) stack of vectors.
    """
    speed_sq = np.sum(velocity * velocity, axis=-1, keepdims=True)
    speed = np.sqrt(speed_sq)
    with np.errstate(invalid='ignore', divide='ignore'):
        direction = np.where(speed > 0.0, -velocity / speed, 0.0)
    return direction * (k_friction * speed_sq)


def restoring_force(position: np.ndarray, mass, gravity: float) -> np.ndarray:
    """
    Linear pull back toward y = 0: (0, -m * g * y, 0).

    `mass` may be a scalar or an array matching position.shape[:-1].
    """
    force = np.zeros_like(position, dtype=float)
    force[..., Y_AXIS] = -mass * gravity * position[..., Y_AXIS]
    return force


def net_force(
    position: np.ndarray,
    velocity: np.ndarray,
    mass: float,
    neighbor_positions: Sequence[np.ndarray],
    physics: PhysicsParams
) -> np.ndarray:
    """
    Total force on one node: spring + friction + restoring.

    Args:
        position: Node position (3,)
        velocity: Node velocity (3,)
        mass: Node mass
        neighbor_positions: Snapshot positions of live neighbors (0 to 4 of them)
        physics: Coefficients

    Returns:
        Net force (3,)
    """
    force = spring_force(position, neighbor_positions, physics.k_spring)
    force = force + friction_force(velocity, physics.k_friction)
    force = force + restoring_force(position, mass, physics.gravity)
    return force


def lattice_forces(
    positions: np.ndarray,
    velocities: np.ndarray,
    masses: np.ndarray,
    masks: np.ndarray,
    physics: PhysicsParams
) -> np.ndarray:
    """
    Net force on every cell of the grid at once.

    Same terms as net_force, with the spring term accumulated direction by
    direction in NEIGHBOR_OFFSETS order so each cell sums its neighbors in
    the same sequence as the per-node path.

    Args:
        positions: Snapshot positions (H, W, 3)
        velocities: Velocities (H, W, 3)
        masses: Masses (H, W)
        masks: Coupling masks (4, H, W) from coupling_masks()
        physics: Coefficients

    Returns:
        Forces (H, W, 3). Values on STATIC/DRIVEN cells are computed but
        meaningless; the integrator masks them out.
    """
    y = positions[..., Y_AXIS]
    spring_y = np.zeros_like(y)
    for (dr, dc), mask in zip(NEIGHBOR_OFFSETS, masks):
        neighbor_y = shifted(y, dr, dc)
        spring_y += np.where(mask, -physics.k_spring * (y - neighbor_y), 0.0)

    forces = np.zeros_like(positions, dtype=float)
    forces[..., Y_AXIS] = spring_y
    forces = forces + friction_force(velocities, physics.k_friction)
    forces = forces + restoring_force(positions, masses, physics.gravity)
    return forces
