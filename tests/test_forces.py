# File: tests/test_forces.py
"""
Test the force model (spring + friction + restoring).

WHY THESE TESTS?
---------------
The force model is the whole physics of the ripple tank. Each term is
checked against a hand calculation, plus the degenerate cases that must
give zero instead of failing (no neighbors, zero velocity).
"""

import numpy as np

from ripple_tank.config import PhysicsParams
from ripple_tank.kernel.forces import (
    spring_force, friction_force, restoring_force, net_force, lattice_forces,
)
from ripple_tank.kernel.topology import neighbor_cells, coupling_masks
from ripple_tank.lattice import Lattice
from ripple_tank.model import NodeRole


def test_spring_force_single_neighbor():
    """A node 1 unit above its neighbor is pulled down by k * 1."""
    p = np.array([0.0, 1.0, 0.0])
    n = np.array([5.0, 0.0, 0.0])

    f = spring_force(p, [n], k_spring=0.1)

    np.testing.assert_allclose(f, [0.0, -0.1, 0.0])


def test_spring_force_ignores_horizontal_offsets():
    """Only the vertical difference matters, not the distance on the grid."""
    p = np.array([0.0, 2.0, 0.0])
    near = np.array([1.0, 1.0, 0.0])
    far = np.array([100.0, 1.0, -40.0])

    assert np.allclose(spring_force(p, [near], 0.1), spring_force(p, [far], 0.1))


def test_spring_force_sums_neighbors():
    p = np.array([0.0, 1.0, 0.0])
    neighbors = [
        np.array([5.0, 0.0, 0.0]),    # pulls down by 0.1
        np.array([-5.0, 3.0, 0.0]),   # pulls up by 0.2
        np.array([0.0, 1.0, 5.0]),    # level: no force
    ]

    f = spring_force(p, neighbors, k_spring=0.1)

    np.testing.assert_allclose(f, [0.0, 0.1, 0.0], atol=1e-15)


def test_spring_force_no_neighbors_is_zero():
    f = spring_force(np.array([0.0, 7.0, 0.0]), [], k_spring=0.1)
    np.testing.assert_array_equal(f, np.zeros(3))


def test_friction_opposes_velocity_quadratically():
    """
    Drag = -v_hat * k * |v|^2.

    For v = (0, -2, 0), k = 0.1: |v|^2 = 4, direction of -v is +y,
    so the force is (0, 0.4, 0).
    """
    f = friction_force(np.array([0.0, -2.0, 0.0]), k_friction=0.1)
    np.testing.assert_allclose(f, [0.0, 0.4, 0.0])


def test_friction_direction_in_3d():
    """v = (3, 4, 0): |v| = 5, force = -(0.6, 0.8, 0) * 0.1 * 25."""
    f = friction_force(np.array([3.0, 4.0, 0.0]), k_friction=0.1)
    np.testing.assert_allclose(f, [-1.5, -2.0, 0.0])


def test_friction_zero_velocity_is_zero():
    """Normalizing a zero vector must not produce NaN."""
    f = friction_force(np.zeros(3), k_friction=0.1)

    assert np.all(np.isfinite(f))
    np.testing.assert_array_equal(f, np.zeros(3))


def test_friction_on_grid_of_velocities():
    v = np.zeros((2, 2, 3))
    v[0, 1, 1] = 1.0
    v[1, 0, 1] = -3.0

    f = friction_force(v, k_friction=0.1)

    assert f.shape == (2, 2, 3)
    np.testing.assert_allclose(f[0, 1], [0.0, -0.1, 0.0])
    np.testing.assert_allclose(f[1, 0], [0.0, 0.9, 0.0])
    np.testing.assert_array_equal(f[0, 0], np.zeros(3))


def test_restoring_force():
    """(0, -m g y, 0) with m = 2, g = 0.5, y = 3 gives (0, -3, 0)."""
    f = restoring_force(np.array([10.0, 3.0, 20.0]), mass=2.0, gravity=0.5)
    np.testing.assert_allclose(f, [0.0, -3.0, 0.0])


def test_restoring_force_disabled_by_default():
    physics = PhysicsParams()
    assert physics.gravity == 0.0

    f = restoring_force(np.array([0.0, 3.0, 0.0]), mass=1.0, gravity=physics.gravity)
    np.testing.assert_array_equal(np.abs(f), np.zeros(3))


def test_net_force_is_sum_of_terms():
    physics = PhysicsParams(k_spring=0.1, k_friction=0.1, gravity=0.2)
    p = np.array([0.0, 1.0, 0.0])
    v = np.array([0.0, 2.0, 0.0])
    neighbors = [np.array([5.0, 0.0, 0.0])]

    f = net_force(p, v, 1.0, neighbors, physics)

    # spring -0.1, friction -0.4, restoring -0.2
    np.testing.assert_allclose(f, [0.0, -0.7, 0.0])


def test_static_neighbor_exerts_no_spring_force():
    """
    WHAT IS THIS TEST?
    ==================
    Two nodes side by side: a STATIC node displaced to y = 3 and a FREE node
    at rest at y = 0.

    If the static node were coupled, the free node would feel +0.3 upward.
    Static neighbors are excluded from the coupling, so the free node feels
    nothing at all.
    """
    roles = np.array([[NodeRole.STATIC.value, NodeRole.FREE.value]])
    snapshot = np.array([[[0.0, 3.0, 0.0], [5.0, 0.0, 0.0]]])

    cells = neighbor_cells(roles, 0, 1)
    neighbor_positions = [snapshot[r, c] for r, c in cells]
    f = net_force(snapshot[0, 1], np.zeros(3), 1.0, neighbor_positions, PhysicsParams())

    assert cells == []
    np.testing.assert_array_equal(f, np.zeros(3))

    # Sanity: coupling the static node would have produced a force
    coupled = spring_force(snapshot[0, 1], [snapshot[0, 0]], 0.1)
    assert np.isclose(coupled[1], 0.3)
    print("✓ Static neighbor contributes zero spring force")


def test_lattice_forces_match_per_node_forces():
    """
    The whole-grid force computation must agree with net_force() evaluated
    node by node on the same snapshot.
    """
    lattice = Lattice.create(12, 10, 5.0, slit_size=4, slit_center_row=5,
                             wall_column=6, driven_row=5, driven_column=0,
                             physics=PhysicsParams(gravity=0.05))
    rng = np.random.default_rng(7)
    lattice.positions[..., 1] = rng.normal(0.0, 1.0, size=lattice.shape)
    lattice.velocities[..., 1] = rng.normal(0.0, 0.5, size=lattice.shape)

    snapshot = lattice.snapshot()
    masks = coupling_masks(lattice.role_codes)
    grid = lattice_forces(snapshot, lattice.velocities, lattice.masses, masks, lattice.physics)

    for r in range(lattice.height):
        for c in range(lattice.width):
            if not lattice.role_at(r, c).integrates:
                continue
            neighbors = [snapshot[nr, nc] for nr, nc in lattice.neighbors(r, c)]
            expected = net_force(snapshot[r, c], lattice.velocities[r, c],
                                 lattice.masses[r, c], neighbors, lattice.physics)
            np.testing.assert_allclose(grid[r, c], expected, rtol=1e-12, atol=1e-15)
