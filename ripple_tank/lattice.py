# ripple_tank/lattice.py
"""
LATTICE: The Grid of Point Masses
=================================

PURPOSE:
--------
A Lattice owns every node of the ripple tank and advances them tick by tick.

LAYOUT (reference scene, 100 x 100):
------------------------------------

    col:  0 ............ 50 ............ 99
    row 0   B B B B B B B S B B B B B B B B    B = BOUNDARY (screen)
            . . . . . . . S . . . . . . . B    S = STATIC (wall)
            . . . . . . . . . . . . . . . B    . = FREE
    row 50  D . . . . . . . . . . . . . . B    D = DRIVEN (source)
            . . . . . . . . . . . . . . . B    slit: rows 42..56 of the
            . . . . . . . S . . . . . . . B          wall column are FREE
    row 99  B B B B B B B S B B B B B B B B

STATE:
------
Node state is stored as whole-grid numpy arrays:

    positions   (H, W, 3)   x = col * spacing, y = displacement, z = row * spacing
    velocities  (H, W, 3)
    masses      (H, W)
    role_codes  (H, W)      NodeRole values
    intensity   (H, W)      display brightness derived from |y|

STEPPING:
---------
Every tick first copies all positions (the snapshot), then updates every
node against that copy. No node ever sees a neighbor's already-updated
position, so the update order cannot change the result.

    step(t)              whole-grid numpy update (fast path)
    update_rows(s, t, r) per-node update of a row partition against snapshot s
    step_by_rows(t)      snapshot + update_rows over all rows
"""

import logging
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .color import displacement_intensity
from .config import DriveParams, InvalidConfiguration, LatticeParams, PhysicsParams
from .kernel.forces import lattice_forces
from .kernel.integrate import integrate_arrays
from .kernel.step import apply_step
from .kernel.topology import coupling_masks, neighbor_cells
from .model import Node, NodeRole, Y_AXIS

logger = logging.getLogger(__name__)


def slit_rows(slit_size: int, slit_center_row: int) -> range:
    """
    Rows of the wall column left open.

    floor(c - s/2) up to (not including) floor(c + s/2): always exactly s rows.
    """
    start = int(np.floor(slit_center_row - slit_size / 2))
    stop = int(np.floor(slit_center_row + slit_size / 2))
    return range(start, stop)


class Lattice:
    """
    2D grid of point masses coupled by vertical springs.

    Build with Lattice.create() or Lattice.from_params(); the constructor
    itself takes already-validated arrays.
    """

    def __init__(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        masses: np.ndarray,
        role_codes: np.ndarray,
        spacing: float,
        wall_column: int,
        slit: range,
        driven_cell: Tuple[int, int],
        physics: PhysicsParams,
        drive: DriveParams,
    ):
        self.positions = positions
        self.velocities = velocities
        self.masses = masses
        self.role_codes = role_codes
        self.spacing = spacing
        self.wall_column = wall_column
        self.slit = slit
        self.driven_cell = driven_cell
        self.physics = physics
        self.drive = drive
        self.tick = 0

        self.intensity = displacement_intensity(positions[..., Y_AXIS])
        self._masks = coupling_masks(role_codes)
        self._integrating = (role_codes == NodeRole.FREE.value) | (role_codes == NodeRole.BOUNDARY.value)
        self._static = role_codes == NodeRole.STATIC.value

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        width: int,
        height: int,
        spacing: float,
        slit_size: int,
        slit_center_row: int,
        wall_column: int,
        driven_row: int,
        driven_column: int,
        *,
        physics: Optional[PhysicsParams] = None,
        drive: Optional[DriveParams] = None,
        mass: float = 1.0,
    ) -> "Lattice":
        """
        Build a lattice at rest (all y = 0, all v = 0).

        Parameters:
        -----------
        width, height : int
            Number of columns and rows
        spacing : float
            Equilibrium distance between adjacent nodes
        slit_size : int
            Number of open rows in the wall column
        slit_center_row : int
            Row the slit is centered on
        wall_column : int
            Column made of STATIC nodes (except the slit)
        driven_row, driven_column : int
            Cell of the DRIVEN source node
        physics : PhysicsParams, optional
            Force model settings (reference values if omitted)
        drive : DriveParams, optional
            Source oscillation (reference values if omitted)
        mass : float
            Mass of every node

        Returns:
        --------
        Lattice

        Raises:
        -------
        InvalidConfiguration
            If the slit does not fit, the wall or driven cell is off the grid,
            or the driven cell sits in the wall column
        """
        if width < 1 or height < 1:
            raise InvalidConfiguration(f"Lattice must be at least 1x1, got {width}x{height}")
        if spacing <= 0:
            raise InvalidConfiguration(f"spacing must be > 0, got {spacing}")
        if mass <= 0:
            raise InvalidConfiguration(f"mass must be > 0, got {mass}")
        if slit_size < 0 or slit_size > height:
            raise InvalidConfiguration(
                f"slit_size must be in [0, {height}], got {slit_size}"
            )
        if not 0 <= wall_column < width:
            raise InvalidConfiguration(
                f"wall_column must be in [0, {width}), got {wall_column}"
            )
        if not (0 <= driven_row < height and 0 <= driven_column < width):
            raise InvalidConfiguration(
                f"Driven cell ({driven_row}, {driven_column}) is outside the {height}x{width} grid"
            )
        if driven_column == wall_column:
            raise InvalidConfiguration(
                f"Driven cell ({driven_row}, {driven_column}) coincides with wall column {wall_column}"
            )

        slit = slit_rows(slit_size, slit_center_row)
        if slit_size > 0 and (slit.start < 0 or slit.stop > height):
            raise InvalidConfiguration(
                f"Slit rows {slit.start}..{slit.stop - 1} do not fit in {height} rows"
            )

        rows, cols = np.meshgrid(np.arange(height), np.arange(width), indexing='ij')
        positions = np.zeros((height, width, 3), dtype=float)
        positions[..., 0] = cols * spacing
        positions[..., 2] = rows * spacing
        velocities = np.zeros((height, width, 3), dtype=float)
        masses = np.full((height, width), float(mass))

        # Later assignments win: screen, then wall, then slit, then source
        role_codes = np.full((height, width), NodeRole.FREE.value, dtype=np.int8)
        role_codes[0, :] = NodeRole.BOUNDARY.value
        role_codes[-1, :] = NodeRole.BOUNDARY.value
        role_codes[:, -1] = NodeRole.BOUNDARY.value
        role_codes[:, wall_column] = NodeRole.STATIC.value
        role_codes[slit.start:slit.stop, wall_column] = NodeRole.FREE.value
        role_codes[driven_row, driven_column] = NodeRole.DRIVEN.value

        lattice = cls(
            positions=positions,
            velocities=velocities,
            masses=masses,
            role_codes=role_codes,
            spacing=float(spacing),
            wall_column=wall_column,
            slit=slit,
            driven_cell=(driven_row, driven_column),
            physics=physics or PhysicsParams(),
            drive=drive or DriveParams(),
        )
        logger.info(
            "Created %dx%d lattice: wall column %d, slit %s, driven node (%d, %d)",
            height, width, wall_column, lattice.slit_description, driven_row, driven_column,
        )
        return lattice

    @classmethod
    def from_params(
        cls,
        params: LatticeParams,
        physics: Optional[PhysicsParams] = None,
        drive: Optional[DriveParams] = None,
    ) -> "Lattice":
        """Build a lattice from a LatticeParams (middle-of-grid defaults applied)."""
        p = params.resolved()
        return cls.create(
            p.width, p.height, p.spacing, p.slit_size, p.slit_center_row,
            p.wall_column, p.driven_row, p.driven_column,
            physics=physics, drive=drive, mass=p.mass,
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def height(self) -> int:
        return self.role_codes.shape[0]

    @property
    def width(self) -> int:
        return self.role_codes.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.role_codes.shape

    @property
    def slit_description(self) -> str:
        """Slit extent for messages: 'rows a-b', or 'closed' for a solid wall."""
        if len(self.slit):
            return f"rows {self.slit.start}-{self.slit.stop - 1}"
        return "closed"

    def _check_cell(self, row: int, col: int) -> None:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(f"Cell ({row}, {col}) is outside the {self.height}x{self.width} lattice")

    def role_at(self, row: int, col: int) -> NodeRole:
        self._check_cell(row, col)
        return NodeRole(int(self.role_codes[row, col]))

    def node_at(self, row: int, col: int) -> Node:
        """
        Read-only copy of the node at (row, col).

        The returned arrays do not share memory with the lattice and cannot
        be written to.
        """
        return self._node(row, col).detached()

    def _node(self, row: int, col: int) -> Node:
        # Live node: position/velocity are views into lattice storage
        self._check_cell(row, col)
        return Node(
            role=NodeRole(int(self.role_codes[row, col])),
            position=self.positions[row, col],
            velocity=self.velocities[row, col],
            mass=float(self.masses[row, col]),
            intensity=float(self.intensity[row, col]),
        )

    def neighbors(self, row: int, col: int) -> List[Tuple[int, int]]:
        """Cells coupled to (row, col); STATIC neighbors are excluded."""
        self._check_cell(row, col)
        return neighbor_cells(self.role_codes, row, col)

    def cells(self, role: NodeRole) -> List[Tuple[int, int]]:
        """All (row, col) cells holding the given role, row-major."""
        rows, cols = np.nonzero(self.role_codes == role.value)
        return list(zip(rows.tolist(), cols.tolist()))

    def snapshot(self) -> np.ndarray:
        """Independent copy of all positions, shape (H, W, 3)."""
        return self.positions.copy()

    def displacement_field(self) -> np.ndarray:
        """Vertical displacement y of every node, shape (H, W) (copy)."""
        return self.positions[..., Y_AXIS].copy()

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def step(self, sim_time: float) -> None:
        """
        Advance every node by one tick (whole-grid path).

        Args:
            sim_time: Driving clock value for this tick; advanced by the caller
        """
        snapshot = self.snapshot()
        forces = lattice_forces(snapshot, self.velocities, self.masses, self._masks, self.physics)
        integrate_arrays(
            self.positions, self.velocities, self.masses, forces, self._integrating, self.physics
        )

        dr, dc = self.driven_cell
        self.positions[dr, dc, Y_AXIS] = self.drive.position(sim_time)

        moving = ~self._static
        self.intensity[moving] = displacement_intensity(self.positions[..., Y_AXIS][moving])
        self.tick += 1

    def update_rows(self, snapshot: np.ndarray, sim_time: float, rows: Iterable[int]) -> None:
        """
        Per-node update of the given rows against a snapshot.

        Reads neighbor positions only from `snapshot` and writes only nodes
        in `rows`, so disjoint row partitions can be processed in any order
        (or concurrently) with the same result.
        """
        for row in rows:
            for col in range(self.width):
                node = self._node(row, col)
                neighbor_positions = [
                    snapshot[nr, nc] for nr, nc in neighbor_cells(self.role_codes, row, col)
                ]
                apply_step(node, neighbor_positions, sim_time, self.physics, self.drive)
                self.intensity[row, col] = node.intensity

    def step_by_rows(self, sim_time: float, row_order: Optional[Iterable[int]] = None) -> None:
        """
        Advance every node by one tick, node by node.

        Args:
            sim_time: Driving clock value for this tick
            row_order: Order to visit rows in (default: top to bottom). Must
                cover every row exactly once.
        """
        rows = list(range(self.height)) if row_order is None else list(row_order)
        if sorted(rows) != list(range(self.height)):
            raise ValueError("row_order must list every row exactly once")
        snapshot = self.snapshot()
        self.update_rows(snapshot, sim_time, rows)
        self.tick += 1
