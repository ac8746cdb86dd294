# ripple_tank/kernel/topology.py
"""
TOPOLOGY: Neighbor Coupling on the Grid
=======================================

PURPOSE:
--------
This module answers one question: "which nodes pull on node (r, c)?"

Every node couples to its four grid neighbors

    (r, c+1), (r, c-1), (r+1, c), (r-1, c)

when they exist, EXCEPT neighbors that are STATIC. A wall node exerts no
spring force at all, so waves hitting the wall see a free edge and only
pass through the slit.

The neighbor order above is fixed. Spring forces are summed in this order
by both the per-node and the whole-grid code paths, so the two produce the
same floating-point result.

USAGE:
------
    cells = neighbor_cells(role_codes, row=3, col=4)   # [(3, 5), (3, 3), ...]
    masks = coupling_masks(role_codes)                 # (4, H, W) bool
    east = shifted(y, 0, 1)                            # y[r, c+1], 0 off-grid
"""

from typing import List, Tuple

import numpy as np

from ..model import NodeRole


NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))

STATIC_CODE = NodeRole.STATIC.value


def neighbor_cells(role_codes: np.ndarray, row: int, col: int) -> List[Tuple[int, int]]:
    """
    Live neighbor cells of (row, col), in NEIGHBOR_OFFSETS order.

    Parameters:
    -----------
    role_codes : np.ndarray
        (H, W) array of NodeRole values
    row, col : int
        Cell whose neighbors are wanted

    Returns:
    --------
    List[Tuple[int, int]]
        Up to 4 (row, col) pairs; off-grid and STATIC neighbors are skipped
    """
    height, width = role_codes.shape
    cells = []
    for dr, dc in NEIGHBOR_OFFSETS:
        nr = row + dr
        nc = col + dc
        if 0 <= nr < height and 0 <= nc < width and role_codes[nr, nc] != STATIC_CODE:
            cells.append((nr, nc))
    return cells


def shifted(field: np.ndarray, dr: int, dc: int) -> np.ndarray:
    """
    Neighbor view of a grid field: out[r, c] = field[r + dr, c + dc].

    Cells whose neighbor falls off the grid get 0. Works for (H, W) and
    (H, W, ...) arrays.
    """
    height, width = field.shape[:2]
    out = np.zeros_like(field)
    dst_r = slice(max(-dr, 0), height - max(dr, 0))
    src_r = slice(max(dr, 0), height - max(-dr, 0))
    dst_c = slice(max(-dc, 0), width - max(dc, 0))
    src_c = slice(max(dc, 0), width - max(-dc, 0))
    out[dst_r, dst_c] = field[src_r, src_c]
    return out


def coupling_masks(role_codes: np.ndarray) -> np.ndarray:
    """
    Per-direction coupling masks for the whole grid.

    masks[k, r, c] is True when cell (r, c) is coupled to its neighbor in
    direction NEIGHBOR_OFFSETS[k]: the neighbor exists and is not STATIC.

    Returns:
    --------
    np.ndarray
        Boolean array of shape (4, H, W)
    """
    height, width = role_codes.shape
    live = role_codes != STATIC_CODE
    # Off-grid neighbors must read as "not live"
    masks = np.zeros((len(NEIGHBOR_OFFSETS), height, width), dtype=bool)
    for k, (dr, dc) in enumerate(NEIGHBOR_OFFSETS):
        masks[k] = shifted(live, dr, dc)
    return masks
