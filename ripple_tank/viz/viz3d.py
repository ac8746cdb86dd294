# ripple_tank/viz/viz3d.py
"""
3D VISUALIZATION: Interactive Ripple Tank Viewer
================================================

PURPOSE:
--------
Draw the lattice as an interactive 3D point cloud using Plotly:
- Free and screen nodes shaded black (at rest) to white (|y| >= 2)
- Wall nodes as large gray squares
- The source node in green
- Camera centered on the middle of the lattice

This module only reads the lattice (positions, roles, intensity); it keeps
no reference to lattice arrays after the figure is built.

AXES:
-----
The physics uses y as the vertical axis and lays the grid out in x-z.
Plotly draws z upward, so the figure shows
    plot x = lattice x (columns), plot y = lattice z (rows), plot z = displacement.
"""

import os
from typing import Optional

import numpy as np
import plotly.graph_objects as go

from ..color import ROLE_COLORS, intensity_to_hex
from ..lattice import Lattice
from ..model import NodeRole, Y_AXIS


_MARKERS = {
    NodeRole.FREE: dict(size=3, symbol='circle'),
    NodeRole.BOUNDARY: dict(size=4, symbol='diamond'),
    NodeRole.STATIC: dict(size=6, symbol='square'),
    NodeRole.DRIVEN: dict(size=8, symbol='circle'),
}


def create_lattice_figure(
    lattice: Lattice,
    title: str = "Ripple Tank",
    stride: int = 1,
) -> go.Figure:
    """
    Create a Plotly figure of the current lattice state.

    Parameters:
    -----------
    lattice : Lattice
        Lattice to draw (read only)
    title : str
        Plot title
    stride : int
        Draw every `stride`-th row and column (the wall column and the
        driven node are always drawn). Use > 1 for large lattices.

    Returns:
    --------
    go.Figure
        One Scatter3d trace per role present in the lattice
    """
    if stride < 1:
        raise ValueError(f"stride must be >= 1, got {stride}")

    height, width = lattice.shape
    rows, cols = np.meshgrid(np.arange(height), np.arange(width), indexing='ij')
    keep = (rows % stride == 0) & (cols % stride == 0)
    keep |= cols == lattice.wall_column
    keep[lattice.driven_cell] = True

    positions = lattice.snapshot()
    intensity = lattice.intensity.copy()

    fig = go.Figure()
    for role in NodeRole:
        mask = keep & (lattice.role_codes == role.value)
        if not mask.any():
            continue

        px = positions[..., 0][mask]
        pz = positions[..., 2][mask]
        py = positions[..., Y_AXIS][mask]

        if role.integrates:
            colors = [intensity_to_hex(v) for v in intensity[mask]]
        else:
            colors = ROLE_COLORS[role]

        fig.add_trace(go.Scatter3d(
            x=px, y=pz, z=py,
            mode='markers',
            marker=dict(color=colors, line=dict(width=0), **_MARKERS[role]),
            name=role.name.capitalize(),
            text=[f"({r}, {c}) y={v:.3f}" for r, c, v in zip(rows[mask], cols[mask], py)],
            hoverinfo='text',
        ))

    fig.update_layout(
        title=dict(text=title, font=dict(size=16)),
        scene=dict(
            xaxis=dict(title='x'),
            yaxis=dict(title='z'),
            zaxis=dict(title='y (displacement)'),
            aspectmode='manual',
            aspectratio=dict(x=1.0, y=height / max(width, 1), z=0.3),
            camera=dict(
                center=dict(x=0, y=0, z=0),  # Middle of the lattice
                eye=dict(x=-1.4, y=0.0, z=1.4),  # Looking across the wall from the source side
            ),
        ),
        showlegend=True,
        legend=dict(x=0.02, y=0.98),
        margin=dict(l=0, r=0, t=40, b=0),
    )
    return fig


def plot_lattice_3d(
    lattice: Lattice,
    title: str = "Ripple Tank",
    outpath: Optional[str] = None,
    show: bool = False,
    **kwargs
) -> go.Figure:
    """
    Create and optionally save/display the 3D lattice view.

    Parameters:
    -----------
    lattice, title:
        See create_lattice_figure()
    outpath : Optional[str]
        If provided, save as an HTML file
    show : bool
        Whether to open the figure
    **kwargs:
        Passed to create_lattice_figure()
    """
    fig = create_lattice_figure(lattice, title=title, **kwargs)

    if outpath:
        os.makedirs(os.path.dirname(outpath) or '.', exist_ok=True)
        fig.write_html(outpath)

    if show:
        fig.show()

    return fig
