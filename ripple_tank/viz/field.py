# ripple_tank/viz/field.py
"""Top-down matplotlib plots of the displacement field and probe traces."""

import os
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ..color import DEFAULT_SATURATION


def plot_displacement_field(
    field: np.ndarray,
    ax: Optional[plt.Axes] = None,
    wall_column: Optional[int] = None,
    title: str = "Displacement |y|",
    saturation: float = DEFAULT_SATURATION,
    outpath: Optional[str] = None,
) -> plt.Axes:
    """
    Draw |field| as a grayscale image (black at rest, white at saturation).

    Parameters:
    -----------
    field : np.ndarray
        (H, W) displacement or peak-displacement field
    ax : plt.Axes, optional
        Axes to draw into; a new figure is created if omitted
    wall_column : int, optional
        Column to mark with a dashed line
    saturation : float
        |y| mapped to white
    outpath : str, optional
        Save the figure here (PNG) and close it

    Returns:
    --------
    plt.Axes
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 8))

    ax.imshow(np.abs(field), cmap='gray', vmin=0.0, vmax=saturation,
              origin='upper', interpolation='nearest')
    if wall_column is not None:
        ax.axvline(wall_column, color='#888888', linestyle='--', linewidth=1)
    ax.set_title(title)
    ax.set_xlabel('column')
    ax.set_ylabel('row')

    if outpath:
        os.makedirs(os.path.dirname(outpath) or '.', exist_ok=True)
        ax.figure.savefig(outpath, dpi=150, bbox_inches='tight')
        plt.close(ax.figure)

    return ax


def plot_probe_history(probes: pd.DataFrame, ax: Optional[plt.Axes] = None) -> plt.Axes:
    """Plot every probe column of a SimulationResult.probes frame against tick."""
    if ax is None:
        _, ax = plt.subplots(figsize=(10, 4))

    for column in probes.columns:
        if column in ('tick', 'sim_time'):
            continue
        ax.plot(probes['tick'], probes[column], label=column, linewidth=1.2)

    ax.axhline(0.0, color='k', linestyle='--', alpha=0.3)
    ax.set_xlabel('tick')
    ax.set_ylabel('y')
    ax.grid(True, alpha=0.3)
    if len(probes.columns) > 2:
        ax.legend(loc='upper right')
    return ax
