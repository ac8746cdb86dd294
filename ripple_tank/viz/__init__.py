# ripple_tank/viz - Visualization Tools
"""
VIZ: Views of the Ripple Tank
=============================

- viz3d: interactive 3D node cloud (Plotly)
- field: top-down displacement images and probe traces (matplotlib)
"""

from .viz3d import plot_lattice_3d, create_lattice_figure
from .field import plot_displacement_field, plot_probe_history

__all__ = ['plot_lattice_3d', 'create_lattice_figure', 'plot_displacement_field', 'plot_probe_history']
