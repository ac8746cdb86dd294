# ripple_tank/color.py
"""
Display mapping from vertical displacement to brightness.

Nodes at rest are black; brightness grows linearly with |y| and saturates
at white when |y| reaches `saturation` (2.0 by default).
"""

import numpy as np

from .model import NodeRole


DEFAULT_SATURATION = 2.0

ROLE_COLORS = {
    NodeRole.FREE: '#0000FF',
    NodeRole.STATIC: '#888888',
    NodeRole.DRIVEN: '#00FF00',
    NodeRole.BOUNDARY: '#0000FF',
}


def displacement_intensity(y, saturation: float = DEFAULT_SATURATION):
    """Map y (scalar or array) to clip(|y| / saturation, 0, 1)."""
    return np.clip(np.abs(y) / saturation, 0.0, 1.0)


def intensity_to_rgb(intensity) -> np.ndarray:
    """
    Linear black-to-white ramp.

    Returns an array of shape (..., 3) with channels in [0, 1].
    """
    value = np.clip(np.asarray(intensity, dtype=float), 0.0, 1.0)
    return np.stack([value, value, value], axis=-1)


def intensity_to_hex(intensity: float) -> str:
    level = int(round(float(np.clip(intensity, 0.0, 1.0)) * 255))
    return f'#{level:02X}{level:02X}{level:02X}'
