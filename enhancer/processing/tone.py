"""
Brightness/contrast tone mapping.

Contrast is an S-curve around the midtone; brightness is a gamma-style power
applied afterwards. Both act on each 8-bit level independently, so the
mapping is evaluated once into a 256-entry lookup table.
"""

import math

import numpy as np

from ..core import RasterImage
from .pixels import clamp_to_uint8, with_rgb


def s_curve(values: np.ndarray, strength: float) -> np.ndarray:
    """
    Sigmoid remapping of normalized values around 0.5.

    strength > 0 steepens the midtones (tanh curve pinned at 0 and 1),
    strength < 0 flattens them linearly toward 0.5.
    """
    values = np.asarray(values, dtype=np.float64)
    if strength == 0:
        return values

    factor = strength * 2
    if factor > 0:
        return 0.5 + np.tanh(factor * (values - 0.5)) / (2 * math.tanh(factor / 2))
    return 0.5 + (values - 0.5) / (1 + abs(factor))


def tone_curve(brightness: float, contrast: float) -> np.ndarray:
    """256-entry float lookup table for the given brightness and contrast."""
    levels = np.arange(256, dtype=np.float64) / 255
    contrasted = s_curve(levels, contrast / 100)
    # tanh rounding can leave -1e-17 at level 0; keep the power base non-negative
    contrasted = np.maximum(contrasted, 0.0)
    return np.power(contrasted, 1 + brightness / 100) * 255


def tone_map(image: RasterImage, brightness: float, contrast: float) -> RasterImage:
    """
    Apply brightness and contrast to R, G, B.

    Args:
        image: Source image
        brightness: [-50, 50]; applied as the exponent 1 + b/100
        contrast: [-50, 50]; positive increases midtone contrast

    Returns:
        New tone-mapped image
    """
    lut = clamp_to_uint8(tone_curve(brightness, contrast))
    return with_rgb(image, lut[image.rgb])
