"""
Colour-space filters: HSL saturation adjustment and colour enhancement.
"""

from typing import Tuple

import numpy as np

from ..core import RasterImage
from .pixels import clamp_to_uint8, rgb_float, with_rgb


# ============================================================================
# HSL CONVERSION
# ============================================================================

def rgb_to_hsl(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Convert normalized RGB (..., 3) to hue, saturation, lightness in [0, 1].

    Achromatic samples (max == min) get h = s = 0.
    """
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    mx = np.maximum(np.maximum(r, g), b)
    mn = np.minimum(np.minimum(r, g), b)
    diff = mx - mn
    total = mx + mn
    lightness = total / 2

    chromatic = diff != 0
    safe_diff = np.where(chromatic, diff, 1.0)
    denominator = np.where(lightness > 0.5, 2 - total, total)
    saturation = np.where(chromatic, diff / np.where(chromatic, denominator, 1.0), 0.0)

    hue_r = ((g - b) / safe_diff + np.where(g < b, 6.0, 0.0)) / 6
    hue_g = ((b - r) / safe_diff + 2) / 6
    hue_b = ((r - g) / safe_diff + 4) / 6
    hue = np.where(mx == r, hue_r, np.where(mx == g, hue_g, hue_b))
    hue = np.where(chromatic, hue, 0.0)

    return hue, saturation, lightness


def hsl_to_rgb(hue: np.ndarray, saturation: np.ndarray, lightness: np.ndarray) -> np.ndarray:
    """Convert hue, saturation, lightness back to normalized RGB (..., 3)."""
    c = (1 - np.abs(2 * lightness - 1)) * saturation
    x = c * (1 - np.abs(np.mod(hue * 6, 2) - 1))
    m = lightness - c / 2
    zero = np.zeros_like(c)

    sector = np.floor(hue * 6)
    conditions = [sector == i for i in range(6)]
    r = np.select(conditions, [c, x, zero, zero, x, c], default=zero)
    g = np.select(conditions, [x, c, c, x, zero, zero], default=zero)
    b = np.select(conditions, [zero, zero, x, c, c, x], default=zero)

    return np.stack([r + m, g + m, b + m], axis=-1)


# ============================================================================
# FILTERS
# ============================================================================

def adjust_saturation(image: RasterImage, saturation: float) -> RasterImage:
    """
    Scale HSL saturation by (saturation + 100) / 100.

    Grey pixels (R == G == B) are left untouched.
    """
    factor = (saturation + 100) / 100

    original = image.rgb
    hue, sat, lightness = rgb_to_hsl(original.astype(np.float64) / 255)
    new_sat = np.clip(sat * factor, 0.0, 1.0)
    adjusted = clamp_to_uint8(hsl_to_rgb(hue, new_sat, lightness) * 255)

    chromatic = (original.max(axis=-1) != original.min(axis=-1))[..., None]
    return with_rgb(image, np.where(chromatic, adjusted, original))


def enhance_colors(image: RasterImage) -> RasterImage:
    """Warm per-channel gamma/gain followed by a 1.15x channel separation stretch."""
    rgb = rgb_float(image) / 255
    r = np.power(rgb[..., 0], 0.9) * 1.05
    g = np.power(rgb[..., 1], 0.95) * 1.02
    b = np.power(rgb[..., 2], 1.1) * 0.98

    mx = np.maximum(np.maximum(r, g), b)
    mn = np.minimum(np.minimum(r, g), b)
    spread = mx > mn
    factor = 1.15
    r = np.where(spread, mn + (r - mn) * factor, r)
    g = np.where(spread, mn + (g - mn) * factor, g)
    b = np.where(spread, mn + (b - mn) * factor, b)

    return with_rgb(image, np.stack([r, g, b], axis=-1) * 255)
