"""
Pixel buffer helpers shared by the filter stages.

Stages compute in float64 and store back through clamp_to_uint8, which
matches 8-bit clamped-array semantics: clamp to [0, 255], round half to even.
"""

import numpy as np

from ..core import RasterImage


def clamp_to_uint8(values: np.ndarray) -> np.ndarray:
    """Clamp to [0, 255] and round half to even."""
    return np.rint(np.clip(values, 0.0, 255.0)).astype(np.uint8)


def rgb_float(image: RasterImage) -> np.ndarray:
    """Colour channels as a fresh float64 array."""
    return image.rgb.astype(np.float64)


def with_rgb(image: RasterImage, rgb: np.ndarray) -> RasterImage:
    """New image with the given colour channels and the source alpha."""
    pixels = np.empty_like(image.pixels)
    pixels[:, :, :3] = rgb if rgb.dtype == np.uint8 else clamp_to_uint8(rgb)
    pixels[:, :, 3] = image.alpha
    return RasterImage(pixels)
