"""Bicubic resampling and resize-factor helpers."""

import math
from typing import Tuple

import numpy as np

from ..core import RasterImage, InvalidParameterError
from .pixels import clamp_to_uint8

# Cubic convolution parameter (Keys, a = -0.5)
CUBIC_A = -0.5


def target_size(width: int, height: int, scale: float) -> Tuple[int, int]:
    """
    Destination size for a scale factor: round(src * scale), at least 1.

    Returns:
        (width, height) tuple
    """
    return (
        max(1, int(math.floor(width * scale + 0.5))),
        max(1, int(math.floor(height * scale + 0.5))),
    )


def fit_scale(width: int, height: int, max_dimension: int) -> float:
    """Aspect-preserving scale so neither side exceeds max_dimension; never above 1."""
    return min(max_dimension / width, max_dimension / height, 1.0)


def upscale_scale(
    width: int,
    height: int,
    area_limit: int = 1_000_000,
    max_factor: float = 2.0,
    max_dimension: int = 1500,
) -> float:
    """
    Scale applied before a full-quality run.

    Images below area_limit pixels are enlarged by up to max_factor, capped
    so the longer side lands at max_dimension. Larger images keep scale 1.
    """
    if width * height >= area_limit:
        return 1.0
    return min(max_factor, max_dimension / max(width, height))


def cubic_weight(t: np.ndarray, a: float = CUBIC_A) -> np.ndarray:
    """Keys cubic convolution kernel, zero outside |t| <= 2."""
    t = np.abs(np.asarray(t, dtype=np.float64))
    near = (a + 2) * t * t * t - (a + 3) * t * t + 1
    far = a * t * t * t - 5 * a * t * t + 8 * a * t - 4 * a
    return np.where(t <= 1, near, np.where(t <= 2, far, 0.0))


def _taps(dst_length: int, src_length: int, scale: float):
    """Clamped source indices and weights for the 4 taps along one axis."""
    coords = np.arange(dst_length, dtype=np.float64) / scale
    base = np.floor(coords)
    frac = coords - base
    base = base.astype(np.intp)

    indices = [np.clip(base + n, 0, src_length - 1) for n in range(-1, 3)]
    weights = [cubic_weight(frac - n) for n in range(-1, 3)]
    return indices, weights


def bicubic_resample(image: RasterImage, scale: float) -> RasterImage:
    """
    Resample all four channels with bicubic interpolation.

    Destination pixel (x, y) samples the source at (x / scale, y / scale)
    from a 4x4 neighbourhood; source coordinates clamp to the image bounds.

    Args:
        image: Source image
        scale: Scale factor (> 0)

    Returns:
        New image of size round(width * scale) x round(height * scale)
    """
    if not scale > 0:
        raise InvalidParameterError(f"Scale factor must be > 0, got {scale}")

    dst_width, dst_height = target_size(image.width, image.height, scale)
    src = image.pixels.astype(np.float64)

    x_idx, x_w = _taps(dst_width, image.width, scale)
    y_idx, y_w = _taps(dst_height, image.height, scale)

    result = np.zeros((dst_height, dst_width, src.shape[2]), dtype=np.float64)
    for m in range(4):
        rows = src[y_idx[m]]
        for n in range(4):
            weight = x_w[n][None, :] * y_w[m][:, None]
            result += rows[:, x_idx[n]] * weight[:, :, None]

    return RasterImage(clamp_to_uint8(result))
