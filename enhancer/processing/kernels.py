"""
Gaussian kernel generation and separable Gaussian blur.
"""

import math

import numpy as np

from ..core import RasterImage, InvalidParameterError
from .pixels import clamp_to_uint8, rgb_float, with_rgb


def gaussian_kernel(radius: float) -> np.ndarray:
    """
    Build a normalized 1-D Gaussian kernel.

    size = max(3, next odd of ceil(radius * 6)), sigma = radius / 3.

    Args:
        radius: Blur radius in pixels (must be > 0)

    Returns:
        Symmetric float64 weights summing to 1
    """
    if not radius > 0:
        raise InvalidParameterError(f"Kernel radius must be > 0, got {radius}")

    size = max(3, math.ceil(radius * 6) | 1)
    sigma = radius / 3
    two_sigma_square = 2 * sigma * sigma
    center = size // 2

    x = np.arange(size, dtype=np.float64) - center
    kernel = np.exp(-(x * x) / two_sigma_square)
    return kernel / kernel.sum()


def convolve_axis(channels: np.ndarray, kernel: np.ndarray, axis: int) -> np.ndarray:
    """
    Convolve (H, W, C) float data along one axis.

    Taps falling outside the image are dropped and the remaining weights
    renormalize, so edges are neither darkened nor padded.
    """
    length = channels.shape[axis]
    half = len(kernel) // 2

    acc = np.zeros_like(channels, dtype=np.float64)
    weight_sum = np.zeros(length, dtype=np.float64)

    for k, weight in enumerate(kernel):
        offset = k - half
        lo = max(0, -offset)
        hi = min(length, length - offset)
        if lo >= hi:
            continue
        if axis == 0:
            acc[lo:hi] += channels[lo + offset:hi + offset] * weight
        else:
            acc[:, lo:hi] += channels[:, lo + offset:hi + offset] * weight
        weight_sum[lo:hi] += weight

    if axis == 0:
        return acc / weight_sum[:, None, None]
    return acc / weight_sum[None, :, None]


def gaussian_blur(image: RasterImage, radius: float) -> RasterImage:
    """
    Separable Gaussian blur over R, G, B; alpha is copied unchanged.

    The horizontal pass is stored at 8 bits before the vertical pass runs.
    """
    kernel = gaussian_kernel(radius)

    horizontal = clamp_to_uint8(convolve_axis(rgb_float(image), kernel, axis=1))
    vertical = convolve_axis(horizontal.astype(np.float64), kernel, axis=0)

    return with_rgb(image, vertical)
