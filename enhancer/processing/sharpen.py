"""
Blur-based sharpening: unsharp mask and high-pass detail enhancement.
"""

import numpy as np

from ..core import RasterImage
from .kernels import gaussian_blur
from .pixels import rgb_float, with_rgb


def unsharp_mask(
    image: RasterImage,
    amount: float,
    radius: float = 1.0,
    threshold: float = 0.0,
) -> RasterImage:
    """
    Sharpen by adding back the high-frequency residual.

    Per RGB sample: diff = original - blurred. Samples with |diff| above
    threshold become original + diff * amount; the rest are kept.

    Args:
        image: Source image
        amount: Residual gain (0 leaves the image unchanged)
        radius: Gaussian blur radius
        threshold: Minimum |diff| before a sample is sharpened

    Returns:
        New sharpened image, alpha untouched
    """
    blurred = gaussian_blur(image, radius)

    original = rgb_float(image)
    diff = original - rgb_float(blurred)
    sharpened = np.where(np.abs(diff) > threshold, original + diff * amount, original)

    return with_rgb(image, sharpened)


def enhance_details(image: RasterImage, radius: float = 2.0, strength: float = 0.8) -> RasterImage:
    """Boost fine detail: original + (original - blur(original)) * strength."""
    blurred = gaussian_blur(image, radius)

    original = rgb_float(image)
    detail = original - rgb_float(blurred)

    return with_rgb(image, original + detail * strength)
