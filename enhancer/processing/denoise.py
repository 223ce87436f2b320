"""
Edge-preserving denoise via a bilateral filter.

Pixels closer than `radius` to any border are passed through unchanged.
Interior rows can be split into bands and filtered on a thread pool; the
bands read only the shared source buffer, so results do not depend on the
worker count.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

import numpy as np

from ..core import RasterImage, InvalidParameterError
from .pixels import clamp_to_uint8

logger = logging.getLogger(__name__)

# Smallest band worth handing to a worker thread
MIN_BAND_ROWS = 16


def bilateral_radius(spatial_sigma: float) -> int:
    """Neighbourhood radius used for a given spatial sigma."""
    return math.ceil(spatial_sigma * 2)


def bilateral_filter(
    image: RasterImage,
    spatial_sigma: float,
    intensity_sigma: float,
    workers: int = 1,
) -> RasterImage:
    """
    Apply a bilateral filter to R, G, B independently.

    Each neighbour is weighted by exp(-d_s^2 / 2 sigma_s^2) * exp(-d_i^2 / 2 sigma_i^2),
    where d_i is the per-channel difference to the centre sample.

    Args:
        image: Source image
        spatial_sigma: Spatial Gaussian sigma (pixels)
        intensity_sigma: Intensity Gaussian sigma (8-bit levels)
        workers: Number of threads for row bands (1 = run inline)

    Returns:
        New filtered image
    """
    if not spatial_sigma > 0 or not intensity_sigma > 0:
        raise InvalidParameterError(
            f"Bilateral sigmas must be > 0, got spatial={spatial_sigma}, intensity={intensity_sigma}"
        )

    radius = bilateral_radius(spatial_sigma)
    height, width = image.height, image.width
    output = image.pixels.copy()

    if height <= 2 * radius or width <= 2 * radius:
        # Entire image lies inside the border band
        return RasterImage(output)

    src = image.rgb.astype(np.int16)
    intensity_lut = _intensity_weights(intensity_sigma)
    spatial = _spatial_weights(radius, spatial_sigma)

    bands = _split_rows(radius, height - radius, workers)

    def run_band(band: Tuple[int, int]) -> None:
        y0, y1 = band
        output[y0:y1, radius:width - radius, :3] = _filter_band(
            src, y0, y1, radius, spatial, intensity_lut
        )

    if len(bands) == 1:
        run_band(bands[0])
    else:
        logger.debug(f"Bilateral: {len(bands)} row bands on {workers} workers")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # list() re-raises the first worker exception
            list(executor.map(run_band, bands))

    return RasterImage(output)


def _intensity_weights(intensity_sigma: float) -> np.ndarray:
    """Lookup table indexed by (difference + 255) for integer sample differences."""
    d = np.arange(-255, 256, dtype=np.float64)
    return np.exp(-d * d / (2 * intensity_sigma * intensity_sigma))


def _spatial_weights(radius: int, spatial_sigma: float) -> np.ndarray:
    """(2r+1, 2r+1) table of spatial weights indexed by (dy + r, dx + r)."""
    offsets = np.arange(-radius, radius + 1, dtype=np.float64)
    distance = offsets[:, None] ** 2 + offsets[None, :] ** 2
    return np.exp(-distance / (2 * spatial_sigma * spatial_sigma))


def _split_rows(start: int, stop: int, workers: int) -> List[Tuple[int, int]]:
    """Split [start, stop) into at most `workers` contiguous bands."""
    rows = stop - start
    count = max(1, min(workers, rows // MIN_BAND_ROWS))
    edges = np.linspace(start, stop, count + 1).astype(int)
    return [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]


def _filter_band(
    src: np.ndarray,
    y0: int,
    y1: int,
    radius: int,
    spatial: np.ndarray,
    intensity_lut: np.ndarray,
) -> np.ndarray:
    """Filter interior rows [y0, y1) and return them as uint8."""
    width = src.shape[1]
    x0, x1 = radius, width - radius

    center = src[y0:y1, x0:x1]
    total = np.zeros(center.shape, dtype=np.float64)
    weight_sum = np.zeros(center.shape, dtype=np.float64)

    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            neighbour = src[y0 + dy:y1 + dy, x0 + dx:x1 + dx]
            weight = spatial[dy + radius, dx + radius] * intensity_lut[center - neighbour + 255]
            total += neighbour * weight
            weight_sum += weight

    # The centre tap always contributes weight 1, so weight_sum > 0
    return clamp_to_uint8(total / weight_sum)
