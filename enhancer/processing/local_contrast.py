"""
Tiled, clip-limited histogram equalization (CLAHE-like).

Each tile is equalized on its own; there is no interpolation between
neighbouring tiles, so strong settings can show tile seams.
"""

from typing import Iterator, Tuple

import numpy as np

from ..core import RasterImage, InvalidParameterError
from .pixels import clamp_to_uint8, with_rgb

DEFAULT_BLOCK_SIZE = 64
DEFAULT_CLIP_LIMIT = 3.0
BINS = 256


def iter_tiles(height: int, width: int, block_size: int = DEFAULT_BLOCK_SIZE) -> Iterator[Tuple[int, int, int, int]]:
    """
    Yield (y0, y1, x0, x1) bounds of non-overlapping tiles, row by row.

    Tiles start at multiples of block_size; the last tile in each direction
    may be partial.
    """
    if block_size <= 0:
        raise InvalidParameterError(f"block_size must be > 0, got {block_size}")
    for y0 in range(0, height, block_size):
        for x0 in range(0, width, block_size):
            yield y0, min(y0 + block_size, height), x0, min(x0 + block_size, width)


def luminance(rgb: np.ndarray) -> np.ndarray:
    """Rounded Rec.601 luma of uint8 RGB, as integer bin indices."""
    rgb = rgb.astype(np.float64)
    luma = 0.299 * rgb[..., 0] + 0.587 * rgb[..., 1] + 0.114 * rgb[..., 2]
    # round half up
    return np.floor(luma + 0.5).astype(np.intp)


def clip_histogram(histogram: np.ndarray, clip_limit: float = DEFAULT_CLIP_LIMIT) -> np.ndarray:
    """
    Cap bins at clip_limit * count / 256 and spread the excess over all bins.

    The total count is preserved.
    """
    histogram = np.asarray(histogram, dtype=np.float64)
    count = histogram.sum()
    clip_value = clip_limit * count / BINS

    over = histogram > clip_value
    excess = (histogram[over] - clip_value).sum()
    clipped = np.where(over, clip_value, histogram)
    return clipped + excess / BINS


def equalize_local_contrast(
    image: RasterImage,
    block_size: int = DEFAULT_BLOCK_SIZE,
    clip_limit: float = DEFAULT_CLIP_LIMIT,
) -> RasterImage:
    """
    Equalize each tile through its clipped luminance CDF.

    The CDF is built from luminance but indexed by each R, G, B sample, so
    channels are remapped independently.

    Args:
        image: Source image
        block_size: Tile edge length in pixels
        clip_limit: Histogram clip multiple of the uniform bin height

    Returns:
        New image with locally equalized contrast
    """
    src = image.rgb
    out = np.empty_like(src)
    luma = luminance(src)

    for y0, y1, x0, x1 in iter_tiles(image.height, image.width, block_size):
        tile = src[y0:y1, x0:x1]
        pixel_count = tile.shape[0] * tile.shape[1]

        histogram = np.bincount(luma[y0:y1, x0:x1].ravel(), minlength=BINS).astype(np.float64)
        cdf = np.cumsum(clip_histogram(histogram, clip_limit))

        out[y0:y1, x0:x1] = clamp_to_uint8(cdf[tile] / pixel_count * 255)

    return with_rgb(image, out)
