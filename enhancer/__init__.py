"""
Raster Enhancer: pixel-level image enhancement pipeline.

Applies spatial and color-space filters (denoise, tone-map, saturate,
sharpen, local contrast, resample) to in-memory RGBA buffers.
"""

__version__ = "1.0.0"
