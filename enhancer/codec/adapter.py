"""
Pillow adapter for decoding sources, encoding results and probing headers.

All codec work happens in memory; the core never touches the filesystem.
"""

import io
import logging
from typing import Dict

import numpy as np
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from ..core import (
    RasterImage,
    ImageInfo,
    ContextUnavailableError,
    DecodeFailureError,
    InvalidParameterError,
    ResourceExhaustedError,
)

logger = logging.getLogger(__name__)

MIME_TYPES: Dict[str, str] = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
}

# Formats that cannot store alpha are written from the RGB channels only
OPAQUE_FORMATS = {"JPEG"}


class CodecAdapter:
    """Thin wrapper around Pillow encode/probe calls."""

    @staticmethod
    def encode(image: RasterImage, quality: float, fmt: str = "JPEG") -> bytes:
        """
        Encode an image to bytes.

        Args:
            image: Raster to encode
            quality: Lossy quality in (0, 1]; ignored by lossless formats
            fmt: Output format name (JPEG, PNG or WEBP)

        Returns:
            Encoded image bytes
        """
        fmt = fmt.upper()
        if fmt not in MIME_TYPES:
            raise ContextUnavailableError(
                f"Unsupported output format '{fmt}'. Available: {', '.join(MIME_TYPES)}"
            )
        if not 0 < quality <= 1:
            raise InvalidParameterError(f"Quality must be in (0, 1], got {quality}")

        pil_image = PILImage.fromarray(image.pixels)
        if fmt in OPAQUE_FORMATS:
            pil_image = pil_image.convert("RGB")

        buffer = io.BytesIO()
        try:
            if fmt == "JPEG":
                pil_image.save(buffer, format="JPEG", quality=CodecAdapter.quality_percent(quality))
            elif fmt == "WEBP":
                pil_image.save(buffer, format="WEBP", quality=CodecAdapter.quality_percent(quality))
            else:
                pil_image.save(buffer, format=fmt)
        except (KeyError, OSError) as e:
            raise ContextUnavailableError(f"Pillow cannot encode {fmt}: {e}") from e

        data = buffer.getvalue()
        logger.debug(f"Encoded {image.width}x{image.height} as {fmt} ({len(data)} bytes)")
        return data

    @staticmethod
    def quality_percent(quality: float) -> int:
        """Map a (0, 1] quality to Pillow's 1-100 scale."""
        return max(1, min(100, int(round(quality * 100))))

    @staticmethod
    def mime_type(fmt: str) -> str:
        """MIME type for a supported output format."""
        return MIME_TYPES[fmt.upper()]

    @staticmethod
    def probe(data: bytes) -> ImageInfo:
        """
        Read dimensions and type of an encoded source image.

        Only the header is parsed; pixels are not decoded.
        """
        try:
            with PILImage.open(io.BytesIO(data)) as pil_image:
                width, height = pil_image.size
                fmt = pil_image.format or ""
        except (UnidentifiedImageError, OSError) as e:
            raise DecodeFailureError(f"Failed to load image: {e}") from e

        mime = PILImage.MIME.get(fmt, "application/octet-stream")
        return ImageInfo(width=width, height=height, byte_size=len(data), mime_type=mime)

    @staticmethod
    def decode(data: bytes) -> RasterImage:
        """Decode source bytes into an RGBA raster."""
        try:
            with PILImage.open(io.BytesIO(data)) as pil_image:
                pixels = np.asarray(pil_image.convert("RGBA"), dtype=np.uint8)
        except (UnidentifiedImageError, OSError) as e:
            raise DecodeFailureError(f"Failed to load image: {e}") from e
        except MemoryError as e:
            raise ResourceExhaustedError("Not enough memory to decode image") from e

        return RasterImage(pixels.copy())

    @staticmethod
    def get_pillow_version() -> str:
        """Return Pillow version string."""
        import PIL
        return getattr(PIL, "__version__", "unknown")
