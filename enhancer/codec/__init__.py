"""Image decoding, encoding and probing."""

from .adapter import CodecAdapter, MIME_TYPES

__all__ = ["CodecAdapter", "MIME_TYPES"]
