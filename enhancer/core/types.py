"""
Core data types for the enhancement pipeline.

All types use @dataclass and Enum for structured representations.
No loose dicts at the internal API boundary.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np

from .errors import InvalidParameterError


CHANNELS = 4  # R, G, B, A


class RunMode(Enum):
    """Which pipeline variant to run."""
    PREVIEW = auto()
    FINAL = auto()


class ValidationSeverity(Enum):
    """Validation issue severity."""
    ERROR = auto()
    WARNING = auto()


@dataclass
class ValidationIssue:
    """A validation problem."""
    severity: ValidationSeverity
    code: str
    message: str
    context: dict = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.severity.name}] {self.code}: {self.message}"


@dataclass
class RasterImage:
    """
    Decoded RGBA raster.

    Pixels are held as a uint8 array of shape (height, width, 4) in R, G, B, A
    order. Stages never mutate an input image; each produces a new one.
    """
    pixels: np.ndarray

    def __post_init__(self):
        if not isinstance(self.pixels, np.ndarray):
            self.pixels = np.asarray(self.pixels)
        if self.pixels.ndim != 3 or self.pixels.shape[2] != CHANNELS:
            raise InvalidParameterError(
                f"RasterImage expects (height, width, 4) pixels, got {self.pixels.shape}"
            )
        if self.pixels.dtype != np.uint8:
            self.pixels = np.clip(self.pixels, 0, 255).astype(np.uint8)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) tuple."""
        return self.width, self.height

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def rgb(self) -> np.ndarray:
        """View of the colour channels."""
        return self.pixels[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        """View of the alpha channel."""
        return self.pixels[:, :, 3]

    def copy(self) -> "RasterImage":
        return RasterImage(self.pixels.copy())

    def to_bytes(self) -> bytes:
        """Flat RGBA sample sequence, row-major."""
        return self.pixels.tobytes()

    @classmethod
    def from_buffer(cls, width: int, height: int, buffer: Iterable[int]) -> "RasterImage":
        """Build an image from a flat RGBA sample sequence of length width*height*4."""
        if width <= 0 or height <= 0:
            raise InvalidParameterError(f"Invalid image dimensions: {width}x{height}")
        if isinstance(buffer, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(buffer, dtype=np.uint8)
        elif isinstance(buffer, np.ndarray):
            flat = buffer.ravel()
        else:
            flat = np.asarray(list(buffer))
        expected = width * height * CHANNELS
        if flat.size != expected:
            raise InvalidParameterError(
                f"Buffer length {flat.size} does not match {width}x{height}x{CHANNELS} = {expected}"
            )
        pixels = np.clip(flat, 0, 255).astype(np.uint8).reshape(height, width, CHANNELS)
        return cls(pixels.copy())

    @classmethod
    def blank(
        cls,
        width: int,
        height: int,
        rgba: Tuple[int, int, int, int] = (0, 0, 0, 255),
    ) -> "RasterImage":
        """Uniform image filled with a single RGBA value."""
        if width <= 0 or height <= 0:
            raise InvalidParameterError(f"Invalid image dimensions: {width}x{height}")
        pixels = np.empty((height, width, CHANNELS), dtype=np.uint8)
        pixels[:, :] = rgba
        return cls(pixels)


@dataclass
class FilterSettings:
    """User-facing enhancement settings."""
    sharpening: float = 0.0   # [0, 100]
    denoising: float = 0.0    # [0, 100]
    brightness: float = 0.0   # [-50, 50]
    contrast: float = 0.0     # [-50, 50]
    saturation: float = 0.0   # [-50, 50]
    ai_enhance: bool = False

    RANGES = {
        "sharpening": (0.0, 100.0),
        "denoising": (0.0, 100.0),
        "brightness": (-50.0, 50.0),
        "contrast": (-50.0, 50.0),
        "saturation": (-50.0, 50.0),
    }

    def clamped(self) -> "FilterSettings":
        """Return a copy with every numeric field clamped to its range."""
        values = {}
        for name, (lo, hi) in self.RANGES.items():
            values[name] = min(hi, max(lo, float(getattr(self, name))))
        return replace(self, ai_enhance=bool(self.ai_enhance), **values)

    def has_changes(self) -> bool:
        """True if at least one stage would run for these settings."""
        return (
            self.sharpening > 0
            or self.denoising > 0
            or self.brightness != 0
            or self.contrast != 0
            or self.saturation != 0
            or self.ai_enhance
        )

    def enhancement_strength(self) -> int:
        """Overall strength score in [0, 100]."""
        total = (
            abs(self.sharpening)
            + abs(self.denoising)
            + abs(self.brightness)
            + abs(self.contrast)
            + abs(self.saturation)
            + (50 if self.ai_enhance else 0)
        )
        return min(100, int(math.floor(total / 3 + 0.5)))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "sharpening": self.sharpening,
            "denoising": self.denoising,
            "brightness": self.brightness,
            "contrast": self.contrast,
            "saturation": self.saturation,
            "aiEnhance": self.ai_enhance,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterSettings":
        """Deserialize from dictionary. Accepts aiEnhance, useAI or ai_enhance."""
        ai = data.get("aiEnhance", data.get("useAI", data.get("ai_enhance", False)))
        return cls(
            sharpening=float(data.get("sharpening", 0.0)),
            denoising=float(data.get("denoising", 0.0)),
            brightness=float(data.get("brightness", 0.0)),
            contrast=float(data.get("contrast", 0.0)),
            saturation=float(data.get("saturation", 0.0)),
            ai_enhance=bool(ai),
        )

    @classmethod
    def preset(cls, name: str) -> "FilterSettings":
        """Named preset. Raises KeyError for unknown names."""
        try:
            values = PRESETS[name.lower()]
        except KeyError:
            raise KeyError(f"Unknown preset '{name}'. Available: {', '.join(PRESETS)}")
        return cls(*values)


# sharpening, denoising, brightness, contrast, saturation, ai_enhance
PRESETS: Dict[str, Tuple[float, float, float, float, float, bool]] = {
    "default": (40, 30, 5, 15, 10, True),
    "portrait": (35, 40, 8, 12, 15, True),
    "landscape": (50, 25, 3, 20, 12, True),
    "vintage": (25, 35, -5, 25, -10, False),
    "professional": (60, 45, 0, 25, 8, True),
}


@dataclass
class ImageInfo:
    """Metadata about a source image."""
    width: int
    height: int
    byte_size: int
    mime_type: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "byteSize": self.byte_size,
            "mimeType": self.mime_type,
        }


@dataclass
class ProcessingResult:
    """Output of one pipeline run."""
    mode: RunMode
    data: Optional[bytes] = None  # encoded image, if encoding was requested
    image: Optional[RasterImage] = None  # raw raster, if encoding was skipped
    mime_type: Optional[str] = None
    progress: List[int] = field(default_factory=list)

    @property
    def is_encoded(self) -> bool:
        return self.data is not None
