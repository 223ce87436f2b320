"""Core data types, errors and validation."""

from .errors import (
    EnhancerError,
    DecodeFailureError,
    ContextUnavailableError,
    ResourceExhaustedError,
    InvalidParameterError,
    ProcessingCancelledError,
    StageFailedError,
)
from .types import (
    CHANNELS,
    RunMode,
    ValidationSeverity,
    ValidationIssue,
    RasterImage,
    FilterSettings,
    PRESETS,
    ImageInfo,
    ProcessingResult,
)
from .validation import SettingsValidator

__all__ = [
    "EnhancerError",
    "DecodeFailureError",
    "ContextUnavailableError",
    "ResourceExhaustedError",
    "InvalidParameterError",
    "ProcessingCancelledError",
    "StageFailedError",
    "CHANNELS",
    "RunMode",
    "ValidationSeverity",
    "ValidationIssue",
    "RasterImage",
    "FilterSettings",
    "PRESETS",
    "ImageInfo",
    "ProcessingResult",
    "SettingsValidator",
]
