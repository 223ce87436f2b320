"""
Error types raised by the enhancement core.

Filter stages are pure numeric transforms; they only fail through resource
exhaustion. Everything else surfaces at the orchestration boundary.
"""


class EnhancerError(Exception):
    """Base class for all enhancement errors."""


class DecodeFailureError(EnhancerError):
    """Source image bytes could not be read."""


class ContextUnavailableError(EnhancerError):
    """A required codec or compute context is missing."""


class ResourceExhaustedError(EnhancerError):
    """Allocation failed while processing an oversized image."""


class InvalidParameterError(EnhancerError, ValueError):
    """A stage parameter or buffer shape is outside what the stage accepts."""


class ProcessingCancelledError(EnhancerError):
    """A stop was requested before the run completed."""


class StageFailedError(EnhancerError):
    """A stage raised an unexpected error; the whole run is aborted."""

    def __init__(self, stage_name: str, message: str):
        super().__init__(f"Stage '{stage_name}' failed: {message}")
        self.stage_name = stage_name
