"""
Filter definitions for the processing pipeline.

Each filter is a stage descriptor: an identifier plus typed, range-checked
parameters. Descriptors hold no pixel data; the executor maps each one to
the numeric routine that implements it.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional, List, Dict


class ParameterType(Enum):
    """Type of filter parameter."""
    FLOAT = auto()
    INT = auto()
    BOOL = auto()


@dataclass
class FilterParameter:
    """A single parameter for a filter."""
    name: str
    param_type: ParameterType
    value: Any
    min_val: Optional[float] = None
    max_val: Optional[float] = None
    description: str = ""

    def validate(self) -> tuple[bool, str]:
        """Validate parameter value. Returns (is_valid, error_message)."""

        if self.param_type == ParameterType.FLOAT:
            if not isinstance(self.value, (int, float)) or isinstance(self.value, bool):
                return False, f"{self.name} must be a number"
            if self.min_val is not None and self.value < self.min_val:
                return False, f"{self.name} must be >= {self.min_val}"
            if self.max_val is not None and self.value > self.max_val:
                return False, f"{self.name} must be <= {self.max_val}"

        elif self.param_type == ParameterType.INT:
            if not isinstance(self.value, int) or isinstance(self.value, bool):
                return False, f"{self.name} must be an integer"
            if self.min_val is not None and self.value < self.min_val:
                return False, f"{self.name} must be >= {int(self.min_val)}"
            if self.max_val is not None and self.value > self.max_val:
                return False, f"{self.name} must be <= {int(self.max_val)}"

        elif self.param_type == ParameterType.BOOL:
            if not isinstance(self.value, bool):
                return False, f"{self.name} must be a boolean"

        return True, ""


@dataclass
class ProcessingFilter:
    """Base class for all processing filters."""
    filter_id: str
    name: str
    category: str
    enabled: bool = True
    order: int = 0
    milestone: Optional[int] = None  # progress percent reported after this stage
    parameters: Dict[str, FilterParameter] = field(default_factory=dict)

    def validate_parameters(self) -> tuple[bool, List[str]]:
        """Validate all parameters. Returns (is_valid, list_of_errors)."""
        errors = []
        for param in self.parameters.values():
            is_valid, error_msg = param.validate()
            if not is_valid:
                errors.append(error_msg)
        return len(errors) == 0, errors

    def values(self) -> Dict[str, Any]:
        """Current parameter values keyed by parameter id."""
        return {key: param.value for key, param in self.parameters.items()}

    def configure(self, **values: Any) -> "ProcessingFilter":
        """Set several parameters at once and return self for chaining."""
        for key, value in values.items():
            if key not in self.parameters:
                raise KeyError(f"{self.name} has no parameter '{key}'")
            self.parameters[key].value = value
        return self


# ============================================================================
# FILTER IMPLEMENTATIONS
# ============================================================================

class BilateralFilter(ProcessingFilter):
    """Edge-preserving denoise."""

    def __init__(self):
        super().__init__(
            filter_id="bilateral",
            name="Bilateral Denoise",
            category="Filtering & Repair",
            parameters={
                "spatial_sigma": FilterParameter(
                    name="Spatial Sigma",
                    param_type=ParameterType.FLOAT,
                    value=3.0,
                    min_val=0.1,
                    max_val=20.0,
                    description="Spatial falloff in pixels; radius is ceil(2 * sigma)"
                ),
                "intensity_sigma": FilterParameter(
                    name="Intensity Sigma",
                    param_type=ParameterType.FLOAT,
                    value=25.0,
                    min_val=0.1,
                    max_val=255.0,
                    description="Intensity falloff in 8-bit levels"
                ),
            }
        )


class ToneMapFilter(ProcessingFilter):
    """S-curve contrast followed by gamma-style brightness."""

    def __init__(self):
        super().__init__(
            filter_id="tone_map",
            name="Tone Map",
            category="Tone & Dynamics",
            parameters={
                "brightness": FilterParameter(
                    name="Brightness",
                    param_type=ParameterType.FLOAT,
                    value=0.0,
                    min_val=-50.0,
                    max_val=50.0,
                    description="Applied as exponent 1 + brightness/100"
                ),
                "contrast": FilterParameter(
                    name="Contrast",
                    param_type=ParameterType.FLOAT,
                    value=0.0,
                    min_val=-50.0,
                    max_val=50.0,
                    description="S-curve strength around the midtone (0 = no change)"
                ),
            }
        )


class SaturationFilter(ProcessingFilter):
    """HSL saturation scaling."""

    def __init__(self):
        super().__init__(
            filter_id="saturation",
            name="Saturation",
            category="Color Transforms",
            parameters={
                "saturation": FilterParameter(
                    name="Saturation",
                    param_type=ParameterType.FLOAT,
                    value=0.0,
                    min_val=-50.0,
                    max_val=50.0,
                    description="Saturation scaled by (value + 100) / 100"
                ),
            }
        )


class UnsharpMaskFilter(ProcessingFilter):
    """Unsharp mask for controlled sharpening."""

    def __init__(self):
        super().__init__(
            filter_id="unsharp_mask",
            name="Unsharp Mask",
            category="Filtering & Repair",
            parameters={
                "amount": FilterParameter(
                    name="Amount",
                    param_type=ParameterType.FLOAT,
                    value=1.0,
                    min_val=0.0,
                    max_val=10.0,
                    description="Sharpening intensity"
                ),
                "radius": FilterParameter(
                    name="Radius",
                    param_type=ParameterType.FLOAT,
                    value=1.0,
                    min_val=0.1,
                    max_val=10.0,
                    description="Gaussian blur radius in pixels"
                ),
                "threshold": FilterParameter(
                    name="Threshold",
                    param_type=ParameterType.FLOAT,
                    value=0.0,
                    min_val=0.0,
                    max_val=255.0,
                    description="Minimum difference (8-bit levels) to sharpen"
                ),
            }
        )


class LocalContrastFilter(ProcessingFilter):
    """Tiled clip-limited histogram equalization."""

    def __init__(self):
        super().__init__(
            filter_id="local_contrast",
            name="Local Contrast",
            category="Tone & Dynamics",
            parameters={
                "block_size": FilterParameter(
                    name="Block Size",
                    param_type=ParameterType.INT,
                    value=64,
                    min_val=1,
                    max_val=1024,
                    description="Tile edge length in pixels"
                ),
                "clip_limit": FilterParameter(
                    name="Clip Limit",
                    param_type=ParameterType.FLOAT,
                    value=3.0,
                    min_val=1.0,
                    max_val=256.0,
                    description="Histogram cap as a multiple of the uniform bin height"
                ),
            }
        )


class DetailEnhanceFilter(ProcessingFilter):
    """High-pass detail boost."""

    def __init__(self):
        super().__init__(
            filter_id="detail_enhance",
            name="Detail Enhance",
            category="Filtering & Repair",
            parameters={
                "radius": FilterParameter(
                    name="Radius",
                    param_type=ParameterType.FLOAT,
                    value=2.0,
                    min_val=0.1,
                    max_val=10.0,
                    description="Blur radius separating detail from base"
                ),
                "strength": FilterParameter(
                    name="Strength",
                    param_type=ParameterType.FLOAT,
                    value=0.8,
                    min_val=0.0,
                    max_val=5.0,
                    description="Gain applied to the high-pass residual"
                ),
            }
        )


class ColorEnhanceFilter(ProcessingFilter):
    """Per-channel gamma/gain and colour separation stretch."""

    def __init__(self):
        super().__init__(
            filter_id="color_enhance",
            name="Color Enhance",
            category="Color Transforms",
            parameters={}  # No parameters for this filter
        )


class ResampleFilter(ProcessingFilter):
    """Bicubic resample by a scale factor."""

    def __init__(self):
        super().__init__(
            filter_id="resample",
            name="Bicubic Resample",
            category="Geometry",
            parameters={
                "scale": FilterParameter(
                    name="Scale",
                    param_type=ParameterType.FLOAT,
                    value=1.0,
                    min_val=0.01,
                    max_val=8.0,
                    description="Output size is round(input size * scale)"
                ),
            }
        )

