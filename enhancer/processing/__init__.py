"""
Processing system for the enhancement engine.

Provides the numeric filter stages and the descriptor pipeline that
sequences them. Filters are stored as configurations and applied in order
by the executor.
"""

from .pipeline import ProcessingPipeline
from .filters import (
    ProcessingFilter,
    FilterParameter,
    ParameterType,
    BilateralFilter,
    ToneMapFilter,
    SaturationFilter,
    UnsharpMaskFilter,
    LocalContrastFilter,
    DetailEnhanceFilter,
    ColorEnhanceFilter,
    ResampleFilter,
)
from .executor import ProcessingExecutor
from .modes import (
    ModeCoefficients,
    MODE_COEFFICIENTS,
    PREPARED_MILESTONE,
    COMPLETE_MILESTONE,
    build_pipeline,
    mode_quality,
)

__all__ = [
    "ProcessingPipeline",
    "ProcessingFilter",
    "FilterParameter",
    "ParameterType",
    "ProcessingExecutor",
    # Modes
    "ModeCoefficients",
    "MODE_COEFFICIENTS",
    "PREPARED_MILESTONE",
    "COMPLETE_MILESTONE",
    "build_pipeline",
    "mode_quality",
    # Filters
    "BilateralFilter",
    "ToneMapFilter",
    "SaturationFilter",
    "UnsharpMaskFilter",
    "LocalContrastFilter",
    "DetailEnhanceFilter",
    "ColorEnhanceFilter",
    "ResampleFilter",
]
