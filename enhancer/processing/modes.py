"""
Per-mode coefficient table and pipeline construction.

Preview and final runs use the same stages with different coefficients and
ordering. Both are described here as data; build_pipeline() turns a
FilterSettings record into an ordered list of stage descriptors.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..core import FilterSettings, RunMode
from .filters import (
    ProcessingFilter,
    BilateralFilter,
    ToneMapFilter,
    SaturationFilter,
    UnsharpMaskFilter,
    LocalContrastFilter,
    DetailEnhanceFilter,
    ColorEnhanceFilter,
)
from .pipeline import ProcessingPipeline

# Stage group keys
DENOISE = "denoise"
TONE = "tone"
SATURATION = "saturation"
SHARPEN = "sharpen"
AI = "ai"

# Progress reported once the input is prepared and once the run succeeds
PREPARED_MILESTONE = 10
COMPLETE_MILESTONE = 100

# Fixed parameters of the AI enhancement chain
AI_BILATERAL = (3.0, 25.0)
AI_BLOCK_SIZE = 64
AI_CLIP_LIMIT = 3.0
AI_DETAIL_RADIUS = 2.0
AI_DETAIL_STRENGTH = 0.8


@dataclass(frozen=True)
class ModeCoefficients:
    """
    Coefficients for one run mode.

    Each (base, span) pair maps a 0-100 slider value v to base + (v / 100) * span.
    """
    spatial_sigma: Tuple[float, float]
    intensity_sigma: Tuple[float, float]
    sharpen_amount: Tuple[float, float]
    sharpen_radius: Tuple[float, float]
    sharpen_threshold: float
    stage_order: Tuple[str, ...]
    quality: float
    milestones: Dict[str, int] = field(default_factory=dict)


MODE_COEFFICIENTS: Dict[RunMode, ModeCoefficients] = {
    RunMode.PREVIEW: ModeCoefficients(
        spatial_sigma=(2.0, 3.0),
        intensity_sigma=(15.0, 35.0),
        sharpen_amount=(0.5, 2.0),
        sharpen_radius=(1.0, 1.5),
        sharpen_threshold=3.0,
        stage_order=(DENOISE, TONE, SATURATION, SHARPEN, AI),
        quality=0.90,
    ),
    RunMode.FINAL: ModeCoefficients(
        spatial_sigma=(3.0, 4.0),
        intensity_sigma=(20.0, 50.0),
        sharpen_amount=(1.0, 3.0),
        sharpen_radius=(1.2, 2.0),
        sharpen_threshold=2.0,
        stage_order=(DENOISE, AI, TONE, SATURATION, SHARPEN),
        quality=0.98,
        milestones={DENOISE: 25, AI: 50, TONE: 65, SATURATION: 80, SHARPEN: 95},
    ),
}


def scaled(pair: Tuple[float, float], value: float) -> float:
    """Map a slider value through a (base, span) coefficient pair."""
    base, span = pair
    return base + (value / 100) * span


def is_stage_active(stage: str, settings: FilterSettings) -> bool:
    """Whether a stage group runs for the given settings."""
    if stage == DENOISE:
        return settings.denoising > 0
    if stage == TONE:
        return settings.brightness != 0 or settings.contrast != 0
    if stage == SATURATION:
        return settings.saturation != 0
    if stage == SHARPEN:
        return settings.sharpening > 0
    if stage == AI:
        return bool(settings.ai_enhance)
    raise ValueError(f"Unknown stage group: {stage}")


def stage_filters(stage: str, settings: FilterSettings, coeffs: ModeCoefficients) -> List[ProcessingFilter]:
    """Descriptors implementing one stage group."""
    if stage == DENOISE:
        return [BilateralFilter().configure(
            spatial_sigma=scaled(coeffs.spatial_sigma, settings.denoising),
            intensity_sigma=scaled(coeffs.intensity_sigma, settings.denoising),
        )]

    if stage == TONE:
        return [ToneMapFilter().configure(
            brightness=settings.brightness,
            contrast=settings.contrast,
        )]

    if stage == SATURATION:
        return [SaturationFilter().configure(saturation=settings.saturation)]

    if stage == SHARPEN:
        return [UnsharpMaskFilter().configure(
            amount=scaled(coeffs.sharpen_amount, settings.sharpening),
            radius=scaled(coeffs.sharpen_radius, settings.sharpening),
            threshold=coeffs.sharpen_threshold,
        )]

    if stage == AI:
        spatial, intensity = AI_BILATERAL
        return [
            BilateralFilter().configure(spatial_sigma=spatial, intensity_sigma=intensity),
            LocalContrastFilter().configure(block_size=AI_BLOCK_SIZE, clip_limit=AI_CLIP_LIMIT),
            DetailEnhanceFilter().configure(radius=AI_DETAIL_RADIUS, strength=AI_DETAIL_STRENGTH),
            ColorEnhanceFilter(),
        ]

    raise ValueError(f"Unknown stage group: {stage}")


def build_pipeline(settings: FilterSettings, mode: RunMode) -> ProcessingPipeline:
    """
    Build the ordered stage list for a run.

    Inactive stage groups are omitted. In modes with milestones, the last
    descriptor of each active group carries that group's progress value.

    Args:
        settings: Enhancement settings (expected already clamped)
        mode: PREVIEW or FINAL

    Returns:
        ProcessingPipeline of enabled stage descriptors
    """
    coeffs = MODE_COEFFICIENTS[mode]
    pipeline = ProcessingPipeline(name=mode.name.lower())

    for stage in coeffs.stage_order:
        if not is_stage_active(stage, settings):
            continue
        filters = stage_filters(stage, settings, coeffs)
        filters[-1].milestone = coeffs.milestones.get(stage)
        for f in filters:
            pipeline.add_filter(f)

    return pipeline


def mode_quality(mode: RunMode) -> float:
    """Default encode quality for a mode, in (0, 1]."""
    return MODE_COEFFICIENTS[mode].quality

