"""
Enhancement orchestration.

Turns a decoded image and a FilterSettings record into a ProcessingResult,
in one of two modes:

- PREVIEW: downscaled to the preview size, fast coefficients, no progress.
- FINAL: optionally enlarged, full-quality coefficients, progress reported
  at fixed milestones ending at 100.

A failing stage aborts the whole run; no partial image is ever returned.
"""

import logging
import time
from typing import Callable, List, Optional

from ..codec import CodecAdapter
from ..core import (
    RasterImage,
    FilterSettings,
    ImageInfo,
    ProcessingResult,
    RunMode,
    InvalidParameterError,
    SettingsValidator,
    ValidationSeverity,
)
from ..processing import (
    ProcessingExecutor,
    ResampleFilter,
    build_pipeline,
    PREPARED_MILESTONE,
    COMPLETE_MILESTONE,
)
from ..processing.resize import fit_scale, upscale_scale
from .settings import Settings

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]
StopCheck = Callable[[], bool]


class ProgressRecorder:
    """Forwards milestones to an optional sink and keeps the sequence."""

    def __init__(self, sink: Optional[ProgressCallback] = None):
        self.sink = sink
        self.values: List[int] = []

    def __call__(self, percent: int) -> None:
        if self.values and percent < self.values[-1]:
            raise ValueError(f"Progress went backwards: {self.values[-1]} -> {percent}")
        self.values.append(percent)
        logger.debug(f"Progress {percent}%")
        if self.sink is not None:
            self.sink(percent)


class EnhancementService:
    """
    Runs preview and final enhancement passes over decoded images.

    Holds no per-image state; one instance can serve concurrent calls on
    distinct images.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.executor = ProcessingExecutor(workers=self.settings.get_worker_threads())
        self.codec = CodecAdapter()
        logger.debug(
            f"EnhancementService ready (Pillow {CodecAdapter.get_pillow_version()}, "
            f"{self.executor.workers} workers)"
        )

    def process_preview(
        self,
        image: RasterImage,
        settings: FilterSettings,
        encode: bool = True,
        should_stop: Optional[StopCheck] = None,
    ) -> ProcessingResult:
        """
        Fast interactive render.

        The image is shrunk (never enlarged) so its longer side fits the
        preview size, then the preview stage list runs.
        """
        max_dimension = self.settings.get_preview_max_dimension()
        scale = fit_scale(image.width, image.height, max_dimension)
        return self._run(RunMode.PREVIEW, image, settings, scale, None, encode, should_stop)

    def process_final(
        self,
        image: RasterImage,
        settings: FilterSettings,
        progress: Optional[ProgressCallback] = None,
        encode: bool = True,
        should_stop: Optional[StopCheck] = None,
    ) -> ProcessingResult:
        """
        Full-quality render with progress.

        Sources below the upscale area limit are resampled first (up to the
        upscale factor, capped at the upscale max dimension). Progress is
        reported at 10 once prepared, after each active stage group, and at
        100 once the result is ready.
        """
        scale = upscale_scale(
            image.width,
            image.height,
            area_limit=self.settings.get_upscale_area_limit(),
            max_factor=self.settings.get_upscale_factor(),
            max_dimension=self.settings.get_upscale_max_dimension(),
        )
        return self._run(RunMode.FINAL, image, settings, scale, progress, encode, should_stop)

    def get_image_info(self, data: bytes) -> ImageInfo:
        """Width, height, byte size and MIME type of encoded source bytes."""
        return self.codec.probe(data)

    def _run(
        self,
        mode: RunMode,
        image: RasterImage,
        settings: FilterSettings,
        scale: float,
        progress: Optional[ProgressCallback],
        encode: bool,
        should_stop: Optional[StopCheck],
    ) -> ProcessingResult:
        started = time.perf_counter()
        settings = self._prepare_settings(settings)
        recorder = ProgressRecorder(progress)
        report = recorder if mode == RunMode.FINAL else None

        pipeline = build_pipeline(settings, mode)
        logger.info(
            f"{mode.name} run: {image.width}x{image.height}, scale {scale:.3f}, "
            f"stages {pipeline.filter_ids() or 'none'}"
        )

        prepared = image
        if scale != 1.0:
            prepared = self.executor.apply(image, ResampleFilter().configure(scale=scale))
        if report is not None:
            report(PREPARED_MILESTONE)

        enhanced = self.executor.execute(prepared, pipeline, progress=report, should_stop=should_stop)

        result = ProcessingResult(mode=mode)
        if encode:
            fmt = self.settings.get_output_format()
            result.data = self.codec.encode(enhanced, self.settings.get_quality(mode), fmt)
            result.mime_type = self.codec.mime_type(fmt)
        else:
            result.image = enhanced

        if report is not None:
            report(COMPLETE_MILESTONE)
        result.progress = list(recorder.values)

        logger.info(
            f"{mode.name} run finished: {enhanced.width}x{enhanced.height} "
            f"in {time.perf_counter() - started:.2f}s"
        )
        return result

    @staticmethod
    def _prepare_settings(settings: FilterSettings) -> FilterSettings:
        """Reject unusable values and clamp out-of-range ones."""
        issues = SettingsValidator.validate(settings)
        errors = [i for i in issues if i.severity == ValidationSeverity.ERROR]
        if errors:
            raise InvalidParameterError("; ".join(str(i) for i in errors))
        for issue in issues:
            logger.warning(str(issue))
        return settings.clamped()
