"""
Processing executor - applies filter descriptors to raster images.

This module bridges the processing pipeline to the numeric filter
routines, handling dispatch, progress milestones and failure mapping.
"""

import logging
import time
from typing import Callable, Optional

from ..core import (
    RasterImage,
    EnhancerError,
    InvalidParameterError,
    ProcessingCancelledError,
    ResourceExhaustedError,
    StageFailedError,
)
from .pipeline import ProcessingPipeline
from .filters import (
    ProcessingFilter,
    BilateralFilter,
    ToneMapFilter,
    SaturationFilter,
    UnsharpMaskFilter,
    LocalContrastFilter,
    DetailEnhanceFilter,
    ColorEnhanceFilter,
    ResampleFilter,
)
from .denoise import bilateral_filter
from .tone import tone_map
from .color import adjust_saturation, enhance_colors
from .sharpen import unsharp_mask, enhance_details
from .local_contrast import equalize_local_contrast
from .resize import bicubic_resample

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]
StopCheck = Callable[[], bool]


class ProcessingExecutor:
    """Executes processing pipeline on RasterImage objects."""

    def __init__(self, workers: int = 1):
        """
        Args:
            workers: Thread count for stages that split work into row bands
        """
        self.workers = max(1, int(workers))

    def execute(
        self,
        image: RasterImage,
        pipeline: ProcessingPipeline,
        progress: Optional[ProgressCallback] = None,
        should_stop: Optional[StopCheck] = None,
    ) -> RasterImage:
        """
        Apply all enabled filters in pipeline to image sequentially.

        Args:
            image: Input image (never modified)
            pipeline: Processing pipeline with filters
            progress: Called with a filter's milestone after that filter completes
            should_stop: Polled before each filter; True aborts the run

        Returns:
            Processed image

        Raises:
            ProcessingCancelledError: should_stop returned True
            InvalidParameterError, ResourceExhaustedError, StageFailedError
        """
        if not pipeline.enabled or pipeline.is_empty():
            return image

        result = image
        for filter in pipeline.get_enabled_filters():
            if should_stop is not None and should_stop():
                logger.info(f"Run stopped before {filter.name}")
                raise ProcessingCancelledError(f"Stopped before stage '{filter.name}'")

            result = self.apply(result, filter)

            if filter.milestone is not None and progress is not None:
                progress(filter.milestone)

        return result

    def apply(self, image: RasterImage, filter: ProcessingFilter) -> RasterImage:
        """
        Apply a single filter to an image.

        Args:
            image: Input image
            filter: Filter to apply

        Returns:
            New processed image
        """
        is_valid, errors = filter.validate_parameters()
        if not is_valid:
            raise InvalidParameterError(f"Invalid parameters for {filter.name}: {errors}")

        started = time.perf_counter()
        try:
            result = self._dispatch(image, filter)
        except MemoryError as e:
            logger.error(f"Out of memory in {filter.name} on {image.width}x{image.height} image")
            raise ResourceExhaustedError(
                f"Not enough memory to run {filter.name} on a {image.width}x{image.height} image"
            ) from e
        except EnhancerError:
            raise
        except Exception as e:
            logger.error(f"Failed to apply filter {filter.name}: {e}")
            raise StageFailedError(filter.name, str(e)) from e

        logger.debug(
            f"{filter.name}: {image.width}x{image.height} -> {result.width}x{result.height} "
            f"in {(time.perf_counter() - started) * 1000:.1f} ms"
        )
        return result

    def _dispatch(self, image: RasterImage, filter: ProcessingFilter) -> RasterImage:
        """Route a descriptor to its handler."""
        if isinstance(filter, BilateralFilter):
            return self._apply_bilateral(image, filter)

        elif isinstance(filter, ToneMapFilter):
            return self._apply_tone_map(image, filter)

        elif isinstance(filter, SaturationFilter):
            return self._apply_saturation(image, filter)

        elif isinstance(filter, UnsharpMaskFilter):
            return self._apply_unsharp_mask(image, filter)

        elif isinstance(filter, LocalContrastFilter):
            return self._apply_local_contrast(image, filter)

        elif isinstance(filter, DetailEnhanceFilter):
            return self._apply_detail_enhance(image, filter)

        elif isinstance(filter, ColorEnhanceFilter):
            return enhance_colors(image)

        elif isinstance(filter, ResampleFilter):
            return self._apply_resample(image, filter)

        else:
            raise InvalidParameterError(f"Unknown filter type: {type(filter).__name__}")

    def _apply_bilateral(self, image: RasterImage, filter: BilateralFilter) -> RasterImage:
        """Apply bilateral denoise."""
        params = filter.values()
        return bilateral_filter(
            image,
            params["spatial_sigma"],
            params["intensity_sigma"],
            workers=self.workers,
        )

    def _apply_tone_map(self, image: RasterImage, filter: ToneMapFilter) -> RasterImage:
        """Apply brightness/contrast tone mapping."""
        params = filter.values()
        return tone_map(image, params["brightness"], params["contrast"])

    def _apply_saturation(self, image: RasterImage, filter: SaturationFilter) -> RasterImage:
        """Apply HSL saturation adjustment."""
        return adjust_saturation(image, filter.values()["saturation"])

    def _apply_unsharp_mask(self, image: RasterImage, filter: UnsharpMaskFilter) -> RasterImage:
        """Apply unsharp mask."""
        params = filter.values()
        return unsharp_mask(
            image,
            amount=params["amount"],
            radius=params["radius"],
            threshold=params["threshold"],
        )

    def _apply_local_contrast(self, image: RasterImage, filter: LocalContrastFilter) -> RasterImage:
        """Apply tiled clip-limited equalization."""
        params = filter.values()
        return equalize_local_contrast(
            image,
            block_size=params["block_size"],
            clip_limit=params["clip_limit"],
        )

    def _apply_detail_enhance(self, image: RasterImage, filter: DetailEnhanceFilter) -> RasterImage:
        """Apply high-pass detail boost."""
        params = filter.values()
        return enhance_details(image, radius=params["radius"], strength=params["strength"])

    def _apply_resample(self, image: RasterImage, filter: ResampleFilter) -> RasterImage:
        """Apply bicubic resample."""
        scale = filter.values()["scale"]
        if scale == 1.0:
            return image
        return bicubic_resample(image, scale)
