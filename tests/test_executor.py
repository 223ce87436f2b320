"""
Tests for the processing executor.
"""
import numpy as np
import pytest

from enhancer.core import (
    FilterSettings,
    RunMode,
    InvalidParameterError,
    ProcessingCancelledError,
    ResourceExhaustedError,
    StageFailedError,
)
from enhancer.processing import (
    ProcessingExecutor,
    ProcessingPipeline,
    BilateralFilter,
    ResampleFilter,
    ToneMapFilter,
    build_pipeline,
)
import enhancer.processing.executor as executor_module


@pytest.fixture
def executor():
    return ProcessingExecutor(workers=2)


class TestExecute:
    """Test pipeline execution."""

    def test_empty_pipeline_returns_input(self, executor, gradient_image):
        assert executor.execute(gradient_image, ProcessingPipeline()) is gradient_image

    def test_reports_milestones_in_order(self, executor, gradient_image):
        seen = []
        pipeline = build_pipeline(FilterSettings.preset("professional"), RunMode.FINAL)
        executor.execute(gradient_image, pipeline, progress=seen.append)
        assert seen == [25, 50, 65, 80, 95]

    def test_input_not_modified(self, executor, gradient_image):
        before = gradient_image.pixels.copy()
        pipeline = build_pipeline(FilterSettings.preset("vintage"), RunMode.PREVIEW)
        result = executor.execute(gradient_image, pipeline)
        assert np.array_equal(gradient_image.pixels, before)
        assert result.size == gradient_image.size

    def test_stop_before_first_stage(self, executor, gradient_image):
        pipeline = build_pipeline(FilterSettings(brightness=10), RunMode.FINAL)
        with pytest.raises(ProcessingCancelledError):
            executor.execute(gradient_image, pipeline, should_stop=lambda: True)

    def test_stop_between_stages(self, executor, gradient_image):
        seen = []
        pipeline = build_pipeline(FilterSettings(brightness=10, saturation=10), RunMode.FINAL)
        with pytest.raises(ProcessingCancelledError):
            executor.execute(
                gradient_image,
                pipeline,
                progress=seen.append,
                should_stop=lambda: len(seen) > 0,
            )
        assert seen == [65]


class TestApply:
    """Test single-stage application and failure mapping."""

    def test_invalid_parameters(self, executor, flat_image):
        with pytest.raises(InvalidParameterError):
            executor.apply(flat_image, BilateralFilter().configure(intensity_sigma=-1.0))

    def test_resample_unit_scale_returns_input(self, executor, flat_image):
        assert executor.apply(flat_image, ResampleFilter()) is flat_image

    def test_resample(self, executor, flat_image):
        result = executor.apply(flat_image, ResampleFilter().configure(scale=0.5))
        assert result.size == (16, 12)

    def test_unexpected_error_becomes_stage_failure(self, executor, flat_image, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(executor_module, "tone_map", broken)
        with pytest.raises(StageFailedError) as excinfo:
            executor.apply(flat_image, ToneMapFilter().configure(brightness=10.0))
        assert excinfo.value.stage_name == "Tone Map"
        assert "boom" in str(excinfo.value)

    def test_memory_error_becomes_resource_exhausted(self, executor, flat_image, monkeypatch):
        def exhausted(*args, **kwargs):
            raise MemoryError()

        monkeypatch.setattr(executor_module, "bilateral_filter", exhausted)
        with pytest.raises(ResourceExhaustedError):
            executor.apply(flat_image, BilateralFilter())
