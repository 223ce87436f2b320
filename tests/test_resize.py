"""
Tests for bicubic resampling and resize-factor helpers.
"""
import numpy as np
import pytest

from enhancer.core import RasterImage, InvalidParameterError
from enhancer.processing.resize import (
    bicubic_resample,
    cubic_weight,
    fit_scale,
    target_size,
    upscale_scale,
)


class TestScaleHelpers:
    """Test size and factor computation."""

    def test_target_size_rounds(self):
        assert target_size(100, 50, 0.5) == (50, 25)
        assert target_size(3, 3, 1.5) == (5, 5)
        assert target_size(1, 1, 0.1) == (1, 1)

    def test_fit_scale(self):
        assert fit_scale(1600, 1200, 800) == pytest.approx(0.5)
        assert fit_scale(400, 900, 800) == pytest.approx(800 / 900)
        assert fit_scale(400, 300, 800) == 1.0

    @pytest.mark.parametrize("size,expected", [
        ((500, 400), 2.0),
        ((1200, 600), 1.25),
        ((2000, 400), 0.75),
        ((1000, 1000), 1.0),
        ((3000, 2000), 1.0),
    ])
    def test_upscale_scale(self, size, expected):
        assert upscale_scale(*size) == pytest.approx(expected)

    def test_cubic_weight_interpolates(self):
        assert cubic_weight(0.0) == 1.0
        assert cubic_weight(1.0) == 0.0
        assert cubic_weight(2.0) == 0.0
        assert cubic_weight(2.5) == 0.0

    def test_cubic_weights_partition_unity(self):
        t = 0.37
        total = sum(cubic_weight(t - n) for n in range(-1, 3))
        assert total == pytest.approx(1.0)


class TestBicubicResample:
    """Test bicubic resampling."""

    def test_unit_scale_is_exact(self, gradient_image):
        result = bicubic_resample(gradient_image, 1.0)
        assert np.array_equal(result.pixels, gradient_image.pixels)

    def test_output_size(self, gradient_image):
        assert bicubic_resample(gradient_image, 2.0).size == (96, 80)
        assert bicubic_resample(gradient_image, 0.25).size == (12, 10)

    def test_uniform_stays_uniform(self):
        image = RasterImage.blank(7, 5, (10, 200, 90, 128))
        result = bicubic_resample(image, 1.7)
        assert (result.pixels == np.array([10, 200, 90, 128], dtype=np.uint8)).all()

    def test_integer_upscale_hits_source_samples(self, gradient_image):
        result = bicubic_resample(gradient_image, 2.0)
        assert np.array_equal(result.pixels[::2, ::2], gradient_image.pixels)

    def test_rejects_bad_scale(self, flat_image):
        with pytest.raises(InvalidParameterError):
            bicubic_resample(flat_image, 0)
