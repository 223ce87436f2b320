"""
Tests for core data types and settings validation.
"""
import numpy as np
import pytest

from enhancer.core import (
    RasterImage,
    FilterSettings,
    PRESETS,
    ImageInfo,
    ProcessingResult,
    RunMode,
    InvalidParameterError,
    SettingsValidator,
    ValidationSeverity,
)


class TestRasterImage:
    """Test the RGBA raster container."""

    def test_from_buffer_layout(self):
        """Samples are read row-major in R, G, B, A order."""
        image = RasterImage.from_buffer(2, 1, bytes([1, 2, 3, 4, 5, 6, 7, 8]))
        assert image.size == (2, 1)
        assert image.pixels[0, 1].tolist() == [5, 6, 7, 8]
        assert image.to_bytes() == bytes([1, 2, 3, 4, 5, 6, 7, 8])

    def test_from_buffer_length_mismatch(self):
        with pytest.raises(InvalidParameterError):
            RasterImage.from_buffer(2, 2, bytes(15))

    def test_from_buffer_rejects_empty_dimensions(self):
        with pytest.raises(InvalidParameterError):
            RasterImage.from_buffer(0, 2, b"")

    def test_rejects_wrong_channel_count(self):
        with pytest.raises(InvalidParameterError):
            RasterImage(np.zeros((4, 4, 3), dtype=np.uint8))

    def test_blank_fills_every_pixel(self):
        image = RasterImage.blank(3, 2, (10, 20, 30, 40))
        assert image.pixel_count == 6
        assert (image.pixels == np.array([10, 20, 30, 40], dtype=np.uint8)).all()

    def test_copy_is_independent(self, flat_image):
        clone = flat_image.copy()
        clone.pixels[0, 0, 0] = 0
        assert flat_image.pixels[0, 0, 0] == 128


class TestFilterSettings:
    """Test settings helpers."""

    def test_defaults_have_no_changes(self):
        assert not FilterSettings().has_changes()

    def test_ai_alone_counts_as_change(self):
        assert FilterSettings(ai_enhance=True).has_changes()

    def test_enhancement_strength(self):
        """(40 + 30 + 5 + 15 + 10 + 50) / 3 rounds to 50."""
        assert FilterSettings.preset("default").enhancement_strength() == 50

    def test_enhancement_strength_is_capped(self):
        settings = FilterSettings(100, 100, 50, 50, 50, True)
        assert settings.enhancement_strength() == 100

    def test_clamped(self):
        clamped = FilterSettings(sharpening=150, brightness=-80).clamped()
        assert clamped.sharpening == 100
        assert clamped.brightness == -50

    def test_presets(self):
        vintage = FilterSettings.preset("Vintage")
        assert vintage.saturation == -10
        assert vintage.ai_enhance is False
        assert set(PRESETS) == {"default", "portrait", "landscape", "vintage", "professional"}

    def test_unknown_preset(self):
        with pytest.raises(KeyError):
            FilterSettings.preset("neon")

    def test_dict_round_trip_accepts_aliases(self):
        settings = FilterSettings.from_dict({"sharpening": 10, "useAI": True})
        assert settings.ai_enhance is True
        assert FilterSettings.from_dict(settings.to_dict()) == settings


class TestSettingsValidator:
    """Test settings validation."""

    def test_valid_settings_have_no_issues(self):
        assert SettingsValidator.validate(FilterSettings.preset("portrait")) == []

    def test_out_of_range_is_warning(self):
        issues = SettingsValidator.validate(FilterSettings(contrast=75))
        assert len(issues) == 1
        assert issues[0].severity == ValidationSeverity.WARNING
        assert issues[0].code == "OUT_OF_RANGE"
        assert not SettingsValidator.has_errors(issues)

    def test_nan_is_error(self):
        issues = SettingsValidator.validate(FilterSettings(denoising=float("nan")))
        assert SettingsValidator.has_errors(issues)
        assert issues[0].code == "NON_FINITE"

    def test_non_number_is_error(self):
        issues = SettingsValidator.validate(FilterSettings(saturation="high"))
        assert [i.code for i in issues] == ["NOT_A_NUMBER"]


class TestResultTypes:
    """Test result records."""

    def test_image_info_dict(self):
        info = ImageInfo(width=4, height=3, byte_size=120, mime_type="image/png")
        assert info.to_dict() == {"width": 4, "height": 3, "byteSize": 120, "mimeType": "image/png"}

    def test_processing_result_encoded_flag(self):
        assert not ProcessingResult(mode=RunMode.PREVIEW).is_encoded
        assert ProcessingResult(mode=RunMode.FINAL, data=b"x").is_encoded
