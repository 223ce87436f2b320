"""
Tests for the command-line entry point.
"""
import pytest

from enhancer.codec import CodecAdapter
from enhancer.core import RasterImage
from enhancer.main import build_parser, main, settings_from_args


class TestArguments:
    """Test argument handling."""

    def test_preset_with_override(self):
        args = build_parser().parse_args(["-i", "a.png", "-o", "b.jpg", "--preset", "vintage", "--contrast", "5"])
        settings = settings_from_args(args)
        assert settings.contrast == 5
        assert settings.sharpening == 25
        assert settings.ai_enhance is False

    def test_ai_flag(self):
        args = build_parser().parse_args(["-i", "a.png", "-o", "b.jpg", "--ai"])
        assert settings_from_args(args).ai_enhance is True

    def test_no_ai_overrides_preset(self):
        args = build_parser().parse_args(["-i", "a.png", "-o", "b.jpg", "--preset", "portrait", "--no-ai"])
        settings = settings_from_args(args)
        assert settings.ai_enhance is False
        assert settings.denoising == 40

    def test_ai_left_to_preset_by_default(self):
        args = build_parser().parse_args(["-i", "a.png", "-o", "b.jpg", "--preset", "landscape"])
        assert args.ai_enhance is None
        assert settings_from_args(args).ai_enhance is True

    def test_unknown_preset_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["-i", "a", "-o", "b", "--preset", "neon"])


class TestMain:
    """Test end-to-end runs."""

    def test_preview_run(self, tmp_path, gradient_image):
        source = tmp_path / "in.png"
        target = tmp_path / "out.jpg"
        source.write_bytes(CodecAdapter.encode(gradient_image, 1.0, "PNG"))
        assert main(["-i", str(source), "-o", str(target), "--preview", "--brightness", "10"]) == 0
        info = CodecAdapter.probe(target.read_bytes())
        assert (info.width, info.height, info.mime_type) == (48, 40, "image/jpeg")

    def test_final_run_upscales(self, tmp_path):
        source = tmp_path / "in.png"
        target = tmp_path / "out.jpg"
        source.write_bytes(CodecAdapter.encode(RasterImage.blank(20, 10), 1.0, "PNG"))
        assert main(["-i", str(source), "-o", str(target), "--saturation", "10"]) == 0
        info = CodecAdapter.probe(target.read_bytes())
        assert (info.width, info.height) == (40, 20)

    def test_missing_input(self, tmp_path):
        assert main(["-i", str(tmp_path / "nope.png"), "-o", str(tmp_path / "out.jpg")]) == 1

    def test_undecodable_input(self, tmp_path):
        source = tmp_path / "in.png"
        source.write_bytes(b"garbage")
        assert main(["-i", str(source), "-o", str(tmp_path / "out.jpg")]) == 1

    def test_unwritable_output(self, tmp_path, gradient_image):
        source = tmp_path / "in.png"
        source.write_bytes(CodecAdapter.encode(gradient_image, 1.0, "PNG"))
        # a directory cannot be written as a file
        assert main(["-i", str(source), "-o", str(tmp_path), "--preview"]) == 1
