"""
Raster Enhancer - command-line entry point.

Reads an image file, runs a preview or final enhancement pass and writes
the encoded result.
"""

import argparse
import logging
import sys
from pathlib import Path

from .codec import CodecAdapter
from .core import FilterSettings, EnhancerError, PRESETS
from .services import EnhancementService, Settings
from .utils import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Raster Enhancer')
    parser.add_argument('--input', '-i', required=True, help='Input image')
    parser.add_argument('--output', '-o', required=True, help='Output image')
    parser.add_argument('--preset', choices=sorted(PRESETS), help='Start from a named preset')
    parser.add_argument('--sharpening', type=float, help='Sharpening (0 to 100)')
    parser.add_argument('--denoising', type=float, help='Denoising (0 to 100)')
    parser.add_argument('--brightness', type=float, help='Brightness (-50 to +50)')
    parser.add_argument('--contrast', type=float, help='Contrast (-50 to +50)')
    parser.add_argument('--saturation', type=float, help='Saturation (-50 to +50)')
    parser.add_argument('--ai', dest='ai_enhance', action='store_true', default=None,
                        help='Enable AI enhancement chain')
    parser.add_argument('--no-ai', dest='ai_enhance', action='store_false', default=None,
                        help='Disable AI enhancement chain')
    parser.add_argument('--preview', action='store_true', help='Render a fast preview instead')
    parser.add_argument('--settings', help='Engine settings INI file')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    return parser


def settings_from_args(args: argparse.Namespace) -> FilterSettings:
    """Preset (or defaults) overridden by any explicit slider values."""
    settings = FilterSettings.preset(args.preset) if args.preset else FilterSettings()
    for name in ("sharpening", "denoising", "brightness", "contrast", "saturation", "ai_enhance"):
        value = getattr(args, name)
        if value is not None:
            setattr(settings, name, value)
    return settings


def main(argv=None) -> int:
    """Run one enhancement from the command line. Returns the exit code."""
    args = build_parser().parse_args(argv)
    logger = setup_logger("enhancer", logging.DEBUG if args.verbose else logging.INFO)
    logger.info(f"Pillow version: {CodecAdapter.get_pillow_version()}")

    service = EnhancementService(Settings(args.settings))
    settings = settings_from_args(args)

    try:
        image = service.codec.decode(Path(args.input).read_bytes())
        if args.preview:
            result = service.process_preview(image, settings)
        else:
            result = service.process_final(
                image,
                settings,
                progress=lambda percent: logger.info(f"Progress: {percent}%"),
            )
    except OSError as e:
        logger.error(f"Could not read {args.input}: {e}")
        return 1
    except EnhancerError as e:
        logger.error(str(e))
        return 1

    try:
        Path(args.output).write_bytes(result.data)
    except OSError as e:
        logger.error(f"Could not write {args.output}: {e}")
        return 1
    logger.info(f"Saved: {args.output} ({len(result.data)} bytes, {result.mime_type})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
