"""
Settings management for the enhancement engine.

Engine tunables live in an [engine] section of an INI file. Without a file
the built-in defaults are used and nothing is written to disk.
"""

import logging
import os
from configparser import ConfigParser, Error as ConfigError
from pathlib import Path
from typing import Optional, Union

from ..core import RunMode
from ..processing.modes import mode_quality

logger = logging.getLogger(__name__)


class Settings:
    """Manages engine settings via an optional settings.ini."""

    SECTION = "engine"
    KEY_PREVIEW_MAX_DIMENSION = "preview_max_dimension"
    KEY_PREVIEW_QUALITY = "preview_quality"
    KEY_FINAL_QUALITY = "final_quality"
    KEY_UPSCALE_AREA_LIMIT = "upscale_area_limit"
    KEY_UPSCALE_MAX_DIMENSION = "upscale_max_dimension"
    KEY_UPSCALE_FACTOR = "upscale_factor"
    KEY_OUTPUT_FORMAT = "output_format"
    KEY_WORKER_THREADS = "worker_threads"

    DEFAULTS = {
        KEY_PREVIEW_MAX_DIMENSION: "800",
        KEY_PREVIEW_QUALITY: str(mode_quality(RunMode.PREVIEW)),
        KEY_FINAL_QUALITY: str(mode_quality(RunMode.FINAL)),
        KEY_UPSCALE_AREA_LIMIT: "1000000",
        KEY_UPSCALE_MAX_DIMENSION: "1500",
        KEY_UPSCALE_FACTOR: "2.0",
        KEY_OUTPUT_FORMAT: "JPEG",
        KEY_WORKER_THREADS: "0",
    }

    def __init__(self, settings_file: Optional[Union[str, Path]] = None):
        """Initialize settings from file (if given and present) or defaults."""
        self.settings_file = Path(settings_file) if settings_file else None
        self.config = ConfigParser()
        self._load()

    def _load(self) -> None:
        """Load settings from file or fall back to defaults."""
        self.config.add_section(self.SECTION)
        for key, value in self.DEFAULTS.items():
            self.config.set(self.SECTION, key, value)

        if self.settings_file and self.settings_file.exists():
            try:
                self.config.read(self.settings_file)
                logger.info(f"Loaded engine settings from {self.settings_file}")
            except ConfigError as e:
                logger.warning(f"Ignoring unreadable settings file {self.settings_file}: {e}")

    def _save(self) -> None:
        """Save settings to file, if one was configured."""
        if not self.settings_file:
            return
        self.settings_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.settings_file, "w") as f:
            self.config.write(f)

    def _get_int(self, key: str) -> int:
        try:
            return self.config.getint(self.SECTION, key)
        except ValueError:
            logger.warning(f"Invalid integer for '{key}', using default")
            return int(self.DEFAULTS[key])

    def _get_float(self, key: str) -> float:
        try:
            return self.config.getfloat(self.SECTION, key)
        except ValueError:
            logger.warning(f"Invalid number for '{key}', using default")
            return float(self.DEFAULTS[key])

    def _set(self, key: str, value) -> None:
        self.config.set(self.SECTION, key, str(value))
        self._save()

    def get_preview_max_dimension(self) -> int:
        """Longest side of preview renders (default: 800)."""
        return self._get_int(self.KEY_PREVIEW_MAX_DIMENSION)

    def set_preview_max_dimension(self, value: int) -> None:
        self._set(self.KEY_PREVIEW_MAX_DIMENSION, int(value))

    def get_quality(self, mode: RunMode) -> float:
        """Encode quality in (0, 1] for a run mode."""
        key = self.KEY_PREVIEW_QUALITY if mode == RunMode.PREVIEW else self.KEY_FINAL_QUALITY
        return self._get_float(key)

    def set_quality(self, mode: RunMode, value: float) -> None:
        key = self.KEY_PREVIEW_QUALITY if mode == RunMode.PREVIEW else self.KEY_FINAL_QUALITY
        self._set(key, float(value))

    def get_upscale_area_limit(self) -> int:
        """Sources below this many pixels are enlarged for final runs (default: 1000000)."""
        return self._get_int(self.KEY_UPSCALE_AREA_LIMIT)

    def get_upscale_max_dimension(self) -> int:
        """Longest side after enlargement (default: 1500)."""
        return self._get_int(self.KEY_UPSCALE_MAX_DIMENSION)

    def get_upscale_factor(self) -> float:
        """Maximum enlargement factor (default: 2.0)."""
        return self._get_float(self.KEY_UPSCALE_FACTOR)

    def get_output_format(self) -> str:
        """Encoded output format (default: 'JPEG')."""
        return self.config.get(self.SECTION, self.KEY_OUTPUT_FORMAT).strip().upper()

    def set_output_format(self, fmt: str) -> None:
        self._set(self.KEY_OUTPUT_FORMAT, fmt.upper())

    def get_worker_threads(self) -> int:
        """Worker threads for banded stages; 0 means one per CPU core."""
        workers = self._get_int(self.KEY_WORKER_THREADS)
        if workers <= 0:
            return os.cpu_count() or 4
        return workers

    def set_worker_threads(self, value: int) -> None:
        self._set(self.KEY_WORKER_THREADS, int(value))
