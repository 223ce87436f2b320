"""
Threaded enhancement runner.

Runs preview and final passes in a QRunnable on a QThreadPool and emits
progress/log/result signals back to the caller.
"""

import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal, QRunnable, QThreadPool

from ..core import (
    RasterImage,
    FilterSettings,
    RunMode,
    EnhancerError,
    ProcessingCancelledError,
)
from .enhancement import EnhancementService

logger = logging.getLogger(__name__)

MILESTONE_LABELS = {
    10: "Image prepared",
    25: "Noise reduced",
    50: "Local contrast and detail enhanced",
    65: "Tone mapped",
    80: "Saturation adjusted",
    95: "Sharpened",
    100: "Done",
}


class EnhanceSignals(QObject):
    """Signals emitted by EnhanceRunner."""
    progress = Signal(int, str)  # (percent, message)
    finished = Signal(bool, str)  # (success, final_message)
    log = Signal(str)  # log message
    result = Signal(object)  # ProcessingResult


class EnhanceRunner(QRunnable):
    """Runnable for a single preview or final pass."""

    def __init__(
        self,
        service: EnhancementService,
        mode: RunMode,
        image: RasterImage,
        settings: FilterSettings,
        encode: bool = True,
    ):
        super().__init__()
        self.service = service
        self.mode = mode
        self.image = image
        self.settings = settings
        self.encode = encode
        self.signals = EnhanceSignals()
        self.stop_requested = False

    def request_stop(self) -> None:
        """Request the run to stop before its next stage."""
        self.stop_requested = True

    def run(self) -> None:
        """Execute the pass and report through signals."""
        label = self.mode.name.lower()
        try:
            self._log(f"Starting {label} enhancement ({self.image.width}x{self.image.height})")
            if self.mode == RunMode.PREVIEW:
                result = self.service.process_preview(
                    self.image,
                    self.settings,
                    encode=self.encode,
                    should_stop=self._should_stop,
                )
            else:
                result = self.service.process_final(
                    self.image,
                    self.settings,
                    progress=self._on_progress,
                    encode=self.encode,
                    should_stop=self._should_stop,
                )
        except ProcessingCancelledError as e:
            self._log(str(e))
            self.signals.finished.emit(False, f"Enhancement {label} stopped")
            return
        except EnhancerError as e:
            self._log(f"ERROR: {e}")
            self.signals.finished.emit(False, f"Enhancement {label} failed: {e}")
            return
        except Exception as e:
            logger.exception("Unexpected failure in enhancement runner")
            self._log(f"FATAL: {e}")
            self.signals.finished.emit(False, f"Enhancement {label} failed: {e}")
            return

        self.signals.result.emit(result)
        self.signals.finished.emit(True, f"Enhancement {label} completed")

    def _should_stop(self) -> bool:
        return self.stop_requested

    def _on_progress(self, percent: int) -> None:
        self.signals.progress.emit(percent, MILESTONE_LABELS.get(percent, f"{percent}%"))

    def _log(self, message: str) -> None:
        """Emit a log message."""
        logger.info(message)
        self.signals.log.emit(message)


class EnhanceManager(QObject):
    """
    Manages enhancement runs on a thread pool.

    A new preview request stops the preview it supersedes. Only one final
    run is allowed at a time.
    """

    finished = Signal(bool, str)  # (success, message)
    log = Signal(str)
    progress = Signal(int, str)  # (percent, message)
    preview_ready = Signal(object)  # ProcessingResult
    final_ready = Signal(object)  # ProcessingResult

    def __init__(self, service: Optional[EnhancementService] = None):
        super().__init__()
        self.service = service or EnhancementService()
        self.thread_pool = QThreadPool()
        self.preview_runner: Optional[EnhanceRunner] = None
        self.final_runner: Optional[EnhanceRunner] = None

    def start_preview(self, image: RasterImage, settings: FilterSettings) -> EnhanceRunner:
        """Start a preview pass, stopping any preview still running."""
        if self.preview_runner:
            self.preview_runner.request_stop()

        runner = EnhanceRunner(self.service, RunMode.PREVIEW, image, settings)
        runner.setAutoDelete(False)
        runner.signals.log.connect(self.log.emit)
        runner.signals.result.connect(
            lambda result, r=runner: self._on_preview_result(r, result)
        )
        runner.signals.finished.connect(
            lambda success, message, r=runner: self._on_preview_finished(r, success, message)
        )
        self.preview_runner = runner
        self.thread_pool.start(runner)
        return runner

    def start_final(self, image: RasterImage, settings: FilterSettings) -> Optional[EnhanceRunner]:
        """Start a final pass. Returns None if one is already running."""
        if self.final_runner:
            self.log.emit("Final enhancement already in progress")
            return None

        runner = EnhanceRunner(self.service, RunMode.FINAL, image, settings)
        runner.setAutoDelete(False)
        runner.signals.log.connect(self.log.emit)
        runner.signals.progress.connect(self.progress.emit)
        runner.signals.result.connect(self.final_ready.emit)
        runner.signals.finished.connect(self._on_final_finished)
        self.final_runner = runner
        self.thread_pool.start(runner)
        return runner

    def stop(self) -> None:
        """Request every active run to stop."""
        for runner in (self.preview_runner, self.final_runner):
            if runner:
                runner.request_stop()

    def wait(self, msecs: int = -1) -> bool:
        """Block until all runs are done."""
        return self.thread_pool.waitForDone(msecs)

    def _on_preview_result(self, runner: EnhanceRunner, result) -> None:
        # Results from a superseded preview are dropped.
        if runner is self.preview_runner:
            self.preview_ready.emit(result)

    def _on_preview_finished(self, runner: EnhanceRunner, success: bool, message: str) -> None:
        if runner is self.preview_runner:
            self.preview_runner = None
            self.finished.emit(success, message)

    def _on_final_finished(self, success: bool, message: str) -> None:
        self.final_runner = None
        self.finished.emit(success, message)
