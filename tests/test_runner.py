"""
Tests for the threaded enhancement runner and manager.
"""
import time

import pytest

from enhancer.core import FilterSettings, RunMode
from enhancer.services import EnhanceManager, EnhanceRunner, EnhancementService, Settings


@pytest.fixture
def service():
    settings = Settings()
    settings.set_preview_max_dimension(16)
    settings.set_worker_threads(1)
    return EnhancementService(settings)


class Recorder:
    """Collects emitted signal arguments."""

    def __init__(self):
        self.progress = []
        self.finished = []
        self.results = []
        self.logs = []

    def attach(self, signals):
        signals.progress.connect(lambda percent, message: self.progress.append((percent, message)))
        signals.finished.connect(lambda success, message: self.finished.append((success, message)))
        signals.log.connect(self.logs.append)
        if hasattr(signals, "result"):
            signals.result.connect(self.results.append)
        return self


def wait_until(app, predicate, timeout=10.0):
    deadline = time.monotonic() + timeout
    while not predicate() and time.monotonic() < deadline:
        app.processEvents()
        time.sleep(0.01)
    return predicate()


class TestEnhanceRunner:
    """Test the runnable directly on the calling thread."""

    def test_final_run(self, qt_app, service, gradient_image):
        runner = EnhanceRunner(service, RunMode.FINAL, gradient_image, FilterSettings(brightness=10), encode=False)
        recorder = Recorder().attach(runner.signals)
        runner.run()
        assert recorder.progress == [(10, "Image prepared"), (65, "Tone mapped"), (100, "Done")]
        assert recorder.finished == [(True, "Enhancement final completed")]
        assert recorder.results[0].image.size == (96, 80)
        assert recorder.logs[0].startswith("Starting final enhancement")

    def test_preview_run_reports_no_progress(self, qt_app, service, gradient_image):
        runner = EnhanceRunner(service, RunMode.PREVIEW, gradient_image, FilterSettings.preset("vintage"))
        recorder = Recorder().attach(runner.signals)
        runner.run()
        assert recorder.progress == []
        assert recorder.finished == [(True, "Enhancement preview completed")]
        assert recorder.results[0].mime_type == "image/jpeg"

    def test_stop_request(self, qt_app, service, gradient_image):
        runner = EnhanceRunner(service, RunMode.FINAL, gradient_image, FilterSettings(contrast=20))
        recorder = Recorder().attach(runner.signals)
        runner.request_stop()
        runner.run()
        assert recorder.finished == [(False, "Enhancement final stopped")]
        assert recorder.results == []

    def test_failure_is_reported(self, qt_app, service, gradient_image):
        runner = EnhanceRunner(service, RunMode.PREVIEW, gradient_image, FilterSettings(contrast=float("inf")))
        recorder = Recorder().attach(runner.signals)
        runner.run()
        success, message = recorder.finished[0]
        assert not success
        assert "NON_FINITE" in message
        assert recorder.results == []


class TestEnhanceManager:
    """Test thread-pool orchestration."""

    def test_final_on_thread_pool(self, qt_app, service, gradient_image):
        manager = EnhanceManager(service)
        recorder = Recorder().attach(manager)
        results = []
        manager.final_ready.connect(results.append)

        assert manager.start_final(gradient_image, FilterSettings(saturation=15)) is not None
        assert manager.wait(10000)
        assert wait_until(qt_app, lambda: recorder.finished)

        assert recorder.finished == [(True, "Enhancement final completed")]
        assert [p for p, _ in recorder.progress] == [10, 80, 100]
        assert results[0].is_encoded
        assert manager.final_runner is None

    def test_second_final_rejected(self, qt_app, service, gradient_image):
        manager = EnhanceManager(service)
        logs = []
        manager.log.connect(logs.append)
        manager.final_runner = EnhanceRunner(service, RunMode.FINAL, gradient_image, FilterSettings())
        assert manager.start_final(gradient_image, FilterSettings()) is None
        assert logs == ["Final enhancement already in progress"]

    def test_new_preview_supersedes_old(self, qt_app, service, gradient_image):
        manager = EnhanceManager(service)
        previews = []
        manager.preview_ready.connect(previews.append)

        first = manager.start_preview(gradient_image, FilterSettings(brightness=5))
        second = manager.start_preview(gradient_image, FilterSettings(brightness=-5))
        assert first.stop_requested
        assert not second.stop_requested

        assert manager.wait(10000)
        assert wait_until(qt_app, lambda: manager.preview_runner is None)
        assert len(previews) == 1
