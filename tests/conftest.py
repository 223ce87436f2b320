"""
Pytest configuration and fixtures for enhancer tests.
"""
import numpy as np
import pytest

from enhancer.core import RasterImage


@pytest.fixture(scope="session")
def qt_app():
    """Process-wide QCoreApplication for signal delivery."""
    from PySide6.QtCore import QCoreApplication
    app = QCoreApplication.instance() or QCoreApplication([])
    return app


@pytest.fixture
def flat_image():
    """32x24 uniform mid-grey image."""
    return RasterImage.blank(32, 24, (128, 128, 128, 255))


@pytest.fixture
def gradient_image():
    """48x40 image with independent horizontal/vertical colour ramps."""
    height, width = 40, 48
    y, x = np.mgrid[0:height, 0:width]
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :, 0] = (x * 255 // (width - 1)).astype(np.uint8)
    pixels[:, :, 1] = (y * 255 // (height - 1)).astype(np.uint8)
    pixels[:, :, 2] = ((x + y) * 255 // (width + height - 2)).astype(np.uint8)
    pixels[:, :, 3] = 200
    return RasterImage(pixels)


@pytest.fixture
def noisy_image():
    """40x40 grey image with deterministic noise."""
    rng = np.random.default_rng(1234)
    grey = np.clip(rng.normal(128, 20, size=(40, 40)), 0, 255).astype(np.uint8)
    pixels = np.empty((40, 40, 4), dtype=np.uint8)
    pixels[:, :, :3] = grey[:, :, None]
    pixels[:, :, 3] = 255
    return RasterImage(pixels)


@pytest.fixture
def checker_image():
    """16x16 black/white checkerboard with 4-pixel squares."""
    y, x = np.mgrid[0:16, 0:16]
    value = np.where(((x // 4) + (y // 4)) % 2 == 0, 255, 0).astype(np.uint8)
    pixels = np.empty((16, 16, 4), dtype=np.uint8)
    pixels[:, :, :3] = value[:, :, None]
    pixels[:, :, 3] = 255
    return RasterImage(pixels)
