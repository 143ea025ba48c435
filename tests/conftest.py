"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
from pathlib import Path

import numpy as np
from PIL import Image

USER_CONFIG_ENV_VARS = (
    'FINDIMAGEDUPES_THRESHOLD',
    'FINDIMAGEDUPES_WORKERS',
    'FINDIMAGEDUPES_EXTENSIONS',
    'FINDIMAGEDUPES_MAX_PIXELS',
    'FINDIMAGEDUPES_UNION_FIND_THRESHOLD',
)


def smooth_pattern(width=240, height=180):
    """A smooth, low-frequency RGB test picture as a uint8 array."""
    x = np.linspace(0.0, 1.0, width)[None, :]
    y = np.linspace(0.0, 1.0, height)[:, None]
    # Diagonal level lines so no row or column of cells sits on an edge
    base = (np.sin(2 * np.pi * (1.3 * x + 0.7 * y) + 0.4)
            + 0.5 * np.cos(2 * np.pi * (0.4 * x - 1.1 * y)))
    red = 128 + 70 * base
    green = 120 + 60 * base
    blue = 110 + 50 * base
    return np.clip(np.dstack([red, green, blue]), 0, 255).astype(np.uint8)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir).resolve()
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_user_config(monkeypatch, tmp_path):
    """Keep tests away from the real ~/.findimagedupes and environment."""
    from findimagedupes.user_config import get_user_config

    monkeypatch.setenv('FINDIMAGEDUPES_CONFIG_DIR', str(tmp_path / 'config'))
    for name in USER_CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    config = get_user_config()
    config.reload()
    yield config
    config.reload()


@pytest.fixture
def sample_image():
    """The smooth test picture as a PIL image."""
    return Image.fromarray(smooth_pattern())


@pytest.fixture
def sample_images(temp_dir, sample_image):
    """
    Create a set of sample images for testing.

    Returns:
        dict with paths to:
        - original.png (smooth test picture)
        - copy.jpg (JPEG re-encode of the original)
        - resized.png (downscaled copy of the original)
        - inverted.png (negative of the original, an unrelated picture)
        - corrupted.jpg (not an image)
        - notes.txt (not an image, wrong extension)
    """
    images = {}

    path = temp_dir / "original.png"
    sample_image.save(path, 'PNG')
    images['original'] = str(path)

    path = temp_dir / "copy.jpg"
    sample_image.save(path, 'JPEG', quality=90)
    images['copy'] = str(path)

    path = temp_dir / "resized.png"
    sample_image.resize((160, 120), Image.BILINEAR).save(path, 'PNG')
    images['resized'] = str(path)

    path = temp_dir / "inverted.png"
    Image.fromarray(255 - smooth_pattern()).save(path, 'PNG')
    images['inverted'] = str(path)

    path = temp_dir / "corrupted.jpg"
    path.write_bytes(b"this is not a jpeg")
    images['corrupted'] = str(path)

    path = temp_dir / "notes.txt"
    path.write_text("not an image")
    images['notes'] = str(path)

    return images
