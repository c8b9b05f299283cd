"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
from pathlib import Path

import numpy as np
from PIL import Image

from imagedupe.models import Fingerprint


def make_pattern(seed: int, size=(128, 128)) -> Image.Image:
    """
    Build a blocky random image.

    An 8x8 grid of random grey levels upscaled to size, so the structure
    survives the blur in the fingerprint engine and different seeds give
    very different fingerprints.
    """
    rng = np.random.default_rng(seed)
    grid = rng.integers(0, 256, size=(8, 8), dtype=np.uint8)
    return Image.fromarray(grid).resize(size, Image.Resampling.BILINEAR).convert('RGB')


def fingerprint_with_bits(*bits: int, length: int = 8) -> Fingerprint:
    """Fingerprint of `length` bytes with the given bit positions set."""
    value = 0
    for bit in bits:
        value |= 1 << bit
    return Fingerprint(value.to_bytes(length, 'big'))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir).resolve()
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def sample_images(temp_dir):
    """
    Create a set of sample images for testing.

    Returns:
        dict with paths to:
        - a.png, b.png (unrelated images)
        - a_copy.png (byte-identical copy of a.png)
        - a_large.png (a.png upscaled, perceptually similar)
    """
    images = {}

    img_a = make_pattern(1)
    path_a = temp_dir / "a.png"
    img_a.save(path_a, 'PNG')
    images['a'] = str(path_a)

    path_b = temp_dir / "b.png"
    make_pattern(2).save(path_b, 'PNG')
    images['b'] = str(path_b)

    path_copy = temp_dir / "a_copy.png"
    shutil.copyfile(path_a, path_copy)
    images['a_copy'] = str(path_copy)

    path_large = temp_dir / "a_large.png"
    img_a.resize((200, 200), Image.Resampling.BILINEAR).save(path_large, 'PNG')
    images['a_large'] = str(path_large)

    return images


@pytest.fixture
def image_dir(temp_dir):
    """Directory holding two unrelated images, a.png and b.png."""
    directory = temp_dir / "photos"
    directory.mkdir()
    make_pattern(1).save(directory / "a.png", 'PNG')
    make_pattern(2).save(directory / "b.png", 'PNG')
    return directory


@pytest.fixture
def corrupted_image(temp_dir):
    """File with a .png extension that is not an image."""
    path = temp_dir / "corrupted.png"
    path.write_bytes(b"not an image")
    return path
