"""
Hashing module for the scanner package.

Provides the fingerprint engine: decode an image, normalize it, and compute
its perceptual hash. Every call builds its own image and hash objects, so
any number of calls can run concurrently.
"""

from __future__ import annotations

from pathlib import Path

from ..config import WORKING_SIZE, BLUR_RADIUS, HASH_SIZE
from ..exceptions import FilesystemError, ImageDecodeError
from ..models import Fingerprint
from .dependencies import Image, ImageFilter, UnidentifiedImageError, imagehash, _logger


def _working_size(width: int, height: int) -> tuple[int, int]:
    """Largest size fitting in WORKING_SIZE with the same aspect ratio."""
    max_w, max_h = WORKING_SIZE
    scale = min(max_w / width, max_h / height)
    return max(1, round(width * scale)), max(1, round(height * scale))


def prepare_image(img: Image.Image) -> Image.Image:
    """
    Normalize a decoded image before hashing.

    Resizes to the working resolution with a nearest-neighbour filter, then
    blurs to suppress high-frequency noise (JPEG artifacts, dithering) that
    would otherwise make near-identical images hash differently.
    """
    # Palette and exotic modes cannot be blurred
    if img.mode not in ('RGB', 'RGBA', 'L'):
        img = img.convert('RGB')

    img = img.resize(_working_size(*img.size), Image.Resampling.NEAREST)
    return img.filter(ImageFilter.GaussianBlur(BLUR_RADIUS))


def compute_fingerprint(filepath: str | Path) -> Fingerprint:
    """
    Calculate the perceptual fingerprint of an image.

    Uses a gradient hash (dhash) over the prepared image.

    Args:
        filepath: Path to the image

    Returns:
        Fingerprint of HASH_SIZE * HASH_SIZE bits

    Raises:
        ImageDecodeError: If the file cannot be decoded as an image
        FilesystemError: If the file cannot be opened
    """
    try:
        with Image.open(filepath) as img:
            # Force load to detect truncated/corrupt images early
            img.load()
            prepared = prepare_image(img)
    except (FileNotFoundError, PermissionError, IsADirectoryError) as e:
        raise FilesystemError(str(filepath), e) from e
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError, SyntaxError) as e:
        _logger.debug(f"Decoding failed for {filepath}: {e}")
        raise ImageDecodeError(str(filepath), e) from e

    return Fingerprint.from_image_hash(imagehash.dhash(prepared, hash_size=HASH_SIZE))


def hash_image(filepath: str | Path) -> tuple[str, Fingerprint]:
    """
    Fingerprint an image and return it keyed by its canonical path.

    Raises:
        ImageDecodeError: If the file cannot be decoded as an image
        FilesystemError: If the path cannot be canonicalized
    """
    fingerprint = compute_fingerprint(filepath)
    try:
        name = str(Path(filepath).resolve(strict=True))
    except OSError as e:
        raise FilesystemError(str(filepath), e) from e
    return name, fingerprint


__all__ = [
    'prepare_image',
    'compute_fingerprint',
    'hash_image',
]
