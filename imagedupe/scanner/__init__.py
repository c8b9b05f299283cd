"""
Scanner package for imagedupe.

Turns a directory into fingerprints: classifies paths by extension, walks
directories, and computes perceptual hashes in parallel.

Public API:
- has_image_suffix: Check whether a path has a supported image extension
- find_image_files: Discover image files in directories
- compute_fingerprint: Calculate the perceptual fingerprint of an image
- hash_image: Fingerprint an image keyed by its canonical path
- hash_images_parallel: Fingerprint many images on a worker pool
- has_jxl_support: Check if JPEG XL support is available
"""

from __future__ import annotations

from .file_discovery import has_image_suffix, find_image_files
from .hashing import prepare_image, compute_fingerprint, hash_image
from .parallel import hash_images_parallel

from .dependencies import HAS_JXL_SUPPORT


def has_jxl_support() -> bool:
    """Check if JPEG XL support is available."""
    return HAS_JXL_SUPPORT


# Public API exports
__all__ = [
    # File discovery
    'has_image_suffix',
    'find_image_files',
    # Fingerprinting
    'prepare_image',
    'compute_fingerprint',
    'hash_image',
    'hash_images_parallel',
    # Feature detection
    'has_jxl_support',
]
