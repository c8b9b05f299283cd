"""
imagedupe
=========
Find visually near-duplicate images in a directory and review each pair.

Features:
- Perceptual fingerprints (blurred gradient hash) for every image
- Incremental database sync: only new images are hashed
- Compact zlib-compressed MessagePack database file
- Pairwise duplicate search with a configurable threshold
- Terminal review that moves the image you don't keep to a trash directory
"""

__version__ = "0.3.0"
__author__ = "Zedidence"

from .models import Fingerprint, DuplicatePair, SyncReport
from .config import SUPPORTED_EXTENSIONS, DEFAULT_THRESHOLD
from .exceptions import (
    HashDBError,
    ImageDecodeError,
    FilesystemError,
    EncodeError,
    DecodeError,
)
from .scanner import (
    has_image_suffix,
    find_image_files,
    compute_fingerprint,
    hash_image,
    hash_images_parallel,
)
from .hashdb import HashDB

__all__ = [
    "Fingerprint",
    "DuplicatePair",
    "SyncReport",
    "SUPPORTED_EXTENSIONS",
    "DEFAULT_THRESHOLD",
    "HashDBError",
    "ImageDecodeError",
    "FilesystemError",
    "EncodeError",
    "DecodeError",
    "has_image_suffix",
    "find_image_files",
    "compute_fingerprint",
    "hash_image",
    "hash_images_parallel",
    "HashDB",
]
