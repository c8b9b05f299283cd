"""
Hash database package for imagedupe.

Provides the path -> fingerprint store with directory synchronization,
duplicate discovery, and compressed MessagePack persistence.

Module structure:
- core.py: HashDB facade class
- sync.py: Add-missing / remove-stale reconciliation with the filesystem
- duplicates.py: Lazy pairwise duplicate search
- codec.py: zlib + MessagePack persistence
"""

from __future__ import annotations

from .core import HashDB
from .codec import encode, decode, save, load
from .duplicates import iter_duplicates, find_duplicates
from .sync import sync_entries

__all__ = [
    'HashDB',
    'encode',
    'decode',
    'save',
    'load',
    'iter_duplicates',
    'find_duplicates',
    'sync_entries',
]
