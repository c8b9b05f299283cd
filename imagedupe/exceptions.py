"""
Exception hierarchy for the hash database.

All errors raised by the fingerprinting, synchronization and persistence
code derive from HashDBError so callers can catch them in one place.
"""

from __future__ import annotations

from typing import Optional


class HashDBError(Exception):
    """Base class for errors raised while working with a hash database."""


class ImageDecodeError(HashDBError):
    """An image file exists but could not be decoded."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Could not read {self.path}: {cause}")


class FilesystemError(HashDBError):
    """A read, write or canonicalize operation failed."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"IO error on {self.path}: {cause}")


class EncodeError(HashDBError):
    """The database could not be encoded."""

    def __init__(self, message: str):
        super().__init__(f"Could not encode database: {message}")


class DecodeError(HashDBError):
    """The persisted database is malformed."""

    def __init__(self, message: str):
        super().__init__(f"Could not decode database: {message}")


__all__ = [
    'HashDBError',
    'ImageDecodeError',
    'FilesystemError',
    'EncodeError',
    'DecodeError',
]
