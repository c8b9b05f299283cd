"""
Data models for imagedupe.

Contains the fingerprint value type, duplicate pairs and synchronization
reports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
import math
import os

import imagehash
import numpy as np


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable form."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


@dataclass(frozen=True)
class Fingerprint:
    """
    Perceptual hash of an image stored as a packed bit vector.

    Attributes:
        data: Raw bytes of the hash, most significant bit first
    """
    data: bytes

    def __post_init__(self):
        if not isinstance(self.data, (bytes, bytearray)):
            raise TypeError(f"Fingerprint data must be bytes, not {type(self.data).__name__}")
        if isinstance(self.data, bytearray):
            object.__setattr__(self, 'data', bytes(self.data))

    @classmethod
    def from_image_hash(cls, image_hash: imagehash.ImageHash) -> 'Fingerprint':
        """Pack an imagehash.ImageHash into a Fingerprint."""
        bits = np.asarray(image_hash.hash, dtype=bool).flatten()
        return cls(np.packbits(bits).tobytes())

    @classmethod
    def from_bytes(cls, data: bytes, expected_length: Optional[int] = None) -> 'Fingerprint':
        """
        Build a Fingerprint from its serialized form.

        Raises:
            ValueError: If expected_length is given and does not match
        """
        if expected_length is not None and len(data) != expected_length:
            raise ValueError(
                f"fingerprint is {len(data)} bytes, expected {expected_length}"
            )
        return cls(bytes(data))

    def to_image_hash(self) -> imagehash.ImageHash:
        """Unpack into a square imagehash.ImageHash."""
        bits = np.unpackbits(np.frombuffer(self.data, dtype=np.uint8)).astype(bool)
        side = math.isqrt(bits.size)
        if side * side != bits.size:
            raise ValueError(f"{bits.size}-bit fingerprint is not a square hash")
        return imagehash.ImageHash(bits.reshape(side, side))

    @property
    def bits(self) -> int:
        """Length of the fingerprint in bits."""
        return len(self.data) * 8

    def distance(self, other: 'Fingerprint') -> int:
        """
        Hamming distance to another fingerprint of the same length.

        Raises:
            ValueError: If the fingerprints have different lengths
        """
        if len(self.data) != len(other.data):
            raise ValueError(
                f"Cannot compare {self.bits}-bit and {other.bits}-bit fingerprints"
            )
        return bin(int(self) ^ int(other)).count('1')

    def __int__(self) -> int:
        return int.from_bytes(self.data, 'big')

    def __sub__(self, other: 'Fingerprint') -> int:
        return self.distance(other)

    def hex(self) -> str:
        return self.data.hex()

    def __str__(self) -> str:
        return self.hex()


@dataclass(frozen=True, eq=False)
class DuplicatePair:
    """
    Two distinct images whose fingerprints are within the threshold.

    The pair is unordered: (a, b) and (b, a) compare and hash equal.

    Attributes:
        first: Canonical path of one image
        second: Canonical path of the other image
        distance: Hamming distance between their fingerprints
    """
    first: str
    second: str
    distance: int = 0

    @property
    def paths(self) -> frozenset:
        return frozenset((self.first, self.second))

    def __eq__(self, other):
        if not isinstance(other, DuplicatePair):
            return NotImplemented
        return self.paths == other.paths and self.distance == other.distance

    def __hash__(self):
        return hash((self.paths, self.distance))

    def __iter__(self):
        yield self.first
        yield self.second


@dataclass
class SyncReport:
    """
    Outcome of synchronizing a hash database with a directory.

    Attributes:
        added: Paths newly fingerprinted and inserted
        removed: Paths dropped because they no longer exist
        failed: (path, reason) pairs skipped in lenient mode
    """
    added: list = field(default_factory=list)
    removed: list = field(default_factory=list)
    failed: list = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """True if the database was modified."""
        return bool(self.added or self.removed)

    def summary(self) -> str:
        """One-line summary for logging."""
        text = f"{len(self.added):,} added, {len(self.removed):,} removed"
        if self.failed:
            text += f", {len(self.failed):,} failed"
        return text


@dataclass
class ImageDetails:
    """
    Display metadata for an image shown during review.

    Attributes:
        path: Full path to the image file
        file_size: Size in bytes
        width: Image width in pixels
        height: Image height in pixels
        error: Error message if the image could not be inspected
    """
    path: str
    file_size: int = 0
    width: int = 0
    height: int = 0
    error: Optional[str] = None

    @property
    def filename(self) -> str:
        """Return just the filename portion of the path."""
        return os.path.basename(self.path)

    @property
    def resolution(self) -> str:
        """Return resolution as 'WxH' string."""
        return f"{self.width}x{self.height}"

    @property
    def file_size_formatted(self) -> str:
        """Return human-readable file size."""
        return format_size(self.file_size)
