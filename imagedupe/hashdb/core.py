"""
HashDB facade class for the hash database.

Provides a unified interface to synchronization, duplicate discovery and
persistence, delegating to the specialized modules of this package.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Callable, Iterator, Optional

from ..models import DuplicatePair, Fingerprint, SyncReport
from . import codec
from .duplicates import iter_duplicates
from .sync import sync_entries


class HashDB(Mapping):
    """
    Database pairing the canonical path of each image with its fingerprint.

    Read access follows the Mapping protocol; the only mutation is sync().

    Usage:
        db = HashDB.from_file(db_file) if db_file.exists() else HashDB()
        db.sync(directory, recursive=True)
        db.to_file(db_file)
        for pair in db.find_duplicates(threshold=10):
            ...
    """

    def __init__(self, entries: Optional[Mapping[str, Fingerprint]] = None):
        """
        Initialize the database.

        Args:
            entries: Initial path -> fingerprint entries. Empty if None.
        """
        self._entries: dict[str, Fingerprint] = dict(entries or {})

    def __getitem__(self, path: str) -> Fingerprint:
        return self._entries[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} entries)"

    # Synchronization
    def sync(
        self,
        root: str | Path,
        recursive: bool = False,
        workers: Optional[int] = None,
        strict: bool = True,
        show_progress: bool = False,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> SyncReport:
        """Add images new under root and drop entries whose files are gone."""
        return sync_entries(
            self._entries,
            root,
            recursive=recursive,
            max_workers=workers,
            strict=strict,
            show_progress=show_progress,
            progress_callback=progress_callback,
        )

    def read_dir(self, root: str | Path, **kwargs) -> SyncReport:
        """Sync against the images directly inside root."""
        return self.sync(root, recursive=False, **kwargs)

    def read_dir_recursive(self, root: str | Path, **kwargs) -> SyncReport:
        """Sync against every image in the subtree under root."""
        return self.sync(root, recursive=True, **kwargs)

    # Duplicate discovery
    def iter_duplicates(
        self,
        threshold: int,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> Iterator[DuplicatePair]:
        """Lazily yield pairs with Hamming distance below threshold."""
        return iter_duplicates(self._entries, threshold, progress_callback)

    def find_duplicates(
        self,
        threshold: int,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> list[DuplicatePair]:
        """All pairs with Hamming distance below threshold, in no particular order."""
        return list(self.iter_duplicates(threshold, progress_callback))

    # Persistence
    def to_bytes(self) -> bytes:
        """Serialize to the compressed on-disk format."""
        return codec.encode(self._entries)

    @classmethod
    def from_bytes(cls, blob: bytes) -> 'HashDB':
        """Deserialize data produced by to_bytes()."""
        return cls(codec.decode(blob))

    def to_file(self, filepath: str | Path) -> None:
        """Write the database to a zlib-compressed MessagePack file."""
        codec.save(self._entries, filepath)

    @classmethod
    def from_file(cls, filepath: str | Path) -> 'HashDB':
        """Read a database from a zlib-compressed MessagePack file."""
        return cls(codec.load(filepath))

    def dump_listing(self) -> str:
        """Tab-separated '<hex fingerprint>\\t<path>' lines, sorted by path."""
        return ''.join(
            f"{self._entries[path].hex()}\t{path}\n" for path in sorted(self._entries)
        )


__all__ = ['HashDB']
