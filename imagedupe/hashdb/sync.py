"""
Synchronization of a hash database with a directory.

Adds fingerprints for images that appeared on disk and drops entries for
images that are gone. An unchanged directory costs one scan and no hashing.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from ..models import Fingerprint, SyncReport
from ..scanner import find_image_files, hash_images_parallel

logger = logging.getLogger(__name__)


def sync_entries(
    entries: dict[str, Fingerprint],
    root: str | Path,
    recursive: bool = False,
    max_workers: Optional[int] = None,
    strict: bool = True,
    show_progress: bool = False,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> SyncReport:
    """
    Reconcile a path -> fingerprint dict with the images under root.

    The dict is only modified after every fingerprint has been collected,
    from the calling thread.

    Args:
        entries: Mapping to update in place
        root: Directory to scan
        recursive: If True, scan the whole subtree
        max_workers: Size of the hashing pool (default: CPU count)
        strict: If True, any fingerprinting failure aborts the call and
            leaves entries untouched. If False, failed files are skipped
            and reported in SyncReport.failed.
        show_progress: Whether to show a tqdm progress bar while hashing
        progress_callback: Optional callback(current, total) while hashing

    Returns:
        SyncReport describing what changed

    Raises:
        ImageDecodeError: (strict mode) an image could not be decoded
        FilesystemError: root cannot be listed, or (strict mode) an image
            could not be read
    """
    known = set(entries)
    present = find_image_files(root, recursive=recursive)

    to_add = present - known
    to_remove = known - present
    logger.debug(
        f"Sync {root}: {len(present):,} on disk, {len(to_add):,} new, {len(to_remove):,} stale"
    )

    hashes, failures = hash_images_parallel(
        sorted(to_add),
        max_workers=max_workers,
        progress_callback=progress_callback,
        show_progress=show_progress,
    )

    report = SyncReport()
    if failures:
        failures.sort(key=lambda failure: failure[0])
        if strict:
            logger.error(f"Could not fingerprint {len(failures):,} files; database not updated")
            raise failures[0][1]
        for path, error in failures:
            logger.warning(f"Skipping {path}: {error}")
            report.failed.append((path, str(error)))

    for name, fingerprint in sorted(hashes, key=lambda item: item[0]):
        entries[name] = fingerprint
        report.added.append(name)

    for name in sorted(to_remove):
        del entries[name]
        report.removed.append(name)

    return report


__all__ = ['sync_entries']
