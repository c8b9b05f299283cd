"""
Duplicate discovery over a hash database.

Compares every unordered pair of entries once. This is O(n^2) in the number
of images and dominates the runtime on large collections; pairs are
generated lazily so memory stays O(n).
"""

from __future__ import annotations

from itertools import combinations
from typing import Callable, Iterator, Mapping, Optional

from ..config import PROGRESS_INTERVAL
from ..models import DuplicatePair, Fingerprint


def iter_duplicates(
    entries: Mapping[str, Fingerprint],
    threshold: int,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> Iterator[DuplicatePair]:
    """
    Yield pairs of entries whose Hamming distance is below threshold.

    Args:
        entries: Mapping of path -> fingerprint
        threshold: Pairs with distance strictly less than this are yielded
        progress_callback: Optional callback(current, total) every
            PROGRESS_INTERVAL comparisons

    Raises:
        ValueError: If threshold is negative or fingerprint lengths differ
    """
    if threshold < 0:
        raise ValueError(f"threshold must be non-negative, got {threshold}")

    lengths = {len(fingerprint.data) for fingerprint in entries.values()}
    if len(lengths) > 1:
        raise ValueError(f"fingerprints of mixed lengths: {sorted(lengths)}")

    # Compare as ints; XOR + popcount is much cheaper than per-pair objects
    items = [(path, int(fingerprint)) for path, fingerprint in entries.items()]
    total = len(items) * (len(items) - 1) // 2

    for count, ((path_1, hash_1), (path_2, hash_2)) in enumerate(combinations(items, 2), 1):
        distance = bin(hash_1 ^ hash_2).count('1')
        if distance < threshold:
            yield DuplicatePair(path_1, path_2, distance)

        if progress_callback and count % PROGRESS_INTERVAL == 0:
            progress_callback(count, total)


def find_duplicates(
    entries: Mapping[str, Fingerprint],
    threshold: int,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> list[DuplicatePair]:
    """List all duplicate pairs. Order is unspecified."""
    return list(iter_duplicates(entries, threshold, progress_callback))


__all__ = ['iter_duplicates', 'find_duplicates']
