"""
Parallel processing module for the scanner package.

Provides parallel fingerprinting with progress tracking and callback support.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional, Callable, Any, Iterable

from ..config import DEFAULT_WORKERS
from ..exceptions import HashDBError
from ..models import Fingerprint
from .hashing import hash_image
from .dependencies import HAS_TQDM, _tqdm_class, _logger


def hash_images_parallel(
    filepaths: Iterable[str],
    max_workers: Optional[int] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = False,
) -> tuple[list[tuple[str, Fingerprint]], list[tuple[str, HashDBError]]]:
    """
    Fingerprint many images in parallel.

    Every submitted file is waited for, even after a failure, so the caller
    always sees the complete outcome of the batch.

    Args:
        filepaths: Image paths to fingerprint
        max_workers: Number of parallel workers (default: CPU count)
        progress_callback: Optional callback(current, total) for progress updates
        show_progress: Whether to show tqdm progress bar

    Returns:
        Tuple of (list of (canonical path, Fingerprint),
        list of (path, error) for files that failed)
    """
    filepaths = list(filepaths)
    if not filepaths:
        return [], []

    results: list[tuple[str, Fingerprint]] = []
    failures: list[tuple[str, HashDBError]] = []
    total = len(filepaths)

    pbar: Optional[Any] = None
    if HAS_TQDM and show_progress and _tqdm_class is not None:
        pbar = _tqdm_class(
            total=total,
            desc="Hashing images",
            unit="img",
            ncols=80,
        )

    # Batch progress callbacks to reduce overhead (every 1000 files or 1 second)
    last_callback_time = time.time()
    callback_batch_size = 1000
    callback_interval = 1.0  # seconds

    with ThreadPoolExecutor(max_workers=max_workers or DEFAULT_WORKERS) as executor:
        futures = {
            executor.submit(hash_image, path): path
            for path in filepaths
        }

        for i, future in enumerate(as_completed(futures)):
            try:
                results.append(future.result())
            except HashDBError as e:
                filepath = futures[future]
                _logger.debug(f"Fingerprinting failed for {filepath}: {e}")
                failures.append((filepath, e))

            if pbar is not None:
                pbar.update(1)

            if progress_callback:
                current_time = time.time()
                should_callback = (
                    (i + 1) % callback_batch_size == 0 or
                    current_time - last_callback_time >= callback_interval or
                    i == total - 1  # Always callback on last item
                )
                if should_callback:
                    progress_callback(i + 1, total)
                    last_callback_time = current_time

    if pbar is not None:
        pbar.close()

    return results, failures


__all__ = ['hash_images_parallel']
