"""
File discovery module for the scanner package.

Provides the extension classifier and the directory scanner that enumerates
candidate images as canonical paths, with optional recursion.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator

from ..config import SUPPORTED_EXTENSIONS
from ..exceptions import FilesystemError
from .dependencies import _logger


def has_image_suffix(filepath: str | Path, extensions: Iterable[str] = SUPPORTED_EXTENSIONS) -> bool:
    """
    Check whether a path names a supported image type.

    Only the path string is inspected. The match is case-sensitive, so
    'photo.png' qualifies but 'photo.PNG' does not.

    Args:
        filepath: Path to classify
        extensions: Allowed extensions without the leading dot

    Returns:
        True if the final extension is in the allowlist
    """
    suffix = Path(filepath).suffix
    if not suffix:
        return False
    return suffix[1:] in extensions


def _iter_entries(root: Path, recursive: bool) -> Iterator[Path]:
    """
    Yield every entry under root, skipping subdirectories that cannot be listed.

    Raises:
        FilesystemError: If root itself cannot be listed, in both modes
    """
    try:
        with os.scandir(root) as it:
            top_level = [Path(entry.path) for entry in it]
    except OSError as e:
        raise FilesystemError(str(root), e) from e

    if not recursive:
        yield from top_level
        return

    def _on_error(err: OSError) -> None:
        if err.filename is not None and os.fspath(err.filename) == os.fspath(root):
            raise FilesystemError(str(root), err) from err
        _logger.debug(f"Skipping unreadable directory {err.filename}: {err}")

    for dirpath, _dirnames, filenames in os.walk(root, onerror=_on_error):
        for name in filenames:
            yield Path(dirpath) / name


def find_image_files(
    root_path: str | Path,
    recursive: bool = False,
    extensions: Iterable[str] = SUPPORTED_EXTENSIONS,
) -> set[str]:
    """
    Find all image files in the given directory.

    Args:
        root_path: Directory path to search for images
        recursive: If True, search subdirectories recursively
        extensions: Allowed extensions without the leading dot

    Returns:
        Set of canonical absolute file paths as strings

    Raises:
        FilesystemError: If root_path is not a readable directory

    Notes:
        - Resolves symlinks so a file reached via several paths appears once
        - Entries that vanish or cannot be inspected are skipped silently,
          as are unreadable subdirectories; an unreadable root is an error
    """
    root = Path(root_path)
    if not root.is_dir():
        raise FilesystemError(str(root), NotADirectoryError("not a directory"))

    extensions = frozenset(extensions)
    images: set[str] = set()

    for filepath in _iter_entries(root, recursive):
        if not has_image_suffix(filepath, extensions):
            continue
        try:
            if not filepath.is_file():
                continue
            images.add(str(filepath.resolve(strict=True)))
        except OSError as e:
            _logger.debug(f"Skipping {filepath}: {e}")

    return images


__all__ = ['has_image_suffix', 'find_image_files']
