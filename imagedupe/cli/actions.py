"""
Discard actions for the review layer.

Provides the operation that removes the image a user chose not to keep,
either by moving it into a trash directory or by deleting it.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional


def _generate_unique_filename(dest: Path, base_path: Path) -> Path:
    """
    Generate a unique filename by appending a counter if file exists.

    Args:
        dest: Desired destination path
        base_path: Base path for generating alternatives

    Returns:
        Path that doesn't exist

    Examples:
        >>> _generate_unique_filename(Path('/trash/photo.jpg'), Path('/data/photo.jpg'))
        Path('/trash/photo_1.jpg')  # if photo.jpg exists
    """
    if not dest.exists():
        return dest

    stem = base_path.stem
    suffix = base_path.suffix
    counter = 1

    while dest.exists():
        dest = dest.parent / f"{stem}_{counter}{suffix}"
        counter += 1

    return dest


def _perform_delete(path: Path, logger: Optional[logging.Logger]) -> None:
    """
    Delete a discarded file.

    Raises:
        PermissionError: If file cannot be deleted
    """
    try:
        path.unlink()
    except PermissionError:
        raise PermissionError(f"Cannot delete {path}: file is read-only or locked")
    if logger:
        logger.info(f"Deleted: {path}")


def _perform_move(path: Path, trash_dir: Path, logger: Optional[logging.Logger]) -> Path:
    """
    Move a discarded file to the trash directory, handling name conflicts.

    Returns:
        Where the file ended up

    Raises:
        PermissionError: If file cannot be moved
    """
    trash_dir.mkdir(parents=True, exist_ok=True)
    dest = _generate_unique_filename(trash_dir / path.name, path)

    try:
        shutil.move(str(path), str(dest))
    except PermissionError:
        raise PermissionError(f"Cannot move {path}: source or destination permission denied")
    if logger:
        logger.info(f"Moved: {path} -> {dest}")
    return dest


def discard_image(
    path: str | Path,
    trash_dir: Optional[Path] = None,
    delete: bool = False,
    dry_run: bool = False,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Remove an image the user chose not to keep.

    Args:
        path: Image to discard
        trash_dir: Directory to move the image into (unless delete)
        delete: If True, unlink the file instead of moving it
        dry_run: If True, only log what would happen
        logger: Optional logger instance

    Raises:
        ValueError: If neither delete nor trash_dir is given
        OSError: If the file cannot be moved or deleted
    """
    path = Path(path)
    if not delete and trash_dir is None:
        raise ValueError("trash_dir is required unless delete=True")

    if dry_run:
        if logger:
            action = 'delete' if delete else f'move to {trash_dir}'
            logger.info(f"[DRY RUN] Would {action}: {path}")
        return

    if delete:
        _perform_delete(path, logger)
    else:
        _perform_move(path, Path(trash_dir), logger)


__all__ = ['discard_image']
