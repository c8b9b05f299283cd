"""
Interactive review of duplicate pairs.

Shows each pair side by side in the terminal and asks which image to keep.
The image not kept is handed to a discard callback.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Iterable, Optional

from PIL import Image, UnidentifiedImageError

from ..models import DuplicatePair, ImageDetails

CHOICES = {
    'l': 'left',
    'r': 'right',
    'b': 'both',
    'q': 'quit',
}


def load_image_details(path: str) -> ImageDetails:
    """
    Read the size and resolution of an image for display.

    Errors are recorded on the result rather than raised.
    """
    info = ImageDetails(path=path)
    try:
        info.file_size = os.path.getsize(path)
        with Image.open(path) as img:
            info.width, info.height = img.size
    except (OSError, UnidentifiedImageError) as e:
        info.error = str(e)
    return info


def _format_side(label: str, info: ImageDetails) -> str:
    line = f"  [{label}] {info.path}\n"
    if info.error:
        return line + f"        (unreadable: {info.error})"
    return line + f"        {info.resolution} | {info.file_size_formatted}"


def prompt_choice(input_func: Callable[[str], str] = input) -> str:
    """
    Ask which image of a pair to keep.

    Loops until one of l/r/b/q is entered.

    Returns:
        'left', 'right', 'both' or 'quit'
    """
    while True:
        answer = input_func("Keep [l]eft, [r]ight, [b]oth, or [q]uit? ").strip().lower()
        if answer[:1] in CHOICES:
            return CHOICES[answer[:1]]
        print("Please enter l, r, b or q.")


def review_duplicates(
    pairs: Iterable[DuplicatePair],
    discard: Callable[[str], None],
    input_func: Callable[[str], str] = input,
    logger: Optional[logging.Logger] = None,
) -> dict:
    """
    Walk the user through every duplicate pair.

    Both files are checked for existence right before a pair is shown,
    since the database may be older than the filesystem. Pairs involving a
    file discarded earlier in the session are skipped the same way.

    Args:
        pairs: Duplicate pairs to review
        discard: Called with the path of each image the user does not keep
        input_func: Source of user answers
        logger: Optional logger instance

    Returns:
        Statistics dictionary with keys:
        - reviewed: Number of pairs shown to the user
        - discarded: Number of images discarded
        - skipped: Number of pairs skipped because a file is missing
        - errors: Number of failed discards
        - error_details: List of dictionaries with 'path' and 'error' keys
    """
    stats = {
        'reviewed': 0,
        'discarded': 0,
        'skipped': 0,
        'errors': 0,
        'error_details': [],
    }
    pairs = list(pairs)
    discarded: set[str] = set()

    for index, pair in enumerate(pairs, 1):
        missing = [path for path in pair if path in discarded or not os.path.isfile(path)]
        if missing:
            stats['skipped'] += 1
            if logger:
                logger.debug(f"Skipping pair, no longer on disk: {', '.join(missing)}")
            continue

        stats['reviewed'] += 1
        print(f"\nPair {index}/{len(pairs)} (distance {pair.distance})")
        print(_format_side("L", load_image_details(pair.first)))
        print(_format_side("R", load_image_details(pair.second)))

        choice = prompt_choice(input_func)
        if choice == 'quit':
            break
        if choice == 'both':
            continue

        loser = pair.second if choice == 'left' else pair.first
        try:
            discard(loser)
            discarded.add(loser)
            stats['discarded'] += 1
        except OSError as e:
            stats['errors'] += 1
            stats['error_details'].append({'path': loser, 'error': str(e)})
            if logger:
                logger.error(f"Could not discard {loser}: {e}")

    return stats


__all__ = [
    'load_image_details',
    'prompt_choice',
    'review_duplicates',
]
