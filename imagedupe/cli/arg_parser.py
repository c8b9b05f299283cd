"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
imagedupe command-line interface.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from ..user_config import UserConfig, load_user_config


def _non_negative_int(value: str) -> int:
    """argparse type for integers >= 0."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def _positive_int(value: str) -> int:
    """argparse type for integers >= 1."""
    number = _non_negative_int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return number


def create_parser(user_config: Optional[UserConfig] = None) -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Args:
        user_config: Source of defaults for threshold and workers

    Returns:
        Configured ArgumentParser instance
    """
    user_config = user_config or load_user_config()
    threshold = user_config.default_threshold
    workers = user_config.default_workers

    parser = argparse.ArgumentParser(
        prog='imagedupe',
        description='Find visually similar images in a directory and review each pair',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  %(prog)s ~/Pictures
      Hash new images, save the database, review duplicate pairs

  %(prog)s ~/Pictures -R --threshold 5
      Scan subdirectories too, with stricter matching

  %(prog)s ~/Pictures --no-update --list
      Print pairs from the saved database without rescanning

  %(prog)s ~/Pictures --rebuild --skip-errors
      Rehash everything, skipping files that cannot be decoded

The database is stored in <path>/{user_config.db_filename} unless --db is given.
Discarded images are moved to {user_config.trash_dir} unless --delete is given.
        """
    )

    parser.add_argument(
        'path',
        type=Path,
        help='Directory to scan for images'
    )

    # Database options
    parser.add_argument(
        '-D', '--db',
        type=Path,
        default=None,
        help=f'Location of database file (default: <PATH>/{user_config.db_filename})'
    )

    parser.add_argument(
        '-R', '--recursive',
        action='store_true',
        help='Scan directory for images recursively'
    )

    update_group = parser.add_mutually_exclusive_group()
    update_group.add_argument(
        '-b', '--rebuild',
        action='store_true',
        help='Force rebuild of the hash database'
    )
    update_group.add_argument(
        '-u', '--no-update',
        action='store_true',
        help='Read database file only; do not update contents'
    )

    parser.add_argument(
        '-d', '--no-dump',
        action='store_true',
        help='Do not write the hash database to file'
    )

    parser.add_argument(
        '--dump-hashes',
        action='store_true',
        help='Print the database as tab-separated fingerprint and path lines after updating'
    )

    parser.add_argument(
        '--skip-errors',
        action='store_true',
        help='Skip images that cannot be decoded instead of aborting'
    )

    # Matching options
    parser.add_argument(
        '-t', '--threshold',
        type=_non_negative_int,
        default=threshold,
        help=f'Image similarity threshold (0-64, lower=stricter). Default: {threshold}'
    )

    parser.add_argument(
        '-w', '--workers',
        type=_positive_int,
        default=workers,
        help=f'Number of parallel hashing workers. Default: {workers}'
    )

    # Review options
    parser.add_argument(
        '-l', '--list',
        action='store_true',
        dest='list_only',
        help='Print duplicate pairs instead of reviewing them'
    )

    parser.add_argument(
        '--trash-dir',
        type=Path,
        default=None,
        help=f'Directory discarded images are moved to (default: {user_config.trash_dir})'
    )

    parser.add_argument(
        '--delete',
        action='store_true',
        help='Delete discarded images instead of moving them to the trash directory'
    )

    parser.add_argument(
        '-n', '--dry-run',
        action='store_true',
        help='Review pairs without touching any files'
    )

    # Output options
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
    )

    return parser


def parse_arguments(argv=None, user_config: Optional[UserConfig] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)
        user_config: Source of defaults (default: ~/.imagedupe/config.json)

    Returns:
        Parsed arguments as Namespace object

    Examples:
        >>> args = parse_arguments(['/path/to/photos', '--threshold', '5'])
        >>> args.path
        PosixPath('/path/to/photos')
        >>> args.threshold
        5
    """
    parser = create_parser(user_config)
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
