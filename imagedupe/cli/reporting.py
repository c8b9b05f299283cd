"""
Report formatting and display for the CLI interface.

Provides functions to print duplicate pairs and review results in a
human-readable format.
"""

from __future__ import annotations

from ..models import DuplicatePair


def _print_section_header(title: str) -> None:
    """Print a section header with divider lines."""
    print("\n" + "-" * 70)
    print(title)
    print("-" * 70)


def print_duplicate_report(pairs: list[DuplicatePair], threshold: int) -> None:
    """
    Print every duplicate pair, closest matches first.

    Each line is '<distance>\\t<path>\\t<path>' so the output can be piped
    into other tools.
    """
    print("\n" + "=" * 70)
    print("DUPLICATE IMAGE REPORT")
    print("=" * 70)
    print(f"\n{len(pairs):,} pairs with distance below {threshold}")

    if not pairs:
        return

    _print_section_header("DISTANCE  PATHS")
    for pair in sorted(pairs, key=lambda p: (p.distance, p.first, p.second)):
        print(f"{pair.distance}\t{pair.first}\t{pair.second}")


def print_review_summary(stats: dict, dry_run: bool = False) -> None:
    """Print the outcome of an interactive review."""
    _print_section_header("REVIEW SUMMARY" + (" [DRY RUN]" if dry_run else ""))
    print(f"Pairs reviewed: {stats['reviewed']:,}")
    print(f"Images {'that would be ' if dry_run else ''}discarded: {stats['discarded']:,}")
    if stats['skipped']:
        print(f"Pairs skipped (file missing): {stats['skipped']:,}")
    if stats['errors']:
        print(f"Errors: {stats['errors']:,}")
        for detail in stats['error_details']:
            print(f"  {detail['path']}: {detail['error']}")


__all__ = ['print_duplicate_report', 'print_review_summary']
