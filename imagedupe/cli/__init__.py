"""
CLI package for imagedupe.

Provides the command-line interface that maintains the hash database for a
directory and walks the user through each duplicate pair.

Public API:
- main: Entry point for CLI execution
- CLIOrchestrator: CLI workflow orchestration class
- review_duplicates: Interactive review of duplicate pairs
- discard_image: Move an image to the trash directory or delete it
- print_duplicate_report: Function to display the pair list
"""

from __future__ import annotations

from .orchestrator import CLIOrchestrator, setup_logging
from .arg_parser import create_parser, parse_arguments
from .actions import discard_image
from .reporting import print_duplicate_report, print_review_summary
from .interactive import review_duplicates, prompt_choice, load_image_details


def main(argv=None) -> int:
    """
    Main entry point for the CLI.

    Delegates to CLIOrchestrator to execute the complete workflow.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    orchestrator = CLIOrchestrator(argv)
    return orchestrator.run()


__all__ = [
    # Main entry point
    'main',
    # Core classes
    'CLIOrchestrator',
    # Utilities
    'setup_logging',
    'create_parser',
    'parse_arguments',
    'discard_image',
    'print_duplicate_report',
    'print_review_summary',
    'review_duplicates',
    'prompt_choice',
    'load_image_details',
]
