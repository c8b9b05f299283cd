"""
CLI workflow orchestration for imagedupe.

Provides the CLIOrchestrator class that coordinates the whole run: load or
create the hash database, sync it with the directory, save it, find
duplicate pairs, and hand them to the review layer.
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Callable, Optional

from ..exceptions import HashDBError
from ..hashdb import HashDB
from ..scanner import has_jxl_support
from ..user_config import UserConfig, load_user_config
from .actions import discard_image
from .arg_parser import parse_arguments
from .interactive import review_duplicates
from .reporting import print_duplicate_report, print_review_summary


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Orchestrates the CLI workflow.

    Manages the lifecycle from argument parsing through database
    synchronization, duplicate detection, and interactive review.
    """

    def __init__(
        self,
        argv: Optional[list[str]] = None,
        input_func: Callable[[str], str] = input,
        user_config: Optional[UserConfig] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            argv: Argument list (default: sys.argv)
            input_func: Source of answers for the review prompts
            user_config: Source of defaults (default: ~/.imagedupe/config.json)
        """
        self.argv = argv
        self.input_func = input_func
        self.user_config = user_config or load_user_config()
        self.logger = logging.getLogger(__name__)
        self.args = None
        self.db_file: Optional[Path] = None
        self.hashdb: Optional[HashDB] = None
        self.duplicates = []

    def run(self) -> int:
        """
        Execute the complete CLI workflow.

        Returns:
            Exit code (0 for success, 1 for error)

        Workflow phases:
        1. Setup & argument parsing
        2. Validation
        3. Load or create the database
        4. Sync with the directory
        5. Save the database
        6. Print the fingerprint listing (--dump-hashes)
        7. Duplicate detection
        8. Report or interactive review
        """
        self._setup_phase()

        exit_code = self._validate_phase()
        if exit_code != 0:
            return exit_code

        try:
            self._load_phase()
            self._update_phase()
            self._dump_phase()
            self._listing_phase()
            self._detect_phase()
        except HashDBError as e:
            self.logger.error(str(e))
            return 1

        self._review_phase()
        return 0

    def _setup_phase(self) -> None:
        """Phase 1: Parse arguments and setup logging."""
        self.args = parse_arguments(self.argv, self.user_config)
        self.logger = setup_logging(self.args.verbose)
        if not has_jxl_support():
            self.logger.debug("JPEG XL support not available (install imagedupe[jxl])")

    def _validate_phase(self) -> int:
        """
        Phase 2: Validate arguments and resolve default locations.

        Returns:
            0 for success, 1 for validation error
        """
        if not self.args.path.is_dir():
            self.logger.error(f"Directory not found: {self.args.path}")
            return 1

        self.db_file = self.args.db or self.args.path / self.user_config.db_filename
        self.logger.info(f"Database file is {self.db_file}")

        if self.args.trash_dir is None and not self.args.delete:
            self.args.trash_dir = self.user_config.trash_dir

        return 0

    def _load_phase(self) -> None:
        """Phase 3: Read the database file, or start empty."""
        if self.db_file.is_file() and not self.args.rebuild:
            self.logger.info(f"Reading from {self.db_file}")
            self.hashdb = HashDB.from_file(self.db_file)
            self.logger.info(f"Loaded {len(self.hashdb):,} entries")
        else:
            self.logger.info("Creating new database")
            self.hashdb = HashDB()

    def _update_phase(self) -> None:
        """Phase 4: Sync the database with the directory."""
        if self.args.no_update:
            return

        self.logger.info(f"Hashing images in {self.args.path}...")
        report = self.hashdb.sync(
            self.args.path,
            recursive=self.args.recursive,
            workers=self.args.workers,
            strict=not self.args.skip_errors,
            show_progress=not self.args.no_progress,
        )
        self.logger.info(f"Database synced: {report.summary()}")

    def _dump_phase(self) -> None:
        """Phase 5: Write the database back to disk."""
        if self.args.no_dump:
            return

        self.logger.info(f"Dumping database to {self.db_file}")
        self.hashdb.to_file(self.db_file)

    def _listing_phase(self) -> None:
        """Phase 6: Print every fingerprint, if requested."""
        if self.args.dump_hashes:
            print(self.hashdb.dump_listing(), end='')

    def _detect_phase(self) -> None:
        """Phase 7: Find duplicate pairs."""
        self.logger.info(f"Finding duplicate images (threshold={self.args.threshold})...")
        total = len(self.hashdb) * (len(self.hashdb) - 1) // 2
        self.logger.debug(f"Comparing {total:,} pairs")
        self.duplicates = self.hashdb.find_duplicates(self.args.threshold)
        self.logger.info(f"Found {len(self.duplicates):,} duplicate pairs")

    def _review_phase(self) -> None:
        """Phase 8: Print the pairs, or review them interactively."""
        if self.args.list_only:
            print_duplicate_report(self.duplicates, self.args.threshold)
            return

        if not self.duplicates:
            self.logger.info("Nothing to review.")
            return

        if self.args.dry_run:
            self.logger.info("[DRY RUN MODE - No files will be modified]")

        discard = functools.partial(
            discard_image,
            trash_dir=self.args.trash_dir,
            delete=self.args.delete,
            dry_run=self.args.dry_run,
            logger=self.logger,
        )
        pairs = sorted(self.duplicates, key=lambda p: (p.distance, p.first, p.second))
        stats = review_duplicates(pairs, discard, self.input_func, self.logger)
        print_review_summary(stats, self.args.dry_run)


__all__ = ['CLIOrchestrator', 'setup_logging']
