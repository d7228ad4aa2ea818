#!/usr/bin/env python3
"""
dupsweep CLI — command line interface for duplicate file detection and removal.
Removal is permanent: duplicates are unlinked, not moved to a trash.
Use --dry-run to see what would be removed.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import signal
import sys
import time
from typing import List, Optional, NoReturn

from dupsweep.core.errors import ConfigurationError
from dupsweep.core.models import ScanParams, DuplicateGroup, ScanStats, DEFAULT_BLOCK_SIZE
from dupsweep.commands import ScanCommand
from dupsweep.services.duplicate_service import DeletionReport
from dupsweep.utils.convert_utils import ConvertUtils
from dupsweep.aliases import (
    HASH_ALG_ALIASES, HASH_ALG_HELP_TEXT,
    STRATEGY_ALIASES, STRATEGY_CHOICES, STRATEGY_HELP_TEXT,
    EPILOG_TEXT
)

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self._stop_requested: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments. `-h` selects the hash algorithm, help is `--help` only."""
        parser = argparse.ArgumentParser(
            prog="dupsweep",
            description="dupsweep — find and remove duplicate files",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT,
            add_help=False
        )

        parser.add_argument(
            "--help",
            action="help",
            default=argparse.SUPPRESS,
            help="Show this help message and exit"
        )

        # Required arguments
        parser.add_argument(
            "--dir", "-d",
            required=True,
            nargs="+",
            type=str,
            metavar="DIR",
            dest="dirs",
            help="Directories (space separated) to scan for duplicates"
        )

        # Traversal options
        parser.add_argument(
            "--exclude", "-e",
            nargs="+",
            default=[],
            type=str,
            metavar="DIR",
            help="Directories (space separated) excluded from scanning"
        )
        parser.add_argument(
            "--depth",
            default=0,
            type=int,
            metavar="N",
            help="Maximum depth below each scanned directory. Default: 0 (no subdirectories)"
        )

        # Filtering options
        parser.add_argument(
            "--minsize", "-s",
            default="1",
            type=str,
            metavar="SIZE",
            help="Minimum file size in bytes (also 1K, 2M...). Default: 1"
        )
        parser.add_argument(
            "--mask", "-m",
            nargs="+",
            default=[],
            type=str,
            metavar="PATTERN",
            help="Filename patterns (regular expressions searched in the name, or globs).\n"
                 "A file is accepted if any pattern matches. Default: all files"
        )

        # Hashing options
        parser.add_argument(
            "--block", "-b",
            default=DEFAULT_BLOCK_SIZE,
            type=int,
            metavar="BYTES",
            help=f"Read block size used for hashing. Default: {DEFAULT_BLOCK_SIZE}"
        )
        parser.add_argument(
            "--hashalg", "-h",
            default="crc32",
            type=str,
            metavar="ALG",
            help=HASH_ALG_HELP_TEXT
        )
        parser.add_argument(
            "--strategy",
            choices=STRATEGY_CHOICES,
            default="size-first",
            type=str,
            help=STRATEGY_HELP_TEXT
        )

        # Actions
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show which files would be removed without removing anything"
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show debug logging, progress and statistics"
        )

        return parser.parse_args(args)

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Validate arguments and build ScanParams. Any problem is fatal before scanning."""
        algorithm = HASH_ALG_ALIASES.get(args.hashalg.strip().lower())
        if algorithm is None:
            self.error_exit(
                f"Hasher {args.hashalg} is not supported. "
                f"Available: {', '.join(HASH_ALG_ALIASES)}"
            )

        try:
            min_size_bytes = ConvertUtils.human_to_bytes(args.minsize)
        except ValueError as e:
            self.error_exit(f"Invalid size format: {e}")

        try:
            return ScanParams(
                root_dirs=args.dirs,
                excluded_dirs=args.exclude,
                max_depth=args.depth,
                min_size_bytes=min_size_bytes,
                masks=args.mask,
                block_size=args.block,
                algorithm=algorithm,
                strategy=STRATEGY_ALIASES[args.strategy],
                dry_run=args.dry_run
            )
        except ConfigurationError as e:
            self.error_exit(str(e))

    def configure_logging(self) -> None:
        if self.verbose:
            level = logging.DEBUG
        elif self.quiet:
            level = logging.ERROR
        else:
            level = logging.WARNING
        logging.basicConfig(level=level, format=LOG_FORMAT)
        logging.getLogger("dupsweep").setLevel(level)

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def stopped_flag(self) -> bool:
        """True once the user asked to stop (first Ctrl+C)."""
        return self._stop_requested

    def _handle_sigint(self, signum, frame) -> None:
        if self._stop_requested:
            raise KeyboardInterrupt
        self._stop_requested = True
        self.warning("Stopping after the current file... (press Ctrl+C again to abort)")

    @staticmethod
    def removal_callback(path: str) -> None:
        """Every removal is printed, --quiet included."""
        print(f"File removed: {path}")

    def output_groups(self, groups: List[DuplicateGroup], dry_run: bool) -> None:
        """Show every group with the kept file first."""
        if self.quiet or not (self.verbose or dry_run):
            return

        for idx, group in enumerate(groups, 1):
            size_str = ConvertUtils.bytes_to_human(group.size)
            reclaimable = ConvertUtils.bytes_to_human(group.reclaimable_bytes)
            print(f"\n📁 Group {idx} | Size: {size_str} | Files: {len(group.files)} | "
                  f"Reclaimable: {reclaimable} | Digest: {group.digest.hex()}")
            print(f"   [KEEP] {group.keeper.path}")
            for file in group.duplicates:
                print(f"   [DEL]  {file.path}")

    def output_summary(self, groups: List[DuplicateGroup], report: DeletionReport, stats: ScanStats) -> None:
        if self.verbose:
            sys.stderr.write("\n")
            print()
            print(stats.print_summary())

        for path, error in report.failed:
            print(f"❌ Failed to remove {path}: {error}", file=sys.stderr)

        if self.stopped_flag():
            print(f"\n⚠️  Cancelled by user: {len(report.removed)} files removed before stopping, "
                  f"results are incomplete.", file=sys.stderr)
            return

        if self.quiet:
            return

        if not groups:
            print("No duplicate groups found.")
            return

        freed = ConvertUtils.bytes_to_human(report.bytes_freed)
        if report.dry_run:
            print(f"\nDry run: {len(report.removed)} files in {len(groups)} groups would be removed ({freed}).")
        elif report.failed:
            print(f"\n⚠️  Partial success: removed {len(report.removed)} files ({freed}), "
                  f"{len(report.failed)} could not be removed.")
        else:
            print(f"\n✅ Removed {len(report.removed)} files from {len(groups)} groups ({freed} freed).")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.configure_logging()

        params = self.create_params(args)

        if not self.quiet:
            for root in params.root_dirs:
                print(f"Scanning directory: {root}")
            if self.verbose:
                print(f"Settings: {params.describe()}")

        handler_installed = False
        try:
            previous_handler = signal.signal(signal.SIGINT, self._handle_sigint)
            handler_installed = True
        except ValueError:
            pass  # not in the main thread; Ctrl+C falls back to KeyboardInterrupt

        try:
            command = ScanCommand()
            groups = command.find(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.stopped_flag
            )
            self.output_groups(groups, params.dry_run)
            report = command.remove(
                groups,
                dry_run=params.dry_run,
                stopped_flag=self.stopped_flag,
                removal_callback=self.removal_callback
            )
        finally:
            if handler_installed:
                signal.signal(signal.SIGINT, previous_handler or signal.SIG_DFL)

        self.output_summary(groups, report, command.stats)

        if self.stopped_flag():
            sys.exit(130)

        if self.verbose:
            print(f"\n✅ Completed in {time.time() - self.start_time:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
