#!/usr/bin/env python3
"""
linkdupes CLI: find duplicate files and replace redundant copies with links.
Every run appends a timestamped record to duplicates.log inside the scanned folder.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import sys
import time
from pathlib import Path
from typing import NoReturn, Optional

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import send2trash  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("Send2Trash")

try:
    import xxhash  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from linkdupes.aliases import (
    ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT, EPILOG_TEXT,
    KEEP_CHOICES, KEEP_HELP_TEXT, MODE_CHOICES, MODE_HELP_TEXT,
)
from linkdupes.commands import DeduplicationCommand, RunReport
from linkdupes.core.models import DEFAULT_IGNORE, DeduplicationParams, OutcomeStatus
from linkdupes.services.duplicate_service import DuplicateService

LOG_FORMAT = "[%(asctime)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self._handlers: list[logging.Handler] = []

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="linkdupes",
            description="linkdupes: find duplicate files and replace them with links",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--path", "-p",
            default=".",
            type=str,
            help="Directory to scan (default: current directory)"
        )
        parser.add_argument(
            "--recursive", "-r",
            action="store_true",
            help="Descend into subdirectories"
        )
        parser.add_argument(
            "--dry-run", "-d",
            action="store_true",
            dest="dry_run",
            help="Report what would be done without touching any file"
        )
        parser.add_argument(
            "--keep", "-k",
            required=True,
            choices=KEEP_CHOICES,
            type=str,
            help=KEEP_HELP_TEXT
        )
        parser.add_argument(
            "--mode", "-m",
            choices=MODE_CHOICES,
            default="symlink",
            type=str,
            help=MODE_HELP_TEXT
        )
        parser.add_argument(
            "--algorithm", "-a",
            choices=ALGORITHM_CHOICES,
            default="md5",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )
        parser.add_argument(
            "--ignore", "-i",
            default=DEFAULT_IGNORE,
            type=str,
            metavar='',
            help=f"Comma-separated ignore list: 'symlink' and file name suffixes (default: {DEFAULT_IGNORE})"
        )
        parser.add_argument(
            "--threads", "-t",
            default=None,
            type=int,
            metavar='',
            help="Parallel hashing threads (default: CPU count)"
        )
        parser.add_argument(
            "--min-size",
            default="0",
            type=str,
            metavar='',
            dest="min_size",
            help="Minimum file size (e.g., 500KB, 1MB). Default: 0"
        )
        parser.add_argument(
            "--max-size",
            default=None,
            type=str,
            metavar='',
            dest="max_size",
            help="Maximum file size (e.g., 10MB, 1GB); -1 for unlimited. Default: unlimited"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Only print warnings and the final summary"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show per-file details and statistics"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        root_path = Path(args.path).resolve()
        if not root_path.exists():
            self.error_exit(f"Directory not found: {args.path}")
        if not root_path.is_dir():
            self.error_exit(f"Path is not a directory: {args.path}")

        if args.threads is not None and args.threads < 1:
            self.error_exit("Thread count must be at least 1")

    def create_params(self, args: argparse.Namespace) -> DeduplicationParams:
        """Create DeduplicationParams from CLI arguments."""
        try:
            return DeduplicationParams.from_cli_values(
                root_dir=str(Path(args.path).resolve()),
                keep=args.keep,
                action=args.mode,
                algorithm=args.algorithm,
                recursive=args.recursive,
                dry_run=args.dry_run,
                ignore_str=args.ignore,
                workers=args.threads,
                min_size_str=args.min_size,
                max_size_str=args.max_size,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def configure_logging(self, params: DeduplicationParams) -> None:
        """
        Console output plus the append-only log artifact in the scanned folder.
        The file always receives INFO and above regardless of --quiet.
        """
        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        root_logger = logging.getLogger("linkdupes")
        root_logger.setLevel(logging.DEBUG if self.verbose else logging.INFO)

        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        console.setLevel(logging.WARNING if self.quiet else logging.DEBUG)
        self._handlers.append(console)

        try:
            log_file = logging.FileHandler(params.log_path, mode="a", encoding="utf-8",
                                           errors="backslashreplace")
            log_file.setFormatter(formatter)
            log_file.setLevel(logging.INFO)
            self._handlers.append(log_file)
        except OSError as e:
            self.warning(f"Cannot write log file {params.log_path}: {e}")

        for handler in self._handlers:
            root_logger.addHandler(handler)

    def close_logging(self) -> None:
        root_logger = logging.getLogger("linkdupes")
        for handler in self._handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers = []

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose or not sys.stderr.isatty():
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        if total and current >= total:
            sys.stderr.write("\n")
        sys.stderr.flush()

    def output_results(self, report: RunReport, params: DeduplicationParams) -> None:
        """Prints the final summary; per-file lines already went through logging."""
        counts = DuplicateService.summarize(report.outcomes)
        if self.verbose:
            print(report.stats.print_summary())

        if params.dry_run:
            print(f"Dry run: {len(report.groups)} groups, {counts[OutcomeStatus.DRY_RUN]} files "
                  f"would be processed with '{params.action.value}'")
        else:
            print(f"{len(report.groups)} groups, {counts[OutcomeStatus.DONE]} files processed, "
                  f"{counts[OutcomeStatus.FAILED]} failed")

        if report.stats.hash_failures:
            self.warning(f"{report.stats.hash_failures} file(s) could not be hashed and were skipped")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        print(f"Warning: {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet

        self.validate_args(args)
        params = self.create_params(args)
        self.configure_logging(params)

        try:
            report = DeduplicationCommand().execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
            )
        except RuntimeError as e:
            self.error_exit(f"Deduplication failed: {e}")
        finally:
            self.close_logging()

        self.output_results(report, params)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
