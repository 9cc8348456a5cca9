"""
Unified command orchestrator for one deduplication run.
This is the SINGLE source of truth for the run workflow; the CLI is a thin shell around it.
"""
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from linkdupes.core.cache import HashCache
from linkdupes.core.deduplicator import DeduplicatorImpl
from linkdupes.core.models import (
    DeduplicationParams, DeduplicationStats, DuplicateGroup, FileRecord, ResolutionOutcome)
from linkdupes.core.scanner import FileScannerImpl
from linkdupes.services.disk_service import DiskService
from linkdupes.services.duplicate_service import DuplicateService
from linkdupes.utils.convert_utils import GIB, ConvertUtils

logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    """Everything a caller needs to present the result of a run."""
    groups: List[DuplicateGroup] = field(default_factory=list)
    outcomes: List[ResolutionOutcome] = field(default_factory=list)
    stats: DeduplicationStats = field(default_factory=DeduplicationStats)
    disk_before: Optional[Tuple[int, int]] = None
    disk_after: Optional[Tuple[int, int]] = None

    @property
    def freed_bytes(self) -> Optional[int]:
        return DiskService.freed(self.disk_before, self.disk_after)

    @property
    def failed(self) -> List[ResolutionOutcome]:
        return [o for o in self.outcomes if not o.succeeded]


class DeduplicationCommand:
    """
    Orchestrates the entire workflow:
    1. Record settings and free space
    2. Discover files under the root
    3. Load the hash cache (content algorithms only)
    4. Find duplicate groups (canonicalize → pre-group → hash → group)
    5. Resolve groups (or plan them under dry-run)
    6. Record free space again

    Usage:
        params = DeduplicationParams(root_dir="/data", keep=KeepPolicy.OLDEST)
        report = DeduplicationCommand().execute(params)
    """

    def __init__(self):
        self._files: List[FileRecord] = []

    def execute(
            self,
            params: DeduplicationParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
    ) -> RunReport:
        """
        Execute one run with the given parameters.

        Raises:
            RuntimeError: If the root cannot be enumerated
        """
        root_dir = os.path.abspath(params.root_dir)
        report = RunReport()
        start_time = time.time()

        logger.info(
            f"Settings: Path={root_dir} | Keep={params.keep.value} | Mode={params.action.value} | "
            f"Algorithm={params.algorithm.value} | Recursive={params.recursive} | "
            f"DryRun={params.dry_run} | Threads={params.worker_count}"
        )
        report.disk_before = DiskService.usage(root_dir)
        logger.info(f"Free space before: {ConvertUtils.disk_to_human(*(report.disk_before or (None, None)))}")

        try:
            report.groups = self._find(params, root_dir, report.stats, progress_callback)

            if report.groups:
                start = time.time()
                report.outcomes = DuplicateService.resolve(report.groups, params)
                report.stats.update_stage("resolve", len(report.groups), len(report.outcomes),
                                          time.time() - start)
            else:
                logger.info("No duplicate groups found.")
        finally:
            report.stats.total_time = time.time() - start_time
            self._log_disk_summary(root_dir, report)

        logger.info("Done.")
        return report

    def _find(
            self,
            params: DeduplicationParams,
            root_dir: str,
            stats: DeduplicationStats,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]]
    ) -> List[DuplicateGroup]:
        logger.info("Scanning directory...")
        scanner = FileScannerImpl(
            root_dir=root_dir,
            recursive=params.recursive,
            ignore_symlinks=params.ignore_symlinks,
            ignore_suffixes=params.ignore_suffixes,
        )
        self._files = scanner.scan()
        stats.files_discovered = len(self._files)

        if not self._files:
            logger.info("No files found.")
            return []

        cache = HashCache(params.cache_path, root_dir)
        if params.algorithm.is_content_hash:
            cache.load()
            if scanner.nested_cache_files:
                logger.info(f"Merging {len(scanner.nested_cache_files)} nested hash cache file(s)...")
                for store_path in scanner.nested_cache_files:
                    cache.merge(store_path)
            stats.cache_rows_loaded = len(cache.entries)
            stats.cache_rows_rejected = cache.rejected_rows
            if cache.entries:
                logger.info(f"Loaded {len(cache.entries)} cached hashes")

        groups, _ = DeduplicatorImpl(cache).find_duplicates(
            self._files, params, stats=stats, progress_callback=progress_callback
        )
        logger.info(f"Found {len(groups)} duplicate groups")
        return groups

    @staticmethod
    def _log_disk_summary(root_dir: str, report: RunReport) -> None:
        report.disk_after = DiskService.usage(root_dir)
        logger.info(f"Free space after: {ConvertUtils.disk_to_human(*(report.disk_after or (None, None)))}")

        freed = report.freed_bytes
        if freed is not None:
            total = report.disk_before[1]
            percent = freed / total * 100 if total else 0.0
            logger.info(f"Total space freed: {freed / GIB:.2f} GB ({percent:.2f}%)")

    def get_files(self) -> List[FileRecord]:
        """Get discovered files after execution."""
        return self._files.copy()
