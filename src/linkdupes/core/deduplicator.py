"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

deduplicator.py
Implements the detection pipeline over discovered FileRecords:
    hardlink canonicalization → size window → size pre-grouping
    (skipped for name mode) → cache-assisted hashing → final grouping
Only the hashing step runs in parallel; every other step runs on the caller's thread.
"""
import logging
import time
from typing import Callable, List, Optional, Tuple

from linkdupes.core.canonicalizer import HardlinkCanonicalizer
from linkdupes.core.grouper import FileGrouperImpl
from linkdupes.core.hasher import ConcurrentHasher
from linkdupes.core.interfaces import HashCacheStore, Hasher
from linkdupes.core.models import (
    Algorithm, DeduplicationParams, DeduplicationStats, DuplicateGroup, FileRecord)

logger = logging.getLogger(__name__)


class DeduplicatorImpl:
    """
    Finds duplicate groups for one run and collects statistics.
    The hash cache and the single-file hasher are injected so the pipeline can
    run against in-memory fakes.
    """
    def __init__(self, cache: HashCacheStore, grouper: Optional[FileGrouperImpl] = None,
                 hasher: Optional[Hasher] = None):
        self.cache = cache
        self.grouper = grouper or FileGrouperImpl()
        self.canonicalizer = HardlinkCanonicalizer()
        self.hasher = hasher

    def find_duplicates(
        self,
        files: List[FileRecord],
        params: DeduplicationParams,
        stats: Optional[DeduplicationStats] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[List[DuplicateGroup], DeduplicationStats]:
        """
        Args:
            files: Records in discovery order
            params: Run configuration (algorithm, size window, worker count)
            stats: Existing stats object to extend, or None for a fresh one
            progress_callback: Reports hashing progress (stage, current, total)
        Returns:
            Tuple[List[DuplicateGroup], DeduplicationStats]
        """
        stats = stats or DeduplicationStats()
        total_start_time = time.time()

        unique = self.canonicalizer.canonicalize(files)
        stats.hardlinks_collapsed += len(files) - len(unique)

        unique = self._apply_size_window(unique, params)

        start_time = time.time()
        if params.algorithm == Algorithm.NAME:
            candidates = unique
        else:
            logger.info("Pre-grouping by size...")
            size_groups = self.grouper.group_by_size(unique)
            sizes = set(size_groups)
            # Keep discovery order rather than dict order
            candidates = [f for f in unique if f.size in sizes]
            stats.update_stage("size", len(size_groups), len(candidates), time.time() - start_time)

        if not candidates:
            logger.info("No duplicate candidates found.")
            stats.total_time = time.time() - total_start_time
            return [], stats

        start_time = time.time()
        hasher = ConcurrentHasher(self.cache, hasher=self.hasher, workers=params.worker_count, stats=stats)
        keyed = hasher.assign_keys(candidates, params.algorithm, progress_callback=progress_callback)
        stats.update_stage("hash", 0, len(keyed), time.time() - start_time)

        start_time = time.time()
        key_groups = self.grouper.group_by_content_key(keyed)
        groups = [DuplicateGroup(key=key, files=members) for key, members in key_groups.items()]
        groups.sort(key=lambda g: -g.size)
        stats.update_stage("group", len(groups), sum(g.duplicate_count for g in groups),
                           time.time() - start_time)

        stats.total_time = time.time() - total_start_time
        return groups, stats

    @staticmethod
    def _apply_size_window(files: List[FileRecord], params: DeduplicationParams) -> List[FileRecord]:
        kept = [
            f for f in files
            if f.size >= params.min_size_bytes
            and (params.max_size_bytes is None or f.size <= params.max_size_bytes)
        ]
        filtered = len(files) - len(kept)
        if filtered:
            logger.info(f"Filtered {filtered} files outside the size range")
        return kept
