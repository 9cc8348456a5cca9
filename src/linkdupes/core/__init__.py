"""
Core deduplication engine: discovery, hash cache, hashing, grouping and keep policy.

This package contains the foundation of linkdupes:
- FileScannerImpl: directory traversal with symlink/suffix ignore rules
- HardlinkCanonicalizer: one record per physical file
- HashCache: validated, append-only (path, size, mtime, algorithm) -> hash store
- ConcurrentHasher + HasherImpl: cache-assisted hashing on a bounded thread pool
- FileGrouperImpl: size and content-key grouping with singleton filtering
- Sorter: keep-policy ordering inside groups
- DeduplicatorImpl: pipeline wiring the pieces together
- Models: FileRecord, DuplicateGroup and configuration objects

No filesystem mutation happens here; resolution lives in linkdupes.services.
"""

from .scanner import FileScannerImpl
from .canonicalizer import HardlinkCanonicalizer, get_physical_id
from .cache import HashCache
from .grouper import FileGrouperImpl
from .hasher import ConcurrentHasher, HasherImpl, ALGORITHMS
from .deduplicator import DeduplicatorImpl
from .sorter import Sorter
from .models import (
    Action, Algorithm, ConfigurationError, DeduplicationParams, DeduplicationStats,
    DuplicateGroup, FileRecord, KeepPolicy, OutcomeStatus, ResolutionOutcome)

__all__ = [
    "FileScannerImpl",
    "HardlinkCanonicalizer",
    "get_physical_id",
    "HashCache",
    "FileGrouperImpl",
    "ConcurrentHasher",
    "HasherImpl",
    "ALGORITHMS",
    "DeduplicatorImpl",
    "Sorter",
    "Action",
    "Algorithm",
    "ConfigurationError",
    "DeduplicationParams",
    "DeduplicationStats",
    "DuplicateGroup",
    "FileRecord",
    "KeepPolicy",
    "OutcomeStatus",
    "ResolutionOutcome",
]
