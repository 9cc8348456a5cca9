"""
linkdupes: duplicate file finder that resolves copies into links.

Core features:
- Content keys by name, size, CRC-32, MD5, SHA-256, SHA-512 or xxHash64
- Resumable hash cache (duplicates.hashes.csv) keyed by path, size, mtime and algorithm
- Pre-existing hardlinks recognised and never treated as duplicates
- Parallel hashing on a bounded thread pool
- Resolution by symlink, hardlink, Windows shortcut, delete or system trash, with dry-run
"""

# Get version
try:
    from importlib.metadata import version as _version, PackageNotFoundError
    __version__ = _version("linkdupes")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API, only what users should import directly
from linkdupes.commands import DeduplicationCommand, RunReport
from linkdupes.core import (
    Action, Algorithm, ConfigurationError, DeduplicationParams, DuplicateGroup,
    FileRecord, KeepPolicy, ResolutionOutcome)
from linkdupes.utils.convert_utils import ConvertUtils
from linkdupes.services import DuplicateService, FileService

__all__ = [
    "DeduplicationCommand",
    "RunReport",
    "DeduplicationParams",
    "Action",
    "Algorithm",
    "KeepPolicy",
    "ConfigurationError",
    "FileRecord",
    "DuplicateGroup",
    "ResolutionOutcome",
    "ConvertUtils",
    "DuplicateService",
    "FileService",
    "__version__",
]
