"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and domain logic for duplicate detection and resolution.
"""

import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union

CACHE_FILE_NAME = "duplicates.hashes.csv"
LOG_FILE_NAME = "duplicates.log"
SYMLINK_TOKEN = "symlink"
DEFAULT_IGNORE = "symlink,.lnk,.url"

PhysicalId = Tuple[int, int]
ContentKey = Union[str, int]


class ConfigurationError(ValueError):
    """Raised when settings cannot be honoured on this host."""


# =============================
# Enums
# =============================

class Algorithm(Enum):
    """
    Equality criterion used to group files.
    NAME and SIZE never read file content; the rest stream the file through a digest.
    """
    NAME = "name"
    SIZE = "size"
    CRC32 = "crc32"
    MD5 = "md5"
    SHA256 = "sha256"
    SHA512 = "sha512"
    XXH64 = "xxh64"

    @property
    def is_content_hash(self) -> bool:
        return self not in (Algorithm.NAME, Algorithm.SIZE)

    @property
    def hex_length(self) -> Optional[int]:
        """Length of the hex digest, None for the metadata-only modes."""
        mapping = {
            Algorithm.CRC32: 8,
            Algorithm.XXH64: 16,
            Algorithm.MD5: 32,
            Algorithm.SHA256: 64,
            Algorithm.SHA512: 128,
        }
        return mapping.get(self)

    def __repr__(self) -> str:
        return self.value


class KeepPolicy(Enum):
    """Which member of a duplicate group survives."""
    LATEST = "latest"
    OLDEST = "oldest"
    HIGHEST = "highest"
    DEEPEST = "deepest"
    FIRST = "first"
    LAST = "last"


class Action(Enum):
    """What happens to every non-kept member of a group."""
    DELETE = "delete"
    SYMLINK = "symlink"
    HARDLINK = "hardlink"
    SHORTCUT = "lnk"
    TRASH = "trash"

    @property
    def past_tense(self) -> str:
        mapping = {
            Action.DELETE: "Deleted",
            Action.SYMLINK: "Symlinked",
            Action.HARDLINK: "Hardlinked",
            Action.SHORTCUT: "Shortcut created for",
            Action.TRASH: "Trashed",
        }
        return mapping[self]

    def __repr__(self) -> str:
        return self.value


class OutcomeStatus(str, Enum):
    DONE = "done"
    DRY_RUN = "dry-run"
    FAILED = "failed"


# ======================
#  Core Data Models
# ======================

@dataclass
class FileRecord:
    """
    One regular file under the scan root.
    `content_key` stays None until the hasher resolves it.
    """
    full_path: str
    relative_path: str
    size: int
    modified_time: int  # st_mtime_ns
    physical_id: Optional[PhysicalId] = None
    content_key: Optional[ContentKey] = None

    @property
    def name(self) -> str:
        return os.path.basename(self.full_path)

    def __repr__(self):
        return f"<FileRecord path={self.relative_path}, size={self.size}>"


@dataclass
class DuplicateGroup:
    """
    Files sharing a content key. Order of `files` is enumeration order
    until a keep policy is applied.
    """
    key: ContentKey
    files: List[FileRecord]

    @property
    def duplicate_count(self) -> int:
        return len(self.files)

    @property
    def size(self) -> int:
        return self.files[0].size if self.files else 0

    def is_duplicate(self) -> bool:
        """True if this group contains at least two files."""
        return self.duplicate_count >= 2

    def __repr__(self):
        return f"<DuplicateGroup key={self.key}, count={len(self.files)}>"


@dataclass
class ResolutionOutcome:
    """Per-file event emitted by the resolution step."""
    path: str
    keep_path: str
    action: Action
    status: OutcomeStatus
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status != OutcomeStatus.FAILED


class DeduplicationStats:
    """
    Statistics collected during a run.
    Stage entries accumulate groups, files and elapsed time.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.files_discovered: int = 0
        self.hardlinks_collapsed: int = 0
        self.cache_hits: int = 0
        self.files_hashed: int = 0
        self.bytes_hashed: int = 0
        self.hash_failures: int = 0
        self.cache_rows_loaded: int = 0
        self.cache_rows_rejected: int = 0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when stats are updated."""
        self._listeners.append(listener)

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

        for listener in self._listeners:
            listener(stage_name, self.stage_stats[stage_name])

    def print_summary(self) -> str:
        labels = {
            "size": "Size Groups",
            "hash": "Hashed Candidates",
            "group": "Duplicate Groups",
            "resolve": "Resolved Groups",
        }

        lines = [
            "Deduplication Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s",
            f"Cache: {self.cache_hits} hits, {self.files_hashed} hashed, {self.hash_failures} failed",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            label = labels.get(stage.lower(), stage.title())
            lines.append(f"{label}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


def shortcuts_supported() -> bool:
    """Shortcut files are only produced on Windows hosts."""
    return sys.platform == "win32"


"""
DTO for deduplication parameters with built-in validation.
Interface-agnostic: used by the CLI and by library callers.
"""
from linkdupes.utils.convert_utils import ConvertUtils

@dataclass
class DeduplicationParams:
    """Parameters for one deduplication run with validation."""
    root_dir: str
    keep: KeepPolicy
    action: Action = Action.SYMLINK
    algorithm: Algorithm = Algorithm.MD5
    recursive: bool = False
    dry_run: bool = False
    ignore: List[str] = field(default_factory=lambda: DEFAULT_IGNORE.split(","))
    workers: Optional[int] = None
    min_size_bytes: int = 0
    max_size_bytes: Optional[int] = None

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        if self.max_size_bytes is not None and self.max_size_bytes < self.min_size_bytes:
            raise ValueError("Maximum size cannot be less than minimum size")

        if self.workers is not None and self.workers < 1:
            raise ValueError("Worker count must be at least 1")

        if self.action == Action.SHORTCUT and not shortcuts_supported():
            raise ConfigurationError(
                f"Shortcut mode '{Action.SHORTCUT.value}' is not supported on {sys.platform}"
            )

        normalized = []
        for token in self.ignore:
            token = token.strip()
            if token and token not in normalized:
                normalized.append(token)
        for artifact in (CACHE_FILE_NAME, LOG_FILE_NAME):
            if artifact not in normalized:
                normalized.append(artifact)
        self.ignore = normalized

    @property
    def ignore_symlinks(self) -> bool:
        return SYMLINK_TOKEN in self.ignore

    @property
    def ignore_suffixes(self) -> List[str]:
        return [token for token in self.ignore if token != SYMLINK_TOKEN]

    @property
    def worker_count(self) -> int:
        return self.workers or os.cpu_count() or 1

    @property
    def cache_path(self) -> str:
        return os.path.join(os.path.abspath(self.root_dir), CACHE_FILE_NAME)

    @property
    def log_path(self) -> str:
        return os.path.join(os.path.abspath(self.root_dir), LOG_FILE_NAME)

    @staticmethod
    def from_cli_values(
            root_dir: str,
            keep: str,
            action: str = Action.SYMLINK.value,
            algorithm: str = Algorithm.MD5.value,
            recursive: bool = False,
            dry_run: bool = False,
            ignore_str: str = DEFAULT_IGNORE,
            workers: Optional[int] = None,
            min_size_str: str = "0",
            max_size_str: Optional[str] = None,
    ) -> 'DeduplicationParams':
        """
        Factory method to create params from raw command-line strings.
        Unknown enum names raise ValueError.
        """
        max_size = None
        if max_size_str is not None and max_size_str.strip() != "-1":
            max_size = ConvertUtils.human_to_bytes(max_size_str)

        return DeduplicationParams(
            root_dir=root_dir,
            keep=KeepPolicy(keep),
            action=Action(action),
            algorithm=Algorithm(algorithm),
            recursive=recursive,
            dry_run=dry_run,
            ignore=ignore_str.split(",") if ignore_str else [],
            workers=workers,
            min_size_bytes=ConvertUtils.human_to_bytes(min_size_str),
            max_size_bytes=max_size,
        )
