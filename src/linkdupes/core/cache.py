"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/cache.py
Persistent hash cache stored as a semicolon-delimited text file in the scan root.

FORMAT
------
    path;size;time;type;hash
    photos/a.jpg;1048576;1712345678123456789;md5;9e107d9d372bb6826bd81d3542a419d6

`path` is relative to the root with forward slashes, `time` is st_mtime_ns.
Rows are only ever appended. A changed file produces a new key, so its old row
simply stops matching and is never rewritten or removed.

A store found in a subdirectory by an earlier run on that subdirectory is
merged at load time with its paths prefixed by the subdirectory; new rows are
only ever appended to the root store.
"""

import logging
import os
import re
import threading
from typing import Dict, Optional, Sequence

from linkdupes.core.interfaces import CacheKey, HashCacheStore
from linkdupes.core.models import Algorithm

logger = logging.getLogger(__name__)

HEADER = "path;size;time;type;hash"
SEPARATOR = ";"
FIELD_COUNT = 5

_DECIMAL = re.compile(r"^[0-9]+$")
_HEX_PATTERNS = {
    algorithm: re.compile(rf"^[0-9a-fA-F]{{{algorithm.hex_length}}}$")
    for algorithm in Algorithm
    if algorithm.hex_length is not None
}


class HashCache(HashCacheStore):
    """
    In-memory view of the cache file plus a serialized appender.

    The mapping is read-only after load() apart from record(), which only adds
    keys that were absent. The lock guards the file append, since rows written
    concurrently by several hashing workers would otherwise interleave.
    """

    def __init__(self, cache_path: str, root_dir: str):
        self.cache_path = cache_path
        self.root_dir = root_dir
        self.entries: Dict[CacheKey, str] = {}
        self.rejected_rows = 0
        self._lock = threading.Lock()
        self._prepared = False

    def load(self) -> Dict[CacheKey, str]:
        """
        Reads every row of the root store, keeping the ones that pass
        validate_row(). Invalid rows are counted, never fatal.
        """
        self.entries = {}
        self.rejected_rows = 0

        if not os.path.isfile(self.cache_path):
            logger.debug(f"No hash cache at {self.cache_path}")
            return self.entries

        self._read_store(self.cache_path, "")
        if self.rejected_rows:
            logger.warning(f"Ignored {self.rejected_rows} corrupt/invalid lines in cache.")
        logger.debug(f"Loaded {len(self.entries)} cached hashes from {self.cache_path}")
        return self.entries

    def merge(self, store_path: str) -> int:
        """
        Adds the rows of a store left by an earlier run on a subdirectory.
        Its paths are relative to that subdirectory, so they are prefixed with
        the subdirectory's path under the root before validation. Rows already
        known from the root store win. Returns the number of new entries.
        """
        prefix = os.path.relpath(os.path.dirname(os.path.abspath(store_path)),
                                 os.path.abspath(self.root_dir)).replace(os.sep, "/")
        before_rows, before_rejected = len(self.entries), self.rejected_rows
        try:
            self._read_store(store_path, "" if prefix == "." else prefix)
        except OSError as e:
            logger.warning(f"Could not read nested hash cache {store_path}: {e}")
            return 0

        rejected = self.rejected_rows - before_rejected
        if rejected:
            logger.warning(f"Ignored {rejected} corrupt/invalid lines in {store_path}.")
        return len(self.entries) - before_rows

    def _read_store(self, store_path: str, prefix: str) -> None:
        # surrogateescape keeps non-UTF-8 file names byte-exact across runs
        with open(store_path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            for line in f:
                line = line.rstrip("\r\n")
                if not line or line == HEADER:
                    continue
                fields = line.split(SEPARATOR)
                if prefix and fields[0]:
                    fields[0] = f"{prefix}/{fields[0]}"
                if not self.validate_row(fields):
                    self.rejected_rows += 1
                    continue
                path, size, mtime, algo, digest = fields
                key = (path, int(size), int(mtime), Algorithm(algo))
                self.entries.setdefault(key, digest.lower())

    def validate_row(self, fields: Sequence[str]) -> bool:
        """
        A row is usable only if the file it names still exists under the root,
        size and time are non-negative integers, the algorithm is known and the
        hash has the exact hex length of that algorithm.
        """
        if len(fields) != FIELD_COUNT:
            return False
        path, size, mtime, algo, digest = fields

        if not path or not os.path.isfile(os.path.join(self.root_dir, path)):
            return False
        if not _DECIMAL.match(size) or not _DECIMAL.match(mtime):
            return False
        try:
            algorithm = Algorithm(algo)
        except ValueError:
            return False

        pattern = _HEX_PATTERNS.get(algorithm)
        if pattern is not None and not pattern.match(digest):
            return False
        return True

    def get(self, relative_path: str, size: int, modified_time: int,
            algorithm: Algorithm) -> Optional[str]:
        return self.entries.get((relative_path, size, modified_time, algorithm))

    def record(self, relative_path: str, size: int, modified_time: int,
               algorithm: Algorithm, digest: str) -> None:
        """
        Appends one row and flushes it before returning.
        Raises OSError if the store cannot be written; the in-memory entry is
        kept either way.
        """
        key = (relative_path, size, modified_time, algorithm)
        line = SEPARATOR.join([relative_path, str(size), str(modified_time), algorithm.value, digest])

        with self._lock:
            self.entries.setdefault(key, digest)
            self._prepare()
            with open(self.cache_path, "a", encoding="utf-8", errors="surrogateescape", newline="\n") as f:
                f.write(line + "\n")
                f.flush()

    def _prepare(self) -> None:
        """
        Writes the header into a new store and terminates a row left without a
        newline by an interrupted run, so the next row starts on its own line.
        Caller holds the lock.
        """
        if self._prepared:
            return
        if not os.path.exists(self.cache_path) or os.path.getsize(self.cache_path) == 0:
            with open(self.cache_path, "w", encoding="utf-8", newline="\n") as f:
                f.write(HEADER + "\n")
        else:
            with open(self.cache_path, "rb+") as f:
                f.seek(-1, os.SEEK_END)
                if f.read(1) != b"\n":
                    f.seek(0, os.SEEK_END)
                    f.write(b"\n")
        self._prepared = True

