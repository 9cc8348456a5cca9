"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements file discovery under the scan root.
Features:
- Walks one directory level, or the whole tree when recursive
- Visits entries in sorted name order so enumeration order is reproducible
- Skips symbolic links / reparse points when "symlink" is in the ignore list
- Skips files whose name ends with any ignored suffix
- Collects hash caches left in subdirectories by earlier runs (nested_cache_files)
- Returns a List of FileRecord in enumeration order
"""

import logging
import os
import stat
import time
from typing import List, Optional

from linkdupes.core.interfaces import FileScanner
from linkdupes.core.models import CACHE_FILE_NAME, FileRecord

logger = logging.getLogger(__name__)

FILE_ATTRIBUTE_REPARSE_POINT = 0x400


class FileScannerImpl(FileScanner):
    """
    Scans a directory and filters entries by the ignore rules.

    Attributes:
        root_dir: Root directory to scan
        recursive: Descend into subdirectories
        ignore_symlinks: Drop symlink / reparse-point entries
        ignore_suffixes: File name suffixes to drop (plain suffix match, not glob)
        nested_cache_files: Hash caches found below the root by the last scan
    """

    def __init__(
        self,
        root_dir: str,
        recursive: bool = False,
        ignore_symlinks: bool = True,
        ignore_suffixes: Optional[List[str]] = None,
    ):
        self.root_dir = os.path.abspath(root_dir)
        self.recursive = recursive
        self.ignore_symlinks = ignore_symlinks
        self.ignore_suffixes = tuple(ignore_suffixes) if ignore_suffixes else ()
        self.nested_cache_files: List[str] = []

    def scan(self) -> List[FileRecord]:
        """
        Returns the regular files under the root that pass the ignore rules.
        Raises RuntimeError only when the root itself cannot be listed.
        """
        logger.debug(f"Root directory: {self.root_dir}")
        logger.debug(f"Filters: recursive={self.recursive}, ignore_symlinks={self.ignore_symlinks}, "
                     f"suffixes={list(self.ignore_suffixes)}")

        if not os.path.exists(self.root_dir):
            error_msg = f"Directory does not exist: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        if not os.path.isdir(self.root_dir):
            error_msg = f"Not a directory: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        try:
            with os.scandir(self.root_dir):
                pass
        except OSError as e:
            error_msg = f"Cannot list directory {self.root_dir}: {e}"
            logger.error(error_msg)
            raise RuntimeError(error_msg) from e

        found_files = []
        folder_count = 0
        self.nested_cache_files = []
        start_time = time.time()

        for root, dirs, files in os.walk(self.root_dir, onerror=self._on_walk_error):
            folder_count += 1
            if self.recursive:
                dirs.sort()
            else:
                dirs[:] = []

            for filename in sorted(files):
                if filename == CACHE_FILE_NAME and root != self.root_dir:
                    self.nested_cache_files.append(os.path.join(root, filename))
                    continue
                record = self._process_file(os.path.join(root, filename))
                if record:
                    found_files.append(record)

        elapsed_time = time.time() - start_time
        logger.debug(f"Total scan time: {elapsed_time:.2f} seconds")
        logger.info(f"Found {len(found_files)} total files in {folder_count} folders.")
        return found_files

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        logger.warning(f"Skipping unreadable directory {error.filename}: {error.strerror}")

    @staticmethod
    def is_link_like(path: str) -> bool:
        """True for symbolic links and, on Windows, any reparse point."""
        try:
            st = os.lstat(path)
        except OSError:
            return False
        if stat.S_ISLNK(st.st_mode):
            return True
        attributes = getattr(st, "st_file_attributes", 0)
        return bool(attributes & FILE_ATTRIBUTE_REPARSE_POINT)

    def _process_file(self, path: str) -> Optional[FileRecord]:
        """
        Builds a FileRecord for one directory entry, or None if it is ignored,
        not a regular file, or cannot be stat'ed.
        """
        name = os.path.basename(path)
        if self.ignore_suffixes and name.endswith(self.ignore_suffixes):
            logger.debug(f"Skipping {path} (ignored suffix)")
            return None

        if self.ignore_symlinks and self.is_link_like(path):
            logger.debug(f"Skipping symbolic link: {path}")
            return None

        try:
            st = os.stat(path)
        except OSError as e:
            logger.debug(f"Could not stat {path}: {e}")
            return None

        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return None

        relative_path = os.path.relpath(path, self.root_dir).replace(os.sep, "/")
        return FileRecord(
            full_path=path,
            relative_path=relative_path,
            size=st.st_size,
            modified_time=st.st_mtime_ns,
        )
