"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Implements file grouping strategies over FileRecord lists.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, List

from linkdupes.core.models import ContentKey, FileRecord


class FileGrouperImpl:
    """
    Partitions records by a key and keeps only groups of two or more.
    Members keep their enumeration order inside each group.
    """

    def group_by_size(self, files: List[FileRecord]) -> Dict[int, List[FileRecord]]:
        """Groups files by their size (pre-filter before hashing)."""
        return self._group_by(files, lambda f: f.size)

    def group_by_content_key(self, files: List[FileRecord]) -> Dict[ContentKey, List[FileRecord]]:
        """Groups files by their resolved content key; files without one are left out."""
        return self._group_by(files, lambda f: f.content_key)

    @staticmethod
    def _group_by(files: List[FileRecord], key_func: Callable[[FileRecord], Any]) -> Dict[Any, List[FileRecord]]:
        """
        Helper method to group files by any computed key.
        Args:
            files: List of files to group
            key_func: Function that computes a hashable key from a FileRecord
        Returns:
            Dict[key, List[FileRecord]]
        """
        groups = defaultdict(list)
        for file in files:
            key = key_func(file)
            if key is not None:
                groups[key].append(file)

        return {key: group for key, group in groups.items() if len(group) >= 2}
