"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/sorter.py
Pure keep-policy logic for duplicate groups, with no dependencies outside core.
"""
from typing import List

from linkdupes.core.models import DuplicateGroup, FileRecord, KeepPolicy


class Sorter:
    """
    Orders files inside duplicate groups so the survivor comes first.
    Python's sort is stable, so equal keys keep their enumeration order:
    - LATEST / OLDEST: modification time, newest / oldest first
    - HIGHEST / DEEPEST: absolute path length, shortest / longest first
    - FIRST / LAST: enumeration order as is / reversed
    """

    @staticmethod
    def order_group(files: List[FileRecord], policy: KeepPolicy) -> List[FileRecord]:
        if policy == KeepPolicy.LATEST:
            return sorted(files, key=lambda f: -f.modified_time)
        if policy == KeepPolicy.OLDEST:
            return sorted(files, key=lambda f: f.modified_time)
        if policy == KeepPolicy.HIGHEST:
            return sorted(files, key=lambda f: len(f.full_path))
        if policy == KeepPolicy.DEEPEST:
            return sorted(files, key=lambda f: -len(f.full_path))
        if policy == KeepPolicy.LAST:
            return list(reversed(files))
        return list(files)

    @staticmethod
    def select_survivor(files: List[FileRecord], policy: KeepPolicy) -> FileRecord:
        if not files:
            raise ValueError("Cannot select a survivor from an empty group")
        return Sorter.order_group(files, policy)[0]

    @staticmethod
    def sort_files_inside_groups(groups: List[DuplicateGroup], policy: KeepPolicy) -> None:
        """Reorders every group in place; the survivor ends up at index 0."""
        if not groups:
            return
        for group in groups:
            group.files[:] = Sorter.order_group(group.files, policy)
