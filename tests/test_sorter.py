"""
Tests for keep-policy ordering.
The survivor is always the first element after ordering; ties keep enumeration order.
"""
import pytest

from linkdupes.core.models import DuplicateGroup, FileRecord, KeepPolicy
from linkdupes.core.sorter import Sorter


def rec(path, mtime):
    return FileRecord(path, path.lstrip("/"), 10, mtime)


@pytest.fixture
def group_files():
    return [
        rec("/r/bb/one.txt", 200),
        rec("/r/a.txt", 100),
        rec("/r/ccc/ddd/three.txt", 300),
    ]


class TestOrderGroup:
    @pytest.mark.parametrize("policy,expected", [
        (KeepPolicy.LATEST, "/r/ccc/ddd/three.txt"),
        (KeepPolicy.OLDEST, "/r/a.txt"),
        (KeepPolicy.HIGHEST, "/r/a.txt"),
        (KeepPolicy.DEEPEST, "/r/ccc/ddd/three.txt"),
        (KeepPolicy.FIRST, "/r/bb/one.txt"),
        (KeepPolicy.LAST, "/r/ccc/ddd/three.txt"),
    ])
    def test_survivor_per_policy(self, group_files, policy, expected):
        assert Sorter.select_survivor(group_files, policy).full_path == expected

    def test_equal_mtimes_keep_enumeration_order(self):
        files = [rec("/r/x", 5), rec("/r/y", 5), rec("/r/z", 5)]
        assert Sorter.select_survivor(files, KeepPolicy.LATEST).full_path == "/r/x"
        assert Sorter.select_survivor(files, KeepPolicy.OLDEST).full_path == "/r/x"

    def test_equal_path_lengths_keep_enumeration_order(self):
        files = [rec("/r/b1", 1), rec("/r/a2", 2)]
        assert Sorter.select_survivor(files, KeepPolicy.HIGHEST).full_path == "/r/b1"
        assert Sorter.select_survivor(files, KeepPolicy.DEEPEST).full_path == "/r/b1"

    def test_input_list_is_not_modified(self, group_files):
        before = list(group_files)
        Sorter.order_group(group_files, KeepPolicy.LAST)
        assert group_files == before

    def test_empty_group_has_no_survivor(self):
        with pytest.raises(ValueError):
            Sorter.select_survivor([], KeepPolicy.FIRST)


class TestSortFilesInsideGroups:
    def test_reorders_in_place(self, group_files):
        group = DuplicateGroup(key="k", files=group_files)
        Sorter.sort_files_inside_groups([group], KeepPolicy.OLDEST)
        assert [f.modified_time for f in group.files] == [100, 200, 300]

    def test_no_groups_is_noop(self):
        Sorter.sort_files_inside_groups([], KeepPolicy.LATEST)
