"""
Tests for FileGrouperImpl.
"""
from linkdupes.core.grouper import FileGrouperImpl
from linkdupes.core.models import FileRecord


def rec(name, size, key=None):
    return FileRecord(f"/root/{name}", name, size, 0, content_key=key)


class TestGroupBySize:
    def test_singletons_are_dropped(self):
        files = [rec("a", 1), rec("b", 1), rec("c", 2)]
        groups = FileGrouperImpl().group_by_size(files)

        assert list(groups) == [1]
        assert [f.relative_path for f in groups[1]] == ["a", "b"]

    def test_empty_input(self):
        assert FileGrouperImpl().group_by_size([]) == {}

    def test_zero_size_files_are_grouped(self):
        groups = FileGrouperImpl().group_by_size([rec("a", 0), rec("b", 0)])
        assert len(groups[0]) == 2


class TestGroupByContentKey:
    def test_members_keep_enumeration_order(self):
        files = [rec("z", 5, "k"), rec("a", 5, "k"), rec("m", 5, "k")]
        groups = FileGrouperImpl().group_by_content_key(files)
        assert [f.relative_path for f in groups["k"]] == ["z", "a", "m"]

    def test_records_without_key_are_ignored(self):
        files = [rec("a", 5, None), rec("b", 5, None), rec("c", 5, "k")]
        assert FileGrouperImpl().group_by_content_key(files) == {}

    def test_integer_keys_from_size_mode(self):
        files = [rec("a", 7, 7), rec("b", 7, 7), rec("c", 9, 9)]
        groups = FileGrouperImpl().group_by_content_key(files)
        assert list(groups) == [7]
