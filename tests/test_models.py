"""
Tests for run parameters and enum helpers.
"""
import os
import sys

import pytest

from linkdupes.core.models import (
    Action, Algorithm, ConfigurationError, DeduplicationParams, DeduplicationStats,
    DuplicateGroup, FileRecord, KeepPolicy)


class TestDeduplicationParams:
    def test_defaults(self, temp_dir):
        params = DeduplicationParams(root_dir=str(temp_dir), keep=KeepPolicy.FIRST)

        assert params.action == Action.SYMLINK
        assert params.algorithm == Algorithm.MD5
        assert params.ignore_symlinks is True
        assert params.ignore_suffixes == [".lnk", ".url", "duplicates.hashes.csv", "duplicates.log"]
        assert params.worker_count >= 1

    def test_artifacts_always_ignored(self, temp_dir):
        params = DeduplicationParams(root_dir=str(temp_dir), keep=KeepPolicy.FIRST, ignore=[])
        assert params.ignore == ["duplicates.hashes.csv", "duplicates.log"]
        assert params.ignore_symlinks is False

    def test_ignore_tokens_trimmed_and_deduplicated(self, temp_dir):
        params = DeduplicationParams(root_dir=str(temp_dir), keep=KeepPolicy.FIRST,
                                     ignore=[" .tmp", ".tmp ", "", "symlink"])
        assert params.ignore[:2] == [".tmp", "symlink"]

    def test_artifact_paths_are_in_root(self, temp_dir):
        params = DeduplicationParams(root_dir=str(temp_dir), keep=KeepPolicy.FIRST)
        assert params.cache_path == os.path.join(str(temp_dir), "duplicates.hashes.csv")
        assert params.log_path == os.path.join(str(temp_dir), "duplicates.log")

    @pytest.mark.parametrize("overrides", [
        {"root_dir": ""},
        {"min_size_bytes": -1},
        {"min_size_bytes": 10, "max_size_bytes": 5},
        {"workers": 0},
    ])
    def test_invalid_values_rejected(self, temp_dir, overrides):
        values = dict(root_dir=str(temp_dir), keep=KeepPolicy.FIRST)
        values.update(overrides)
        with pytest.raises(ValueError):
            DeduplicationParams(**values)

    @pytest.mark.skipif(sys.platform == "win32", reason="shortcuts are supported on Windows")
    def test_shortcut_rejected_off_windows(self, temp_dir):
        with pytest.raises(ConfigurationError):
            DeduplicationParams(root_dir=str(temp_dir), keep=KeepPolicy.FIRST, action=Action.SHORTCUT)


class TestFromCliValues:
    def test_converts_strings(self, temp_dir):
        params = DeduplicationParams.from_cli_values(
            str(temp_dir), "latest", "delete", "sha512", recursive=True,
            ignore_str="symlink,.bak", workers=4, min_size_str="2K", max_size_str="1MB")

        assert params.keep == KeepPolicy.LATEST
        assert params.action == Action.DELETE
        assert params.algorithm == Algorithm.SHA512
        assert params.ignore_suffixes[0] == ".bak"
        assert params.min_size_bytes == 2048
        assert params.max_size_bytes == 1024 * 1024

    def test_minus_one_means_unlimited(self, temp_dir):
        params = DeduplicationParams.from_cli_values(str(temp_dir), "first", max_size_str="-1")
        assert params.max_size_bytes is None

    def test_unknown_policy(self, temp_dir):
        with pytest.raises(ValueError):
            DeduplicationParams.from_cli_values(str(temp_dir), "newest")


class TestEnums:
    def test_content_hash_flags(self):
        assert not Algorithm.NAME.is_content_hash
        assert not Algorithm.SIZE.is_content_hash
        assert Algorithm.CRC32.is_content_hash

    def test_hex_lengths(self):
        assert Algorithm.CRC32.hex_length == 8
        assert Algorithm.MD5.hex_length == 32
        assert Algorithm.SHA512.hex_length == 128
        assert Algorithm.NAME.hex_length is None

    def test_shortcut_value_is_lnk(self):
        assert Action("lnk") is Action.SHORTCUT


class TestGroupAndStats:
    def test_group_size_and_count(self):
        files = [FileRecord("/r/a", "a", 7, 0), FileRecord("/r/b", "b", 7, 0)]
        group = DuplicateGroup(key="k", files=files)
        assert group.size == 7
        assert group.duplicate_count == 2
        assert group.is_duplicate()

    def test_stage_updates_accumulate_and_notify(self):
        stats = DeduplicationStats()
        seen = []
        stats.add_listener(lambda stage, data: seen.append(stage))

        stats.update_stage("hash", 0, 3, 0.5)
        stats.update_stage("hash", 0, 2, 0.5)

        assert stats.stage_stats["hash"] == {"groups": 0, "files": 5, "time": 1.0}
        assert seen == ["hash", "hash"]
        assert "Hashed Candidates: 0 / 5" in stats.print_summary()
