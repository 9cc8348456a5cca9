"""
Tests for digest computation and the cache-assisted concurrent hasher.
"""
import hashlib
import threading

import pytest

from linkdupes.core.hasher import ALGORITHMS, ConcurrentHasher, HasherImpl
from linkdupes.core.models import Algorithm, DeduplicationStats, FileRecord


class MemoryCache:
    """In-memory stand-in for HashCache."""

    def __init__(self, entries=None):
        self.entries = dict(entries or {})
        self.recorded = []
        self._lock = threading.Lock()

    def load(self):
        return self.entries

    def get(self, relative_path, size, modified_time, algorithm):
        return self.entries.get((relative_path, size, modified_time, algorithm))

    def record(self, relative_path, size, modified_time, algorithm, digest):
        with self._lock:
            self.entries[(relative_path, size, modified_time, algorithm)] = digest
            self.recorded.append(relative_path)


class CountingHasher(HasherImpl):
    def __init__(self):
        super().__init__()
        self.calls = []
        self._lock = threading.Lock()

    def compute(self, path, algorithm):
        with self._lock:
            self.calls.append(path)
        return super().compute(path, algorithm)


def make_record(path, name=None):
    st = path.stat()
    return FileRecord(str(path), name or path.name, st.st_size, st.st_mtime_ns)


class TestHasherImpl:
    @pytest.mark.parametrize("algorithm,data,expected", [
        (Algorithm.MD5, b"abc", "900150983cd24fb0d6963f7d28e17f72"),
        (Algorithm.CRC32, b"123456789", "cbf43926"),
        (Algorithm.SHA256, b"abc",
         "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"),
    ])
    def test_known_digests(self, temp_dir, algorithm, data, expected):
        path = temp_dir / "f.bin"
        path.write_bytes(data)
        assert HasherImpl().compute(str(path), algorithm) == expected

    def test_empty_file_crc32(self, temp_dir):
        path = temp_dir / "empty"
        path.write_bytes(b"")
        assert HasherImpl().compute(str(path), Algorithm.CRC32) == "00000000"

    @pytest.mark.parametrize("algorithm", [a for a in Algorithm if a.is_content_hash])
    def test_digest_length_matches_algorithm(self, temp_dir, algorithm):
        path = temp_dir / "f.bin"
        path.write_bytes(b"some content")
        digest = HasherImpl().compute(str(path), algorithm)

        assert len(digest) == algorithm.hex_length
        assert digest == digest.lower()

    def test_chunked_read_matches_single_read(self, temp_dir):
        """Streaming in tiny chunks must give the same digest as hashing at once."""
        data = bytes(range(256)) * 50
        path = temp_dir / "f.bin"
        path.write_bytes(data)

        assert HasherImpl(chunk_size=7).compute(str(path), Algorithm.SHA512) == \
            hashlib.sha512(data).hexdigest()

    def test_metadata_modes_are_rejected(self, temp_dir):
        path = temp_dir / "f.bin"
        path.write_bytes(b"x")
        with pytest.raises(ValueError):
            HasherImpl().compute(str(path), Algorithm.SIZE)

    def test_missing_file_raises_oserror(self, temp_dir):
        with pytest.raises(OSError):
            HasherImpl().compute(str(temp_dir / "missing"), Algorithm.MD5)

    def test_registry_covers_every_content_algorithm(self):
        assert set(ALGORITHMS) == {a for a in Algorithm if a.is_content_hash}


class TestConcurrentHasher:
    def test_cache_hit_skips_reading(self, test_files):
        record = make_record(test_files["a"])
        cache = MemoryCache({
            (record.relative_path, record.size, record.modified_time, Algorithm.MD5): "f" * 32
        })
        hasher = CountingHasher()
        stats = DeduplicationStats()

        keyed = ConcurrentHasher(cache, hasher=hasher, workers=2, stats=stats).assign_keys(
            [record], Algorithm.MD5)

        assert keyed[0].content_key == "f" * 32
        assert hasher.calls == []
        assert stats.cache_hits == 1
        assert cache.recorded == []

    def test_miss_is_hashed_and_recorded(self, test_files):
        records = [make_record(test_files["a"]), make_record(test_files["b"])]
        cache = MemoryCache()
        stats = DeduplicationStats()

        keyed = ConcurrentHasher(cache, workers=4, stats=stats).assign_keys(records, Algorithm.MD5)

        expected = hashlib.md5(b"X" * 100).hexdigest()
        assert [r.content_key for r in keyed] == [expected, expected]
        assert sorted(cache.recorded) == ["a.txt", "b.txt"]
        assert stats.files_hashed == 2
        assert stats.bytes_hashed == 200

    def test_unreadable_file_gets_no_key(self, test_files, temp_dir):
        good = make_record(test_files["a"])
        gone = FileRecord(str(temp_dir / "gone.txt"), "gone.txt", 100, 1)
        cache = MemoryCache()
        stats = DeduplicationStats()

        keyed = ConcurrentHasher(cache, workers=2, stats=stats).assign_keys([good, gone], Algorithm.MD5)

        assert keyed == [good]
        assert gone.content_key is None
        assert stats.hash_failures == 1
        assert cache.recorded == ["a.txt"]

    def test_cache_write_failure_keeps_digest(self, test_files):
        class ReadOnlyCache(MemoryCache):
            def record(self, *args):
                raise OSError("read-only")

        record = make_record(test_files["a"])
        keyed = ConcurrentHasher(ReadOnlyCache()).assign_keys([record], Algorithm.CRC32)
        assert len(keyed) == 1
        assert len(keyed[0].content_key) == 8

    def test_name_mode_uses_file_name_without_io(self, test_files):
        records = [make_record(test_files["a"]), make_record(test_files["deep"], "sub/deep.txt")]
        hasher = CountingHasher()
        cache = MemoryCache()

        keyed = ConcurrentHasher(cache, hasher=hasher).assign_keys(records, Algorithm.NAME)

        assert [r.content_key for r in keyed] == ["a.txt", "deep.txt"]
        assert hasher.calls == []
        assert cache.recorded == []

    def test_size_mode_uses_size(self, test_files):
        records = [make_record(test_files["a"]), make_record(test_files["unique"])]
        keyed = ConcurrentHasher(MemoryCache(), hasher=CountingHasher()).assign_keys(
            records, Algorithm.SIZE)
        assert [r.content_key for r in keyed] == [100, 333]

    def test_result_keeps_input_order(self, temp_dir):
        """Completion order of workers must not leak into the result."""
        paths = []
        for i, size in enumerate([500, 10, 300, 1, 50]):
            path = temp_dir / f"f{i}.bin"
            path.write_bytes(b"z" * size)
            paths.append(path)
        records = [make_record(p) for p in paths]

        keyed = ConcurrentHasher(MemoryCache(), workers=3).assign_keys(records, Algorithm.SHA256)
        assert [r.relative_path for r in keyed] == [p.name for p in paths]

    def test_progress_reported_per_hashed_file(self, test_files):
        records = [make_record(test_files["a"]), make_record(test_files["b"])]
        calls = []

        ConcurrentHasher(MemoryCache(), workers=2).assign_keys(
            records, Algorithm.MD5, progress_callback=lambda *args: calls.append(args))

        assert calls[-1] == ("hash", 2, 2)
        assert len(calls) == 2

    def test_unencodable_cache_row_keeps_digest(self, test_files):
        """An append the store cannot encode is a warning, not a failed run."""
        class StrictCache(MemoryCache):
            def record(self, *args):
                raise UnicodeEncodeError("utf-8", "\udcff", 0, 1, "surrogates not allowed")

        records = [make_record(test_files["a"]), make_record(test_files["b"])]
        stats = DeduplicationStats()
        keyed = ConcurrentHasher(StrictCache(), workers=2, stats=stats).assign_keys(records, Algorithm.MD5)

        assert len(keyed) == 2
        assert stats.hash_failures == 0
