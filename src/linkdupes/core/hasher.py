"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements content keys for files: streaming digests plus a bounded worker pool
that consults the persistent hash cache before reading anything.

The ConcurrentHasher is the only concurrent stage of a run. Each task owns one
file, hence one cache key; the cache serializes its own file appends.
"""

import hashlib
import logging
import zlib
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional, Tuple

import xxhash

from linkdupes.core.interfaces import HashAlgorithm, HashCacheStore, Hasher
from linkdupes.core.models import Algorithm, DeduplicationStats, FileRecord
from linkdupes.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1024 * 1024
LARGE_FILE_NOTICE = 100 * 1024 * 1024


class Crc32Digest:
    """
    CRC-32 (reflected polynomial 0xEDB88320, init and final xor 0xFFFFFFFF)
    with the incremental hashlib interface. zlib.crc32 implements exactly this.
    """
    def __init__(self):
        self._value = 0

    def update(self, data: bytes) -> None:
        self._value = zlib.crc32(data, self._value)

    def hexdigest(self) -> str:
        return f"{self._value & 0xFFFFFFFF:08x}"


class HashlibAlgorithmImpl(HashAlgorithm):
    def __init__(self, name: str):
        self.name = name

    def new(self):
        return hashlib.new(self.name)


class Crc32AlgorithmImpl(HashAlgorithm):
    name = "crc32"

    def new(self):
        return Crc32Digest()


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    name = "xxh64"

    def new(self):
        return xxhash.xxh64()


ALGORITHMS: Dict[Algorithm, HashAlgorithm] = {
    Algorithm.CRC32: Crc32AlgorithmImpl(),
    Algorithm.MD5: HashlibAlgorithmImpl("md5"),
    Algorithm.SHA256: HashlibAlgorithmImpl("sha256"),
    Algorithm.SHA512: HashlibAlgorithmImpl("sha512"),
    Algorithm.XXH64: XXHashAlgorithmImpl(),
}


class HasherImpl(Hasher):
    """
    Computes the full-content digest of one file by streaming it in chunks.
    Read errors propagate as OSError.
    """

    def __init__(self, chunk_size: int = READ_CHUNK_SIZE):
        self.chunk_size = chunk_size

    def compute(self, path: str, algorithm: Algorithm) -> str:
        implementation = ALGORITHMS.get(algorithm)
        if implementation is None:
            raise ValueError(f"Algorithm '{algorithm.value}' does not hash content")

        digest = implementation.new()
        with open(path, "rb") as f:
            while True:
                chunk = f.read(self.chunk_size)
                if not chunk:
                    break
                digest.update(chunk)
        return digest.hexdigest()


class ConcurrentHasher:
    """
    Assigns a content key to every candidate record.

    - NAME / SIZE: metadata only, no I/O, no cache interaction.
    - Content algorithms: cache hit reuses the stored digest; a miss is hashed
      on the worker pool and recorded in the cache as soon as it completes.
    Records whose file cannot be read get no key and are left out of the result.
    """

    def __init__(
        self,
        cache: HashCacheStore,
        hasher: Optional[Hasher] = None,
        workers: int = 1,
        stats: Optional[DeduplicationStats] = None,
    ):
        self.cache = cache
        self.hasher = hasher or HasherImpl()
        self.workers = max(1, workers)
        self.stats = stats or DeduplicationStats()

    def assign_keys(
        self,
        records: List[FileRecord],
        algorithm: Algorithm,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[FileRecord]:
        """Returns the records that obtained a key, in input order."""
        if algorithm == Algorithm.NAME:
            for record in records:
                record.content_key = record.name
            return list(records)

        if algorithm == Algorithm.SIZE:
            for record in records:
                record.content_key = record.size
            return list(records)

        to_hash = []
        for record in records:
            cached = self.cache.get(record.relative_path, record.size, record.modified_time, algorithm)
            if cached is not None:
                record.content_key = cached
                self.stats.cache_hits += 1
            else:
                to_hash.append(record)

        total_bytes = sum(r.size for r in to_hash)
        logger.info(f"Cache: {self.stats.cache_hits} hits, {len(to_hash)} files "
                    f"({ConvertUtils.bytes_to_human(total_bytes)}) need hashing")

        # Smallest first so early progress reflects many completed files
        to_hash.sort(key=lambda r: r.size)
        processed = 0

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            future_to_record = {
                executor.submit(self._hash_one, record, algorithm): record
                for record in to_hash
            }
            for future in as_completed(future_to_record):
                record = future_to_record[future]
                digest, error = future.result()
                processed += 1
                if digest is None:
                    self.stats.hash_failures += 1
                    logger.warning(f"  Failed to hash {record.relative_path}: {error}")
                else:
                    record.content_key = digest
                    self.stats.files_hashed += 1
                    self.stats.bytes_hashed += record.size
                if progress_callback:
                    progress_callback("hash", processed, len(to_hash))

        return [r for r in records if r.content_key is not None]

    def _hash_one(self, record: FileRecord, algorithm: Algorithm) -> Tuple[Optional[str], Optional[str]]:
        """
        Worker task: hash, then persist. Returns (digest, None) or (None, reason).
        A failed cache append keeps the digest for this run.
        """
        if record.size > LARGE_FILE_NOTICE:
            logger.debug(f"  Large: {record.relative_path} ({ConvertUtils.bytes_to_human(record.size)})")
        try:
            digest = self.hasher.compute(record.full_path, algorithm)
        except OSError as e:
            return None, str(e)

        try:
            self.cache.record(record.relative_path, record.size, record.modified_time, algorithm, digest)
        except (OSError, ValueError) as e:
            logger.warning(f"  Could not append {record.relative_path} to hash cache: {e}")
        return digest, None
