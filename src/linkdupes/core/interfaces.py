"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the deduplication system.
Components depend on these seams rather than on each other, so the hasher and
the resolver can be exercised with in-memory fakes instead of a real tree.

Key Components:
---------------
- HashAlgorithm: streaming digest factory (crc32, md5, sha*, xxh64).
- HashCacheStore: persistent (path, size, time, algorithm) -> hash mapping.
- FileScanner: enumerates candidate files under the root.
- Hasher: computes the content key of one file.
"""

from typing import Dict, List, Optional, Protocol, Tuple

from linkdupes.core.models import Algorithm, FileRecord

CacheKey = Tuple[str, int, int, Algorithm]


class Digest(Protocol):
    """Incremental digest object as returned by hashlib-style constructors."""
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for streaming hash algorithms.

    Allows plugging in different digests without affecting the hasher.
    """
    name: str

    def new(self) -> Digest:
        """Returns a fresh incremental digest."""
        ...


class HashCacheStore(Protocol):
    def load(self) -> Dict[CacheKey, str]: ...

    def get(self, relative_path: str, size: int, modified_time: int,
            algorithm: Algorithm) -> Optional[str]: ...

    def record(self, relative_path: str, size: int, modified_time: int,
               algorithm: Algorithm, digest: str) -> None: ...


class FileScanner(Protocol):
    def scan(self) -> List[FileRecord]:
        """
        Scan files from the configured directory.

        Returns:
            Regular files that passed the ignore rules, in enumeration order.
        """
        ...


class Hasher(Protocol):
    """Interface for hashing the whole content of a file."""
    def compute(self, path: str, algorithm: Algorithm) -> str: ...
