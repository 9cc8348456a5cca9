"""
Shared fixtures for linkdupes tests.
Creates isolated temporary directories with controlled test files.
"""
import os
import sys
import tempfile
from pathlib import Path
from typing import Dict

import pytest

# Add src/ to sys.path so 'linkdupes' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from linkdupes.core.models import DeduplicationParams, KeepPolicy  # noqa: E402

BASE_TIME_NS = 1_700_000_000_000_000_000


def set_mtime(path: Path, offset_seconds: int) -> int:
    """Pins the modification time of path relative to BASE_TIME_NS and returns it."""
    mtime = BASE_TIME_NS + offset_seconds * 1_000_000_000
    os.utime(path, ns=(mtime, mtime))
    return mtime


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for deduplication scenarios:
    - a.txt / b.txt: same 100 bytes, a.txt older
    - c.txt: 100 different bytes (same size, different content)
    - unique.bin: only file of its size
    - sub/deep.txt: same content as a.txt, newest of the three
    """
    files = {}
    content_x = b"X" * 100
    content_y = b"Y" * 100

    files["a"] = temp_dir / "a.txt"
    files["a"].write_bytes(content_x)
    files["b"] = temp_dir / "b.txt"
    files["b"].write_bytes(content_x)
    files["c"] = temp_dir / "c.txt"
    files["c"].write_bytes(content_y)
    files["unique"] = temp_dir / "unique.bin"
    files["unique"].write_bytes(b"U" * 333)

    subdir = temp_dir / "sub"
    subdir.mkdir()
    files["deep"] = subdir / "deep.txt"
    files["deep"].write_bytes(content_x)

    set_mtime(files["a"], 0)
    set_mtime(files["b"], 10)
    set_mtime(files["c"], 20)
    set_mtime(files["unique"], 30)
    set_mtime(files["deep"], 40)
    return files


@pytest.fixture
def make_params(temp_dir):
    """Factory for DeduplicationParams rooted at temp_dir."""
    def _make(**overrides) -> DeduplicationParams:
        values = dict(root_dir=str(temp_dir), keep=KeepPolicy.OLDEST, workers=2)
        values.update(overrides)
        return DeduplicationParams(**values)
    return _make
