"""
Shared fixtures for dupsweep tests.
Creates isolated temporary directories with controlled duplicate trees.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so 'dupsweep' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from dupsweep.core.models import FileRecord


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files directly inside temp_dir:
    - 3 identical 1KB files ('A')
    - 2 identical 2KB files ('B')
    - 1 file of 1KB with different content (same size as the 'A' group)
    - 1 file with a unique size
    - 1 empty file
    - a subdirectory with another copy of the 'A' content
    """
    files = {}

    content_a = b"A" * 1024
    for name in ("dup1_a.txt", "dup1_b.txt", "dup1_c.txt"):
        files[name] = temp_dir / name
        files[name].write_bytes(content_a)

    content_b = b"B" * 2048
    for name in ("dup2_a.txt", "dup2_b.txt"):
        files[name] = temp_dir / name
        files[name].write_bytes(content_b)

    files["same_size_other.txt"] = temp_dir / "same_size_other.txt"
    files["same_size_other.txt"].write_bytes(b"Z" * 1024)

    files["unique.txt"] = temp_dir / "unique.txt"
    files["unique.txt"].write_bytes(b"C" * 1500)

    files["empty.txt"] = temp_dir / "empty.txt"
    files["empty.txt"].write_bytes(b"")

    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["subdir/dup1_d.txt"] = subdir / "dup1_d.txt"
    files["subdir/dup1_d.txt"].write_bytes(content_a)

    return files


@pytest.fixture
def make_record():
    """Builds a FileRecord for an existing file."""
    def _make(path) -> FileRecord:
        return FileRecord.from_path(path)
    return _make


class RecordingHasher:
    """Wraps a real hasher and records every path it was asked to hash."""

    def __init__(self, hasher):
        self.hasher = hasher
        self.hashed_paths = []

    def compute_digest(self, file):
        self.hashed_paths.append(file.path)
        return self.hasher.compute_digest(file)


@pytest.fixture
def recording_hasher():
    from dupsweep.core.hasher import HasherImpl, MD5AlgorithmImpl
    return RecordingHasher(HasherImpl(MD5AlgorithmImpl()))
