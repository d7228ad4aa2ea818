"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and run configuration for scanning and duplicate detection.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union
from pathlib import Path
from enum import Enum
import errno
import os
import stat

from dupsweep.core.errors import ConfigurationError
from dupsweep.core.filters import compile_masks


# =============================
# Enums
# =============================

class HashAlgorithmName(Enum):
    """
    Content hash algorithm used for the whole run.
    """
    CRC32 = "crc32"
    MD5 = "md5"
    SHA1 = "sha1"
    XXH64 = "xxh64"

    @property
    def display_name(self) -> str:
        """Human-readable name for help/summary output."""
        mapping = {
            HashAlgorithmName.CRC32: "CRC32",
            HashAlgorithmName.MD5: "MD5",
            HashAlgorithmName.SHA1: "SHA-1",
            HashAlgorithmName.XXH64: "xxHash64",
        }
        return mapping.get(self, self.value)

    @property
    def digest_size(self) -> int:
        """Digest width in bytes."""
        mapping = {
            HashAlgorithmName.CRC32: 4,
            HashAlgorithmName.MD5: 16,
            HashAlgorithmName.SHA1: 20,
            HashAlgorithmName.XXH64: 8,
        }
        return mapping[self]

    def __repr__(self) -> str:
        return self.value


class EngineStrategy(Enum):
    """
    Grouping strategy of the duplicate detection engine.
    """
    SIZE_FIRST = "size-first"
    HASH_FIRST = "hash-first"

    @property
    def description(self) -> str:
        """Detailed description for help text."""
        mapping = {
            EngineStrategy.SIZE_FIRST:
                "Group by size, hash only files sharing a size (default)",
            EngineStrategy.HASH_FIRST:
                "Hash every candidate on ingestion, then group by size + digest",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True, order=True)
class FileRecord:
    """
    A candidate file: its path and the size observed when it was accepted.
    Ordering is (size, path), which is also the order groups are reported in.
    """
    size: int  # in bytes
    path: str
    # (st_dev, st_ino); two paths with the same identity are one file
    identity: Optional[Tuple[int, int]] = field(default=None, compare=False, repr=False)

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "FileRecord":
        """
        lstat `path` and build a record. Symlinks are not followed: anything
        but a regular file raises OSError, as does a failing lstat.
        """
        normalized = os.path.abspath(os.fspath(path))
        stat_result = os.lstat(normalized)
        if not stat.S_ISREG(stat_result.st_mode):
            raise OSError(errno.EINVAL, "Not a regular file", normalized)
        return cls.from_stat(normalized, stat_result)

    @classmethod
    def from_stat(cls, path: str, stat_result: os.stat_result) -> "FileRecord":
        return cls(size=stat_result.st_size, path=path, identity=(stat_result.st_dev, stat_result.st_ino))

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}>"


@dataclass
class DuplicateGroup:
    """
    Files with identical size and identical content digest.
    Files are kept sorted by path; the first one is the keeper.
    """
    size: int
    digest: bytes
    files: List[FileRecord]

    def __post_init__(self):
        if any(f.size != self.size for f in self.files):
            raise ValueError("All files in a group must have the group's size.")
        self.files = sorted(self.files, key=lambda f: f.path)

    @property
    def keeper(self) -> FileRecord:
        return self.files[0]

    @property
    def duplicates(self) -> List[FileRecord]:
        return self.files[1:]

    @property
    def reclaimable_bytes(self) -> int:
        return self.size * (len(self.files) - 1)

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={len(self.files)}, digest={self.digest.hex()}>"


@dataclass
class ScanStats:
    """
    Counters collected during one run.
    """
    directories_visited: int = 0
    files_seen: int = 0
    candidates: int = 0
    files_hashed: int = 0
    hash_failures: int = 0
    traversal_errors: List[Tuple[str, str]] = field(default_factory=list)
    groups_found: int = 0
    files_removed: int = 0
    removal_failures: int = 0
    bytes_reclaimed: int = 0
    total_time: float = 0.0

    def record_traversal_error(self, path: str, error: Union[OSError, str]) -> None:
        self.traversal_errors.append((path, str(error)))

    def print_summary(self) -> str:
        lines = [
            "📊 Scan Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            f"Directories visited: {self.directories_visited}",
            f"Files seen / candidates: {self.files_seen} / {self.candidates}",
            f"Files hashed: {self.files_hashed} (failures: {self.hash_failures})",
            f"Traversal errors: {len(self.traversal_errors)}",
            f"Duplicate groups: {self.groups_found}",
            f"Files removed: {self.files_removed} (failures: {self.removal_failures})",
        ]
        return "\n".join(lines)


"""
DTO for scan parameters with built-in validation.
Interface-agnostic — used by the CLI and by library callers.
"""

DEFAULT_BLOCK_SIZE = 4096
DEFAULT_MIN_SIZE = 1


@dataclass
class ScanParams:
    """Parameters for one scan-and-remove run, validated on creation."""
    root_dirs: List[str]
    excluded_dirs: List[str] = field(default_factory=list)
    max_depth: int = 0
    min_size_bytes: int = DEFAULT_MIN_SIZE
    masks: List[str] = field(default_factory=list)
    block_size: int = DEFAULT_BLOCK_SIZE
    algorithm: HashAlgorithmName = HashAlgorithmName.CRC32
    strategy: EngineStrategy = EngineStrategy.SIZE_FIRST
    dry_run: bool = False

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if isinstance(self.algorithm, str):
            try:
                self.algorithm = HashAlgorithmName(self.algorithm.strip().lower())
            except ValueError:
                raise ConfigurationError(
                    f"Hash algorithm '{self.algorithm}' is not supported. "
                    f"Available: {', '.join(a.value for a in HashAlgorithmName)}"
                ) from None

        if isinstance(self.strategy, str):
            try:
                self.strategy = EngineStrategy(self.strategy.strip().lower())
            except ValueError:
                raise ConfigurationError(f"Unknown engine strategy: '{self.strategy}'") from None

        if self.block_size <= 0:
            raise ConfigurationError("Can't have 0 block size")

        if self.min_size_bytes < 0:
            raise ConfigurationError("Minimum size cannot be negative")

        if self.max_depth < 0:
            raise ConfigurationError("Depth cannot be negative")

        if not self.root_dirs:
            raise ConfigurationError("At least one directory to scan is required")

        self.root_dirs = [self._validated_dir(d) for d in self.root_dirs]
        self.excluded_dirs = [self._validated_dir(d) for d in self.excluded_dirs]
        self.masks = [m for m in self.masks if m]
        compile_masks(self.masks)

    @staticmethod
    def _validated_dir(directory: Union[str, Path]) -> str:
        path = Path(directory)
        if not path.exists() or not path.is_dir():
            raise ConfigurationError(f"{directory} is not a valid directory, aborting")
        return str(path.resolve())

    def describe(self) -> str:
        masks = ", ".join(self.masks) if self.masks else "*"
        return (
            f"depth={self.max_depth}, min size={self.min_size_bytes}B, masks={masks}, "
            f"block={self.block_size}B, hash={self.algorithm.display_name}, "
            f"strategy={self.strategy.value}"
        )
