"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the duplicate detection system.
These protocols enforce structural typing using Python's `typing.Protocol` so that
hash algorithms, engines and deletion policies can be swapped without touching callers.

Key Components:
---------------
- HashState / HashAlgorithm: Incremental hash functions (CRC32, MD5, SHA-1, xxHash64).
- Hasher: Computes a file's digest by streaming it through a HashAlgorithm in blocks.
- FileScanner: Walks directory trees and produces candidate FileRecords.
- DuplicateEngine: Ingests candidates and resolves them into DuplicateGroups.
- DeletionPolicy: Decides which group members to keep and removes the rest.
"""

from typing import Protocol, Iterator, List, Optional, Callable, Tuple
from dupsweep.core.models import FileRecord, DuplicateGroup


# ===== Interfaces =====

class HashState(Protocol):
    """Running digest state fed chunk by chunk."""
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like CRC32, MD5 or xxHash
    without affecting the rest of the grouping logic.
    """
    name: str
    digest_size: int

    def new(self) -> HashState:
        """Returns a fresh incremental hash state."""
        ...


class Hasher(Protocol):
    """Interface for computing the full-content digest of a file."""
    def compute_digest(self, file: FileRecord) -> bytes: ...


class FileScanner(Protocol):
    """
    Interface for scanning file systems and collecting candidate files.
    """
    def scan(
        self,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Iterator[FileRecord]:
        """
        Walk the configured roots.

        Args:
            stopped_flag: Function that returns True if operation should be canceled.
            progress_callback: Optional callback for reporting progress (stage, current, total).

        Returns:
            Iterator over accepted candidate files.
        """
        ...


class DuplicateEngine(Protocol):
    """
    Interface for the duplicate detection engine.

    Strategies differ in when content is hashed, never in what they report:
    groups come out in ascending size order, members in ascending path order.
    """
    def add(self, path: str) -> None:
        """Stat `path` and register it as a candidate."""
        ...

    def add_record(self, record: FileRecord) -> None:
        """Register an already stat-ed candidate."""
        ...

    def resolve(
        self,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Iterator[DuplicateGroup]:
        """Yield every group of two or more files with identical content."""
        ...


class DeletionPolicy(Protocol):
    """
    Interface for turning a DuplicateGroup into removals.
    """
    def plan(self, group: DuplicateGroup) -> Tuple[FileRecord, List[FileRecord]]:
        """Returns (keeper, files to remove)."""
        ...
