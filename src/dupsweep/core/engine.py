"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/engine.py
Duplicate detection engines.

STRATEGIES
----------
SizeFirstEngine : add() only records (size, path); resolve() hashes files that
                  share their size with at least one other file. Files with a
                  unique size are never read.
HashFirstEngine : add() hashes every candidate immediately and buckets it by
                  (size, digest); resolve() only filters buckets.

OUTPUT CONTRACT
---------------
Both engines yield DuplicateGroups in ascending size order (ties broken by
digest bytes), members sorted by path. A file that can't be hashed is logged,
counted in ScanStats.hash_failures and left out of its group. resolve() can be
called again and never re-hashes a file. The stopped_flag is checked between
files, never in the middle of hashing one.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterator, List, Optional, Callable, Set, Tuple

from dupsweep.core.models import FileRecord, DuplicateGroup, EngineStrategy, ScanStats
from dupsweep.core.grouper import FileGrouperImpl
from dupsweep.core.interfaces import DuplicateEngine, Hasher

logger = logging.getLogger(__name__)


class EngineBase(DuplicateEngine):
    """
    Shared bookkeeping: de-duplication by path and by (st_dev, st_ino), stats
    and the grouper. Hard links and symlinks never make a file its own duplicate.
    """

    def __init__(self, hasher: Hasher, stats: Optional[ScanStats] = None):
        self.stats = stats if stats is not None else ScanStats()
        self.grouper = FileGrouperImpl(hasher, self.stats)
        self._paths: Set[str] = set()
        self._identities: Set[Tuple[int, int]] = set()

    def add(self, path: str) -> None:
        self.add_record(FileRecord.from_path(path))

    def add_record(self, record: FileRecord) -> None:
        if record.path in self._paths:
            logger.debug(f"Already registered, ignoring: {record.path}")
            return
        if record.identity is not None:
            if record.identity in self._identities:
                logger.debug(f"Same file already registered under another path, ignoring: {record.path}")
                return
            self._identities.add(record.identity)
        self._paths.add(record.path)
        self._ingest(record)

    def _ingest(self, record: FileRecord) -> None:
        raise NotImplementedError

    def __len__(self) -> int:
        return len(self._paths)

    def __contains__(self, path: str) -> bool:
        return path in self._paths


class SizeFirstEngine(EngineBase):
    """
    Size-first strategy: bucket by size on ingestion, hash lazily in resolve().
    """

    def __init__(self, hasher: Hasher, stats: Optional[ScanStats] = None):
        super().__init__(hasher, stats)
        self._size_buckets: Dict[int, Set[FileRecord]] = defaultdict(set)

    def _ingest(self, record: FileRecord) -> None:
        self._size_buckets[record.size].add(record)

    def resolve(
        self,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Iterator[DuplicateGroup]:
        candidates = {
            size: sorted(bucket, key=lambda f: f.path)
            for size, bucket in self._size_buckets.items()
            if len(bucket) >= 2
        }
        total_files = sum(len(files) for files in candidates.values())
        processed_files = 0
        logger.debug(
            f"{len(candidates)} of {len(self._size_buckets)} size groups need hashing ({total_files} files)"
        )

        for size in sorted(candidates):
            files = candidates[size]
            for file in files:
                if stopped_flag and stopped_flag():
                    logger.debug("Resolve interrupted by user")
                    return
                self.grouper.digest_of(file)
                processed_files += 1
                if progress_callback:
                    progress_callback("Hashing", processed_files, total_files)

            hash_groups = self.grouper.group_by_digest(files)
            for digest in sorted(hash_groups):
                yield DuplicateGroup(size=size, digest=digest, files=hash_groups[digest])


class HashFirstEngine(EngineBase):
    """
    Hash-first strategy: every candidate is hashed in add(), resolve() only
    picks buckets with two or more files.
    """

    def __init__(self, hasher: Hasher, stats: Optional[ScanStats] = None):
        super().__init__(hasher, stats)
        self._digest_buckets: Dict[Tuple[int, bytes], Set[FileRecord]] = defaultdict(set)

    def _ingest(self, record: FileRecord) -> None:
        digest = self.grouper.digest_of(record)
        if digest is None:
            return
        # Size is part of the key: equal digests of different sizes never group.
        self._digest_buckets[(record.size, digest)].add(record)

    def resolve(
        self,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Iterator[DuplicateGroup]:
        keys = sorted(k for k, bucket in self._digest_buckets.items() if len(bucket) >= 2)
        for processed, (size, digest) in enumerate(keys, 1):
            if stopped_flag and stopped_flag():
                logger.debug("Resolve interrupted by user")
                return
            if progress_callback:
                progress_callback("Grouping", processed, len(keys))
            yield DuplicateGroup(size=size, digest=digest, files=list(self._digest_buckets[(size, digest)]))


ENGINES = {
    EngineStrategy.SIZE_FIRST: SizeFirstEngine,
    EngineStrategy.HASH_FIRST: HashFirstEngine,
}


def create_engine(
    strategy: EngineStrategy,
    hasher: Hasher,
    stats: Optional[ScanStats] = None
) -> EngineBase:
    """Builds the engine for `strategy`."""
    return ENGINES[strategy](hasher, stats)


def find_duplicates(
    paths: List[str],
    hasher: Hasher,
    strategy: EngineStrategy = EngineStrategy.SIZE_FIRST
) -> List[DuplicateGroup]:
    """Convenience wrapper: add every path, resolve, return groups as a list."""
    engine = create_engine(strategy, hasher)
    for path in paths:
        engine.add(path)
    return list(engine.resolve())
