"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Implements file grouping by size and by content digest using FileRecord objects and a Hasher.
"""

import logging
from typing import List, Dict, Any, Callable, Iterable, Optional
from collections import defaultdict

from dupsweep.core.interfaces import Hasher
from dupsweep.core.models import FileRecord, ScanStats
from dupsweep.core.errors import HashingError

logger = logging.getLogger(__name__)


class FileGrouperImpl:
    """
    Groups FileRecords by a computed key.
    Uses an injected Hasher instance for content grouping.
    Every digest computed through the grouper is cached by path, so a file is
    hashed at most once however many times it is grouped.
    """

    def __init__(self, hasher: Hasher, stats: Optional[ScanStats] = None):
        self.hasher = hasher
        self.stats = stats if stats is not None else ScanStats()
        self._digests: Dict[str, bytes] = {}
        self._failed: Dict[str, str] = {}

    def group_by_digest(self, files: Iterable[FileRecord]) -> Dict[bytes, List[FileRecord]]:
        """Groups files by full content digest. Files that fail to hash are left out."""
        return self._group_by(files, self.digest_of)

    def digest_of(self, file: FileRecord) -> Optional[bytes]:
        """
        Returns the cached or freshly computed digest, or None when the file
        can't be confirmed (read error or size change since scan).
        """
        if file.path in self._digests:
            return self._digests[file.path]
        if file.path in self._failed:
            return None
        try:
            digest = self.hasher.compute_digest(file)
        except HashingError as e:
            logger.warning(f"Skipping {file.path}: {e}")
            self._failed[file.path] = str(e)
            self.stats.hash_failures += 1
            return None
        self.stats.files_hashed += 1
        self._digests[file.path] = digest
        return digest

    @staticmethod
    def _group_by(files: Iterable[FileRecord], key_func: Callable[[FileRecord], Any]) -> Dict[Any, List[FileRecord]]:
        """
        Helper method to group files by any computed key.
        Args:
            files: Files to group
            key_func: Function that computes a hashable key from a FileRecord (None = skip)
        Returns:
            Dict[key, List[FileRecord]] with only groups of 2+ files, each sorted by path
        """
        groups = defaultdict(list)
        for file in files:
            key = key_func(file)
            if key is not None:
                groups[key].append(file)

        result = {}
        for key, group in groups.items():
            if len(group) >= 2:  # Avoid groups with less than 2 files
                result[key] = sorted(group, key=lambda f: f.path)

        return result
