"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements directory tree walking for duplicate detection.
Features:
- Walks several root directories with os.walk, in sorted order
- Limits recursion depth (0 = only the root's direct entries)
- Prunes excluded directories before os.walk enters them
- Applies the CandidateFilter to regular files
- Reports unreadable entries instead of silently dropping them
"""

import os
import stat
import time
import logging
from pathlib import Path
from typing import Iterator, List, Optional, Callable

from dupsweep.core.models import FileRecord, ScanStats
from dupsweep.core.filters import CandidateFilter
from dupsweep.core.interfaces import FileScanner, DuplicateEngine

logger = logging.getLogger(__name__)


class FileScannerImpl(FileScanner):
    """
    Walks root directories and yields files that pass the candidate filter.

    Attributes:
        root_dirs: Directories to scan, in order
        excluded_dirs: Directories pruned from traversal (with everything below them)
        max_depth: Maximum depth below each root; a directory at depth d is
                   entered only if d <= max_depth (the root itself is depth 0)
        candidate_filter: Size/mask predicate applied to regular files
    """

    def __init__(
        self,
        root_dirs: List[str],
        excluded_dirs: Optional[List[str]] = None,
        max_depth: int = 0,
        candidate_filter: Optional[CandidateFilter] = None,
        stats: Optional[ScanStats] = None
    ):
        self.root_dirs = [os.path.abspath(d) for d in root_dirs]
        self.excluded_dirs = [str(Path(d).resolve()) for d in excluded_dirs] if excluded_dirs else []
        self.max_depth = max_depth
        self.candidate_filter = candidate_filter or CandidateFilter()
        self.stats = stats if stats is not None else ScanStats()

    def scan(
        self,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Iterator[FileRecord]:
        """
        Yields accepted candidates root by root.
        Stops quietly when stopped_flag returns True (checked between files).
        """
        logger.debug("Starting scan operation")
        logger.debug(f"Roots: {self.root_dirs}, excluded: {self.excluded_dirs}, depth: {self.max_depth}")
        logger.debug(f"Filter: {self.candidate_filter}")

        start_time = time.time()

        for root_dir in self.root_dirs:
            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by user")
                return

            if self._is_excluded_directory(Path(root_dir), self.excluded_dirs):
                logger.debug(f"Skipping excluded root: {root_dir}")
                continue

            logger.debug(f"Scanning directory: {root_dir}")
            for root, dirs, files in os.walk(root_dir, onerror=self._on_walk_error):
                self.stats.directories_visited += 1

                depth = self._depth_of(root_dir, root)
                # Pre-filter subdirectories BEFORE os.walk enters them
                if depth >= self.max_depth:
                    dirs[:] = []
                else:
                    dirs[:] = sorted(d for d in dirs if self._prefilter_dirs(Path(root) / d))

                for filename in sorted(files):
                    if stopped_flag and stopped_flag():
                        logger.debug("Scan interrupted by user")
                        return

                    record = self._process_file(os.path.join(root, filename))
                    self.stats.files_seen += 1
                    if record is not None:
                        self.stats.candidates += 1
                        yield record

                    if progress_callback:
                        progress_callback("Scanning", self.stats.files_seen, None)

        logger.debug(f"Total scan time: {time.time() - start_time:.2f} seconds")
        logger.debug(f"Scan completed. Accepted {self.stats.candidates} of {self.stats.files_seen} files.")

    def feed(
        self,
        engine: DuplicateEngine,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> int:
        """Adds every accepted candidate to `engine`. Returns how many were added."""
        added = 0
        for record in self.scan(stopped_flag=stopped_flag, progress_callback=progress_callback):
            engine.add_record(record)
            added += 1
        return added

    @staticmethod
    def _depth_of(root_dir: str, current: str) -> int:
        relative = os.path.relpath(current, root_dir)
        if relative == os.curdir:
            return 0
        return relative.count(os.sep) + 1

    def _on_walk_error(self, error: OSError) -> None:
        path = error.filename or "<unknown>"
        logger.warning(f"Cannot read directory {path}: {error.strerror or error}")
        self.stats.record_traversal_error(path, error)

    @staticmethod
    def _is_excluded_directory(path: Path, excluded_dirs: List[str]) -> bool:
        """Check if path is one of the excluded directories or inside one."""
        try:
            path_str = str(path.resolve(strict=False))
            for excluded_dir in excluded_dirs:
                normalized_excluded = os.path.normpath(excluded_dir)
                if path_str.startswith(normalized_excluded + os.sep) or \
                        path_str == normalized_excluded:
                    return True
            return False
        except (OSError, ValueError):
            return False

    def _prefilter_dirs(self, path: Path) -> bool:
        """Pre-filter directories: skip excluded ones and symlinked directories."""
        if path.is_symlink():
            logger.debug(f"Skipping symbolic link to directory: {path}")
            return False

        if self.excluded_dirs and self._is_excluded_directory(path, self.excluded_dirs):
            logger.debug(f"Skipping excluded directory: {path}")
            return False

        return True

    def _process_file(self, path: str) -> Optional[FileRecord]:
        """
        Stat a file and return a FileRecord if it passes all filters.
        Entries that vanish or can't be stat-ed are reported as traversal errors.
        """
        try:
            stat_result = os.lstat(path)
        except OSError as e:
            logger.warning(f"Could not stat {path}: {e.strerror or e}")
            self.stats.record_traversal_error(path, e)
            return None

        if not stat.S_ISREG(stat_result.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return None

        size = stat_result.st_size
        if not self.candidate_filter.size_passes(size):
            logger.debug(f"Skipping {path} (size {size} bytes below minimum)")
            return None

        if not self.candidate_filter.mask_passes(os.path.basename(path)):
            logger.debug(f"Skipping {path} (no mask matched)")
            return None

        logger.debug(f"Accepted file: {os.path.basename(path)} ({size} bytes)")
        return FileRecord.from_stat(path, stat_result)
