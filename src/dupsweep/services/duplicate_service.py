"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/duplicate_service.py
Deletion policy: keep the first file of every duplicate group (path order),
remove the rest.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple

from dupsweep.core.interfaces import DeletionPolicy
from dupsweep.core.models import DuplicateGroup, FileRecord
from dupsweep.services.file_service import FileService

logger = logging.getLogger(__name__)


@dataclass
class DeletionReport:
    """Outcome of applying the policy to one or more groups."""
    kept: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)
    bytes_freed: int = 0
    dry_run: bool = False

    def merge(self, other: "DeletionReport") -> None:
        self.kept.extend(other.kept)
        self.removed.extend(other.removed)
        self.failed.extend(other.failed)
        self.bytes_freed += other.bytes_freed

    @property
    def success(self) -> bool:
        return not self.failed


class KeepFirstPolicy(DeletionPolicy):
    """
    Keeps group.files[0] and removes every other member.

    Groups arrive sorted by path, so the same file is kept whatever order the
    directories were walked in. Each removal is logged and passed to
    `removal_callback`; a failed removal is recorded and the next file is tried.
    """

    def __init__(self, removal_callback: Optional[Callable[[str], None]] = None):
        self.removal_callback = removal_callback

    def plan(self, group: DuplicateGroup) -> Tuple[FileRecord, List[FileRecord]]:
        if len(group.files) < 2:
            raise ValueError(f"Not a duplicate group: {group!r}")
        ordered = sorted(group.files, key=lambda f: f.path)
        return ordered[0], ordered[1:]

    def apply(self, group: DuplicateGroup, dry_run: bool = False) -> DeletionReport:
        keeper, to_remove = self.plan(group)
        report = DeletionReport(kept=[keeper.path], dry_run=dry_run)
        logger.debug(f"Keeping {keeper.path}")

        for file in to_remove:
            if dry_run:
                report.removed.append(file.path)
                report.bytes_freed += file.size
                logger.info(f"Would remove: {file.path}")
                continue

            try:
                FileService.remove_file(file.path)
            except OSError as e:
                logger.warning(f"Failed to remove {file.path}: {e}")
                report.failed.append((file.path, str(e)))
                continue

            report.removed.append(file.path)
            report.bytes_freed += file.size
            logger.info(f"File removed: {file.path}")
            if self.removal_callback:
                self.removal_callback(file.path)

        return report

    def apply_all(
        self,
        groups: Iterable[DuplicateGroup],
        dry_run: bool = False,
        stopped_flag: Optional[Callable[[], bool]] = None
    ) -> DeletionReport:
        """Applies the policy group by group. Stops between groups on cancellation."""
        total = DeletionReport(dry_run=dry_run)
        for group in groups:
            if stopped_flag and stopped_flag():
                logger.debug("Deletion interrupted by user")
                break
            total.merge(self.apply(group, dry_run=dry_run))
        return total
