"""
Unified command orchestrator for a scan-and-remove run.
This is the SINGLE source of truth for the workflow — the CLI only parses
arguments and prints.
"""
import time
import logging
from typing import List, Optional, Callable, Tuple

from dupsweep.core.models import DuplicateGroup, ScanParams, ScanStats
from dupsweep.core.filters import CandidateFilter
from dupsweep.core.hasher import HasherImpl, get_algorithm
from dupsweep.core.engine import create_engine
from dupsweep.core.scanner import FileScannerImpl
from dupsweep.services.duplicate_service import KeepFirstPolicy, DeletionReport

logger = logging.getLogger(__name__)


class ScanCommand:
    """
    Orchestrates the whole workflow:
    1. Build hasher, engine and scanner from validated ScanParams
    2. Walk every root, feeding candidates to the engine
    3. Resolve duplicate groups
    4. Apply the keep-first deletion policy (or only plan it on dry run)

    Usage:
        params = ScanParams(root_dirs=["/data"], max_depth=3)
        command = ScanCommand()
        groups, report, stats = command.execute(
            params,
            progress_callback=cli_progress_printer,
            stopped_flag=signal_handler_check,
            removal_callback=print_removed
        )
    """

    def __init__(self):
        self.stats = ScanStats()
        self.groups: List[DuplicateGroup] = []

    def find(
            self,
            params: ScanParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> List[DuplicateGroup]:
        """Scan and resolve without touching any file."""
        start_time = time.time()
        self.stats = ScanStats()

        hasher = HasherImpl(get_algorithm(params.algorithm), block_size=params.block_size)
        engine = create_engine(params.strategy, hasher, self.stats)
        scanner = FileScannerImpl(
            root_dirs=params.root_dirs,
            excluded_dirs=params.excluded_dirs,
            max_depth=params.max_depth,
            candidate_filter=CandidateFilter(params.min_size_bytes, params.masks),
            stats=self.stats
        )

        scanner.feed(engine, stopped_flag=stopped_flag, progress_callback=progress_callback)
        self.groups = list(engine.resolve(stopped_flag=stopped_flag, progress_callback=progress_callback))

        self.stats.groups_found = len(self.groups)
        self.stats.total_time = time.time() - start_time
        logger.debug(f"Found {len(self.groups)} duplicate groups in {self.stats.total_time:.3f}s")
        return self.groups

    def execute(
            self,
            params: ScanParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None,
            removal_callback: Optional[Callable[[str], None]] = None
    ) -> Tuple[List[DuplicateGroup], DeletionReport, ScanStats]:
        """
        Run the full workflow.

        Args:
            params: Validated run parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if operation should stop)
            removal_callback: called with each removed path

        Returns:
            Tuple of (duplicate_groups, deletion_report, statistics)
        """
        start_time = time.time()
        groups = self.find(params, progress_callback=progress_callback, stopped_flag=stopped_flag)
        report = self.remove(
            groups,
            dry_run=params.dry_run,
            stopped_flag=stopped_flag,
            removal_callback=removal_callback
        )
        self.stats.total_time = time.time() - start_time

        return groups, report, self.stats

    def remove(
            self,
            groups: List[DuplicateGroup],
            dry_run: bool = False,
            stopped_flag: Optional[Callable[[], bool]] = None,
            removal_callback: Optional[Callable[[str], None]] = None
    ) -> DeletionReport:
        """Apply the keep-first policy to `groups` and record the outcome in stats."""
        policy = KeepFirstPolicy(removal_callback=removal_callback)
        report = policy.apply_all(groups, dry_run=dry_run, stopped_flag=stopped_flag)

        if not dry_run:
            self.stats.files_removed = len(report.removed)
            self.stats.bytes_reclaimed = report.bytes_freed
        self.stats.removal_failures = len(report.failed)
        return report
