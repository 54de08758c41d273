"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

Unified command orchestrator for deduplication.
This is the single place where scanning, grouping and resolution are wired together.
"""
from typing import List, Optional, Callable, Tuple

from linkdedup.core.models import (
    DuplicateGroup,
    DeduplicationStats,
    DeduplicationParams,
    FileRecord,
    ResolutionReport,
)
from linkdedup.core.scanner import FileScannerImpl
from linkdedup.core.grouper import FileGrouperImpl
from linkdedup.core.hasher import HasherImpl
from linkdedup.core.deduplicator import DeduplicatorImpl
from linkdedup.services.file_service import FileService
from linkdedup.services.resolver import Resolver


class DeduplicationCommand:
    """
    Orchestrates the entire deduplication workflow:
    1. Scan every root into FileRecords
    2. Group them into canonically ordered DuplicateGroups
    3. Resolve the groups according to the policy in the params

    Usage:
        params = DeduplicationParams(roots=["~/Pictures"], mode=ResolveMode.DELETE)
        command = DeduplicationCommand()
        groups, stats = command.execute(
            params,
            progress_callback=cli_progress_printer,
            stopped_flag=signal_handler_check
        )
        report = command.resolve(groups, params, stopped_flag=signal_handler_check)
    """

    def __init__(self, file_service=FileService):
        self._file_service = file_service
        self._files: List[FileRecord] = []

    def execute(
            self,
            params: DeduplicationParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> Tuple[List[DuplicateGroup], DeduplicationStats]:
        """
        Scan and group. Nothing on disk is changed.

        Args:
            params: Validated deduplication parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if operation should stop)

        Returns:
            Tuple of (duplicate_groups, statistics)

        Raises:
            PathNotFoundError: a root is missing or not a directory
            ScanError: traversal failed
        """
        # Step 1: Scan files
        scanner = FileScannerImpl(roots=params.roots, max_workers=params.threads)
        self._files = scanner.scan(
            stopped_flag=stopped_flag,
            progress_callback=progress_callback
        )

        # Step 2: Find duplicates; a fresh hasher per run keeps the inode cache run-local
        grouper = FileGrouperImpl(hasher=HasherImpl(), max_workers=params.threads)
        deduplicator = DeduplicatorImpl(grouper)
        groups, stats = deduplicator.find_duplicates(
            self._files,
            stopped_flag=stopped_flag,
            progress_callback=progress_callback
        )

        return groups, stats

    def resolve(
            self,
            groups: List[DuplicateGroup],
            params: DeduplicationParams,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> ResolutionReport:
        """
        Apply the run's policy to the groups.

        Raises:
            DeleteError / LinkError: a file operation failed and force is not set
        """
        resolver = Resolver(params.policy, file_service=self._file_service, stopped_flag=stopped_flag)
        return resolver.resolve(groups)

    def get_files(self) -> List[FileRecord]:
        """Get scanned files after execution."""
        return self._files.copy()
