"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

deduplicator.py
Implements the pipeline-based grouping engine using FileRecord objects.
Pipeline: size -> front-chunk hash (large files only) -> full SHA-256.
Every returned group is canonically ordered: files[0] is the original.
"""
import time
from typing import List, Tuple, Optional, Callable

from linkdedup.core.models import FileRecord, DuplicateGroup, DeduplicationStats, Stage
from linkdedup.core.grouper import FileGrouperImpl
from linkdedup.core.interfaces import HashStage, Deduplicator
from linkdedup.core.stages import SizeStageImpl, FrontHashStage, FullHashStage
from linkdedup.core.sorter import Sorter


# =============================
# Main Deduplicator Class
# =============================
class DeduplicatorImpl(Deduplicator):
    """
    Implements multi-stage duplicate detection using a pipeline architecture.
    Collects detailed statistics.
    """
    def __init__(self, grouper: Optional[FileGrouperImpl] = None):
        self.grouper = grouper or FileGrouperImpl()

    def find_duplicates(
        self,
        files: List[FileRecord],
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[List[DuplicateGroup], DeduplicationStats]:
        """
        Main grouping pipeline.
        Args:
            files: Records in scan order, as returned by the scanner
            stopped_flag (Optional[Callable[[], bool]]): Function that returns True if operation should be stopped.
            progress_callback (Optional[Callable[[str, int, int], None]]): Reports progress per stage.
        Returns:
            Tuple[List[DuplicateGroup], DeduplicationStats]
        """
        stats = DeduplicationStats()
        stats.files_scanned = len(files)
        total_start_time = time.time()
        failures_before = len(self.grouper.failures)

        # Initial stage: group by size
        size_stage = SizeStageImpl(self.grouper)
        start_time = time.time()
        groups = size_stage.process(
            files,
            stopped_flag=stopped_flag,
            progress_callback=progress_callback
        )
        DeduplicatorImpl._update_stats(stats, Stage.SIZE.value, time.time() - start_time, groups)

        # Run all hash stages in sequence
        for stage in self._build_pipeline():
            if not groups:
                break
            start_time = time.time()
            groups = stage.process(
                groups,
                stopped_flag=stopped_flag,
                progress_callback=progress_callback
            )
            duration = time.time() - start_time
            DeduplicatorImpl._update_stats(stats, stage.get_stage_name(), duration, groups)

        if stopped_flag and stopped_flag():
            groups = []

        Sorter.sort_files_inside_groups(groups)
        Sorter.sort_groups(groups)

        stats.hash_failures = list(self.grouper.failures[failures_before:])
        stats.total_time = time.time() - total_start_time

        return groups, stats

    def _build_pipeline(self) -> List[HashStage]:
        return [FrontHashStage(self.grouper), FullHashStage(self.grouper)]

    @staticmethod
    def _update_stats(
        stats: DeduplicationStats,
        stage: str,
        duration: float,
        groups: List[DuplicateGroup]
    ):
        """Helper to update DeduplicationStats object."""
        stats.update_stage(
            stage_name=stage,
            groups_found=len(groups),
            files_processed=sum(len(g.files) for g in groups),
            duration=duration
        )
