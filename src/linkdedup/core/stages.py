"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Grouping pipeline stages for linkdedup.

SizeStageImpl    : candidate groups of equal size
FrontHashStage   : xxHash64 prefilter over the leading chunk, large files only
FullHashStage    : SHA-256 over the whole content, the only stage that confirms

Hash stages can only split the groups they receive, never merge them, so
membership of a final group depends on the full-content digest alone.
Every stage honours `stopped_flag` and reports (stage name, done, total)
through `progress_callback`.
"""

from typing import Callable, Dict, List, Optional

from linkdedup.core.models import FileRecord, DuplicateGroup, Stage
from linkdedup.core.grouper import FileGrouperImpl
from linkdedup.core.interfaces import SizeStage, HashStage

KB = 1024
MB = 1024 * KB


class DeduplicationConfig:
    PREFILTER_SIZE_LIMIT = 128 * KB  # Groups at or below this size skip the front hash

    # (largest file size, leading chunk to hash), checked in order
    CHUNK_TABLE = (
        (3 * PREFILTER_SIZE_LIMIT, PREFILTER_SIZE_LIMIT),
        (10 * MB, 64 * KB),
        (30 * MB, 128 * KB),
        (60 * MB, 256 * KB),
        (120 * MB, 512 * KB),
        (360 * MB, 1 * MB),
    )
    MAX_CHUNK = 2 * MB

    @staticmethod
    def get_chunk_size(file_size: int) -> int:
        if file_size <= DeduplicationConfig.PREFILTER_SIZE_LIMIT:
            return file_size
        for upper_bound, chunk in DeduplicationConfig.CHUNK_TABLE:
            if file_size <= upper_bound:
                return chunk
        return DeduplicationConfig.MAX_CHUNK


class SizeStageImpl(SizeStage):
    def __init__(self, grouper: FileGrouperImpl):
        self.grouper = grouper

    def process(
            self,
            files: List[FileRecord],
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[DuplicateGroup]:
        """Returns one candidate group per size shared by 2+ files."""
        if stopped_flag and stopped_flag():
            return []

        groups = [
            DuplicateGroup(size=size, files=members)
            for size, members in self.grouper.group_by_size(files).items()
        ]
        if progress_callback:
            progress_callback(Stage.SIZE.value, len(files), len(files))
        return groups


class HashStageBase:
    """
    Walks candidate groups one at a time and replaces each with the
    sub-groups returned by `split()`.
    """
    def __init__(self, grouper: FileGrouperImpl):
        self.grouper = grouper

    @staticmethod
    def assign_chunk_sizes(files: List[FileRecord]) -> None:
        for file in files:
            file.chunk_size = DeduplicationConfig.get_chunk_size(file.size)

    def get_stage_name(self) -> str:
        raise NotImplementedError

    def split(self, group: DuplicateGroup) -> List[DuplicateGroup]:
        raise NotImplementedError

    def process(
            self,
            groups: List[DuplicateGroup],
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[DuplicateGroup]:
        refined: List[DuplicateGroup] = []
        total = sum(len(g.files) for g in groups)
        done = 0

        for group in groups:
            if stopped_flag and stopped_flag():
                return []
            refined.extend(self.split(group))
            done += len(group.files)
            if progress_callback:
                progress_callback(self.get_stage_name(), done, total)

        return refined


class FrontHashStage(HashStageBase, HashStage):
    def get_stage_name(self) -> str:
        return Stage.FRONT.value

    def split(self, group: DuplicateGroup) -> List[DuplicateGroup]:
        if group.size <= DeduplicationConfig.PREFILTER_SIZE_LIMIT:
            return [group]
        self.assign_chunk_sizes(group.files)
        by_front: Dict[bytes, List[FileRecord]] = self.grouper.group_by_front_hash(group.files)
        return [DuplicateGroup(size=group.size, files=members) for members in by_front.values()]


class FullHashStage(HashStageBase, HashStage):
    def get_stage_name(self) -> str:
        return Stage.FULL.value

    def split(self, group: DuplicateGroup) -> List[DuplicateGroup]:
        return [
            DuplicateGroup(size=group.size, files=members, digest=digest)
            for digest, members in self.grouper.group_by_full_hash(group.files).items()
        ]
