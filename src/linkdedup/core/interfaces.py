"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the deduplication system.
These protocols enforce structural typing using Python's `typing.Protocol` to ensure
consistency across modules while maintaining flexibility and modularity.

Key Components:
---------------
- HashAlgorithm: Standardized interface for hash functions (SHA-256, xxHash).
- Hasher: Interface for computing the front-chunk and full-content hashes of files.
- FileScanner: Interface for walking roots and returning eligible file records.
- FileGrouper: Interface for grouping files by size or hash values.
- SizeStage / HashStage: Interfaces for individual stages in the grouping pipeline.
- Deduplicator: Interface for the engine coordinating all stages.
"""

from typing import Protocol, List, Dict, Tuple, Optional, Callable, Any
from linkdedup.core.models import (
    FileRecord,
    DuplicateGroup,
    DeduplicationStats,
)


# ===== Interfaces =====

class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions without affecting the rest
    of the pipeline. `new()` must return an object with `update()` and `digest()`,
    as both hashlib and xxhash objects do.
    """

    @staticmethod
    def hash(data: bytes) -> bytes:
        """Computes the hash of the provided byte data."""
        ...

    @staticmethod
    def new() -> Any:
        """Returns a fresh incremental hash object."""
        ...


class Hasher(Protocol):
    """Interface for hashing a prefix or the whole content of a file."""
    def compute_front_hash(self, file: FileRecord) -> bytes: ...
    def compute_full_hash(self, file: FileRecord) -> bytes: ...


class FileScanner(Protocol):
    """
    Interface for scanning file systems and collecting file records.
    """
    def scan(
        self,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[FileRecord]:
        """
        Scan the configured roots.

        Args:
            stopped_flag: Function that returns True if operation should be canceled.
            progress_callback: Optional callback for reporting progress (stage, current, total).

        Returns:
            Eligible, physically unique records in scan order.

        Raises:
            PathNotFoundError: a root is missing or not a directory.
            ScanError: directory traversal failed.
        """
        ...


class FileGrouper(Protocol):
    """
    Interface for grouping files based on size or content hashes.
    """
    def group_by_size(self, files: List[FileRecord]) -> Dict[int, List[FileRecord]]:
        """Group files by their size in bytes."""
        ...

    def group_by_front_hash(self, files: List[FileRecord]) -> Dict[bytes, List[FileRecord]]:
        """Group files by the hash of their leading chunk."""
        ...

    def group_by_full_hash(self, files: List[FileRecord]) -> Dict[bytes, List[FileRecord]]:
        """Group files by their full content hash."""
        ...


# =============================
# Stage Interfaces
# =============================


class SizeStage(Protocol):
    """
    Interface for the first stage: grouping files by size.
    """
    def process(
        self,
        files: List[FileRecord],
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[DuplicateGroup]:
        ...


class HashStage(Protocol):
    """
    Interface for a stage that splits candidate groups by a hash.
    """

    def get_stage_name(self) -> str:
        """Return the name of this stage (used in logging and stats)."""
        ...

    def process(
        self,
        groups: List[DuplicateGroup],
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[DuplicateGroup]:
        """
        Split every group by this stage's key and drop singletons.

        Args:
            groups: Current candidate groups.
            stopped_flag: Optional function to check for cancellation.
            progress_callback: Optional callback for progress updates (stage, current, total).

        Returns:
            Refined groups for the next stage.
        """
        ...


class Deduplicator(Protocol):
    """
    Interface for the grouping engine.

    Coordinates the stages (size -> front hash -> full hash), orders every
    confirmed group canonically and collects statistics.
    """
    def find_duplicates(
        self,
        files: List[FileRecord],
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[List[DuplicateGroup], DeduplicationStats]:
        ...
