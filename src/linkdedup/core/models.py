"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for scanning, grouping and resolving duplicate files.
"""

import os
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Tuple, Union

from linkdedup.errors import UsageError

logger = logging.getLogger(__name__)


# =============================
# Enums
# =============================

class ResolveMode(Enum):
    """
    What to do with the redundant members of every duplicate group.
    """
    LIST = "list"
    DELETE = "delete"
    HARDLINK = "hardlink"

    @property
    def display_name(self) -> str:
        """Human-readable name for logs and help text."""
        mapping = {
            ResolveMode.LIST: "List",
            ResolveMode.DELETE: "Delete",
            ResolveMode.HARDLINK: "Hard link",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class Stage(str, Enum):
    SIZE = "Size grouping"
    FRONT = "Front-chunk Hash"
    FULL = "Full Hash"


class ActionKind(Enum):
    """Outcome of resolving one non-canonical member of a group."""
    DELETED = "deleted"
    LINKED = "linked"
    KEPT_SHARED_INODE = "kept-shared-inode"
    ALREADY_LINKED = "already-linked"
    DELETE_FAILED = "delete-failed"
    LINK_FAILED = "link-failed"

    @property
    def removed_file(self) -> bool:
        """True when the member's path was successfully unlinked."""
        return self in (ActionKind.DELETED, ActionKind.LINKED, ActionKind.LINK_FAILED)

    @property
    def is_failure(self) -> bool:
        return self in (ActionKind.DELETE_FAILED, ActionKind.LINK_FAILED)


# ======================
#  Core Data Models
# ======================

@dataclass
class FileHashes:
    full: Optional[bytes] = None   # SHA-256 of the whole content
    front: Optional[bytes] = None  # xxHash64 of the leading chunk (prefilter only)

    def __post_init__(self):
        fields = getattr(self, '__dataclass_fields__', {})
        for key in fields:
            value = getattr(self, key)
            if value is not None and not isinstance(value, bytes):
                raise ValueError(f"Field '{key}' must be bytes or None")


@dataclass
class FileRecord:
    """
    One eligible, physically unique file found by the scanner.

    `device` and `inode` identify the storage object: two records with the same
    pair are hard links to each other, not independent copies.
    `scan_index` is the position of the record in scan order and drives the
    choice of the original within a group.
    """
    path: str
    size: int  # in bytes
    device: int = 0
    inode: int = 0
    scan_index: int = 0
    name: Optional[str] = None
    hashes: FileHashes = field(default_factory=FileHashes)
    chunk_size: Optional[int] = None  # Set by the front-chunk stage

    def __post_init__(self):
        if self.name is None:
            self.name = os.path.basename(self.path)

    @property
    def inode_key(self) -> Tuple[int, int]:
        return self.device, self.inode

    @property
    def content_hash(self) -> Optional[str]:
        """Hex SHA-256 digest, or None before the full-hash stage ran."""
        return self.hashes.full.hex() if self.hashes.full is not None else None

    def shares_inode_with(self, other: "FileRecord") -> bool:
        return self.inode_key == other.inode_key

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}, inode={self.inode}>"


@dataclass
class DuplicateGroup:
    """
    Files with byte-identical content.
    Before the full-hash stage this is a candidate group (same size, maybe same
    front hash); afterwards `digest` holds the shared SHA-256 and `files[0]` is
    the original.
    """
    size: int
    files: List[FileRecord]
    digest: Optional[bytes] = None

    @property
    def original(self) -> FileRecord:
        return self.files[0]

    @property
    def content_hash(self) -> Optional[str]:
        """Hex SHA-256 shared by every member, or None for a candidate group."""
        return self.digest.hex() if self.digest is not None else None

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={len(self.files)}>"


@dataclass(frozen=True)
class ResolutionPlan:
    """The original of a group and every other member, in canonical order."""
    original: FileRecord
    to_remove: Tuple[Tuple[FileRecord, bool], ...]

    @classmethod
    def from_group(cls, group: DuplicateGroup) -> "ResolutionPlan":
        original = group.original
        return cls(
            original=original,
            to_remove=tuple(
                (member, member.shares_inode_with(original))
                for member in group.files[1:]
            ),
        )


@dataclass(frozen=True)
class ResolutionPolicy:
    """
    How the resolver treats non-canonical members.
    Invalid combinations are rejected here, before anything touches the disk.
    """
    mode: ResolveMode = ResolveMode.LIST
    force: bool = False
    include_hard_links: bool = False

    def __post_init__(self):
        if self.mode is ResolveMode.LIST:
            if self.force:
                raise UsageError("Cannot use force without first choosing delete or hardlink mode.")
            if self.include_hard_links:
                raise UsageError("Cannot use deletehl without first choosing delete mode.")
        if self.mode is ResolveMode.HARDLINK and self.include_hard_links:
            raise UsageError("Deletehl is not compatible with hardlink mode.")


@dataclass(frozen=True)
class ActionRecord:
    kind: ActionKind
    record: FileRecord
    original: FileRecord
    error: Optional[str] = None

    @property
    def shares_inode(self) -> bool:
        return self.record.shares_inode_with(self.original)


@dataclass
class ResolutionReport:
    """Everything the resolver did, in the order it did it."""
    policy: ResolutionPolicy
    groups: List[DuplicateGroup] = field(default_factory=list)
    actions: List[ActionRecord] = field(default_factory=list)
    cancelled: bool = False

    @property
    def failures(self) -> List[ActionRecord]:
        return [a for a in self.actions if a.kind.is_failure]

    def add(self, kind: ActionKind, record: FileRecord, original: FileRecord,
            error: Optional[str] = None) -> ActionRecord:
        action = ActionRecord(kind=kind, record=record, original=original, error=error)
        self.actions.append(action)
        return action


@dataclass
class DeduplicationStats:
    """
    Statistics collected during the grouping pipeline.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.files_scanned: int = 0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self.hash_failures: List[Tuple[str, str]] = []  # (path, reason)

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

    def print_summary(self) -> str:
        lines = [
            "Deduplication Statistics:",
            f"Files scanned: {self.files_scanned}",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            if data["groups"] > 0 or data["time"] > 0:
                lines.append(f"{stage}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        if self.hash_failures:
            lines.append(f"Files skipped (unreadable): {len(self.hash_failures)}")

        return "\n".join(lines)


"""
DTO for deduplication parameters with built-in validation.
Interface-agnostic, built by the CLI and consumed by DeduplicationCommand.
"""

MAX_RECOMMENDED_THREADS = 32


@dataclass
class DeduplicationParams:
    """Parameters for one deduplication run."""
    roots: List[str]
    mode: ResolveMode = ResolveMode.LIST
    force: bool = False
    include_hard_links: bool = False
    threads: int = 0
    log_dir: Optional[str] = None

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.roots:
            raise UsageError("At least one folder to search is required")
        if any(not str(root).strip() for root in self.roots):
            raise UsageError("Folder path cannot be empty")

        # Raises UsageError for invalid option combinations
        self.policy = ResolutionPolicy(
            mode=self.mode,
            force=self.force,
            include_hard_links=self.include_hard_links,
        )
        self.threads = self.normalize_threads(self.threads)

    @staticmethod
    def normalize_threads(threads: Optional[int]) -> int:
        """Bound the worker pool used for scanning and hashing."""
        if threads is None or threads <= 0:
            return min(MAX_RECOMMENDED_THREADS, os.cpu_count() or 8)
        if threads > MAX_RECOMMENDED_THREADS:
            logger.warning(
                "Using %d threads, which is more than the recommended maximum of %d.",
                threads, MAX_RECOMMENDED_THREADS,
            )
        return threads
