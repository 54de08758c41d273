"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/accountant.py
Turns a ResolutionReport into deletion counts and the final summary line.
"""
from dataclasses import dataclass

from linkdedup.core.models import ResolutionReport
from linkdedup.utils.convert_utils import ConvertUtils


@dataclass(frozen=True)
class DeletionTally:
    files_deleted: int = 0
    bytes_freed: int = 0  # approximate


def tally(report: ResolutionReport) -> DeletionTally:
    """
    Count removed paths and the storage they released.

    Every removed path counts as deleted, hard links included. Freed space adds
    the original's size once per removed member that had its own inode; members
    sharing the original's inode free nothing.
    """
    files_deleted = 0
    bytes_freed = 0
    for action in report.actions:
        if not action.kind.removed_file:
            continue
        files_deleted += 1
        if not action.shares_inode:
            bytes_freed += action.original.size
    return DeletionTally(files_deleted=files_deleted, bytes_freed=bytes_freed)


def summary_message(result: DeletionTally, include_hard_links: bool = False) -> str:
    if result.files_deleted == 0:
        if include_hard_links:
            return "No duplicates found."
        return "No (non-hard-link) duplicates found."
    noun = "file" if result.files_deleted == 1 else "files"
    if result.bytes_freed == 0:
        return f"Deleted {result.files_deleted} {noun}."
    return (f"Deleted {result.files_deleted} {noun} to save approximately "
            f"{ConvertUtils.bytes_to_human(result.bytes_freed)} of storage space.")
