"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/resolver.py
Applies a ResolutionPolicy to canonically ordered duplicate groups.

- list: nothing is touched
- delete: every non-original member is deleted, except paths sharing the
  original's inode unless the policy includes hard links
- hardlink: every non-original member not already sharing the original's
  inode is deleted and recreated as a hard link to the original

Failures are forward-only: completed deletions are never undone.
"""
import logging
from typing import Callable, List, Optional, Type

from linkdedup.core.models import (
    ActionKind,
    DuplicateGroup,
    FileRecord,
    ResolutionPlan,
    ResolutionPolicy,
    ResolutionReport,
    ResolveMode,
)
from linkdedup.errors import DeleteError, LinkError
from linkdedup.services.audit_log import audit_logger
from linkdedup.services.file_service import FileService

logger = logging.getLogger(__name__)


class Resolver:
    """
    Walks groups in order and members in canonical order, one action at a time.

    Without `force`, the first DeleteError/LinkError is recorded, written to the
    audit log and re-raised with the partial report attached as `error.report`.
    With `force`, failures are recorded and processing continues.
    """

    def __init__(self,
                 policy: ResolutionPolicy,
                 file_service: Type[FileService] = FileService,
                 stopped_flag: Optional[Callable[[], bool]] = None):
        self.policy = policy
        self.file_service = file_service
        self.stopped_flag = stopped_flag

    def resolve(self, groups: List[DuplicateGroup]) -> ResolutionReport:
        report = ResolutionReport(policy=self.policy, groups=list(groups))
        if self.policy.mode is ResolveMode.LIST:
            return report

        for group in groups:
            plan = ResolutionPlan.from_group(group)
            for record, shares_inode in plan.to_remove:
                if shares_inode and self._keeps_shared_inode():
                    self._skip_shared(report, record, plan.original)
                    continue

                if self.stopped_flag and self.stopped_flag():
                    logger.info("Cancelled, no further files will be deleted")
                    audit_logger.warning("Run cancelled by user before all duplicates were resolved.")
                    report.cancelled = True
                    return report

                if not self._delete(report, record, plan.original):
                    continue
                if self.policy.mode is ResolveMode.HARDLINK:
                    self._link(report, record, plan.original)

        return report

    def _keeps_shared_inode(self) -> bool:
        if self.policy.mode is ResolveMode.HARDLINK:
            return True
        return not self.policy.include_hard_links

    def _skip_shared(self, report: ResolutionReport, record: FileRecord, original: FileRecord) -> None:
        if self.policy.mode is ResolveMode.HARDLINK:
            report.add(ActionKind.ALREADY_LINKED, record, original)
            audit_logger.info(f"Already hard linked: {record.path} shares inode number {record.inode} "
                              f"with {original.path}")
        else:
            report.add(ActionKind.KEPT_SHARED_INODE, record, original)
            audit_logger.info(f"Not deleting: {record.path}. It shares inode number {record.inode} "
                              f"with {original.path}")

    def _delete(self, report: ResolutionReport, record: FileRecord, original: FileRecord) -> bool:
        """Deletes one member. Returns False when the member is still on disk."""
        audit_logger.info(f"Deleting duplicate: {record.path} (original: {original.path})")
        try:
            self.file_service.delete_file(record.path)
        except DeleteError as e:
            report.add(ActionKind.DELETE_FAILED, record, original, error=str(e))
            self._handle_failure(e, report)
            return False

        if self.policy.mode is not ResolveMode.HARDLINK:
            report.add(ActionKind.DELETED, record, original)
        return True

    def _link(self, report: ResolutionReport, record: FileRecord, original: FileRecord) -> None:
        audit_logger.info(f"Hard linking {record.path} to {original.path}")
        try:
            self.file_service.hard_link(original.path, record.path)
        except LinkError as e:
            report.add(ActionKind.LINK_FAILED, record, original, error=str(e))
            self._handle_failure(e, report)
            return
        report.add(ActionKind.LINKED, record, original)

    def _handle_failure(self, error: DeleteError, report: ResolutionReport) -> None:
        audit_logger.error(str(error))
        if not self.policy.force:
            error.report = report
            raise error
        logger.info(f"{error} (continuing, force is set)")
