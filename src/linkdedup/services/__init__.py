"""
Services that act on grouping results: filesystem mutation, resolution,
accounting and the per-run audit log.
"""

from .file_service import FileService
from .resolver import Resolver
from .accountant import DeletionTally, tally, summary_message
from .audit_log import AuditLog, audit_logger, default_log_dir

__all__ = [
    "FileService",
    "Resolver",
    "DeletionTally",
    "tally",
    "summary_message",
    "AuditLog",
    "audit_logger",
    "default_log_dir",
]
