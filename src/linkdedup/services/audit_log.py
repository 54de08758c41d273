"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/audit_log.py
Per-run audit log: a dated, append-only file recording what a run looked at
and every change it made to the tree.

The audit trail goes through the dedicated `linkdedup.audit` logger. It does
not propagate to the root logger, so console verbosity never changes what ends
up in the file.
"""
import os
import sys
import logging
from datetime import datetime
from typing import List, Optional

from linkdedup.core.models import DuplicateGroup, ResolutionPolicy

logger = logging.getLogger(__name__)

audit_logger = logging.getLogger("linkdedup.audit")
audit_logger.propagate = False
audit_logger.setLevel(logging.INFO)
audit_logger.addHandler(logging.NullHandler())

LOG_DIR_ENV = "LINKDEDUP_LOG_DIR"
LOG_FORMAT = "%(asctime)s | %(message)s"


def default_log_dir() -> str:
    """Per-user log directory for the current platform."""
    env_dir = os.environ.get(LOG_DIR_ENV)
    if env_dir:
        return os.path.expanduser(env_dir)

    home = os.path.expanduser("~")
    if sys.platform == "darwin":
        return os.path.join(home, "Library", "Logs", "linkdedup")
    if sys.platform == "win32":
        base = os.environ.get("LOCALAPPDATA") or os.path.join(home, "AppData", "Local")
        return os.path.join(base, "linkdedup", "Logs")
    state_home = os.environ.get("XDG_STATE_HOME") or os.path.join(home, ".local", "state")
    return os.path.join(state_home, "linkdedup", "logs")


def log_file_name(moment: Optional[datetime] = None) -> str:
    moment = moment or datetime.now()
    return moment.strftime("%Y-%m-%d_%H_%M_%S") + ".log"


def format_listing(groups: List[DuplicateGroup]) -> List[str]:
    """`<sha256> <inode> <path>` lines, groups and members in canonical order."""
    return [
        f"{group.content_hash} {file.inode} {file.path}"
        for group in groups
        for file in group.files
    ]


class AuditLog:
    """
    Context manager attaching a file handler to the audit logger for one run.

    If the log directory cannot be created, a warning is logged and the run
    goes on without a log file (`path` stays None).
    """

    def __init__(self, log_dir: Optional[str] = None):
        self.log_dir = log_dir or default_log_dir()
        self.path: Optional[str] = None
        self._handler: Optional[logging.Handler] = None

    def __enter__(self) -> "AuditLog":
        try:
            os.makedirs(self.log_dir, exist_ok=True)
            path = os.path.join(self.log_dir, log_file_name())
            handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        except OSError as e:
            logger.warning(f"Cannot write audit log to {self.log_dir}: {e}")
            return self

        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        audit_logger.addHandler(handler)
        self._handler = handler
        self.path = path
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._handler is not None:
            audit_logger.removeHandler(self._handler)
            self._handler.close()
            self._handler = None
        return False

    @staticmethod
    def record_run(roots: List[str], policy: ResolutionPolicy) -> None:
        audit_logger.info(f"Searching: {' '.join(roots)}")
        audit_logger.info(f"Mode: {policy.mode.value}")
        audit_logger.info(f"Force: {'yes' if policy.force else 'no'}")
        audit_logger.info(f"Delete hard links: {'yes' if policy.include_hard_links else 'no'}")

    @staticmethod
    def record_duplicates(groups: List[DuplicateGroup]) -> None:
        audit_logger.info(f"Duplicate groups found: {len(groups)}")
        for line in format_listing(groups):
            audit_logger.info(line)

    @staticmethod
    def record_message(message: str, level: int = logging.INFO) -> None:
        audit_logger.log(level, message)
