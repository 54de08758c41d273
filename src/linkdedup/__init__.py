"""
linkdedup: find byte-identical files across folders and reclaim their space.

Core features:
- Multi-stage grouping: size → xxHash64 front-chunk prefilter → SHA-256 of the full content
- Three resolution modes: list, delete, hardlink
- Hard-link aware: paths that already share storage are never counted as reclaimable
- Dated per-run audit log of every change made to the tree
"""

from importlib.metadata import PackageNotFoundError, version as _version

try:
    __version__ = _version("linkdedup")
except PackageNotFoundError:
    # Running from a source checkout without installation
    __version__ = "0.0.0"

# Public API, only what users should import directly
from linkdedup.commands import DeduplicationCommand
from linkdedup.core import (
    DeduplicationParams, ResolveMode, ResolutionPolicy, ResolutionReport,
    FileRecord, DuplicateGroup)
from linkdedup.errors import (
    DedupError, UsageError, ScanError, PathNotFoundError, HashError, DeleteError, LinkError)
from linkdedup.services import Resolver, FileService, tally, summary_message
from linkdedup.utils.convert_utils import ConvertUtils

__all__ = [
    "DeduplicationCommand",
    "DeduplicationParams",
    "ResolveMode",
    "ResolutionPolicy",
    "ResolutionReport",
    "FileRecord",
    "DuplicateGroup",
    "DedupError",
    "UsageError",
    "ScanError",
    "PathNotFoundError",
    "HashError",
    "DeleteError",
    "LinkError",
    "Resolver",
    "FileService",
    "tally",
    "summary_message",
    "ConvertUtils",
    "__version__",
]
