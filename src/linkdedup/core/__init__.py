"""
Core grouping engine: eligibility, scanner, hasher, grouper, and pipeline orchestrator.

This package contains the performance-critical foundation of linkdedup:
- FileScannerImpl: recursive traversal of one or more roots, one record per physical path
- HasherImpl: xxHash64 front-chunk prefilter and SHA-256 full-content fingerprint
- FileGrouperImpl: size and hash-based grouping with singleton filtering
- DeduplicatorImpl: multi-stage pipeline (size → front hash → full hash)
- Sorter: canonical ordering, files[0] of every group is the original
- Models: FileRecord, DuplicateGroup, resolution policy and report objects

Nothing here deletes or links files; that lives in linkdedup.services.
"""

from .eligibility import is_eligible, IGNORED_FILENAMES
from .scanner import FileScannerImpl
from .grouper import FileGrouperImpl
from .hasher import HasherImpl, XXHashAlgorithmImpl, SHA256AlgorithmImpl
from .deduplicator import DeduplicatorImpl
from .sorter import Sorter
from .models import (
    FileRecord, FileHashes, DuplicateGroup, DeduplicationParams, DeduplicationStats,
    ResolveMode, ResolutionPolicy, ResolutionPlan, ResolutionReport, ActionKind, ActionRecord)

__all__ = [
    "is_eligible",
    "IGNORED_FILENAMES",
    "FileScannerImpl",
    "FileGrouperImpl",
    "HasherImpl",
    "XXHashAlgorithmImpl",
    "SHA256AlgorithmImpl",
    "DeduplicatorImpl",
    "Sorter",
    "FileRecord",
    "FileHashes",
    "DuplicateGroup",
    "DeduplicationParams",
    "DeduplicationStats",
    "ResolveMode",
    "ResolutionPolicy",
    "ResolutionPlan",
    "ResolutionReport",
    "ActionKind",
    "ActionRecord",
]
