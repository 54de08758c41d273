"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

errors.py
Exception hierarchy shared by the engine and the CLI.
Each exception class carries the process exit status the CLI reports for it.
"""
from typing import Optional


class DedupError(Exception):
    """Base class for all linkdedup failures."""
    exit_code = 1


class UsageError(DedupError):
    """Malformed or conflicting command-line input. Nothing is changed on disk."""
    exit_code = 2


class ScanError(DedupError):
    """Listing the files to compare failed."""
    exit_code = 4


class PathNotFoundError(ScanError):
    """A search root does not exist or is not a directory."""
    exit_code = 1

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"Unable to locate a folder named: {path}")


class HashError(DedupError):
    """A file vanished or became unreadable between discovery and hashing."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(message)


class DeleteError(DedupError):
    """A duplicate could not be deleted."""
    exit_code = 3

    def __init__(self, path: str, message: str, report=None):
        self.path = path
        self.report = report  # partial ResolutionReport, attached by the resolver
        super().__init__(message)


class LinkError(DeleteError):
    """A hard link could not be created after its duplicate was deleted."""
