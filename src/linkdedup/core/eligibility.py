"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/eligibility.py
Decides whether a filesystem entry takes part in deduplication.
Pure functions: no filesystem access, callers pass in the lstat mode.
"""

import os
import stat

IGNORED_FILENAMES = frozenset({".DS_Store", ".localized"})


def is_bundle_dir_name(name: str) -> bool:
    """Directories with a dot in their name (app bundles, packages) are not user data."""
    return "." in name


def is_eligible(path: str, mode: int, root: str = "") -> bool:
    """
    True if the entry at `path` should be compared against other files.

    Args:
        path: Path of the entry.
        mode: `st_mode` from lstat, so symlinks are seen as links.
        root: Search root the entry was found under. Only directory segments
              below the root are checked for dots.
    """
    if not stat.S_ISREG(mode):
        return False

    name = os.path.basename(path)
    if name in IGNORED_FILENAMES:
        return False

    parent = os.path.dirname(path)
    if root:
        parent = os.path.relpath(parent, root)
    for segment in os.path.normpath(parent).split(os.sep):
        if segment in ("", ".", ".."):
            continue
        if is_bundle_dir_name(segment):
            return False
    return True
