"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements file scanning over one or more search roots.
Features:
- Recursively walks every root with os.walk (symlinks are never followed)
- Visits directory entries in sorted order so scan order is reproducible
- Prunes bundle-style directories (names containing a dot)
- Walks independent roots concurrently, then merges them in root order
- Records the same physical path only once, even for nested or repeated roots
"""

import os
import time
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Callable, Tuple

from linkdedup.core.eligibility import is_eligible, is_bundle_dir_name
from linkdedup.core.interfaces import FileScanner
from linkdedup.core.models import FileRecord
from linkdedup.errors import PathNotFoundError, ScanError

logger = logging.getLogger(__name__)

# (path as found, canonical path used for identity, lstat result)
_Entry = Tuple[str, str, os.stat_result]


class FileScannerImpl(FileScanner):
    """
    Scans search roots recursively and returns eligible file records.

    Attributes:
        roots: Directories to scan, in the order given by the user
        max_workers: Upper bound for roots walked at the same time
    """

    def __init__(self, roots: List[str], max_workers: int = 4):
        self.roots = [str(root) for root in roots]
        self.max_workers = max(1, max_workers)

    def scan(self,
             stopped_flag: Optional[Callable[[], bool]] = None,
             progress_callback: Optional[Callable[[str, int, object], None]] = None) -> List[FileRecord]:
        """
        Walk all roots and return one record per eligible, physically unique path.
        Records are numbered in scan order (root order, then walk order).
        """
        logger.debug(f"Roots: {self.roots}")

        if stopped_flag and stopped_flag():
            logger.debug("Scan cancelled before start")
            return []

        # All roots are checked before any of them is walked
        roots = [self._validate_root(root) for root in self.roots]

        start_time = time.time()
        workers = min(self.max_workers, len(roots))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._walk_root, root, stopped_flag) for root in roots]
            per_root = [future.result() for future in futures]

        if stopped_flag and stopped_flag():
            logger.debug("Scan interrupted by user")
            return []

        records = self._merge(per_root, progress_callback)

        logger.debug(f"Total scan time: {time.time() - start_time:.2f} seconds")
        logger.debug(f"Scan completed. Found {len(records)} eligible files.")
        return records

    @staticmethod
    def _validate_root(root: str) -> str:
        path = os.path.abspath(os.path.expanduser(root))
        if not os.path.exists(path):
            logger.error(f"Directory does not exist: {root}")
            raise PathNotFoundError(root)
        if not os.path.isdir(path):
            logger.error(f"Not a directory: {root}")
            raise PathNotFoundError(root, f"Not a folder: {root}")
        return path

    @staticmethod
    def _raise_scan_error(error: OSError) -> None:
        """os.walk error hook: any traversal failure aborts the scan."""
        raise ScanError(f"Failed to list {error.filename}: {error.strerror or error}") from error

    def _walk_root(self, root: str, stopped_flag: Optional[Callable[[], bool]] = None) -> List[_Entry]:
        real_root = os.path.realpath(root)
        entries: List[_Entry] = []

        logger.debug(f"Scanning directory: {root}")
        for dirpath, dirnames, filenames in os.walk(root, onerror=self._raise_scan_error):
            if stopped_flag and stopped_flag():
                return entries

            # Pre-filter subdirectories BEFORE os.walk enters them
            dirnames[:] = sorted(d for d in dirnames if self._prefilter_dir(dirpath, d))

            for filename in sorted(filenames):
                path = os.path.join(dirpath, filename)
                try:
                    st = os.lstat(path)
                except FileNotFoundError:
                    logger.debug(f"File vanished during scan: {path}")
                    continue
                except OSError as e:
                    raise ScanError(f"Failed to read metadata of {path}: {e}") from e

                if not is_eligible(path, st.st_mode, root):
                    logger.debug(f"Skipping ineligible entry: {path}")
                    continue

                canonical = os.path.join(real_root, os.path.relpath(path, root))
                entries.append((path, canonical, st))
        return entries

    @staticmethod
    def _prefilter_dir(dirpath: str, name: str) -> bool:
        """Skip bundle directories; nothing below them is eligible."""
        if is_bundle_dir_name(name):
            logger.debug(f"Skipping bundle directory: {os.path.join(dirpath, name)}")
            return False
        return True

    @staticmethod
    def _merge(per_root: List[List[_Entry]],
               progress_callback: Optional[Callable[[str, int, object], None]] = None) -> List[FileRecord]:
        """
        Concatenate per-root results in root order and keep the first occurrence
        of every physical path. Distinct paths sharing an inode are all kept.
        """
        # Progress throttling: update every N files to reduce overhead
        progress_interval = 5000
        seen = set()
        records: List[FileRecord] = []

        for entries in per_root:
            for path, canonical, st in entries:
                key = (st.st_dev, st.st_ino, os.path.normcase(canonical))
                if key in seen:
                    logger.debug(f"Already scanned through another root: {path}")
                    continue
                seen.add(key)
                records.append(FileRecord(
                    path=path,
                    size=st.st_size,
                    device=st.st_dev,
                    inode=st.st_ino,
                    scan_index=len(records),
                ))
                if progress_callback and len(records) % progress_interval == 0:
                    progress_callback('scanning', len(records), None)

        if progress_callback:
            progress_callback('scanning', len(records), None)
        return records
