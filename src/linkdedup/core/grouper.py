"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Implements file grouping strategies using FileRecord objects and a Hasher.
Hash keys are computed on a bounded thread pool; partitions keep input order.
"""

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from typing import List, Dict, Tuple, Any, Callable, Optional

from linkdedup.core.interfaces import FileGrouper, Hasher
from linkdedup.core.models import FileRecord
from linkdedup.core.hasher import HasherImpl
from linkdedup.errors import HashError

logger = logging.getLogger(__name__)


class FileGrouperImpl(FileGrouper):
    """
    A concrete implementation of FileGrouper.
    Uses an injected Hasher instance for flexibility and testability.

    Files whose hash cannot be computed are left out of every group and
    remembered in `failures` as (path, reason) pairs.
    """

    def __init__(self, hasher: Optional[Hasher] = None, max_workers: int = 8):
        self.hasher = hasher or HasherImpl()
        self.max_workers = max(1, max_workers)
        self.failures: List[Tuple[str, str]] = []

    def group_by_size(self, files: List[FileRecord]) -> Dict[int, List[FileRecord]]:
        """Groups files by their size."""
        return self._group_by(files, lambda f: f.size)

    def group_by_front_hash(self, files: List[FileRecord]) -> Dict[bytes, List[FileRecord]]:
        """Groups files by front hash."""
        return self._group_by(files, self.hasher.compute_front_hash, parallel=True)

    def group_by_full_hash(self, files: List[FileRecord]) -> Dict[bytes, List[FileRecord]]:
        """Groups files by full content hash."""
        return self._group_by(files, self.hasher.compute_full_hash, parallel=True)

    def _group_by(self,
                  files: List[FileRecord],
                  key_func: Callable[[FileRecord], Any],
                  parallel: bool = False) -> Dict[Any, List[FileRecord]]:
        """
        Helper method to group files by any computed key.
        Args:
            files: List of files to group
            key_func: Function that computes a hashable key from a FileRecord
            parallel: Compute keys on the thread pool (for I/O-bound keys)
        Returns:
            Dict[key, List[FileRecord]] with groups of two or more files,
            members in the same relative order as `files`
        """
        if parallel and len(files) > 1 and self.max_workers > 1:
            workers = min(self.max_workers, len(files))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                keys = list(executor.map(lambda f: self._safe_key(f, key_func), files))
        else:
            keys = [self._safe_key(f, key_func) for f in files]

        groups = defaultdict(list)
        skipped_files = 0
        for file, key in zip(files, keys):
            if key is None:
                skipped_files += 1
                continue
            groups[key].append(file)

        if skipped_files > 0:
            logger.warning(f"Skipped {skipped_files} files due to hash computation errors")

        # Avoid groups with less than 2 files
        return {key: group for key, group in groups.items() if len(group) >= 2}

    def _safe_key(self, file: FileRecord, key_func: Callable[[FileRecord], Any]) -> Any:
        try:
            return key_func(file)
        except HashError as e:
            logger.warning(f"Error processing {file.path}: {e}")
            self.failures.append((file.path, str(e)))
            return None
