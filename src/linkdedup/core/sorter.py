"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/sorter.py
Pure ordering logic for duplicate groups, no dependencies outside core.
Decides which member of every group is the original.
"""
from typing import List

from linkdedup.core.models import DuplicateGroup, FileRecord


class Sorter:
    """
    Orders files inside duplicate groups, and the groups themselves.
    Modifies in-place.
    Sorting priority (applied lexicographically):
    1. Scan position of the first member sharing the file's inode
       (the storage object found first wins)
    2. The file's own scan position
    So files[0] is always the first file met during the scan, and other paths
    to the same inode follow it directly.
    """

    @staticmethod
    def canonical_key(group: DuplicateGroup):
        first_seen = {}
        for file in group.files:
            index = first_seen.get(file.inode_key)
            if index is None or file.scan_index < index:
                first_seen[file.inode_key] = file.scan_index

        def key_func(f: FileRecord):
            return first_seen[f.inode_key], f.scan_index
        return key_func

    @staticmethod
    def sort_files_inside_groups(groups: List[DuplicateGroup]) -> None:
        if not groups:
            return
        for group in groups:
            group.files.sort(key=Sorter.canonical_key(group))

    @staticmethod
    def sort_groups(groups: List[DuplicateGroup]) -> None:
        """Order groups by the scan position of their original. Call after sorting members."""
        groups.sort(key=lambda g: g.original.scan_index if g.files else 0)
