"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Filesystem mutations used when resolving duplicates: delete and hard link.
Errors are translated into the linkdedup exception hierarchy.
"""
import os
import logging

from linkdedup.errors import DeleteError, LinkError

logger = logging.getLogger(__name__)


class FileService:
    """
    File operations that change the tree.
    Static methods, so tests can patch them with mock.patch.object.
    """

    @staticmethod
    def delete_file(file_path: str) -> None:
        """Unlinks a file. Only this path goes away; other hard links stay."""
        try:
            os.unlink(file_path)
        except OSError as e:
            raise DeleteError(file_path, f"Failed to delete {file_path}: {e.strerror or e}") from e
        logger.debug(f"Deleted {file_path}")

    @staticmethod
    def hard_link(source_path: str, link_path: str) -> None:
        """Creates `link_path` as a new hard link to the storage object of `source_path`."""
        try:
            os.link(source_path, link_path)
        except OSError as e:
            raise LinkError(
                link_path,
                f"Failed to hard link {link_path} to {source_path}: {e.strerror or e}"
            ) from e
        logger.debug(f"Linked {link_path} -> {source_path}")
