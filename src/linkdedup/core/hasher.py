"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file hashing utilities using FileRecord and pluggable hash algorithms.

HasherImpl computes two kinds of digests:
- front hash: xxHash64 over the first `chunk_size` bytes, a cheap prefilter
- full hash: SHA-256 over the whole byte stream, the content fingerprint

Full hashes are cached per (device, inode), so hard links are read only once.
"""

import hashlib
import logging
import threading
from typing import Dict, Optional, Tuple

import xxhash

from linkdedup.core.models import FileRecord
from linkdedup.core.interfaces import Hasher, HashAlgorithm
from linkdedup.errors import HashError

logger = logging.getLogger(__name__)


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    @staticmethod
    def hash(data: bytes) -> bytes:
        return xxhash.xxh64(data).digest()

    @staticmethod
    def new():
        return xxhash.xxh64()


class SHA256AlgorithmImpl(HashAlgorithm):
    @staticmethod
    def hash(data: bytes) -> bytes:
        return hashlib.sha256(data).digest()

    @staticmethod
    def new():
        return hashlib.sha256()


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Computes and caches hashes for the front chunk and the full content of a file.

    Safe to call from several threads at once.
    """

    def __init__(self,
                 front_algorithm: Optional[HashAlgorithm] = None,
                 full_algorithm: Optional[HashAlgorithm] = None,
                 block_size: int = 64 * 1024):
        self.front_algorithm = front_algorithm or XXHashAlgorithmImpl()
        self.full_algorithm = full_algorithm or SHA256AlgorithmImpl()
        self.block_size = block_size
        self._full_cache: Dict[Tuple[int, int], bytes] = {}
        self._lock = threading.Lock()

    def compute_full_hash(self, file: FileRecord) -> bytes:
        """
        Stream the whole file through the full algorithm.

        Raises:
            HashError: the file can no longer be opened or read.
        """
        if file.hashes.full is not None:
            return file.hashes.full

        with self._lock:
            cached = self._full_cache.get(file.inode_key)
        if cached is not None:
            logger.debug(f"Reusing full hash of inode {file.inode} for {file.path}")
            file.hashes.full = cached
            return cached

        hasher = self.full_algorithm.new()
        try:
            with open(file.path, 'rb') as f:
                for block in iter(lambda: f.read(self.block_size), b''):
                    hasher.update(block)
        except OSError as e:
            raise HashError(file.path, f"Failed to read {file.path}: {e}") from e

        digest = hasher.digest()
        with self._lock:
            self._full_cache[file.inode_key] = digest
        file.hashes.full = digest
        return digest

    def compute_front_hash(self, file: FileRecord) -> bytes:
        """Computes and caches hash of the first N bytes of a file."""
        if file.hashes.front is not None:
            return file.hashes.front
        chunk_size = file.chunk_size if file.chunk_size is not None else file.size
        try:
            with open(file.path, 'rb') as f:
                data = f.read(chunk_size)
        except OSError as e:
            raise HashError(file.path, f"Error reading {file.path} at offset 0: {e}") from e
        result = self.front_algorithm.hash(data)
        file.hashes.front = result
        return result
