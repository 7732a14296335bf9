"""File content comparison with a hash cache.

This module provides the FileHasher class for computing SHA256 hashes of
files with an in-memory cache. It backs the CHECK_REPLACE conflict action:
when a chart file exists on both sides of a merge, identical copies are
dropped and differing copies are kept under a new name.

Example:
    >>> from bmspack.scanning import FileHasher
    >>> hasher = FileHasher()
    >>> hasher.files_identical(Path("a/song.bms"), Path("b/song.bms"))
    True
"""

import hashlib
from pathlib import Path
from typing import Dict, Tuple

# Buffer size for chunked file reading (64KB)
CHUNK_SIZE = 65536


class FileHasher:
    """Computes SHA256 hashes of files with caching support.

    The cache is keyed by (resolved path, size, mtime) so a file that
    changes between two lookups is hashed again.

    Attributes:
        _cache: Mapping of cache keys to SHA256 hex digests.
        _cache_hits: Counter for cache hits.
        _cache_misses: Counter for cache misses.
    """

    def __init__(self) -> None:
        self._cache: Dict[Tuple[Path, int, float], str] = {}
        self._cache_hits: int = 0
        self._cache_misses: int = 0

    def hash_file(self, file_path: Path) -> str:
        """Compute the SHA256 hash of a file.

        Args:
            file_path: Path to the file to hash.

        Returns:
            The SHA256 hex digest of the file.

        Raises:
            OSError: If the file cannot be stat'ed or read.
        """
        resolved_path = file_path.resolve()
        stat_result = resolved_path.stat()

        cache_key = (resolved_path, stat_result.st_size, stat_result.st_mtime)
        if cache_key in self._cache:
            self._cache_hits += 1
            return self._cache[cache_key]

        self._cache_misses += 1
        sha256_hash = hashlib.sha256()
        with open(resolved_path, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                sha256_hash.update(chunk)

        hash_value = sha256_hash.hexdigest()
        self._cache[cache_key] = hash_value
        return hash_value

    def files_identical(self, first: Path, second: Path) -> bool:
        """Report whether two files have identical content.

        Files of different sizes are never hashed.
        """
        if first.stat().st_size != second.stat().st_size:
            return False
        return self.hash_file(first) == self.hash_file(second)

    def get_cache_stats(self) -> Dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with 'size', 'hits' and 'misses'.
        """
        return {
            "size": len(self._cache),
            "hits": self._cache_hits,
            "misses": self._cache_misses,
        }
