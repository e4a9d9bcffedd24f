"""Content hashing for the thumbnail cache.

Uses xxh64 over the full byte stream: fast, non-cryptographic and
stable across runs, so identical bytes always map to the same cache key.
"""
from __future__ import annotations

from pathlib import Path

import xxhash

HASH_CHUNK_SIZE = 32 * 1024


def content_hash(path: Path, chunk_size: int = HASH_CHUNK_SIZE) -> str:
    """Hash the whole file in fixed-size chunks.

    Returns:
        16-character lowercase hex digest.

    Raises:
        OSError: the file cannot be opened or read.
    """
    hasher = xxhash.xxh64()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(chunk_size), b""):
            hasher.update(chunk)
    return hasher.hexdigest()
