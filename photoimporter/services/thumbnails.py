"""Content-addressed thumbnail cache.

Cache files live at <root>/<source stem>_<xxh64>.jpg. The hash covers
the full source bytes, so a file is only ever extracted once no matter
what it is called, and a changed file gets a new entry.
"""
from __future__ import annotations

import logging
import os
import shutil
import threading
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from ..core.config import default_thumbnail_root
from ..core.errors import CacheExtractionSoftFailure, PathOutsideCache, ThumbnailError
from ..core.models import ThumbnailRecord
from ..engines.exiftool import ExifTool
from ..engines.hash_engine import HASH_CHUNK_SIZE, content_hash

logger = logging.getLogger(__name__)


THUMBNAIL_SUFFIX = ".jpg"


def _lexical(path: Union[str, Path]) -> Path:
    """Absolute, normalized path without touching the filesystem."""
    return Path(os.path.normpath(os.path.abspath(path)))


class ThumbnailCache:
    """Extracts embedded previews with exiftool and serves them back.

    - get(): hash, then return the cached file or extract it
    - read(): only serves files strictly inside the cache root
    - clear(): drops the whole cache

    Extraction failures are soft: they are logged and attached to the
    record, never raised, so one bad file cannot stop a browsing loop.
    """

    def __init__(
        self,
        exiftool: ExifTool,
        root: Optional[Path] = None,
        chunk_size: int = HASH_CHUNK_SIZE,
    ):
        """Initialize the cache.

        Args:
            exiftool: Used for embedded thumbnail extraction.
            root: Cache directory, defaults to <cache dir>/PhotoImporter/thumbnails.
            chunk_size: Read size used while hashing sources.
        """
        self._exiftool = exiftool
        self._root = _lexical(root or default_thumbnail_root())
        self._chunk_size = chunk_size
        self._key_locks: dict[str, threading.Lock] = {}
        self._key_users: dict[str, int] = {}
        self._registry_lock = threading.Lock()

    @property
    def root(self) -> Path:
        return self._root

    def cache_path_for(self, source: Path, digest: str) -> Path:
        return self._root / f"{source.stem}_{digest}{THUMBNAIL_SUFFIX}"

    def get(self, source: Union[str, Path]) -> ThumbnailRecord:
        """Return the cached thumbnail for source, extracting it on a miss.

        Raises:
            ThumbnailError: the source file could not be read for hashing.
        """
        source = Path(source)
        try:
            digest = content_hash(source, self._chunk_size)
        except OSError as e:
            raise ThumbnailError(f"cannot hash {source}: {e}") from e

        cache_path = self.cache_path_for(source, digest)

        with self._locked(digest):
            if cache_path.exists():
                logger.debug(f"thumbnail for {str(source)!r}, with hash {digest!r} already exists at {str(cache_path)!r}")
                return ThumbnailRecord(
                    source_path=source,
                    content_hash=digest,
                    cache_path=cache_path,
                    exists=True,
                    cache_hit=True,
                )

            failure = self._extract(source, digest)

        return ThumbnailRecord(
            source_path=source,
            content_hash=digest,
            cache_path=cache_path,
            exists=cache_path.exists(),
            soft_failure=failure,
        )

    def get_many(
        self,
        sources: Iterable[Union[str, Path]],
        workers: int = 4,
    ) -> list[Optional[ThumbnailRecord]]:
        """Run get() over many sources in a thread pool.

        Returns:
            Records in input order; None where the source could not be hashed.
        """
        def safe_get(source: Union[str, Path]) -> Optional[ThumbnailRecord]:
            try:
                return self.get(source)
            except ThumbnailError as e:
                logger.error(str(e))
                return None

        sources = list(sources)
        if workers <= 1 or len(sources) <= 1:
            return [safe_get(source) for source in sources]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(safe_get, sources))

    def read(self, cache_path: Union[str, Path]) -> bytes:
        """Read a cached thumbnail.

        The path is checked lexically before any filesystem access.

        Raises:
            PathOutsideCache: cache_path is not strictly inside the cache root.
            OSError: the file cannot be read.
        """
        candidate = _lexical(cache_path)
        if candidate == self._root or self._root not in candidate.parents:
            raise PathOutsideCache(Path(cache_path), self._root)
        return candidate.read_bytes()

    def clear(self) -> None:
        """Remove the whole cache root. A missing root is not an error."""
        logger.debug(f"Clear cache: {self._root}")
        try:
            shutil.rmtree(self._root)
        except FileNotFoundError:
            pass

    @contextmanager
    def _locked(self, digest: str) -> Iterator[None]:
        """Hold the lock for one content hash; the entry is dropped when unused."""
        with self._registry_lock:
            lock = self._key_locks.get(digest)
            if lock is None:
                lock = self._key_locks[digest] = threading.Lock()
                self._key_users[digest] = 0
            self._key_users[digest] += 1
        try:
            with lock:
                yield
        finally:
            with self._registry_lock:
                self._key_users[digest] -= 1
                if self._key_users[digest] == 0:
                    del self._key_users[digest]
                    del self._key_locks[digest]

    def _extract(self, source: Path, digest: str) -> Optional[CacheExtractionSoftFailure]:
        # exiftool expands %-codes in the whole -w argument
        escaped_root = str(self._root).replace("%", "%%")
        template = os.path.join(escaped_root, f"%f_{digest}{THUMBNAIL_SUFFIX}")

        failure: Optional[CacheExtractionSoftFailure] = None
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            result = self._exiftool.extract_thumbnail(source, template)
        except OSError as e:
            failure = CacheExtractionSoftFailure(source, None, str(e))
        else:
            if not result.ok:
                failure = CacheExtractionSoftFailure(source, result.returncode, result.combined)

        if failure is not None:
            logger.error(str(failure))
        return failure
