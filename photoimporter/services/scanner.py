"""Source medium scanning service."""
from __future__ import annotations

import logging
import stat
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterator

import magic

from ..core.errors import ScanError
from ..core.models import MediaEntry

logger = logging.getLogger(__name__)


HIDDEN_PREFIX = "."

RAW_EXTENSIONS = frozenset({
    ".3fr", ".ari", ".arw", ".srf", ".sr2", ".bay", ".braw", ".cri", ".crw",
    ".cr2", ".cr3", ".cap", ".iiq", ".eip", ".dcs", ".dcr", ".drf", ".k25",
    ".kdc", ".dng", ".erf", ".fff", ".gpr", ".jxs", ".mef", ".mdc", ".mos",
    ".mrw", ".nef", ".nrw", ".orf", ".pef", ".ptx", ".pxn", ".r3d", ".raf",
    ".raw", ".rw2", ".rwl", ".rwz", ".srw", ".tco", ".x3f",
})

VIDEO_EXTENSIONS = frozenset({
    ".mov", ".mp4", ".m4v", ".mts", ".m2ts", ".avi", ".3gp",
})

ALLOWED_EXTENSIONS = RAW_EXTENSIONS | VIDEO_EXTENSIONS


def is_hidden(path: Path) -> bool:
    return path.name.startswith(HIDDEN_PREFIX)


def is_allowed(path: Path) -> bool:
    """Check the extension against the allow-list, ignoring case."""
    return path.suffix.lower() in ALLOWED_EXTENSIONS


def detect_mime_type(path: Path) -> str:
    """Sniff the MIME type from file content with libmagic.

    Returns an empty string if the file cannot be read.
    """
    try:
        return magic.from_file(str(path), mime=True)
    except (OSError, magic.MagicException) as e:
        logger.error(f"error detecting mime type for {str(path)!r}: {e}")
        return ""


class MediaScanner:
    """Finds importable media files below a source root.

    Hidden entries are pruned, only allow-listed extensions are kept
    and any walk error aborts the whole scan.
    """

    def __init__(self, workers: int = 1):
        """Initialize the scanner.

        Args:
            workers: Threads used for MIME sniffing. Output order is the
                walk order regardless of this value.
        """
        if workers < 1:
            raise ValueError("Workers must be at least 1")
        self._workers = workers

    def scan(self, root: Path) -> list[MediaEntry]:
        """Scan root and return one MediaEntry per matched file.

        Raises:
            ScanError: a directory could not be listed or a symlink is broken.
        """
        root = Path(root)
        if not root.is_dir():
            raise ScanError(root, "not a directory")

        found = list(self._walk(root))
        paths = [path for path, _ in found]

        if self._workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=self._workers) as executor:
                mimes = list(executor.map(detect_mime_type, paths))
        else:
            mimes = [detect_mime_type(path) for path in paths]

        entries = [
            MediaEntry(path=path, size_bytes=size, mime_type=mime)
            for (path, size), mime in zip(found, mimes)
        ]
        logger.info(f"Total files found: {len(entries)}")
        return entries

    def count(self, root: Path) -> tuple[int, int]:
        """Count matched files and their total size without sniffing.

        Returns:
            (file_count, total_bytes)
        """
        files = 0
        total = 0
        for _, size in self._walk(Path(root)):
            files += 1
            total += size
        return files, total

    def _walk(self, directory: Path) -> Iterator[tuple[Path, int]]:
        """Depth-first walk in case-insensitive name order."""
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name.lower())
        except OSError as e:
            raise ScanError(directory, e.strerror or str(e)) from e

        for entry in entries:
            if is_hidden(entry):
                continue

            try:
                info = entry.lstat()
            except OSError as e:
                raise ScanError(entry, e.strerror or str(e)) from e

            if stat.S_ISLNK(info.st_mode):
                try:
                    info = entry.stat()
                except OSError as e:
                    raise ScanError(entry, f"broken symlink: {e.strerror or e}") from e
                # Linked directories are not descended
                if stat.S_ISDIR(info.st_mode):
                    continue
            elif stat.S_ISDIR(info.st_mode):
                yield from self._walk(entry)
                continue

            if stat.S_ISREG(info.st_mode) and is_allowed(entry):
                yield entry, info.st_size
