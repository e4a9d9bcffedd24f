"""Exception hierarchy for the import pipeline and thumbnail cache.

Import failures carry the source path and the stage that failed so a
caller can tell the user exactly what went wrong and where.
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional


class ImportStage(Enum):
    """Step of a single-file import that can fail."""
    EXTRACTION = "extraction"
    DESTINATION = "destination"
    CONVERSION = "conversion"
    COPY = "copy"
    DELETE = "delete"


class PhotoImporterError(Exception):
    """Base exception for all photoimporter errors."""
    pass


class PolicyError(PhotoImporterError):
    """Raised when import settings are missing or malformed."""
    pass


class ScanError(PhotoImporterError):
    """Raised when walking a source tree fails."""

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"scan aborted at {self.path}: {reason}")


class ImportStageError(PhotoImporterError):
    """A file failed at one stage of the import.

    Abstract: raise one of the per-stage subclasses, which set `stage`.
    """

    stage: ImportStage

    def __init__(self, source_path: Path, reason: str, destination_path: Optional[Path] = None):
        if not hasattr(type(self), "stage"):
            raise TypeError(f"{type(self).__name__} is abstract; raise a per-stage subclass")
        self.source_path = Path(source_path)
        self.reason = reason
        self.destination_path = destination_path
        super().__init__(f"{self.stage.value} failed for {self.source_path}: {reason}")


class ExtractionFailed(ImportStageError):
    """The metadata tool produced no usable capture date."""
    stage = ImportStage.EXTRACTION


class DestinationCreateFailed(ImportStageError):
    stage = ImportStage.DESTINATION


class ConversionFailed(ImportStageError):
    """The external DNG converter failed."""
    stage = ImportStage.CONVERSION


class CopyFailed(ImportStageError):
    stage = ImportStage.COPY


class DeleteFailed(ImportStageError):
    """The original could not be removed after a successful copy/convert."""
    stage = ImportStage.DELETE


class ThumbnailError(PhotoImporterError):
    """Raised when a source file cannot be hashed for the thumbnail cache."""
    pass


class PathOutsideCache(PhotoImporterError):
    """A read was requested for a path outside the thumbnail cache root."""

    def __init__(self, path: Path, root: Path):
        self.path = Path(path)
        self.root = Path(root)
        super().__init__(f"path {str(self.path)!r} is not located in the thumbnail directory {str(self.root)!r}")


class CacheExtractionSoftFailure(PhotoImporterError):
    """Thumbnail extraction failed for one file.

    Never raised: it is logged and attached to the returned ThumbnailRecord
    so browsing can continue without that preview.
    """

    def __init__(self, source_path: Path, returncode: Optional[int], output: str = ""):
        self.source_path = Path(source_path)
        self.returncode = returncode
        self.output = output
        super().__init__(f"thumbnail extraction failed for {self.source_path} (exit {returncode}): {output.strip()}")

