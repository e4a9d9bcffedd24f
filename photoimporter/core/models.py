"""Domain models - immutable data classes."""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import ImportStage, ImportStageError, CacheExtractionSoftFailure


CAPTURE_DATE_FORMAT = "%Y-%m-%d"
_CAPTURE_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


class ImportOutcome(Enum):
    """What happened to a single file."""
    COPIED = "copied"
    CONVERTED = "converted"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class MediaEntry:
    """A media file discovered on the source medium."""
    path: Path
    size_bytes: int
    mime_type: str = ""
    is_file: bool = True

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def extension(self) -> str:
        return self.path.suffix.lower()

    def to_dict(self) -> dict:
        return {
            "path": str(self.path),
            "is_file": self.is_file,
            "size": self.size_bytes,
            "mime_type": self.mime_type,
            "filename": self.filename,
        }


@dataclass(frozen=True, slots=True)
class CaptureDate:
    """Capture date as reported by the metadata tool, in YYYY-MM-DD form.

    The text is kept even when it is not a real calendar date (cameras
    without a clock set report 0000:00:00), so folder naming can fall
    back to it.
    """
    text: str

    @classmethod
    def from_date(cls, value: date) -> "CaptureDate":
        return cls(value.strftime(CAPTURE_DATE_FORMAT))

    def to_date(self) -> Optional[date]:
        """Parse the text, returning None if it is not a valid date."""
        match = _CAPTURE_DATE_RE.match(self.text)
        if not match:
            return None
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Outcome of importing one file."""
    source_path: Path
    outcome: ImportOutcome
    destination_path: Optional[Path] = None
    deleted: bool = False
    error: Optional[ImportStageError] = None

    @property
    def is_success(self) -> bool:
        return self.outcome != ImportOutcome.FAILED

    @property
    def stage(self) -> Optional[ImportStage]:
        return self.error.stage if self.error else None

    @property
    def reason(self) -> Optional[str]:
        return self.error.reason if self.error else None


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Ordered per-file results plus the first hard error, if any."""
    results: tuple[ImportResult, ...]
    error: Optional[ImportStageError] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def copied(self) -> int:
        return sum(1 for r in self.results if r.outcome == ImportOutcome.COPIED)

    @property
    def converted(self) -> int:
        return sum(1 for r in self.results if r.outcome == ImportOutcome.CONVERTED)

    @property
    def deleted(self) -> int:
        return sum(1 for r in self.results if r.deleted)

    def raise_for_error(self) -> None:
        """Re-raise the error that stopped the batch."""
        if self.error is not None:
            raise self.error

    def summary(self) -> dict[str, int]:
        return {
            "processed": len(self.results),
            "copied": self.copied,
            "converted": self.converted,
            "deleted": self.deleted,
            "failed": 0 if self.error is None else 1,
        }


@dataclass(frozen=True, slots=True)
class ThumbnailRecord:
    """A cached preview keyed by the content hash of its source."""
    source_path: Path
    content_hash: str
    cache_path: Path
    exists: bool
    cache_hit: bool = False
    soft_failure: Optional[CacheExtractionSoftFailure] = None

    def to_dict(self) -> dict:
        return {
            "thumbnail_path": str(self.cache_path),
            "original_path": str(self.source_path),
            "hash": self.content_hash,
        }
