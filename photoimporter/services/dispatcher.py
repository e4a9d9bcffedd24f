"""Per-file import: copy or convert into the destination tree."""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional, Union

from ..core.config import ImportPolicy
from ..core.errors import (
    CopyFailed,
    DeleteFailed,
    DestinationCreateFailed,
    ImportStageError,
)
from ..core.models import CaptureDate, ImportOutcome, ImportResult, MediaEntry
from ..core.protocols import MetadataProbe
from ..engines.converter import DngConverter
from .resolver import resolve_subfolder

logger = logging.getLogger(__name__)


class ConversionDispatcher:
    """Imports a single file according to an ImportPolicy.

    Steps, each of which can stop the file with a stage error:
    1. probe the capture date (date-pattern subfolders only)
    2. create the destination directory
    3. convert to DNG, or
    4. copy byte-for-byte
    5. delete the original if requested

    Stage failures are returned as FAILED results, never raised.
    """

    def __init__(self, probe: MetadataProbe, converter: DngConverter):
        """Initialize dispatcher.

        Args:
            probe: Capture-date source.
            converter: DNG converter used when the policy asks for conversion.
        """
        self._probe = probe
        self._converter = converter

    def process(self, file: Union[MediaEntry, Path, str], policy: ImportPolicy) -> ImportResult:
        source = file.path if isinstance(file, MediaEntry) else Path(file)
        logger.debug(f"Processing file: {source}")

        try:
            return self._process(source, policy)
        except ImportStageError as e:
            logger.error(str(e))
            return ImportResult(
                source_path=source,
                outcome=ImportOutcome.FAILED,
                destination_path=e.destination_path,
                error=e,
            )

    def destination_dir(self, source: Path, policy: ImportPolicy) -> Path:
        """Resolve the destination directory, probing the date if needed.

        Raises:
            ExtractionFailed: the capture date is required but unavailable.
        """
        shot_date: Optional[CaptureDate] = None
        if policy.requires_capture_date:
            shot_date = self._probe.capture_date(source)

        subfolder = resolve_subfolder(
            shot_date,
            policy.subfolder_mode,
            custom_name=policy.custom_subfolder_name,
            pattern=policy.subfolder_pattern,
        )
        return policy.destination_root / subfolder if subfolder else policy.destination_root

    def _process(self, source: Path, policy: ImportPolicy) -> ImportResult:
        dest_dir = self.destination_dir(source, policy)

        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DestinationCreateFailed(
                source, f"failed to create destination directory {dest_dir}: {e}"
            ) from e

        if policy.convert_to_archival:
            destination = self._converter.convert(source, dest_dir, policy)
            outcome = ImportOutcome.CONVERTED
        else:
            destination = dest_dir / source.name
            copy_file(source, destination)
            outcome = ImportOutcome.COPIED

        deleted = False
        if policy.delete_original:
            logger.debug(f"Deleting original file: {source}")
            try:
                source.unlink()
            except OSError as e:
                raise DeleteFailed(
                    source,
                    f"failed to delete original file: {e}",
                    destination_path=destination,
                ) from e
            deleted = True

        return ImportResult(
            source_path=source,
            outcome=outcome,
            destination_path=destination,
            deleted=deleted,
        )


def copy_file(source: Path, target: Path) -> None:
    """Copy contents and permission bits.

    Raises:
        CopyFailed: on any I/O error.
    """
    logger.debug(f"Copying file to: {target}")
    try:
        shutil.copy2(source, target)
    except (OSError, shutil.Error) as e:
        raise CopyFailed(source, f"failed to copy file: {e}") from e
