"""ExifTool invocations: capture-date probing and thumbnail extraction."""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Union

from ..core.errors import ExtractionFailed
from ..core.models import CaptureDate
from ..core.protocols import ProcessRunner
from .process import ProcessOutput, SubprocessRunner

logger = logging.getLogger(__name__)


CAPTURE_DATE_TAG = "DateTimeOriginal"
EXIF_DATE_RE = re.compile(r"(\d{4}):(\d{2}):(\d{2})")


class ExifTool:
    """Thin wrapper around single exiftool invocations.

    The executable path is resolved once at startup (see ToolPaths) and
    every call goes through the injected ProcessRunner.
    """

    def __init__(
        self,
        executable: Union[str, Path] = "exiftool",
        runner: Optional[ProcessRunner] = None,
    ):
        self._executable = executable
        self._runner = runner or SubprocessRunner()

    @property
    def executable(self) -> Union[str, Path]:
        return self._executable

    def read_tag(self, path: Path, tag: str) -> ProcessOutput:
        """Read one tag value in its simplest printed form (-s3).

        Raises:
            OSError: exiftool could not be started.
        """
        return self._runner.run(self._executable, [f"-{tag}", "-s3", str(path)])

    def extract_thumbnail(self, path: Path, output_template: str) -> ProcessOutput:
        """Write the embedded thumbnail image using a -w filename template.

        Raises:
            OSError: exiftool could not be started.
        """
        return self._runner.run(
            self._executable,
            ["-thumbnailimage", "-b", "-w", output_template, str(path)],
        )


def parse_capture_date(output: str) -> Optional[CaptureDate]:
    """Find a YYYY:MM:DD date in exiftool output and return it as YYYY-MM-DD."""
    match = EXIF_DATE_RE.search(output.strip())
    if not match:
        return None
    year, month, day = match.groups()
    return CaptureDate(f"{year}-{month}-{day}")


class ExifToolMetadataProbe:
    """MetadataProbe that reads DateTimeOriginal with exiftool.

    A failure is reported once; retrying is left to the caller.
    """

    def __init__(self, exiftool: ExifTool):
        self._exiftool = exiftool

    def capture_date(self, path: Path) -> CaptureDate:
        try:
            result = self._exiftool.read_tag(path, CAPTURE_DATE_TAG)
        except OSError as e:
            raise ExtractionFailed(path, f"failed to execute exiftool: {e}") from e

        if not result.ok:
            raise ExtractionFailed(
                path,
                f"exiftool exited with status {result.returncode}: {result.stderr.strip()}",
            )

        shot_date = parse_capture_date(result.stdout)
        if shot_date is None:
            raise ExtractionFailed(path, "failed to extract shot date")

        logger.debug(f"Shot date for {path}: {shot_date}")
        return shot_date
