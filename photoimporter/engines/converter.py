"""Adobe DNG Converter invocation."""
from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

from ..core.config import ConversionMethod, ImportPolicy, PreviewSize
from ..core.errors import ConversionFailed
from ..core.protocols import ProcessRunner
from .process import SubprocessRunner

logger = logging.getLogger(__name__)


PREVIEW_FLAGS = {
    PreviewSize.FULL: "-p2",
    PreviewSize.MEDIUM: "-p1",
    PreviewSize.NONE: "-p0",
}

DNG_EXTENSION = ".dng"


def converter_args(policy: ImportPolicy) -> list[str]:
    """Derive converter flags from the import policy.

    -p0/-p1/-p2 preview size, -c lossless or -u uncompressed,
    -l linear conversion, -e embed the original raw file.
    """
    args = [PREVIEW_FLAGS.get(policy.preview_size, "-p0")]

    if policy.lossless_compression:
        args.append("-c")
    else:
        args.append("-u")

    if policy.conversion_method == ConversionMethod.LINEAR:
        args.append("-l")

    if policy.embed_original:
        args.append("-e")

    return args


class DngConverter:
    """Runs the DNG converter for one file at a time."""

    def __init__(
        self,
        executable: Optional[Path],
        runner: Optional[ProcessRunner] = None,
    ):
        """Initialize the converter.

        Args:
            executable: Resolved converter path, None if not installed.
            runner: Process runner used for the conversion.
        """
        self._executable = executable
        self._runner = runner or SubprocessRunner()

    @property
    def executable(self) -> Optional[Path]:
        return self._executable

    def is_available(self) -> bool:
        """Whether the converter is installed. Never raises."""
        if self._executable is None:
            return False
        try:
            return self._executable.exists()
        except OSError:
            return False

    def build_command(self, source: Path, destination_dir: Path, policy: ImportPolicy) -> list[str]:
        return ["-mp", "-d", str(destination_dir), *converter_args(policy), str(source)]

    def convert(self, source: Path, destination_dir: Path, policy: ImportPolicy) -> Path:
        """Convert source into destination_dir.

        Returns:
            Expected path of the written DNG.

        Raises:
            ConversionFailed: converter missing, failed to start, or non-zero exit.
        """
        if not self.is_available():
            raise ConversionFailed(source, "DNG Converter is not available")

        args = self.build_command(source, destination_dir, policy)
        command_line = subprocess.list2cmdline([str(self._executable), *args])
        logger.debug(f"Converting to DNG: {command_line}")

        try:
            result = self._runner.run(self._executable, args)
        except OSError as e:
            raise ConversionFailed(source, f"DNG Converter failed: {e}, command: {command_line}") from e

        if not result.ok:
            raise ConversionFailed(
                source,
                f"DNG Converter failed with status {result.returncode}, "
                f"command: {command_line}, output: {result.combined.strip()}",
            )

        logger.debug(f"DNG conversion completed for: {source}")
        return destination_dir / f"{source.stem}{DNG_EXTENSION}"
