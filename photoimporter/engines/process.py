"""Process execution for the external tools."""
from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessOutput:
    """Captured result of one external process run."""
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def combined(self) -> str:
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


class SubprocessRunner:
    """ProcessRunner backed by subprocess.run.

    Calls block until the tool exits. No timeout is applied unless one
    is given; an expired timeout is reported as a failed run.
    """

    TIMEOUT_RETURNCODE = -1

    def __init__(self, timeout: Optional[float] = None):
        """Initialize the runner.

        Args:
            timeout: Seconds to wait for each process, None to wait forever.
        """
        self._timeout = timeout

    def run(
        self,
        executable: Union[str, Path],
        args: Sequence[str],
        cwd: Optional[Path] = None,
    ) -> ProcessOutput:
        command = [str(executable), *args]
        logger.debug(f"Running: {subprocess.list2cmdline(command)}")
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                errors="replace",
                cwd=cwd,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            logger.error(f"Timed out after {self._timeout}s: {command[0]}")
            return ProcessOutput(
                returncode=self.TIMEOUT_RETURNCODE,
                stdout=_decode(e.stdout),
                stderr=f"timed out after {self._timeout}s",
            )
        return ProcessOutput(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )


def _decode(data: Union[bytes, str, None]) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode(errors="replace")
    return data
