"""Protocol definitions (interfaces) for dependency injection."""
from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Protocol, Sequence, Union

from .models import CaptureDate

if TYPE_CHECKING:
    from ..engines.process import ProcessOutput


class ProcessRunner(Protocol):
    """Runs an external program to completion.

    Implementations:
    - SubprocessRunner: real processes via subprocess.run
    - test doubles that record invocations
    """

    @abstractmethod
    def run(
        self,
        executable: Union[str, Path],
        args: Sequence[str],
        cwd: Optional[Path] = None,
    ) -> "ProcessOutput":
        """Run and capture stdout/stderr. Raises OSError if it cannot start."""
        ...


class MetadataProbe(Protocol):
    """Interface for reading the capture date of a file."""

    @abstractmethod
    def capture_date(self, path: Path) -> CaptureDate:
        """Return the capture date. Raises ExtractionFailed."""
        ...


class SettingsStore(Protocol):
    """Read-only view of the persisted key/value settings."""

    @abstractmethod
    def get(self, key: str, default: str = "") -> str:
        """Return the raw JSON text stored under key."""
        ...


class EventSink(Protocol):
    """Receives fire-and-forget notifications for a presentation layer."""

    @abstractmethod
    def publish(self, name: str, payload: Optional[dict[str, Any]] = None) -> None:
        ...


class ProgressReporter(Protocol):
    """Interface for progress reporting."""

    @abstractmethod
    def start_phase(self, name: str, total: int) -> None:
        """Start a new processing phase."""
        ...

    @abstractmethod
    def advance_phase(self, amount: int = 1) -> None:
        """Advance the current phase by an amount."""
        ...

    @abstractmethod
    def end_phase(self) -> None:
        """Complete current phase."""
        ...

    @abstractmethod
    def info(self, message: str) -> None:
        """Log an info message."""
        ...

    @abstractmethod
    def warning(self, message: str) -> None:
        """Log a warning message."""
        ...

    @abstractmethod
    def error(self, message: str) -> None:
        """Log an error message."""
        ...
