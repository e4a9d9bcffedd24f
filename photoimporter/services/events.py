"""Notifications for a presentation layer.

Publishing is fire-and-forget: nothing in the import pipeline depends
on whether an event was delivered.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.protocols import EventSink

logger = logging.getLogger(__name__)


# Import lifecycle
IMPORT_STARTED = "import-started"
FILE_PROCESSED = "file-processed"
IMPORT_FINISHED = "import-finished"
IMPORT_FAILED = "import-failed"

# Menu actions
SELECT_ALL = "select-all"
DESELECT_ALL = "deselect-all"
INVERT_SELECTION = "invert"
IMPORT_SELECTED = "import-selected"


class NullEventSink:
    """Discards every event."""

    def publish(self, name: str, payload: Optional[dict[str, Any]] = None) -> None:
        pass


class LoggingEventSink:
    """Writes events to the log at debug level."""

    def publish(self, name: str, payload: Optional[dict[str, Any]] = None) -> None:
        logger.debug(f"Event {name}: {payload or {}}")


@dataclass
class RecordingEventSink:
    """Keeps published events in memory, in order."""
    events: list[tuple[str, dict[str, Any]]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def publish(self, name: str, payload: Optional[dict[str, Any]] = None) -> None:
        with self._lock:
            self.events.append((name, dict(payload or {})))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def clear(self) -> None:
        with self._lock:
            self.events.clear()


class MenuActions:
    """Menu commands forwarded to the presentation layer as events."""

    def __init__(self, sink: EventSink):
        self._sink = sink

    def select_all(self) -> None:
        self._emit(SELECT_ALL)

    def select_none(self) -> None:
        self._emit(DESELECT_ALL)

    def invert(self) -> None:
        self._emit(INVERT_SELECTION)

    def import_selected(self) -> None:
        self._emit(IMPORT_SELECTED)

    def _emit(self, name: str) -> None:
        self._sink.publish(name)
        logger.debug(f"{name} event emitted")
