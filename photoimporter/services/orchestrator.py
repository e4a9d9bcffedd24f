"""Batch import - runs files through the dispatcher in order."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from ..core.config import ImportPolicy
from ..core.errors import PolicyError
from ..core.models import BatchResult, ImportResult, MediaEntry
from ..core.protocols import EventSink, ProgressReporter
from .dispatcher import ConversionDispatcher
from .events import (
    FILE_PROCESSED,
    IMPORT_FAILED,
    IMPORT_FINISHED,
    IMPORT_STARTED,
    NullEventSink,
)
from .scanner import MediaScanner

logger = logging.getLogger(__name__)


class ImportOrchestrator:
    """Imports a batch of files one at a time, stopping at the first failure.

    Files are never reordered or run in parallel: creating folders and
    deleting originals cannot be undone, so a failed batch always stops
    at a known file with everything before it completed.

    All dependencies are injected - no global state.
    """

    def __init__(
        self,
        dispatcher: ConversionDispatcher,
        events: Optional[EventSink] = None,
        progress: Optional[ProgressReporter] = None,
        scanner: Optional[MediaScanner] = None,
    ):
        """Initialize orchestrator.

        Args:
            dispatcher: Per-file import step.
            events: Receives start/per-file/finish notifications.
            progress: Optional terminal progress reporter.
            scanner: Used by import_from_source.
        """
        self._dispatcher = dispatcher
        self._events = events or NullEventSink()
        self._progress = progress
        self._scanner = scanner or MediaScanner()

    def import_batch(
        self,
        files: Iterable[Union[MediaEntry, Path, str]],
        policy: ImportPolicy,
    ) -> BatchResult:
        """Import files in input order.

        Returns:
            BatchResult with one result per attempted file. If a file
            failed, it is the last result and its error is the batch error.
        """
        sources = [f.path if isinstance(f, MediaEntry) else Path(f) for f in files]
        total = len(sources)

        logger.info(f"Starting import of {total} files to {policy.destination_root}")
        self._events.publish(IMPORT_STARTED, {
            "total": total,
            "destination": str(policy.destination_root),
        })
        if self._progress:
            self._progress.start_phase("Importing", total)

        results: list[ImportResult] = []
        try:
            for index, source in enumerate(sources, start=1):
                result = self._dispatcher.process(source, policy)
                results.append(result)

                self._events.publish(FILE_PROCESSED, {
                    "index": index,
                    "total": total,
                    "source": str(result.source_path),
                    "destination": str(result.destination_path) if result.destination_path else None,
                    "outcome": result.outcome.value,
                    "deleted": result.deleted,
                })
                if self._progress:
                    self._progress.advance_phase()

                if not result.is_success:
                    return self._fail(results, result, total)
        finally:
            if self._progress:
                self._progress.end_phase()

        batch = BatchResult(results=tuple(results))
        logger.info(f"Successfully processed {len(results)} files")
        self._events.publish(IMPORT_FINISHED, batch.summary())
        return batch

    def import_from_source(self, policy: ImportPolicy) -> BatchResult:
        """Scan policy.source_root and import everything found.

        Raises:
            PolicyError: the policy has no source root.
            ScanError: the source could not be walked.
        """
        if policy.source_root is None:
            raise PolicyError("no source selected to import from")
        entries = self._scanner.scan(policy.source_root)
        return self.import_batch(entries, policy)

    def _fail(self, results: list[ImportResult], failed: ImportResult, total: int) -> BatchResult:
        error = failed.error
        remaining = total - len(results)
        logger.error(
            f"Import stopped at {failed.source_path} ({error.stage.value}); "
            f"{remaining} files not attempted"
        )
        self._events.publish(IMPORT_FAILED, {
            "source": str(failed.source_path),
            "stage": error.stage.value,
            "reason": error.reason,
            "not_attempted": remaining,
        })
        if self._progress:
            self._progress.error(str(error))
        return BatchResult(results=tuple(results), error=error)
