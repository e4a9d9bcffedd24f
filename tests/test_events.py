"""Tests for event sinks and menu actions."""
import logging
from unittest.mock import MagicMock

from photoimporter.services.events import (
    DESELECT_ALL,
    IMPORT_SELECTED,
    INVERT_SELECTION,
    SELECT_ALL,
    LoggingEventSink,
    MenuActions,
    NullEventSink,
    RecordingEventSink,
)


class TestEventSinks:
    """Tests for the bundled event sinks."""

    def test_recording_sink(self):
        sink = RecordingEventSink()
        sink.publish("a", {"x": 1})
        sink.publish("b")

        assert sink.events == [("a", {"x": 1}), ("b", {})]
        assert sink.names == ["a", "b"]

        sink.clear()
        assert sink.events == []

    def test_recording_sink_copies_payload(self):
        sink = RecordingEventSink()
        payload = {"x": 1}
        sink.publish("a", payload)
        payload["x"] = 2

        assert sink.events[0][1] == {"x": 1}

    def test_null_sink(self):
        NullEventSink().publish("anything", {"x": 1})

    def test_logging_sink(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="photoimporter.services.events"):
            LoggingEventSink().publish("file-processed", {"index": 1})

        assert "file-processed" in caplog.text


class TestMenuActions:
    """Menu commands become events with the names the presentation layer expects."""

    def test_event_names(self):
        sink = RecordingEventSink()
        actions = MenuActions(sink)

        actions.select_all()
        actions.select_none()
        actions.invert()
        actions.import_selected()

        assert sink.names == [SELECT_ALL, DESELECT_ALL, INVERT_SELECTION, IMPORT_SELECTED]
        assert sink.names == ["select-all", "deselect-all", "invert", "import-selected"]

    def test_no_payload(self):
        sink = MagicMock()
        MenuActions(sink).select_all()
        sink.publish.assert_called_once_with("select-all")
