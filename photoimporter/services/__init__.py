"""Service layer - import pipeline and thumbnail cache."""
from .scanner import MediaScanner, ALLOWED_EXTENSIONS, detect_mime_type
from .resolver import resolve_subfolder, format_date_folder
from .dispatcher import ConversionDispatcher
from .orchestrator import ImportOrchestrator
from .thumbnails import ThumbnailCache
from .events import NullEventSink, LoggingEventSink, RecordingEventSink, MenuActions
from .presentation import to_data_uri, load_image

__all__ = [
    "MediaScanner",
    "ALLOWED_EXTENSIONS",
    "detect_mime_type",
    "resolve_subfolder",
    "format_date_folder",
    "ConversionDispatcher",
    "ImportOrchestrator",
    "ThumbnailCache",
    "NullEventSink",
    "LoggingEventSink",
    "RecordingEventSink",
    "MenuActions",
    "to_data_uri",
    "load_image",
]
