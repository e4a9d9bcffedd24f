"""Memory card import: scan, copy or convert into a dated folder tree.

Also keeps a content-addressed cache of embedded thumbnails for browsing.
"""

__version__ = "1.0.0"

# Core exports
from .core.config import ImportPolicy, SubfolderMode, PreviewSize, ConversionMethod, ToolPaths
from .core.models import MediaEntry, CaptureDate, ImportOutcome, ImportResult, BatchResult, ThumbnailRecord
from .core.protocols import ProcessRunner, MetadataProbe, SettingsStore, EventSink, ProgressReporter
from .core.errors import (
    PhotoImporterError,
    PolicyError,
    ScanError,
    ImportStageError,
    PathOutsideCache,
    ThumbnailError,
)

# Engine exports
from .engines.process import SubprocessRunner
from .engines.exiftool import ExifTool, ExifToolMetadataProbe
from .engines.converter import DngConverter

# Service exports
from .services.scanner import MediaScanner
from .services.resolver import resolve_subfolder
from .services.dispatcher import ConversionDispatcher
from .services.orchestrator import ImportOrchestrator
from .services.thumbnails import ThumbnailCache

# Persistence exports
from .persistence.settings import JsonSettingsStore

# Logging exports
from .logging.rich_logger import RichProgressReporter

__all__ = [
    # Core
    "ImportPolicy",
    "SubfolderMode",
    "PreviewSize",
    "ConversionMethod",
    "ToolPaths",
    "MediaEntry",
    "CaptureDate",
    "ImportOutcome",
    "ImportResult",
    "BatchResult",
    "ThumbnailRecord",
    "ProcessRunner",
    "MetadataProbe",
    "SettingsStore",
    "EventSink",
    "ProgressReporter",
    "PhotoImporterError",
    "PolicyError",
    "ScanError",
    "ImportStageError",
    "PathOutsideCache",
    "ThumbnailError",
    # Engines
    "SubprocessRunner",
    "ExifTool",
    "ExifToolMetadataProbe",
    "DngConverter",
    # Services
    "MediaScanner",
    "resolve_subfolder",
    "ConversionDispatcher",
    "ImportOrchestrator",
    "ThumbnailCache",
    # Persistence
    "JsonSettingsStore",
    # Logging
    "RichProgressReporter",
]
