"""Core domain models, configuration and protocols."""
from .protocols import (
    ProcessRunner,
    MetadataProbe,
    SettingsStore,
    EventSink,
    ProgressReporter,
)
from .models import (
    MediaEntry,
    CaptureDate,
    ImportOutcome,
    ImportResult,
    BatchResult,
    ThumbnailRecord,
)
from .config import (
    ImportPolicy,
    SubfolderMode,
    PreviewSize,
    ConversionMethod,
    ToolPaths,
)
from .errors import (
    ImportStage,
    PhotoImporterError,
    PolicyError,
    ScanError,
    ImportStageError,
    ExtractionFailed,
    DestinationCreateFailed,
    ConversionFailed,
    CopyFailed,
    DeleteFailed,
    ThumbnailError,
    PathOutsideCache,
    CacheExtractionSoftFailure,
)

__all__ = [
    # Protocols
    "ProcessRunner",
    "MetadataProbe",
    "SettingsStore",
    "EventSink",
    "ProgressReporter",
    # Models
    "MediaEntry",
    "CaptureDate",
    "ImportOutcome",
    "ImportResult",
    "BatchResult",
    "ThumbnailRecord",
    # Config
    "ImportPolicy",
    "SubfolderMode",
    "PreviewSize",
    "ConversionMethod",
    "ToolPaths",
    # Errors
    "ImportStage",
    "PhotoImporterError",
    "PolicyError",
    "ScanError",
    "ImportStageError",
    "ExtractionFailed",
    "DestinationCreateFailed",
    "ConversionFailed",
    "CopyFailed",
    "DeleteFailed",
    "ThumbnailError",
    "PathOutsideCache",
    "CacheExtractionSoftFailure",
]
