"""External tool engines and hashing."""
from .process import ProcessOutput, SubprocessRunner
from .exiftool import ExifTool, ExifToolMetadataProbe
from .converter import DngConverter, converter_args
from .hash_engine import content_hash

__all__ = [
    "ProcessOutput",
    "SubprocessRunner",
    "ExifTool",
    "ExifToolMetadataProbe",
    "DngConverter",
    "converter_args",
    "content_hash",
]
