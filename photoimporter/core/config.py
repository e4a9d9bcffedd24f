"""Configuration models with validation.

ImportPolicy mirrors the settings file written by the desktop shell
(camelCase keys) and is validated once per batch. Tool locations and
cache directories are resolved once at startup and passed around as
read-only values.
"""
from __future__ import annotations

import json
import os
import shutil
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import PolicyError

if TYPE_CHECKING:
    from .protocols import SettingsStore


APP_NAME = "PhotoImporter"
CONFIG_STORE_FILENAME = "config.json"

EXIFTOOL_ENV = "PHOTOIMPORTER_EXIFTOOL"
CONVERTER_ENV = "PHOTOIMPORTER_DNG_CONVERTER"

MACOS_CONVERTER = Path("/Applications/Adobe DNG Converter.app/Contents/MacOS/Adobe DNG Converter")
WINDOWS_CONVERTER = Path(r"C:\Program Files\Adobe\Adobe DNG Converter\Adobe DNG Converter.exe")


class SubfolderMode(Enum):
    """How the destination subfolder is chosen."""
    NONE = "none"
    CUSTOM = "custom"
    DATE = "date"


class PreviewSize(str, Enum):
    """JPEG preview embedded in converted DNGs."""
    NONE = "none"
    MEDIUM = "medium"
    FULL = "fullSize"


class ConversionMethod(str, Enum):
    DEFAULT = "default"
    LINEAR = "linear"


class ImportPolicy(BaseModel):
    """Settings for one import batch.

    Field aliases match the keys stored by the settings shell, so a
    policy can be built straight from the stored JSON. Unknown keys and
    wrongly typed values are rejected.
    """
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    source_root: Optional[Path] = Field(
        default=None,
        alias="sourceDisk",
        description="Mount point or folder to import from",
    )
    destination_root: Path = Field(
        ...,
        alias="location",
        description="Root of the destination tree",
    )
    subfolder_pattern: str = Field(
        default="none",
        alias="createSubFoldersPattern",
        description="'none', 'custom' or a date pattern such as 'yyyymmdd'",
    )
    custom_subfolder_name: str = Field(
        default="",
        alias="customSubFolderName",
        description="Subfolder used when subfolder_pattern is 'custom'",
    )
    convert_to_archival: bool = Field(default=False, alias="convertToDng")
    delete_original: bool = Field(default=False, alias="deleteOriginal")
    preview_size: PreviewSize = Field(default=PreviewSize.MEDIUM, alias="jpegPreviewSize")
    lossless_compression: bool = Field(default=False, alias="compressedLossless")
    conversion_method: ConversionMethod = Field(
        default=ConversionMethod.DEFAULT,
        alias="imageConversionMethod",
    )
    embed_original: bool = Field(default=False, alias="embedOriginalRawFile")

    @field_validator("source_root", mode="before")
    @classmethod
    def expand_source(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return Path(value).expanduser() if isinstance(value, (str, Path)) else value

    @field_validator("destination_root", mode="before")
    @classmethod
    def expand_destination(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            raise ValueError("destination location must not be empty")
        return Path(value).expanduser() if isinstance(value, (str, Path)) else value

    @field_validator("subfolder_pattern")
    @classmethod
    def normalize_pattern(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("subfolder pattern must not be empty")
        return value

    @field_validator("custom_subfolder_name")
    @classmethod
    def check_custom_name(cls, value: str) -> str:
        if value and (Path(value).is_absolute() or ".." in Path(value).parts):
            raise ValueError(f"custom subfolder must stay inside the destination: {value!r}")
        return value

    @field_validator("conversion_method", mode="before")
    @classmethod
    def empty_method_is_default(cls, value: Any) -> Any:
        if value in ("", None):
            return ConversionMethod.DEFAULT
        return value

    @property
    def subfolder_mode(self) -> SubfolderMode:
        if self.subfolder_pattern == SubfolderMode.NONE.value:
            return SubfolderMode.NONE
        if self.subfolder_pattern == SubfolderMode.CUSTOM.value:
            return SubfolderMode.CUSTOM
        return SubfolderMode.DATE

    @property
    def requires_capture_date(self) -> bool:
        return self.subfolder_mode == SubfolderMode.DATE

    @classmethod
    def from_json(cls, raw: str) -> "ImportPolicy":
        """Build a policy from the settings JSON text."""
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            raise PolicyError(f"invalid import settings: {e}") from e

    @classmethod
    def from_settings(
        cls,
        store: "SettingsStore",
        key: str = CONFIG_STORE_FILENAME,
        **overrides: Any,
    ) -> "ImportPolicy":
        """Build a policy from stored settings, with field-name overrides on top.

        Overrides set to None are ignored, so stored values win unless a
        caller explicitly supplies one.
        """
        raw = store.get(key, "{}")
        try:
            stored = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PolicyError(f"settings {key!r} are not valid JSON: {e}") from e
        if not isinstance(stored, dict):
            raise PolicyError(f"settings {key!r} must hold a JSON object")

        for name, value in overrides.items():
            if value is None:
                continue
            field = cls.model_fields.get(name)
            if field is None:
                raise PolicyError(f"unknown import setting: {name}")
            stored[field.alias or name] = value

        try:
            return cls.model_validate(stored)
        except ValidationError as e:
            raise PolicyError(f"invalid import settings: {e}") from e

    def with_overrides(self, **kwargs: Any) -> "ImportPolicy":
        """Create a new policy with some values overridden (by field name)."""
        current = self.model_dump()
        current.update({k: v for k, v in kwargs.items() if v is not None})
        try:
            return type(self).model_validate(current)
        except ValidationError as e:
            raise PolicyError(f"invalid import settings: {e}") from e


def user_cache_dir() -> Path:
    """Platform cache directory (XDG on Linux)."""
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches"
    if sys.platform == "win32":
        return Path(os.environ.get("LOCALAPPDATA") or Path.home() / "AppData" / "Local")
    return Path(os.environ.get("XDG_CACHE_HOME") or Path.home() / ".cache")


def user_config_dir() -> Path:
    """Platform config directory (XDG on Linux)."""
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA") or Path.home() / "AppData" / "Roaming")
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")


def default_thumbnail_root() -> Path:
    return user_cache_dir() / APP_NAME / "thumbnails"


def default_settings_dir() -> Path:
    return user_config_dir() / APP_NAME


def locate_exiftool() -> Optional[Path]:
    """Find exiftool from the environment override or PATH."""
    override = os.environ.get(EXIFTOOL_ENV)
    if override:
        return Path(override)
    found = shutil.which("exiftool")
    return Path(found) if found else None


def locate_converter() -> Optional[Path]:
    """Find the DNG converter from the environment override or platform default."""
    override = os.environ.get(CONVERTER_ENV)
    if override:
        return Path(override)
    if sys.platform == "darwin":
        return MACOS_CONVERTER
    if sys.platform == "win32":
        return WINDOWS_CONVERTER
    found = shutil.which("dngconverter")
    return Path(found) if found else None


@dataclass(frozen=True, slots=True)
class ToolPaths:
    """Resolved locations of the external tools, built once at startup."""
    exiftool: Optional[Path]
    converter: Optional[Path]

    @classmethod
    def discover(cls) -> "ToolPaths":
        return cls(exiftool=locate_exiftool(), converter=locate_converter())

    @property
    def exiftool_command(self) -> str:
        return str(self.exiftool) if self.exiftool else "exiftool"
