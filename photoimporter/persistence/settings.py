"""File-backed settings store.

Each key is a file under the settings directory holding raw JSON text,
the same layout the desktop shell's config store writes. The core only
ever reads it.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..core.config import default_settings_dir
from ..core.errors import PolicyError

logger = logging.getLogger(__name__)


class JsonSettingsStore:
    """Read-only key/value store backed by one file per key."""

    def __init__(self, directory: Optional[Path] = None):
        """Initialize store.

        Args:
            directory: Settings directory, defaults to <config dir>/PhotoImporter.
        """
        self._directory = Path(directory) if directory else default_settings_dir()

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        if not key or Path(key).name != key:
            raise PolicyError(f"invalid settings key: {key!r}")
        return self._directory / key

    def get(self, key: str, default: str = "{}") -> str:
        """Return the text stored under key, or default if nothing is stored.

        Raises:
            PolicyError: the key is not a plain file name, or the file
                exists but cannot be read.
        """
        path = self.path_for(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug(f"No stored settings at {path}, using default")
            return default
        except OSError as e:
            raise PolicyError(f"cannot read settings {path}: {e}") from e

        return text if text.strip() else default
