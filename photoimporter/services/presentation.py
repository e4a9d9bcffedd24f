"""Hand-off of cached image bytes to a presentation layer."""
from __future__ import annotations

import base64
from pathlib import Path
from typing import Union

from .thumbnails import ThumbnailCache

JPEG_MIME = "image/jpeg"


def to_data_uri(data: bytes, mime_type: str = JPEG_MIME) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def load_image(cache: ThumbnailCache, cache_path: Union[str, Path]) -> str:
    """Read a cached thumbnail and return it as a data URI.

    Raises:
        PathOutsideCache: cache_path is outside the thumbnail cache.
    """
    return to_data_uri(cache.read(cache_path))
