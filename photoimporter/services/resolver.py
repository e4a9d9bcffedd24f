"""Destination subfolder naming.

Pure functions, no I/O. Two fallback tiers:
- an unknown pattern name formats as yyyymmdd
- a date that does not parse is returned as-is, so the file still
  lands in a folder named after whatever the camera reported
"""
from __future__ import annotations

from datetime import date
from typing import Union

from ..core.config import SubfolderMode
from ..core.models import CaptureDate


DEFAULT_DATE_PATTERN = "yyyymmdd"

MONTH_NAMES = {
    1: "January", 2: "February", 3: "March", 4: "April",
    5: "May", 6: "June", 7: "July", 8: "August",
    9: "September", 10: "October", 11: "November", 12: "December"
}


def _yyyymmdd(d: date) -> str:
    return f"{d.year:04d}{d.month:02d}{d.day:02d}"


DATE_PATTERNS = {
    "yyyymmdd": _yyyymmdd,
    "yymmdd": lambda d: f"{d.year % 100:02d}{d.month:02d}{d.day:02d}",
    "ddmmyy": lambda d: f"{d.day:02d}{d.month:02d}{d.year % 100:02d}",
    "ddmm": lambda d: f"{d.day:02d}{d.month:02d}",
    "yyyyddmmm": lambda d: f"{d.year:04d}{d.day:02d}{MONTH_NAMES[d.month]}",
    "ddmmmyyyy": lambda d: f"{d.day:02d}{MONTH_NAMES[d.month]}{d.year:04d}",
}


def format_date_folder(shot_date: Union[CaptureDate, date, str], pattern: str) -> str:
    """Format a capture date as a folder name.

    Args:
        shot_date: Capture date, or its YYYY-MM-DD text.
        pattern: Pattern name, case-insensitive.

    Returns:
        The formatted name, or the unparsed text if it is not a valid date.
    """
    if isinstance(shot_date, date):
        parsed = shot_date
    else:
        capture = shot_date if isinstance(shot_date, CaptureDate) else CaptureDate(shot_date)
        parsed = capture.to_date()
        if parsed is None:
            return capture.text

    formatter = DATE_PATTERNS.get(pattern.strip().lower(), _yyyymmdd)
    return formatter(parsed)


def resolve_subfolder(
    capture_date: Union[CaptureDate, date, str, None],
    mode: SubfolderMode,
    custom_name: str = "",
    pattern: str = DEFAULT_DATE_PATTERN,
) -> str:
    """Compute the destination subfolder name.

    Returns "" for SubfolderMode.NONE (files land in the destination root),
    custom_name verbatim for SubfolderMode.CUSTOM and the formatted date
    for SubfolderMode.DATE.
    """
    if mode == SubfolderMode.NONE:
        return ""
    if mode == SubfolderMode.CUSTOM:
        return custom_name
    if capture_date is None:
        return ""
    return format_date_folder(capture_date, pattern)
