"""Tests for destination subfolder naming."""
import pytest
from datetime import date

from photoimporter.core.config import SubfolderMode
from photoimporter.core.models import CaptureDate
from photoimporter.services.resolver import format_date_folder, resolve_subfolder


SHOT = CaptureDate("2024-06-15")


class TestFormatDateFolder:
    """Tests for date pattern formatting."""

    @pytest.mark.parametrize("pattern, expected", [
        ("yyyymmdd", "20240615"),
        ("yymmdd", "240615"),
        ("ddmmyy", "150624"),
        ("ddmm", "1506"),
        ("yyyyddmmm", "202415June"),
        ("ddmmmyyyy", "15June2024"),
    ])
    def test_patterns(self, pattern, expected):
        assert format_date_folder(SHOT, pattern) == expected

    def test_pattern_case_insensitive(self):
        assert format_date_folder(SHOT, "DDMMMYYYY") == "15June2024"

    def test_unknown_pattern_uses_yyyymmdd(self):
        assert format_date_folder(SHOT, "weekly") == "20240615"

    def test_accepts_date_and_text(self):
        assert format_date_folder(date(2001, 2, 3), "yyyymmdd") == "20010203"
        assert format_date_folder("2001-02-03", "ddmm") == "0302"

    def test_single_digit_padding(self):
        assert format_date_folder(CaptureDate("2009-01-05"), "yymmdd") == "090105"

    @pytest.mark.parametrize("text", ["0000-00-00", "2024-13-01", "sometime"])
    def test_unparseable_date_returned_raw(self, text):
        assert format_date_folder(CaptureDate(text), "yyyymmdd") == text


class TestResolveSubfolder:
    """Tests for resolve_subfolder."""

    def test_none_mode_is_empty(self):
        assert resolve_subfolder(SHOT, SubfolderMode.NONE) == ""
        assert resolve_subfolder(None, SubfolderMode.NONE, custom_name="x") == ""

    def test_custom_mode(self):
        assert resolve_subfolder(None, SubfolderMode.CUSTOM, custom_name="Holiday") == "Holiday"

    def test_custom_mode_empty_name(self):
        assert resolve_subfolder(None, SubfolderMode.CUSTOM) == ""

    def test_date_mode(self):
        assert resolve_subfolder(SHOT, SubfolderMode.DATE, pattern="yymmdd") == "240615"

    def test_date_mode_without_date(self):
        assert resolve_subfolder(None, SubfolderMode.DATE, pattern="yyyymmdd") == ""

    def test_is_pure(self):
        first = resolve_subfolder(SHOT, SubfolderMode.DATE, pattern="ddmmmyyyy")
        second = resolve_subfolder(SHOT, SubfolderMode.DATE, pattern="ddmmmyyyy")
        assert first == second == "15June2024"
