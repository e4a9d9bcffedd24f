"""Tests for the media scanner."""
import os
import pytest
from pathlib import Path
from unittest.mock import patch

from photoimporter.core.errors import ScanError
from photoimporter.services.scanner import (
    ALLOWED_EXTENSIONS,
    MediaScanner,
    detect_mime_type,
    is_allowed,
)


class TestAllowList:
    """Tests for the extension allow-list."""

    @pytest.mark.parametrize("name", ["a.CR2", "a.cr2", "a.Cr2", "a.NEF", "a.dng", "a.MOV", "a.mp4"])
    def test_allowed_any_case(self, name):
        assert is_allowed(Path(name))

    @pytest.mark.parametrize("name", ["a.txt", "a.TXT", "a.json", "a.xmp", "README", "a.cr2.bak"])
    def test_not_allowed(self, name):
        assert not is_allowed(Path(name))

    def test_set_is_lowercase(self):
        assert all(ext == ext.lower() and ext.startswith(".") for ext in ALLOWED_EXTENSIONS)


class TestMediaScanner:
    """Tests for MediaScanner."""

    @pytest.fixture
    def scanner(self):
        return MediaScanner()

    def test_scan_finds_media(self, scanner, card):
        """Raw files and video in any case are found."""
        names = [entry.filename for entry in scanner.scan(card)]

        assert names == ["IMG_0001.CR2", "IMG_0002.cr2", "MVI_0003.MP4", "empty.dng"]

    def test_scan_excludes_non_media(self, scanner, card):
        names = {entry.filename for entry in scanner.scan(card)}
        assert "notes.txt" not in names

    def test_hidden_entries_pruned(self, scanner, card):
        """Hidden files and whole hidden directories are skipped."""
        paths = [entry.path for entry in scanner.scan(card)]

        assert not any(part.startswith(".") for p in paths for part in p.relative_to(card).parts)
        assert card / ".Trashes" / "IMG_9999.CR2" not in paths

    def test_directories_never_emitted(self, scanner, tmp_path: Path):
        (tmp_path / "FOLDER.CR2").mkdir()
        assert scanner.scan(tmp_path) == []

    def test_entry_sizes(self, scanner, card):
        sizes = {entry.filename: entry.size_bytes for entry in scanner.scan(card)}

        assert sizes["IMG_0001.CR2"] == 70
        assert sizes["empty.dng"] == 0

    def test_mime_types(self, scanner, card):
        mimes = {entry.filename: entry.mime_type for entry in scanner.scan(card)}

        assert mimes["MVI_0003.MP4"] == "video/mp4"
        assert mimes["empty.dng"].endswith("x-empty")

    def test_workers_keep_order(self, card):
        single = MediaScanner(workers=1).scan(card)
        threaded = MediaScanner(workers=4).scan(card)

        assert single == threaded

    def test_rescan_is_fresh(self, scanner, card):
        first = scanner.scan(card)
        (card / "DCIM" / "100CANON" / "IMG_0004.CR2").write_bytes(b"new")

        assert len(scanner.scan(card)) == len(first) + 1

    def test_count(self, scanner, card):
        files, total = scanner.count(card)

        assert files == 4
        assert total == 70 + 140 + 44 + 0

    def test_root_not_directory(self, scanner, tmp_path: Path):
        with pytest.raises(ScanError):
            scanner.scan(tmp_path / "missing")

    def test_invalid_workers(self):
        with pytest.raises(ValueError):
            MediaScanner(workers=0)

    def test_broken_symlink_aborts(self, scanner, card):
        os.symlink(card / "gone.CR2", card / "DCIM" / "link.CR2")

        with pytest.raises(ScanError) as exc_info:
            scanner.scan(card)
        assert exc_info.value.path == card / "DCIM" / "link.CR2"

    def test_symlinked_directory_not_descended(self, scanner, card, tmp_path: Path):
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        (elsewhere / "IMG_5000.CR2").write_bytes(b"x")
        os.symlink(elsewhere, card / "linked")

        names = {entry.filename for entry in scanner.scan(card)}
        assert "IMG_5000.CR2" not in names

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="permissions are not enforced for root",
    )
    def test_permission_denied_aborts(self, scanner, card):
        locked = card / "LOCKED"
        locked.mkdir()
        (locked / "IMG_7000.CR2").write_bytes(b"x")
        locked.chmod(0)
        try:
            with pytest.raises(ScanError):
                scanner.scan(card)
        finally:
            locked.chmod(0o755)


class TestMimeDetection:
    """Tests for content sniffing."""

    def test_image_content(self, jpeg_source):
        assert detect_mime_type(jpeg_source) == "image/jpeg"

    def test_unreadable_file(self, tmp_path: Path):
        assert detect_mime_type(tmp_path / "missing.cr2") == ""

    @pytest.mark.parametrize("name, header, expected", [
        ("P1000.ORF", b"IIRO\x08\x00\x00\x00", "image/x-olympus-orf"),
        ("CLIP.MOV", b"\x1a\x45\xdf\xa3\x93\x42\x82\x88matroska", "video/x-matroska"),
        ("MVI_0001.MOV", b"\x00\x00\x00\x14ftypqt  ", "video/quicktime"),
        ("MVI_0002.AVI", b"RIFF\x00\x00\x00\x00AVI LIST", "video/x-msvideo"),
    ])
    def test_container_content(self, tmp_path: Path, name, header, expected):
        path = tmp_path / name
        path.write_bytes(header + b"\x00" * 256)
        assert detect_mime_type(path) == expected

    def test_ignores_extension(self, tmp_path: Path):
        path = tmp_path / "IMG_0001.CR2"
        path.write_text("not really a raw file\n")
        assert detect_mime_type(path) == "text/plain"

    def test_sniff_error_logged(self, tmp_path: Path, caplog):
        path = tmp_path / "IMG_0001.CR2"
        path.write_bytes(b"x")
        with patch("photoimporter.services.scanner.magic.from_file", side_effect=PermissionError("denied")):
            assert detect_mime_type(path) == ""
        assert "denied" in caplog.text
