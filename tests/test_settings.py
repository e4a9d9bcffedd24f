"""Tests for the settings store."""
import pytest
from pathlib import Path

from photoimporter.core.errors import PolicyError
from photoimporter.persistence.settings import JsonSettingsStore


class TestJsonSettingsStore:
    """Tests for JsonSettingsStore."""

    def test_reads_key_file(self, tmp_path: Path):
        (tmp_path / "config.json").write_text('{"location": "/lib"}')
        assert JsonSettingsStore(tmp_path).get("config.json") == '{"location": "/lib"}'

    def test_missing_key_returns_default(self, tmp_path: Path):
        store = JsonSettingsStore(tmp_path)

        assert store.get("config.json") == "{}"
        assert store.get("config.json", "") == ""

    def test_blank_file_returns_default(self, tmp_path: Path):
        (tmp_path / "config.json").write_text("  \n")
        assert JsonSettingsStore(tmp_path).get("config.json") == "{}"

    def test_missing_directory(self, tmp_path: Path):
        assert JsonSettingsStore(tmp_path / "nope").get("config.json") == "{}"

    @pytest.mark.parametrize("key", ["", "../config.json", "sub/config.json"])
    def test_rejects_non_plain_keys(self, tmp_path: Path, key):
        with pytest.raises(PolicyError):
            JsonSettingsStore(tmp_path).get(key)

    def test_unreadable_key(self, tmp_path: Path):
        (tmp_path / "config.json").mkdir()
        with pytest.raises(PolicyError):
            JsonSettingsStore(tmp_path).get("config.json")

    def test_default_directory(self, monkeypatch, tmp_path: Path):
        monkeypatch.setattr("photoimporter.core.config.sys.platform", "linux")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert JsonSettingsStore().directory == tmp_path / "PhotoImporter"
