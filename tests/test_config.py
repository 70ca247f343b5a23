"""Tests for TOML store configuration."""

import pytest

from zettel.config import (
    CONFIG_FILENAME,
    DEFAULT_DEBOUNCE_MS,
    StoreConfig,
    get_default_store_path,
    load_config,
    load_or_create_config,
    save_config,
)


class TestStorePath:
    def test_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ZETTEL_STORE_PATH", str(tmp_path / "zk"))
        assert get_default_store_path() == (tmp_path / "zk").resolve()

    def test_home_default(self, monkeypatch):
        monkeypatch.delenv("ZETTEL_STORE_PATH", raising=False)
        assert get_default_store_path().name == ".zettel"


class TestLoadOrCreate:
    def test_creates_defaults(self, tmp_path):
        config = load_or_create_config(tmp_path)
        assert (tmp_path / CONFIG_FILENAME).exists()
        assert config.scroll_debounce_ms == DEFAULT_DEBOUNCE_MS
        assert config.default_address == ""
        assert config.notes_path == tmp_path / "notes.json"

    def test_round_trip(self, tmp_path):
        save_config(StoreConfig(path=tmp_path, default_address="4b", indent=4, scroll_debounce_ms=120))
        config = load_or_create_config(tmp_path)
        assert config.default_address == "4b"
        assert config.indent == 4
        assert config.scroll_debounce_ms == 120

    def test_env_store_used_when_no_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ZETTEL_STORE_PATH", str(tmp_path))
        config = load_or_create_config()
        assert config.path == tmp_path.resolve()


class TestLoadConfig:
    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path)

    def test_newer_version_rejected(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("[store]\nversion = 99\n")
        with pytest.raises(ValueError):
            load_config(tmp_path)

    def test_bad_setting_rejected(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text('[outline]\nscroll_debounce_ms = "soon"\n')
        with pytest.raises(ValueError):
            load_config(tmp_path)

    def test_partial_file_uses_defaults(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text('[outline]\ndefault_address = "1a"\n')
        config = load_config(tmp_path)
        assert config.default_address == "1a"
        assert config.indent == 2
