"""Tests for environment configuration."""

from pathlib import Path

from tpv_core.config import DEFAULT_STORAGE_KEY, load_config


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self):
        """An empty environment gives the default configuration."""
        config = load_config({})
        assert config.state_dir == Path("~/.tpv").expanduser()
        assert config.storage_key == DEFAULT_STORAGE_KEY == "tpv_matet_v1"
        assert config.catalog_path is None
        assert config.log_level == "INFO"
        assert config.strong_ids is True

    def test_overrides(self, tmp_path):
        """Environment variables override every default."""
        config = load_config({
            "TPV_STATE_DIR": str(tmp_path),
            "TPV_STORAGE_KEY": "feria_2026",
            "TPV_CATALOG_PATH": str(tmp_path / "catalog.json"),
            "TPV_LOG_LEVEL": "debug",
            "TPV_STRONG_IDS": "0",
        })
        assert config.state_dir == tmp_path
        assert config.storage_key == "feria_2026"
        assert config.catalog_path == tmp_path / "catalog.json"
        assert config.log_level == "DEBUG"
        assert config.strong_ids is False

    def test_blank_values_fall_back(self):
        """Blank variables fall back to the defaults."""
        config = load_config({"TPV_STORAGE_KEY": "  ", "TPV_CATALOG_PATH": ""})
        assert config.storage_key == DEFAULT_STORAGE_KEY
        assert config.catalog_path is None
