"""Unit tests for configuration loading."""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from sheet_merger.config import ConfigLoader, MergerConfig
from sheet_merger.constants import Defaults, Placeholders

ENV_VARS = (
    "SHEET_MERGER_STORAGE_DIR",
    "SHEET_MERGER_SIMILARITY_THRESHOLD",
    "SHEET_MERGER_ASSIGNMENT_THRESHOLD",
    "SHEET_MERGER_HISTORY",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestMergerConfig:
    """Test suite for MergerConfig."""

    def test_default_config(self):
        """Test default configuration values."""
        config = MergerConfig()

        assert config.storage_dir == Path(".sheet_merger")
        assert config.similarity_threshold == 0.6
        assert config.assignment_threshold == 0.7
        assert config.history_enabled is True
        assert config.required_fields == ()
        assert config.placeholder_prefixes == Placeholders.PREFIXES

    def test_config_is_immutable(self):
        config = MergerConfig()

        with pytest.raises(FrozenInstanceError):
            config.similarity_threshold = 0.9  # type: ignore[misc]

    @pytest.mark.parametrize("value", [-0.1, 1.5])
    def test_rejects_out_of_range_thresholds(self, value):
        with pytest.raises(ValueError, match="similarity_threshold"):
            MergerConfig(similarity_threshold=value)
        with pytest.raises(ValueError, match="assignment_threshold"):
            MergerConfig(assignment_threshold=value)

    def test_rejects_empty_placeholder_prefixes(self):
        with pytest.raises(ValueError, match="placeholder_prefixes"):
            MergerConfig(placeholder_prefixes=())

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch):
        """Test reading settings from environment variables."""
        monkeypatch.setenv("SHEET_MERGER_STORAGE_DIR", "/tmp/merger")
        monkeypatch.setenv("SHEET_MERGER_SIMILARITY_THRESHOLD", "0.75")
        monkeypatch.setenv("SHEET_MERGER_HISTORY", "off")

        config = MergerConfig.from_env()

        assert config.storage_dir == Path("/tmp/merger")
        assert config.similarity_threshold == 0.75
        assert config.assignment_threshold == Defaults.ASSIGNMENT_THRESHOLD
        assert config.history_enabled is False


class TestConfigLoader:
    """Test suite for ConfigLoader."""

    def test_load_without_file(self):
        assert ConfigLoader.load() == MergerConfig()

    def test_load_from_toml(self, tmp_path: Path):
        """Test loading configuration from a TOML file."""
        config_file = tmp_path / "custom.toml"
        config_file.write_text(
            "[paths]\n"
            'storage_dir = "data/mappings"\n'
            "\n"
            "[matching]\n"
            "similarity_threshold = 0.8\n"
            "history_enabled = false\n"
            'required_fields = ["Customer Name", " ", "Email"]\n',
            encoding="utf-8",
        )

        config = ConfigLoader.load(config_file)

        assert config.storage_dir == Path("data/mappings")
        assert config.similarity_threshold == 0.8
        assert config.assignment_threshold == 0.7
        assert config.history_enabled is False
        assert config.required_fields == ("Customer Name", "Email")

    def test_default_file_in_working_directory(self, tmp_path: Path):
        (tmp_path / Defaults.CONFIG_FILE).write_text(
            "[matching]\nassignment_threshold = 0.9\n", encoding="utf-8"
        )

        assert ConfigLoader.load().assignment_threshold == 0.9

    def test_environment_is_overridden_by_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("SHEET_MERGER_SIMILARITY_THRESHOLD", "0.5")
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[matching]\nsimilarity_threshold = 0.65\n", encoding="utf-8")

        assert ConfigLoader.load(config_file).similarity_threshold == 0.65

    def test_invalid_file_warns_and_falls_back(self, tmp_path: Path):
        """Test that an invalid file falls back to the defaults with a warning."""
        config_file = tmp_path / "broken.toml"
        config_file.write_text("[matching]\nsimilarity_threshold = 4.0\n", encoding="utf-8")

        with pytest.warns(UserWarning, match="Failed to load config"):
            config = ConfigLoader.load(config_file)

        assert config == MergerConfig()

    def test_malformed_toml_warns(self, tmp_path: Path):
        config_file = tmp_path / "broken.toml"
        config_file.write_text("[matching\n", encoding="utf-8")

        with pytest.warns(UserWarning):
            config = ConfigLoader.load(config_file)

        assert config.similarity_threshold == Defaults.SIMILARITY_THRESHOLD
