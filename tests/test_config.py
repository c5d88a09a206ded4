"""Tests for VaultwatchConfig."""

import pytest

from vaultwatch.config import (
    MIN_TIMELINE_STEPS,
    ConfigError,
    HistoryConfig,
    IngestionConfig,
    ParserConfig,
    TimelineConfig,
    VaultwatchConfig,
)


class TestDefaults:
    def test_timeline_defaults(self):
        assert TimelineConfig().steps == 30

    def test_ingestion_defaults(self):
        c = IngestionConfig()
        assert c.lines_max == 100
        assert c.max_line_length == 8192
        assert c.ignore_existing is False

    def test_history_defaults(self):
        c = HistoryConfig()
        assert c.log_history_max == 1000
        assert c.activity_history_max == 1000

    def test_parser_defaults(self):
        assert ParserConfig().app_name == "safe-vault"

    def test_min_steps(self):
        assert TimelineConfig(steps=MIN_TIMELINE_STEPS).steps == MIN_TIMELINE_STEPS
        with pytest.raises(ConfigError):
            TimelineConfig(steps=MIN_TIMELINE_STEPS - 1)


class TestVaultwatchConfig:
    def test_properties(self, tmp_path):
        config = VaultwatchConfig(project_path=tmp_path)
        assert config.vaultwatch_dir == tmp_path / ".vaultwatch"
        assert config.config_path == tmp_path / ".vaultwatch" / "config.toml"

    def test_load_defaults(self, tmp_path):
        config = VaultwatchConfig.load(tmp_path)
        assert config.timeline.steps == 30
        assert config.project_path == tmp_path

    def test_load_from_toml(self, tmp_path):
        config_dir = tmp_path / ".vaultwatch"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text(
            "[timeline]\nsteps = 60\n"
            "[ingestion]\nlines_max = 500\nignore_existing = true\n"
            "[history]\nactivity_history_max = 20\n"
            '[parser]\napp_name = "sn_node"\n'
        )
        config = VaultwatchConfig.load(tmp_path)
        assert config.timeline.steps == 60
        assert config.ingestion.lines_max == 500
        assert config.ingestion.ignore_existing is True
        assert config.history.activity_history_max == 20
        assert config.history.log_history_max == 1000
        assert config.parser.app_name == "sn_node"

    def test_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VAULTWATCH_TIMELINE_STEPS", "45")
        monkeypatch.setenv("VAULTWATCH_IGNORE_EXISTING", "yes")
        config = VaultwatchConfig.load(tmp_path)
        assert config.timeline.steps == 45
        assert config.ingestion.ignore_existing is True

    def test_env_overrides_toml(self, tmp_path, monkeypatch):
        config_dir = tmp_path / ".vaultwatch"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text('[parser]\napp_name = "toml-vault"\n')
        monkeypatch.setenv("VAULTWATCH_APP_NAME", "env-vault")
        config = VaultwatchConfig.load(tmp_path)
        assert config.parser.app_name == "env-vault"

    def test_env_false(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VAULTWATCH_IGNORE_EXISTING", "0")
        assert VaultwatchConfig.load(tmp_path).ingestion.ignore_existing is False

    def test_too_few_steps(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VAULTWATCH_TIMELINE_STEPS", "3")
        with pytest.raises(ConfigError):
            VaultwatchConfig.load(tmp_path)
