"""Tests for settings validation and config loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from ctrl.config import load_config
from ctrl.config.settings import Settings
from ctrl.exceptions import ConfigurationError, InvalidConfigError, MissingConfigError
from ctrl.registry import ManifestStore


def _make_settings(tmp_path, **overrides):
    defaults = {
        "_env_file": None,
        "slack_bot_token": "xoxb-test",
        "slack_app_token": "xapp-test",
        "manifest_path": str(tmp_path / "manifest.yaml"),
    }
    defaults.update(overrides)
    return Settings(**defaults)


class TestSettings:
    """Field defaults and validators."""

    def test_defaults(self, tmp_path):
        settings = _make_settings(tmp_path)
        assert settings.slash_command == "/ctrl"
        assert settings.default_configured_project == "amcwb/ctrl"
        assert settings.manifest_corrupt_policy == "reset"
        assert settings.manifest_path == tmp_path / "manifest.yaml"
        assert settings.slack_bot_token_str == "xoxb-test"
        assert settings.is_production

    def test_log_level_is_normalised(self, tmp_path):
        assert _make_settings(tmp_path, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self, tmp_path):
        with pytest.raises(ValidationError):
            _make_settings(tmp_path, log_level="chatty")

    def test_invalid_corrupt_policy(self, tmp_path):
        with pytest.raises(ValidationError):
            _make_settings(tmp_path, manifest_corrupt_policy="ignore")

    def test_slash_command_needs_slash(self, tmp_path):
        with pytest.raises(ValidationError):
            _make_settings(tmp_path, slash_command="ctrl")

    def test_manifest_path_cannot_be_directory(self, tmp_path):
        with pytest.raises(ValidationError):
            _make_settings(tmp_path, manifest_path=str(tmp_path))

    def test_github_base_url_trailing_slash(self, tmp_path):
        settings = _make_settings(tmp_path, github_base_url="https://ghe.example.com/")
        assert settings.github_base_url == "https://ghe.example.com"

    def test_store_from_settings(self, tmp_path):
        settings = _make_settings(
            tmp_path, manifest_corrupt_policy="fail", store_retry_attempts=5
        )
        store = ManifestStore.from_settings(settings)
        assert store.path == tmp_path / "manifest.yaml"
        assert store.corrupt_policy == "fail"
        assert store.retry_attempts == 5


class TestLoadConfig:
    """Loading from env files."""

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(config_file=tmp_path / "missing.env")

    def test_loads_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SLACK_BOT_TOKEN", raising=False)
        monkeypatch.delenv("SLACK_APP_TOKEN", raising=False)
        env_file = tmp_path / "ctrl.env"
        env_file.write_text(
            "SLACK_BOT_TOKEN=xoxb-file\n"
            "SLACK_APP_TOKEN=xapp-file\n"
            f"MANIFEST_PATH={tmp_path / 'data.yaml'}\n"
        )
        settings = load_config(config_file=env_file)
        assert settings.slack_bot_token_str == "xoxb-file"
        assert settings.manifest_path == Path(tmp_path / "data.yaml")

    def test_invalid_env_file_raises_invalid_config_error(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SLACK_BOT_TOKEN", raising=False)
        monkeypatch.delenv("SLACK_APP_TOKEN", raising=False)
        monkeypatch.chdir(tmp_path)
        env_file = tmp_path / "ctrl.env"
        env_file.write_text("LOG_LEVEL=INFO\n")
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config(config_file=env_file)
        assert isinstance(exc_info.value, ConfigurationError)
        assert isinstance(exc_info.value.__cause__, ValidationError)
