"""Shared fixtures for registry and bot tests."""

import pytest

from ctrl.config.settings import Settings
from ctrl.registry import ManifestStore, ProjectRegistry


def make_settings(tmp_path, **overrides):
    defaults = {
        "_env_file": None,
        "slack_bot_token": "xoxb-test",
        "slack_app_token": "xapp-test",
        "manifest_path": str(tmp_path / "manifest.yaml"),
    }
    defaults.update(overrides)
    return Settings(**defaults)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def manifest_path(tmp_path):
    return tmp_path / "manifest.yaml"


@pytest.fixture
def store(manifest_path):
    return ManifestStore(manifest_path, retry_delay=0)


@pytest.fixture
def registry(store):
    return ProjectRegistry(store)
