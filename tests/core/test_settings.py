"""Tests for dms.core.settings and dms.api.settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from dms.api.settings import DmsAPISettings
from dms.core.settings import DmsSettings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for key in ("DMS_LOG_LEVEL", "DMS_STORE_BACKEND", "DMS_CONNECTORS", "DMS_API_PREFIX", "DMS_PORT"):
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    s = DmsSettings()
    assert s.log_level == "INFO"
    assert s.store_backend == "memory"
    assert s.default_page_size == 50
    assert s.connectors == {"file": ["file"]}
    assert isinstance(s.database_path, Path)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("DMS_LOG_LEVEL", "debug")
    monkeypatch.setenv("DMS_STORE_BACKEND", "sqlite")
    monkeypatch.setenv("DMS_CONNECTORS", '{"kafka": ["kafka"]}')
    s = DmsSettings()
    assert s.log_level == "DEBUG"
    assert s.store_backend == "sqlite"
    assert s.connectors == {"kafka": ["kafka"]}


def test_unknown_backend_rejected():
    with pytest.raises(ValidationError):
        DmsSettings(store_backend="redis")


def test_api_settings(monkeypatch):
    monkeypatch.setenv("DMS_API_PREFIX", "/v2")
    monkeypatch.setenv("DMS_PORT", "9000")
    s = DmsAPISettings()
    assert s.api_prefix == "/v2"
    assert s.port == 9000
    assert s.debug is False
    assert s.store_backend == "memory"
