"""Configuration Tests."""

import pytest
from pydantic import ValidationError

from toolgate_config.settings import Settings, clear_settings_cache, get_settings


def test_settings_load_defaults(monkeypatch):
    """Test settings load with defaults."""
    for name in ("TOOL_HTTP_TIMEOUT_SECONDS", "LOG_FORMAT", "SECRET_SERVICE_URL", "OTEL_TRACES_ENABLED"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()
    assert settings.TOOL_HTTP_TIMEOUT_SECONDS == 120.0
    assert settings.LOG_FORMAT == "json"
    assert settings.SECRET_SERVICE_URL == ""
    assert settings.OTEL_TRACES_ENABLED is False


def test_settings_read_environment(monkeypatch):
    """Test env vars override defaults."""
    monkeypatch.setenv("TOOL_HTTP_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("secret_service_url", "http://secrets:8080")

    settings = Settings()
    assert settings.TOOL_HTTP_TIMEOUT_SECONDS == 5.0
    assert settings.SECRET_SERVICE_URL == "http://secrets:8080"


def test_settings_reject_non_positive_timeout(monkeypatch):
    monkeypatch.setenv("TOOL_HTTP_TIMEOUT_SECONDS", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_settings_reject_unknown_log_format(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "xml")
    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_is_cached():
    clear_settings_cache()
    first = get_settings()
    assert get_settings() is first

    clear_settings_cache()
    assert get_settings() is not first
