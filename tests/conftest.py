"""Pytest fixtures."""

import json

import pytest
from fastapi.testclient import TestClient

from factories import CONFIRM_WEBHOOK_TOOL, GMAIL_OAUTH_TOOL, SEND_EMAIL_TOOL
from toolgate_config.settings import clear_settings_cache
from toolgate_tools.schemas import ToolConfig


@pytest.fixture
def send_email_config() -> ToolConfig:
    return ToolConfig.model_validate(SEND_EMAIL_TOOL)


@pytest.fixture
def oauth_config() -> ToolConfig:
    return ToolConfig.model_validate(GMAIL_OAUTH_TOOL)


@pytest.fixture
def confirm_webhook_config() -> ToolConfig:
    return ToolConfig.model_validate(CONFIRM_WEBHOOK_TOOL)


@pytest.fixture
def catalog_path(tmp_path):
    """Temporary catalog file seeded with the no-call webhook tool."""
    path = tmp_path / "tools.json"
    path.write_text(json.dumps([CONFIRM_WEBHOOK_TOOL]), encoding="utf-8")
    return path


@pytest.fixture
def client(monkeypatch, catalog_path):
    """FastAPI test client backed by a temporary catalog.

    Collaborator services are left unconfigured.
    """
    monkeypatch.setenv("TOOL_CATALOG_PATH", str(catalog_path))
    monkeypatch.setenv("SECRET_SERVICE_URL", "")
    monkeypatch.setenv("TOOL_AUTH_SERVICE_URL", "")
    clear_settings_cache()

    from apps.core_api.main import app

    with TestClient(app) as test_client:
        yield test_client

    clear_settings_cache()
