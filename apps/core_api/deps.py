"""
FastAPI Dependency Injection.

Provides dependency injection for:
- Settings
- The tool service wired up in the application lifespan
"""

from fastapi import HTTPException, Request

from toolgate_config.settings import Settings, get_settings
from toolgate_tools.service import ToolService


def get_app_settings() -> Settings:
    """Dependency: cached application settings."""
    return get_settings()


def get_tool_service(request: Request) -> ToolService:
    """
    Dependency: ToolService created during application startup.

    Raises:
        HTTPException: 503 if the service has not been initialized
    """
    service = getattr(request.app.state, "tool_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Tool service not initialized")
    return service
