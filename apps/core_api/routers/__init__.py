"""API routers."""

from apps.core_api.routers import health, metrics, tools

__all__ = ["health", "metrics", "tools"]
