"""
Toolgate Configuration Package.

Provides Pydantic Settings loaded from environment variables.
"""

from toolgate_config.settings import Settings, clear_settings_cache, get_settings

__all__ = ["Settings", "clear_settings_cache", "get_settings"]
