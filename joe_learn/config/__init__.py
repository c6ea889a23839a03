"""
Application configuration.

Settings come from environment variables with sensible defaults.
Provider credentials are loaded from files at startup.
"""

from .credentials import StartupError, load_service_account
from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "StartupError", "load_service_account"]
