"""Configuration module for Pump Match.

Usage:
    from pumpmatch.config import get_settings

    settings = get_settings()  # Cached singleton
    print(settings.app_name)

Note:
    We intentionally don't export a module-level `settings` instance
    because that would fail on import if required env vars aren't set.
    Use `get_settings()` to get the cached instance at runtime.
"""

from pumpmatch.config.logging import configure_logging, ensure_logging_configured
from pumpmatch.config.settings import Settings, get_settings

__all__ = ["Settings", "configure_logging", "ensure_logging_configured", "get_settings"]
