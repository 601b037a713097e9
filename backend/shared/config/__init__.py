"""
Unified Configuration Access Point

    from shared.config import get_settings

    settings = get_settings()
    max_entries = settings.sortly.history_max_entries
"""

from .settings import (
    ApplicationSettings,
    Environment,
    RedisSettings,
    ServiceSettings,
    SortlySettings,
    StoreBackend,
    get_settings,
    reload_settings,
)

__all__ = [
    "ApplicationSettings",
    "Environment",
    "RedisSettings",
    "ServiceSettings",
    "SortlySettings",
    "StoreBackend",
    "get_settings",
    "reload_settings",
]
