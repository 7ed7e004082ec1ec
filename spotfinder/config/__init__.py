"""
Configuration package for the Nearest Spot Finder service.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    GeocoderSettings,
    SearchSettings,
    CategorySettings,
    SecuritySettings,
    settings,
    get_settings,
    reload_settings,
    use_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "GeocoderSettings",
    "SearchSettings",
    "CategorySettings",
    "SecuritySettings",
    "settings",
    "get_settings",
    "reload_settings",
    "use_settings",
]
