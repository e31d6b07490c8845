"""Configuration package."""

from dtforge.config.settings import Settings, settings

__all__ = [
    "Settings",
    "settings",
]
