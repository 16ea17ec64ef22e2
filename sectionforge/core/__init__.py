"""Core configuration, errors and logging."""

from sectionforge.core.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
