"""Core configuration and factory components."""

from slashfill.core.config import Settings, get_settings
from slashfill.core.factory import ComponentFactory, get_factory

__all__ = [
    "Settings",
    "get_settings",
    "ComponentFactory",
    "get_factory",
]
