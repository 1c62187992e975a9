"""Configuration management package for Rune Launcher"""

from .loader import ENV_PREFIX, ConfigLoader, get_config_loader

__all__ = [
    "ENV_PREFIX",
    "ConfigLoader",
    "get_config_loader",
]
