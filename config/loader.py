"""Configuration loader for Rune Launcher

Loads configuration from multiple sources with the following priority:
1. Environment variables (highest priority)
2. .env file
3. Hardcoded defaults (lowest priority)

Environment variables are looked up with the ``RUNE_LAUNCHER_`` prefix, so the
``REQUEST_TIMEOUT`` setting is read from ``RUNE_LAUNCHER_REQUEST_TIMEOUT``.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "RUNE_LAUNCHER_"


class ConfigLoader:
    """Handles loading configuration from the environment and a .env file"""

    def __init__(self, env_path: Optional[str] = None, prefix: str = ENV_PREFIX):
        """Initialize the config loader

        Args:
            env_path: Optional path to .env file.
                     Defaults to '.env' in the current directory.
            prefix: Prefix prepended to every environment variable name
        """
        self.env_path = Path(env_path) if env_path else Path(".env")
        self.prefix = prefix
        self._load_env_file()

    def _load_env_file(self):
        """Load environment variables from .env file if it exists"""
        if self.env_path.exists():
            load_dotenv(dotenv_path=self.env_path)
            logger.debug(f"Loaded environment variables from {self.env_path}")
        else:
            logger.debug(f".env file not found at {self.env_path}, using environment variables and defaults only")

    def env_name(self, name: str) -> str:
        """Full environment variable name for a setting"""
        return f"{self.prefix}{name}"

    def get(self, name: str, default: Any) -> Any:
        """Get a configuration value with priority: env > default

        The type of ``default`` decides how the raw environment string is parsed.

        Args:
            name: Setting name (without prefix)
            default: Default value if not found in environment

        Returns:
            The configuration value from environment or default
        """
        env_var = self.env_name(name)
        env_value = os.getenv(env_var)
        if env_value is None:
            if isinstance(default, str) and default.startswith("~/"):
                return str(Path(default).expanduser())
            return default

        # bool must be checked before int
        if isinstance(default, bool):
            return env_value.strip().lower() in ('true', '1', 'yes', 'on')
        if isinstance(default, int):
            try:
                return int(env_value)
            except ValueError:
                logger.warning(f"Failed to parse {env_var}={env_value} as int, using default: {default}")
                return default
        if isinstance(default, float):
            try:
                return float(env_value)
            except ValueError:
                logger.warning(f"Failed to parse {env_var}={env_value} as float, using default: {default}")
                return default
        return env_value

    def get_optional(self, name: str) -> Optional[str]:
        """Get a string setting that has no default

        Returns:
            The stripped value, or None when unset or blank
        """
        value = os.getenv(self.env_name(name))
        if value is None or not value.strip():
            return None
        return value.strip()


# Create a global instance
_config_loader = None

def get_config_loader() -> ConfigLoader:
    """Get or create the global ConfigLoader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
