"""
Configuration package for ServiceAgent.

This package centralizes environment variable handling so every module
reads settings the same way.
"""

import os
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

# Centralized config dictionary cache
_config_cache = None


def get_env(name: str, default: Optional[Any] = None) -> Any:
    """
    Get an environment variable with a default value.

    Args:
        name: Name of the environment variable
        default: Default value if the environment variable is not set

    Returns:
        Value of the environment variable or the default
    """
    return os.getenv(name, default)


def get_boolean_env(name: str, default: bool = False) -> bool:
    """Get a boolean environment variable."""
    value = os.getenv(name, str(default)).lower()
    return value in ("true", "1", "yes", "y", "t")


def get_int_env(name: str, default: int = 0) -> int:
    """Get an integer environment variable, falling back on parse errors."""
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def load_config(env_file: Optional[str] = None) -> dict[str, Any]:
    """
    Load configuration from environment variables and/or .env file.

    Settings are re-read after the .env files are applied, so values
    loaded here win over the import-time defaults.

    Args:
        env_file: Optional path to a .env file to load

    Returns:
        Dictionary of configuration values
    """
    global _config_cache

    if env_file:
        load_dotenv(env_file, override=True)
    else:
        env_paths = [
            ".env",
            ".env.local",
            f".env.{os.getenv('ENVIRONMENT', 'development')}",
        ]

        for env_path in env_paths:
            if Path(env_path).exists():
                load_dotenv(env_path, override=True)

    from serviceagent.config import settings

    settings.reload()
    config = settings.get_all_settings()

    _config_cache = config
    return config


def get_config() -> dict[str, Any]:
    """Get the cached configuration dictionary, loading it on first use."""
    if _config_cache is None:
        return load_config()

    return _config_cache


from serviceagent.config.settings import *  # noqa: E402,F401,F403

__all__ = [
    "load_config",
    "get_config",
    "get_env",
    "get_boolean_env",
    "get_int_env",
]

settings_module = sys.modules["serviceagent.config.settings"]
current_module = sys.modules[__name__]

for name in dir(settings_module):
    if name.isupper():
        setattr(current_module, name, getattr(settings_module, name))
        __all__.append(name)
