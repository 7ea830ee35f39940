"""Settings loader and singleton manager.

This module handles:
- Environment variable loading from an optional .env file
- Configuration file loading from TOML
- Thread-safe singleton pattern for the Settings instance
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from querycache.config.models.settings import Settings
from querycache.shared.errors import (
    ConfigurationError,
    ErrorCode,
    ErrorContext,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS = (
    Path("config/querycache.toml"),
    Path("querycache.toml"),
)


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking pattern to ensure thread-safety
    while minimizing lock overhead.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance (thread-safe).

        Returns:
            The global Settings instance, loading it if necessary.
        """
        # First check (without lock for performance)
        if self._instance is None:
            # Second check (with lock for thread-safety)
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()

        return self._instance

    def reload_config(self, config_path: str | Path | None = None) -> Settings:
        """Reload the global settings instance from configuration files.

        Returns:
            The reloaded Settings instance.
        """
        with self._lock:
            self._instance = load_settings(config_path)

        return self._instance

    def reset(self) -> None:
        """Drop the cached instance so the next access reloads it."""
        with self._lock:
            self._instance = None


def _load_env_file(env_file: Path = Path(".env")) -> None:
    """Load environment variables from a .env file if one exists.

    Existing environment variables win over values in the file.

    Raises:
        ConfigurationError: If the file exists but cannot be read
    """
    if not env_file.exists():
        return

    try:
        load_dotenv(env_file, override=False)
    except OSError as e:
        raise ConfigurationError(
            code=ErrorCode.FILE_READ_ERROR,
            message=f"Failed to read .env file: {e}",
            context=ErrorContext(
                operation="load_env",
                additional_data={"file_name": env_file.name},
            ),
            original_error=e,
        ) from e


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from TOML configuration file or environment.

    Args:
        config_path: Optional path to TOML configuration file. If None, tries
            the default locations and falls back to environment variables.

    Returns:
        Settings instance loaded from the specified source

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    _load_env_file()

    if config_path is None:
        config_path = next((path for path in DEFAULT_CONFIG_PATHS if path.exists()), None)

    try:
        if config_path is None:
            return Settings()
        logger.debug("Loading settings from %s", config_path)
        return Settings.from_toml_file(config_path)
    except FileNotFoundError as e:
        raise ConfigurationError(
            code=ErrorCode.CONFIG_MISSING,
            message=str(e),
            context=ErrorContext(
                operation="load_settings",
                additional_data={"config_path": str(config_path)},
            ),
            original_error=e,
        ) from e
    except ValidationError as e:
        raise ConfigurationError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Invalid configuration: {e.error_count()} error(s)",
            context=ErrorContext(
                operation="load_settings",
                additional_data={"config_path": str(config_path)},
            ),
            original_error=e,
        ) from e
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            code=ErrorCode.FILE_READ_ERROR,
            message=f"Failed to read configuration: {e}",
            context=ErrorContext(
                operation="load_settings",
                additional_data={"config_path": str(config_path)},
            ),
            original_error=e,
        ) from e


# Global loader instance
_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance (thread-safe)."""
    return _loader.get_config()


def reload_config(config_path: str | Path | None = None) -> Settings:
    """Reload the global settings instance from configuration files."""
    return _loader.reload_config(config_path)
