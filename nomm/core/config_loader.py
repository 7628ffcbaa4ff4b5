# Path: nomm/core/config_loader.py
"""
Mod Manager Configuration Loader

Centralized configuration management for the mod manager.
Loads environment variables with type safety and defaults.

Architecture:
- Singleton pattern for global configuration
- Type-safe access with validation
- Sensible defaults (nothing is required)
- Runtime overrides for settings chosen in the UI (game folder)
"""

import os
from typing import Any, Optional
from pathlib import Path
from dotenv import load_dotenv

from nomm.constants import (
    ENV_GAME_FOLDER,
    ENV_MANIFEST_URL,
    ENV_MANIFEST_PATH,
    ENV_PREREQUISITE_URL,
    ENV_REQUEST_TIMEOUT,
    ENV_CONNECT_TIMEOUT,
    ENV_CHUNK_SIZE,
    ENV_RETRY_ATTEMPTS,
    ENV_RETRY_DELAY,
    ENV_MANIFEST_RETRY_ATTEMPTS,
    ENV_MAX_CONCURRENT,
    ENV_MAX_EXTRACTION_DEPTH,
    ENV_LOG_DIR,
    ENV_LOG_LEVEL,
    ENV_LOG_CONSOLE,
    DEFAULT_PREREQUISITE_URL,
    DEFAULT_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY,
    DEFAULT_MANIFEST_RETRY_ATTEMPTS,
    DEFAULT_MAX_CONCURRENT,
    MAX_EXTRACTION_DEPTH,
)


class ConfigLoader:
    """
    Singleton configuration loader.

    Loads configuration from environment variables with type
    conversion and sensible defaults.

    Example:
        config = ConfigLoader()
        game_folder = config.get('game_folder')
        config.set('game_folder', Path('/games/NuclearOption'))
    """

    _instance: Optional['ConfigLoader'] = None
    _initialized: bool = False

    def __new__(cls) -> 'ConfigLoader':
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """
        Initialize configuration loader.

        Only runs once due to singleton pattern.
        """
        if ConfigLoader._initialized:
            return

        # config_loader.py is at: <root>/nomm/core/config_loader.py
        # .env is at: <root>/.env
        current_file = Path(__file__).resolve()
        project_root = current_file.parent.parent.parent
        env_path = project_root / '.env'

        if env_path.exists():
            load_dotenv(dotenv_path=env_path, interpolate=True)

        self._config = self._load_configuration()
        ConfigLoader._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next ConfigLoader() re-reads the environment."""
        cls._instance = None
        cls._initialized = False

    def _load_configuration(self) -> dict[str, Any]:
        """
        Load all configuration from environment.

        Returns:
            Dictionary of configuration values
        """
        config = {
            # ================================================================
            # GAME / CATALOG
            # ================================================================
            'game_folder': self._get_path(ENV_GAME_FOLDER),
            'manifest_url': self._get_env(ENV_MANIFEST_URL),
            'manifest_path': self._get_path(ENV_MANIFEST_PATH),
            'prerequisite_url': self._get_env(ENV_PREREQUISITE_URL, DEFAULT_PREREQUISITE_URL),

            # ================================================================
            # DOWNLOAD CONFIGURATION
            # ================================================================
            'request_timeout': self._get_int(ENV_REQUEST_TIMEOUT, DEFAULT_TIMEOUT),
            'connect_timeout': self._get_int(ENV_CONNECT_TIMEOUT, DEFAULT_CONNECT_TIMEOUT),
            'chunk_size': self._get_int(ENV_CHUNK_SIZE, DEFAULT_CHUNK_SIZE),
            'retry_attempts': self._get_int(ENV_RETRY_ATTEMPTS, DEFAULT_RETRY_ATTEMPTS),
            'retry_delay': self._get_float(ENV_RETRY_DELAY, DEFAULT_RETRY_DELAY),
            'manifest_retry_attempts': self._get_int(
                ENV_MANIFEST_RETRY_ATTEMPTS, DEFAULT_MANIFEST_RETRY_ATTEMPTS
            ),
            'max_concurrent': self._get_int(ENV_MAX_CONCURRENT, DEFAULT_MAX_CONCURRENT),

            # ================================================================
            # EXTRACTION CONFIGURATION
            # ================================================================
            'max_extraction_depth': self._get_int(ENV_MAX_EXTRACTION_DEPTH, MAX_EXTRACTION_DEPTH),

            # ================================================================
            # LOGGING CONFIGURATION
            # ================================================================
            'log_dir': self._get_path(ENV_LOG_DIR),
            'log_level': self._get_env(ENV_LOG_LEVEL, 'INFO'),
            'log_console': self._get_bool(ENV_LOG_CONSOLE, True),
        }

        return config

    def _get_env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get string environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found

        Returns:
            Environment variable value or default
        """
        value = os.getenv(key)

        if value is None or not value.strip():
            return default

        return value.strip()

    def _get_bool(self, key: str, default: bool) -> bool:
        """Get boolean environment variable."""
        value = os.getenv(key)
        if value is None:
            return default

        return value.strip().lower() in ('true', '1', 'yes', 'on')

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable (default if missing or invalid)."""
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value.strip())
        except ValueError:
            return default

    def _get_float(self, key: str, default: float) -> float:
        """Get float environment variable (default if missing or invalid)."""
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return float(value.strip())
        except ValueError:
            return default

    def _get_path(self, key: str) -> Optional[Path]:
        """
        Get path environment variable.

        Args:
            key: Environment variable name

        Returns:
            Path object or None
        """
        value = os.getenv(key)

        if value is None or not value.strip():
            return None

        return Path(value.strip()).expanduser()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        value = self._config.get(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        """
        Override a configuration value at runtime.

        Args:
            key: Configuration key
            value: New value
        """
        self._config[key] = value

    def __getitem__(self, key: str) -> Any:
        """Dictionary-style access to configuration."""
        return self._config[key]

    def __contains__(self, key: str) -> bool:
        """Check if configuration key exists."""
        return key in self._config


__all__ = ['ConfigLoader']
