# Path: dependency_loader/core/config_loader.py
"""
Dependency Loader Configuration Loader

Centralized configuration management for the Dependency Loader.
Loads and validates environment variables with type safety and defaults.

Architecture:
- .env file loaded through python-dotenv (never overrides the real environment)
- Type-safe access with validation
- Sensible defaults for every key
- Explicit overrides for embedding hosts and tests
"""

import os
from typing import Any, Optional
from pathlib import Path
from dotenv import load_dotenv

from dependency_loader.constants import (
    LOADER_VERSION,
    ENV_ROOT,
    ENV_MANIFEST,
    ENV_CLASSPATH_FILE,
    ENV_REPOSITORIES,
    ENV_SHOW_DEBUG,
    ENV_ENFORCE_FILE_CHECK,
    ENV_SCOPES,
    ENV_INCLUDE_UNSCOPED,
    ENV_REQUEST_TIMEOUT,
    ENV_CONNECT_TIMEOUT,
    ENV_RETRY_ATTEMPTS,
    ENV_RETRY_DELAY,
    ENV_MAX_RETRY_DELAY,
    ENV_MAX_CONCURRENT,
    ENV_CHUNK_SIZE,
    ENV_USER_AGENT,
    ENV_LOG_LEVEL,
    ENV_LOG_CONSOLE,
    ENV_LOG_DIR,
    DEFAULT_ALLOWED_SCOPES,
    DEFAULT_INCLUDE_UNSCOPED,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY,
    DEFAULT_MAX_RETRY_DELAY,
    DEFAULT_MAX_CONCURRENT,
    DEFAULT_DEPENDENCY_ROOT,
    DEFAULT_MANIFEST_NAME,
    DEFAULT_CLASSPATH_NAME,
    DEFAULT_ENV_FILE,
)


class ConfigLoader:
    """
    Configuration loader for the dependency loader.

    Loads configuration from environment variables with validation,
    type conversion, and sensible defaults. Every LoaderContext owns
    exactly one ConfigLoader; there is no process-wide instance.

    Example:
        config = ConfigLoader()
        root = config.get('dependency_root')
        chunk_size = config.get('chunk_size')

        # Host or test supplied values win over the environment
        config = ConfigLoader(overrides={'show_debug': True})
    """

    def __init__(
        self,
        env_file: Optional[Path] = None,
        overrides: Optional[dict[str, Any]] = None
    ):
        """
        Initialize configuration loader.

        Args:
            env_file: Optional path to a .env file (defaults to ./.env)
            overrides: Optional values that replace loaded configuration
        """
        env_path = Path(env_file) if env_file else Path.cwd() / DEFAULT_ENV_FILE

        if env_path.exists():
            load_dotenv(dotenv_path=env_path, interpolate=True)

        self.env_path = env_path
        self._config = self._load_configuration()

        if overrides:
            self._config.update(overrides)

            # Classpath file follows an overridden root unless set explicitly
            if ('dependency_root' in overrides and 'classpath_file' not in overrides
                    and os.getenv(ENV_CLASSPATH_FILE) is None):
                self._config['classpath_file'] = Path(overrides['dependency_root']) / DEFAULT_CLASSPATH_NAME

    def _load_configuration(self) -> dict[str, Any]:
        """
        Load and validate all configuration from environment.

        Returns:
            Dictionary of validated configuration values
        """
        dependency_root = self._get_path(ENV_ROOT) or Path(DEFAULT_DEPENDENCY_ROOT)

        config = {
            # ================================================================
            # DIRECTORY PATHS
            # ================================================================
            'dependency_root': dependency_root,
            'manifest_path': self._get_path(ENV_MANIFEST) or Path(DEFAULT_MANIFEST_NAME),
            'classpath_file': self._get_path(ENV_CLASSPATH_FILE) or dependency_root / DEFAULT_CLASSPATH_NAME,

            # ================================================================
            # REPOSITORIES
            # ================================================================
            'repositories': self._get_list(ENV_REPOSITORIES),

            # ================================================================
            # RESOLUTION BEHAVIOUR
            # ================================================================
            'show_debug': self._get_bool(ENV_SHOW_DEBUG, False),
            'enforce_file_check': self._get_bool(ENV_ENFORCE_FILE_CHECK, True),
            'allowed_scopes': self._get_list(ENV_SCOPES) or sorted(DEFAULT_ALLOWED_SCOPES),
            'include_unscoped': self._get_bool(ENV_INCLUDE_UNSCOPED, DEFAULT_INCLUDE_UNSCOPED),

            # ================================================================
            # DOWNLOAD CONFIGURATION
            # ================================================================
            'request_timeout': self._get_int(ENV_REQUEST_TIMEOUT, DEFAULT_TIMEOUT),
            'connect_timeout': self._get_int(ENV_CONNECT_TIMEOUT, DEFAULT_CONNECT_TIMEOUT),
            'retry_attempts': self._get_int(ENV_RETRY_ATTEMPTS, DEFAULT_RETRY_ATTEMPTS),
            'retry_delay': self._get_float(ENV_RETRY_DELAY, DEFAULT_RETRY_DELAY),
            'max_retry_delay': self._get_int(ENV_MAX_RETRY_DELAY, DEFAULT_MAX_RETRY_DELAY),
            'max_concurrent': self._get_int(ENV_MAX_CONCURRENT, DEFAULT_MAX_CONCURRENT),
            'chunk_size': self._get_int(ENV_CHUNK_SIZE, DEFAULT_CHUNK_SIZE),
            'user_agent': self._get_env(ENV_USER_AGENT, f'dependency-loader/{LOADER_VERSION}'),

            # ================================================================
            # LOGGING CONFIGURATION
            # ================================================================
            'log_level': self._get_env(ENV_LOG_LEVEL, 'INFO'),
            'log_console': self._get_bool(ENV_LOG_CONSOLE, True),
            'log_dir': self._get_path(ENV_LOG_DIR),
        }

        return config

    def _get_env(self, key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
        """
        Get string environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found
            required: If True, raises ValueError when missing

        Returns:
            Environment variable value or default

        Raises:
            ValueError: If required and not found
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ValueError(f"Required environment variable not set: {key}")
            return default

        return value.strip()

    def _get_bool(self, key: str, default: bool) -> bool:
        """
        Get boolean environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found

        Returns:
            Boolean value
        """
        value = os.getenv(key)
        if value is None:
            return default

        return value.strip().lower() in ('true', '1', 'yes', 'on')

    def _get_int(self, key: str, default: int) -> int:
        """
        Get integer environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found or invalid

        Returns:
            Integer value
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value.strip())
        except ValueError:
            return default

    def _get_float(self, key: str, default: float) -> float:
        """Get float environment variable, default when missing or invalid."""
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return float(value.strip())
        except ValueError:
            return default

    def _get_path(self, key: str, required: bool = False) -> Optional[Path]:
        """
        Get path environment variable.

        Args:
            key: Environment variable name
            required: If True, raises ValueError when missing

        Returns:
            Path object or None

        Raises:
            ValueError: If required and not found
        """
        value = os.getenv(key)

        if value is None or not value.strip():
            if required:
                raise ValueError(f"Required environment variable not set: {key}")
            return None

        return Path(value.strip())

    def _get_list(self, key: str) -> list[str]:
        """
        Get comma-separated list environment variable.

        Args:
            key: Environment variable name

        Returns:
            List of non-empty, stripped entries (empty if not set)
        """
        value = os.getenv(key)
        if not value:
            return []

        return [item.strip() for item in value.split(',') if item.strip()]

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        return self._config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Dictionary-style access to configuration."""
        return self._config[key]

    def __contains__(self, key: str) -> bool:
        """Check if configuration key exists."""
        return key in self._config

    def keys(self):
        """Get all configuration keys."""
        return self._config.keys()

    def items(self):
        """Get all configuration key-value pairs."""
        return self._config.items()


__all__ = ['ConfigLoader']
