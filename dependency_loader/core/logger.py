# Path: dependency_loader/core/logger.py
"""
Dependency Loader Logger

Centralized logging configuration for the dependency loader.

Architecture:
- Component-based logging (core, engine, cli)
- File and console output
- Configurable log levels
- IPO (Input-Process-Output) structured logging
"""

import logging
from typing import Optional

from dependency_loader.core.config_loader import ConfigLoader
from dependency_loader.constants import (
    LOG_FORMAT,
    LOG_DATE_FORMAT,
    LOG_FILE_ACTIVITY,
    LOG_FILE_DOWNLOADS,
    LOG_FILE_ERRORS,
    LOGGER_ROOT,
    LOGGER_CORE,
    LOGGER_ENGINE,
    LOGGER_CLI,
)


class LoaderLogger:
    """
    Centralized logger for the dependency loader.

    Provides component-specific loggers with unified configuration.
    Loggers are handed out before configuration; handlers are attached
    once configure() is called by the entry point or embedding host.

    Example:
        logger = get_logger(__name__, 'engine')
        logger.info("[INPUT] Resolving com.zaxxer:HikariCP:2.6.1")
        logger.info("[PROCESS] Downloading HikariCP-2.6.1.jar")
        logger.info("[OUTPUT] Download completed: 130KB in 0.4s")
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize loader logger.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config
        self._configured = False

    def configure(self) -> None:
        """Configure logging system for the dependency loader."""
        if self._configured:
            return

        config = self.config if self.config else ConfigLoader()

        log_dir = config.get('log_dir')
        log_level = config.get('log_level', 'INFO')
        console_output = config.get('log_console', True)

        # Verbose diagnostics need DEBUG records to reach the handlers
        if config.get('show_debug', False):
            log_level = 'DEBUG'

        level = getattr(logging, str(log_level).upper(), logging.INFO)

        logger = logging.getLogger(LOGGER_ROOT)
        logger.setLevel(level)
        logger.handlers.clear()

        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        if log_dir:
            log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_dir / LOG_FILE_ACTIVITY)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

            # Download-specific log file
            download_handler = logging.FileHandler(log_dir / LOG_FILE_DOWNLOADS)
            download_handler.setLevel(logging.DEBUG)
            download_handler.setFormatter(formatter)
            logging.getLogger(LOGGER_ENGINE).addHandler(download_handler)

            # Error-only log file
            error_handler = logging.FileHandler(log_dir / LOG_FILE_ERRORS)
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(formatter)
            logger.addHandler(error_handler)

        if console_output:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(level)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        self._configured = True

    def get_logger(self, name: str, component: str = 'core') -> logging.Logger:
        """
        Get logger for specific component.

        Args:
            name: Module name (typically __name__)
            component: Component type ('core', 'engine', 'cli')

        Returns:
            Logger instance
        """
        if component == 'core':
            logger_name = f"{LOGGER_CORE}.{name}"
        elif component == 'engine':
            logger_name = f"{LOGGER_ENGINE}.{name}"
        elif component == 'cli':
            logger_name = f"{LOGGER_CLI}.{name}"
        else:
            logger_name = f"{LOGGER_ROOT}.{name}"

        return logging.getLogger(logger_name)


# Global logger instance
_loader_logger = LoaderLogger()


def get_logger(name: str, component: str = 'core') -> logging.Logger:
    """
    Get logger for a dependency loader component.

    Args:
        name: Module name (typically __name__)
        component: Component type ('core', 'engine', 'cli')

    Returns:
        Logger instance

    Example:
        from dependency_loader.core.logger import get_logger

        logger = get_logger(__name__, 'engine')
        logger.info("[INPUT] Processing dependency request")
    """
    return _loader_logger.get_logger(name, component)


def configure_logging(config: Optional[ConfigLoader] = None) -> None:
    """
    Configure dependency loader logging system.

    Call this once from the entry point. Embedding hosts that manage
    logging themselves can skip it; records then propagate to their root.

    Args:
        config: Optional ConfigLoader instance
    """
    global _loader_logger

    if config:
        _loader_logger = LoaderLogger(config)

    _loader_logger.configure()


__all__ = ['get_logger', 'configure_logging', 'LoaderLogger']
