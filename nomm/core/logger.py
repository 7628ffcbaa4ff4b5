# Path: nomm/core/logger.py
"""
Mod Manager Logger

Centralized logging configuration for the mod manager.

Architecture:
- Component-based logging (core, engine, extraction, catalog, local)
- File and console output
- Configurable log levels
- IPO (Input-Process-Output) structured logging
"""

import logging
from typing import Optional

from nomm.core.config_loader import ConfigLoader
from nomm.constants import (
    LOG_FORMAT,
    LOG_DATE_FORMAT,
    LOGGER_ROOT,
    LOGGER_CORE,
    LOGGER_ENGINE,
    LOGGER_EXTRACTION,
    LOGGER_CATALOG,
    LOGGER_LOCAL,
    ACTIVITY_LOG_FILENAME,
    INSTALL_LOG_FILENAME,
    ERROR_LOG_FILENAME,
)

_COMPONENT_LOGGERS = {
    'core': LOGGER_CORE,
    'engine': LOGGER_ENGINE,
    'extraction': LOGGER_EXTRACTION,
    'catalog': LOGGER_CATALOG,
    'local': LOGGER_LOCAL,
}


class NommLogger:
    """
    Centralized logger for the mod manager.

    Provides component-specific loggers with unified configuration.

    Example:
        logger = get_logger(__name__, 'engine')
        logger.info("[INPUT] Installing MyMod")
        logger.info("[PROCESS] Extracting 12 entries")
        logger.info("[OUTPUT] MyMod installed in 1.2s")
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize logger.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()
        self._configured = False

    def configure(self) -> None:
        """Configure logging system for the mod manager."""
        if self._configured:
            return

        log_dir = self.config.get('log_dir')
        log_level = getattr(logging, str(self.config.get('log_level', 'INFO')).upper(), logging.INFO)
        console_output = self.config.get('log_console', True)

        if log_dir:
            log_dir.mkdir(parents=True, exist_ok=True)

        logger = logging.getLogger(LOGGER_ROOT)
        logger.setLevel(log_level)
        logger.handlers.clear()

        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        if log_dir:
            file_handler = logging.FileHandler(log_dir / ACTIVITY_LOG_FILENAME)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

            # Install-specific log file
            install_handler = logging.FileHandler(log_dir / INSTALL_LOG_FILENAME)
            install_handler.setLevel(logging.DEBUG)
            install_handler.setFormatter(formatter)
            logging.getLogger(LOGGER_ENGINE).addHandler(install_handler)

            # Error-only log file
            error_handler = logging.FileHandler(log_dir / ERROR_LOG_FILENAME)
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(formatter)
            logger.addHandler(error_handler)

        if console_output:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(log_level)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        self._configured = True

    def get_logger(self, name: str, component: str = 'core') -> logging.Logger:
        """
        Get logger for specific component.

        Args:
            name: Module name (typically __name__)
            component: Component type ('core', 'engine', 'extraction', 'catalog', 'local')

        Returns:
            Configured logger instance
        """
        if not self._configured:
            self.configure()

        prefix = _COMPONENT_LOGGERS.get(component, LOGGER_ROOT)
        return logging.getLogger(f"{prefix}.{name}")


# Global logger instance
_nomm_logger = NommLogger()


def get_logger(name: str, component: str = 'core') -> logging.Logger:
    """
    Get logger for a mod manager component.

    Args:
        name: Module name (typically __name__)
        component: Component type

    Returns:
        Configured logger instance

    Example:
        from nomm.core.logger import get_logger

        logger = get_logger(__name__, 'engine')
        logger.info("[INPUT] Install requested")
    """
    return _nomm_logger.get_logger(name, component)


def configure_logging(config: Optional[ConfigLoader] = None) -> None:
    """
    Configure logging system.

    Call this once at application start.

    Args:
        config: Optional ConfigLoader instance
    """
    global _nomm_logger

    if config:
        _nomm_logger = NommLogger(config)

    _nomm_logger.configure()


__all__ = ['get_logger', 'configure_logging', 'NommLogger']
