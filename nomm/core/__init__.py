# Path: nomm/core/__init__.py
"""
Mod Manager Core Module

Core utilities: configuration, logging, filesystem layout and errors.
"""

from .config_loader import ConfigLoader
from .data_paths import ModPaths
from .exceptions import NommError, NetworkError, ExtractionError, ResolutionAbort
from .logger import get_logger, configure_logging

__all__ = [
    'ConfigLoader',
    'ModPaths',
    'NommError',
    'NetworkError',
    'ExtractionError',
    'ResolutionAbort',
    'get_logger',
    'configure_logging',
]
