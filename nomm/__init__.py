# Path: nomm/__init__.py
"""
Nuclear Option Mod Manager

Mod installation engine: catalog, dependency resolution, download with
retry, multi-format extraction and observable per-target progress.
"""

from .app import ModManager
from .engine.dependency_resolver import ResolveOutcome

__version__ = '1.0.0'

__all__ = ['ModManager', 'ResolveOutcome']
