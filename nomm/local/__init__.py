# Path: nomm/local/__init__.py
"""
Local Module

Installed-mod metadata and the on-disk registry.
"""

from nomm.local.metadata import ModMeta, write_meta, read_meta, meta_path
from nomm.local.registry import InstalledMod, LocalModRegistry

__all__ = [
    'ModMeta',
    'write_meta',
    'read_meta',
    'meta_path',
    'InstalledMod',
    'LocalModRegistry',
]
