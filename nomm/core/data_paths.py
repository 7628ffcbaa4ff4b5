# Path: nomm/core/data_paths.py
"""
Mod Manager Data Paths

Filesystem layout for installed mods.

Layout:
    <game_folder>/
        BepInEx/
            plugins/<mod_id>/           enabled mods
            disabledPlugins/<mod_id>/   staged / disabled mods
"""

from pathlib import Path
from typing import Optional

from nomm.core.config_loader import ConfigLoader
from nomm.constants import (
    BEPINEX_DIR_NAME,
    PLUGINS_DIR_NAME,
    DISABLED_PLUGINS_DIR_NAME,
)


class ModPaths:
    """
    Resolves install locations from the configured game folder.

    The game folder is read on every access so a folder chosen at
    runtime (config.set('game_folder', ...)) takes effect immediately.

    Example:
        paths = ModPaths()
        if paths.prerequisite_installed():
            target = paths.staging_dir('MyMod')
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        self.config = config if config else ConfigLoader()

    @property
    def game_folder(self) -> Optional[Path]:
        folder = self.config.get('game_folder')
        return Path(folder) if folder else None

    @property
    def bepinex_dir(self) -> Optional[Path]:
        game = self.game_folder
        return game / BEPINEX_DIR_NAME if game else None

    @property
    def plugins_dir(self) -> Optional[Path]:
        bepinex = self.bepinex_dir
        return bepinex / PLUGINS_DIR_NAME if bepinex else None

    @property
    def disabled_plugins_dir(self) -> Optional[Path]:
        bepinex = self.bepinex_dir
        return bepinex / DISABLED_PLUGINS_DIR_NAME if bepinex else None

    def prerequisite_installed(self) -> bool:
        """Check whether the mod loader runtime is present on disk."""
        bepinex = self.bepinex_dir
        return bepinex is not None and bepinex.exists()

    def staging_dir(self, mod_id: str) -> Path:
        """
        Directory a mod is installed into before it is enabled.

        Raises:
            ValueError: If no game folder is configured
        """
        disabled = self.disabled_plugins_dir
        if disabled is None:
            raise ValueError("Game folder is not configured")
        return disabled / mod_id

    def enabled_dir(self, mod_id: str) -> Path:
        """Directory of an enabled mod."""
        plugins = self.plugins_dir
        if plugins is None:
            raise ValueError("Game folder is not configured")
        return plugins / mod_id


__all__ = ['ModPaths']
