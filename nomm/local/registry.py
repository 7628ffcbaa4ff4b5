# Path: nomm/local/registry.py
"""
Local Mod Registry

Installed mods found on disk, and their enable/disable/uninstall
lifecycle.

Enabled mods live in BepInEx/plugins/<id>, disabled (and freshly
installed) ones in BepInEx/disabledPlugins/<id>. Enabling moves the
directory from one to the other.
"""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from packaging.version import Version

from nomm.core.config_loader import ConfigLoader
from nomm.core.data_paths import ModPaths
from nomm.core.logger import get_logger
from nomm.catalog.models import Artifact, Extension
from nomm.local.metadata import ModMeta, read_meta
from nomm.constants import LOG_INPUT, LOG_OUTPUT

logger = get_logger(__name__, 'local')


@dataclass(frozen=True)
class InstalledMod:
    """A mod directory found on disk."""
    id: str
    directory: Path
    enabled: bool
    meta: Optional[ModMeta] = None

    @property
    def artifact(self) -> Optional[Artifact]:
        return self.meta.artifact if self.meta else None

    @property
    def version(self) -> Optional[Version]:
        artifact = self.artifact
        return artifact.version if artifact else None

    @property
    def cached_extension(self) -> Optional[Extension]:
        return self.meta.cached_extension if self.meta else None


class LocalModRegistry:
    """
    Mapping from mod id to installed mod.

    Example:
        registry = LocalModRegistry()
        registry.refresh()
        if registry.installed_version('MyMod') is None:
            ...
    """

    def __init__(self, paths: Optional[ModPaths] = None, config: Optional[ConfigLoader] = None):
        self.config = config if config else ConfigLoader()
        self.paths = paths if paths else ModPaths(self.config)
        self._mods: dict[str, InstalledMod] = {}

    @property
    def mods(self) -> dict[str, InstalledMod]:
        return dict(self._mods)

    def get(self, mod_id: str) -> Optional[InstalledMod]:
        return self._mods.get(mod_id)

    def installed_version(self, mod_id: str) -> Optional[Version]:
        mod = self._mods.get(mod_id)
        return mod.version if mod else None

    def refresh(self) -> dict[str, InstalledMod]:
        """
        Rescan the plugin directories.

        Returns:
            The new mapping
        """
        mods: dict[str, InstalledMod] = {}

        # Disabled first so an enabled copy of the same id wins
        for root, enabled in ((self.paths.disabled_plugins_dir, False), (self.paths.plugins_dir, True)):
            if root is None or not root.is_dir():
                continue
            for directory in sorted(root.iterdir()):
                if not directory.is_dir():
                    continue
                meta = read_meta(directory)
                mod_id = meta.id if meta else directory.name
                mods[mod_id] = InstalledMod(mod_id, directory, enabled, meta)

        self._mods = mods
        logger.debug(f"{LOG_OUTPUT} {len(mods)} local mods")
        return dict(mods)

    def enable(self, mod_id: str) -> bool:
        """
        Move a staged mod into the plugins directory.

        An enabled copy of the same id is replaced.

        Returns:
            False if nothing is staged for mod_id
        """
        return self._move(mod_id, self.paths.staging_dir(mod_id), self.paths.enabled_dir(mod_id))

    def disable(self, mod_id: str) -> bool:
        """Move an enabled mod back into the disabled plugins directory."""
        return self._move(mod_id, self.paths.enabled_dir(mod_id), self.paths.staging_dir(mod_id))

    def uninstall(self, mod_id: str) -> bool:
        """Delete a mod's directory."""
        mod = self._mods.get(mod_id)
        if mod is None:
            return False

        logger.info(f"{LOG_INPUT} Uninstalling {mod_id} from {mod.directory}")
        shutil.rmtree(mod.directory)
        self.refresh()
        return True

    def has_update(self, mod_id: str, catalog) -> bool:
        """
        Check whether the catalog lists a newer artifact than the installed one.

        Args:
            mod_id: Installed mod
            catalog: ModCatalog to look the mod up in
        """
        installed = self.installed_version(mod_id)
        latest = catalog.latest_artifact(mod_id)
        if installed is None or latest is None:
            return False
        return latest.version > installed

    def _move(self, mod_id: str, source: Path, destination: Path) -> bool:
        if not source.is_dir():
            logger.warning(f"Nothing to move for {mod_id}: {source} does not exist")
            return False

        logger.info(f"{LOG_INPUT} Moving {mod_id}: {source} -> {destination}")
        if destination.exists():
            shutil.rmtree(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(destination))
        self.refresh()
        return True


__all__ = ['InstalledMod', 'LocalModRegistry']
