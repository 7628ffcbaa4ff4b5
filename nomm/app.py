# Path: nomm/app.py
"""
Mod Manager

Composition root: builds the Task State Store, install coordinator,
catalog, local registry and dependency resolver around one
ConfigLoader, and exposes the operations a UI calls.
"""

import asyncio
from typing import Optional, Union

from packaging.version import Version

from nomm.core.config_loader import ConfigLoader
from nomm.core.data_paths import ModPaths
from nomm.core.logger import get_logger
from nomm.catalog.repository import ModCatalog
from nomm.local.registry import LocalModRegistry
from nomm.engine.task_state import TaskStateStore
from nomm.engine.coordinator import InstallCoordinator
from nomm.engine.dependency_resolver import DependencyResolver, ResolveOutcome
from nomm.constants import LOG_INPUT

logger = get_logger(__name__, 'core')


class ModManager:
    """
    Facade over the install engine.

    Example:
        manager = ModManager()
        await manager.refresh_catalog()
        manager.install_mod('MyMod')
        await manager.coordinator.join()
        await manager.close()
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        self.config = config if config else ConfigLoader()
        self.paths = ModPaths(self.config)

        self.store = TaskStateStore()
        self.coordinator = InstallCoordinator(store=self.store, config=self.config)
        self.catalog = ModCatalog(config=self.config)
        self.registry = LocalModRegistry(self.paths, self.config)
        self.resolver = DependencyResolver(
            self.catalog,
            self.registry,
            self.coordinator,
            paths=self.paths,
            config=self.config
        )

    async def refresh_catalog(self) -> bool:
        """Re-fetch the manifest and rescan installed mods."""
        self.registry.refresh()
        return await self.catalog.refresh()

    def install_mod(
        self,
        mod_id: str,
        version: Optional[Union[str, Version]] = None
    ) -> ResolveOutcome:
        return self.resolver.install_mod(mod_id, version)

    def install_prerequisite(self) -> Optional[asyncio.Task]:
        return self.resolver.install_prerequisite()

    def update_mod(self, mod_id: str) -> ResolveOutcome:
        """
        Install the newest catalog artifact of an installed mod.

        Returns:
            ALREADY_INSTALLED when no newer artifact is listed
        """
        logger.info(f"{LOG_INPUT} Update requested: {mod_id}")
        if not self.registry.has_update(mod_id, self.catalog):
            return ResolveOutcome.ALREADY_INSTALLED
        return self.resolver.install_mod(mod_id)

    async def close(self) -> None:
        """Wait for running installs and release network resources."""
        await self.coordinator.close()
        await self.catalog.close()


__all__ = ['ModManager']
