# Path: nomm/engine/dependency_resolver.py
"""
Dependency Resolver

Walks a mod's dependency graph and dispatches one install per mod.

Architecture:
- Synchronous depth-first walk; each install is handed to the
  InstallCoordinator and runs in the background
- Processing set scoped to one top-level call breaks cycles and
  suppresses duplicates within that call
- Dependencies, then the extended base, are dispatched before the
  dependent itself
- A branch that cannot be installed is abandoned with a warning and a
  ResolveOutcome; siblings already dispatched keep running
- A missing prerequisite redirects the whole call into installing it;
  the caller re-issues the request once it completes
"""

import asyncio
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from packaging.version import Version, InvalidVersion

from nomm.core.logger import get_logger
from nomm.core.config_loader import ConfigLoader
from nomm.core.data_paths import ModPaths
from nomm.core.exceptions import ResolutionAbort
from nomm.catalog.models import Artifact, Extension, parse_version
from nomm.catalog.repository import ModCatalog
from nomm.local.metadata import ModMeta, write_meta
from nomm.local.registry import LocalModRegistry
from nomm.engine.coordinator import InstallCoordinator
from nomm.engine.result import InstallResult
from nomm.constants import (
    PREREQUISITE_ID,
    DEFAULT_PREREQUISITE_URL,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'engine')


class ResolveOutcome(Enum):
    """What one node of the walk did."""
    DISPATCHED = 'dispatched'
    ALREADY_PROCESSING = 'already_processing'
    ALREADY_INSTALLED = 'already_installed'
    NOT_IN_CATALOG = 'not_in_catalog'
    VERSION_NOT_FOUND = 'version_not_found'
    DIRECTORY_FAILED = 'directory_failed'
    PREREQUISITE_MISSING = 'prerequisite_missing'


class DependencyResolver:
    """
    Resolves and dispatches mod installs.

    Must be called from the event loop thread; returns as soon as the
    installs are dispatched.

    Example:
        resolver = DependencyResolver(catalog, registry, coordinator)
        outcome = resolver.install_mod('MyMod')
        if outcome is ResolveOutcome.PREREQUISITE_MISSING:
            # re-issue once the prerequisite install has finished
            ...
    """

    def __init__(
        self,
        catalog: ModCatalog,
        registry: LocalModRegistry,
        coordinator: InstallCoordinator,
        paths: Optional[ModPaths] = None,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize dependency resolver.

        Args:
            catalog: Source of mod entries and artifacts
            registry: Installed mods (skip-if-satisfied, enable after install)
            coordinator: Runs the actual installs
            paths: Filesystem layout (built from config if None)
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()
        self.paths = paths if paths else ModPaths(self.config)
        self.catalog = catalog
        self.registry = registry
        self.coordinator = coordinator

    def install_mod(
        self,
        mod_id: str,
        version: Optional[Union[str, Version]] = None,
        processing: Optional[set[str]] = None
    ) -> ResolveOutcome:
        """
        Install a mod and everything it depends on.

        Args:
            mod_id: Catalog identifier
            version: Exact version to install (latest if None)
            processing: Ids already visited in this top-level call

        Returns:
            Outcome for mod_id itself
        """
        logger.info(f"{LOG_INPUT} Install {mod_id} (version={version or 'latest'})")

        if not self.paths.prerequisite_installed():
            logger.warning(
                f"{LOG_OUTPUT} {PREREQUISITE_ID} not found; installing it instead of {mod_id}"
            )
            self.install_prerequisite()
            return ResolveOutcome.PREREQUISITE_MISSING

        return self._visit(mod_id, version, processing if processing is not None else set())

    def install_prerequisite(self) -> Optional[asyncio.Task]:
        """
        Install the mod loader runtime into the game folder.

        Runs in protected mode: existing files are kept and nothing is
        deleted on failure.

        Returns:
            Install task, or None if no game folder is configured
        """
        game_folder = self.paths.game_folder
        if game_folder is None:
            logger.warning(f"Cannot install {PREREQUISITE_ID}: game folder is not configured")
            return None

        url = self.config.get('prerequisite_url', DEFAULT_PREREQUISITE_URL)

        def on_success(result: InstallResult) -> None:
            self.registry.refresh()

        return self.coordinator.install(
            PREREQUISITE_ID,
            url,
            game_folder,
            protected=True,
            on_success=on_success
        )

    def _visit(
        self,
        mod_id: str,
        version: Optional[Union[str, Version]],
        processing: set[str]
    ) -> ResolveOutcome:
        if mod_id in processing:
            logger.debug(f"{LOG_PROCESS} {mod_id} already visited")
            return ResolveOutcome.ALREADY_PROCESSING
        processing.add(mod_id)

        try:
            return self._resolve(mod_id, version, processing)
        except ResolutionAbort as e:
            logger.warning(f"{LOG_OUTPUT} Skipping {e.mod_id}: {e}")
            return e.outcome

    def _resolve(
        self,
        mod_id: str,
        version: Optional[Union[str, Version]],
        processing: set[str]
    ) -> ResolveOutcome:
        extension = self.catalog.find(mod_id)
        if extension is None:
            raise ResolutionAbort(mod_id, ResolveOutcome.NOT_IN_CATALOG, f"{mod_id} is not in the catalog")

        artifact = self._select_artifact(extension, version)

        if version is None and self.registry.installed_version(mod_id) == artifact.version:
            logger.info(f"{LOG_OUTPUT} {mod_id} {artifact.version} already installed")
            return ResolveOutcome.ALREADY_INSTALLED

        for dependency in artifact.dependencies:
            self._visit(dependency.id, dependency.version, processing)
        if artifact.extends is not None:
            self._visit(artifact.extends.id, artifact.extends.version, processing)

        target_dir = self._prepare_directory(mod_id)

        async def on_success(result: InstallResult) -> None:
            await write_meta(target_dir, ModMeta(extension.id, artifact, extension))
            self.registry.refresh()
            if self.registry.get(extension.id) is not None:
                self.registry.enable(extension.id)

        logger.info(f"{LOG_PROCESS} Dispatching {mod_id} {artifact.version} into {target_dir}")
        self.coordinator.install(
            extension.id,
            artifact.download_url,
            target_dir,
            on_success=on_success,
            clean_target=True
        )
        return ResolveOutcome.DISPATCHED

    def _select_artifact(
        self,
        extension: Extension,
        version: Optional[Union[str, Version]]
    ) -> Artifact:
        if version is None:
            artifact = extension.latest_artifact()
            if artifact is None:
                raise ResolutionAbort(
                    extension.id, ResolveOutcome.VERSION_NOT_FOUND, f"{extension.id} has no artifacts"
                )
            return artifact

        try:
            artifact = extension.find_artifact(parse_version(version))
        except InvalidVersion:
            artifact = None
        if artifact is None:
            raise ResolutionAbort(
                extension.id, ResolveOutcome.VERSION_NOT_FOUND, f"{extension.id} {version} is not published"
            )
        return artifact

    def _prepare_directory(self, mod_id: str) -> Path:
        """
        Staging directory for a fresh install, with its parent created.

        The directory itself is emptied by the coordinator under the
        target lock, so a running install of the same mod is untouched.
        """
        try:
            target_dir = self.paths.staging_dir(mod_id)
            target_dir.parent.mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError) as e:
            raise ResolutionAbort(
                mod_id, ResolveOutcome.DIRECTORY_FAILED, f"cannot create install directory: {e}"
            ) from e
        return target_dir


__all__ = ['DependencyResolver', 'ResolveOutcome']
