# Path: nomm/catalog/repository.py
"""
Mod Catalog

In-memory cache of the remote manifest.

A refresh replaces the cached list only when the fetch produced a
value; on failure the previous catalog is kept unchanged.
When manifest_path is configured the manifest is read from that file
instead of the network.
"""

import asyncio
from typing import Optional

from nomm.core.config_loader import ConfigLoader
from nomm.core.logger import get_logger
from nomm.catalog.manifest_client import ManifestClient
from nomm.catalog.models import Artifact, Extension
from nomm.constants import LOG_INPUT, LOG_OUTPUT

logger = get_logger(__name__, 'catalog')


class ModCatalog:
    """
    Cached list of catalog mods.

    Example:
        catalog = ModCatalog()
        await catalog.refresh()
        extension = catalog.find('MyMod')
    """

    def __init__(
        self,
        client: Optional[ManifestClient] = None,
        config: Optional[ConfigLoader] = None
    ):
        self.config = config if config else ConfigLoader()
        self.client = client if client else ManifestClient(self.config)
        self._mods: list[Extension] = []
        self._lock = asyncio.Lock()
        self.is_loading = False

    @property
    def mods(self) -> list[Extension]:
        return list(self._mods)

    def set_mods(self, mods: list[Extension]) -> None:
        """Replace the cached catalog."""
        self._mods = list(mods)

    async def refresh(self, url: Optional[str] = None) -> bool:
        """
        Re-fetch the manifest.

        A refresh already in progress makes this call return at once.

        Args:
            url: Manifest URL (configured manifest_path, then manifest_url,
                if None)

        Returns:
            True if the cached catalog was replaced
        """
        if self._lock.locked():
            logger.info("Manifest refresh already running")
            return False

        async with self._lock:
            self.is_loading = True
            try:
                manifest_path = None if url else self.config.get('manifest_path')
                if manifest_path:
                    logger.info(f"{LOG_INPUT} Refreshing catalog from file {manifest_path}")
                    fetched = await self.client.load_manifest(manifest_path)
                else:
                    manifest_url = url or self.config.get('manifest_url')
                    logger.info(f"{LOG_INPUT} Refreshing catalog from {manifest_url}")
                    fetched = await self.client.fetch_manifest(manifest_url)

                if fetched is None:
                    logger.warning(
                        f"{LOG_OUTPUT} Manifest unavailable; keeping {len(self._mods)} cached mods"
                    )
                    return False

                self._mods = fetched
                logger.info(f"{LOG_OUTPUT} Catalog now lists {len(fetched)} mods")
                return True
            finally:
                self.is_loading = False

    def find(self, mod_id: str) -> Optional[Extension]:
        for extension in self._mods:
            if extension.id == mod_id:
                return extension
        return None

    def latest_artifact(self, mod_id: str) -> Optional[Artifact]:
        extension = self.find(mod_id)
        return extension.latest_artifact() if extension else None

    async def close(self) -> None:
        await self.client.close()


__all__ = ['ModCatalog']
