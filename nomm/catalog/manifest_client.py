# Path: nomm/catalog/manifest_client.py
"""
Manifest Client

Async HTTP client for the remote mod manifest with retry logic, plus a
reader for a manifest file on disk (offline use).
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Optional, Union
import aiofiles
import aiohttp
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type
)

from nomm.core.config_loader import ConfigLoader
from nomm.core.logger import get_logger
from nomm.catalog.models import Extension
from nomm.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MANIFEST_RETRY_ATTEMPTS,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
    RETRYABLE_STATUS_CODES,
    DEFAULT_USER_AGENT,
    HEADER_USER_AGENT,
    HEADER_ACCEPT,
)

logger = get_logger(__name__, 'catalog')


class ManifestClient:
    """
    Async HTTP client for the mod manifest.

    Features:
    - Automatic retry with exponential backoff on transport errors
    - Permissive decoding (unknown fields ignored)
    - None instead of an exception on transport or decode failure
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize manifest client.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()
        self.timeout = self.config.get('request_timeout', DEFAULT_TIMEOUT)
        self.retry_attempts = self.config.get(
            'manifest_retry_attempts', DEFAULT_MANIFEST_RETRY_ATTEMPTS
        )

        self._session: Optional[aiohttp.ClientSession] = None

    async def fetch_manifest(self, url: Optional[str]) -> Optional[list[Extension]]:
        """
        Fetch and decode the manifest.

        Args:
            url: Manifest URL

        Returns:
            Decoded extensions, or None on any failure
        """
        if not url:
            logger.warning("No manifest URL configured")
            return None

        logger.info(f"{LOG_INPUT} Fetching manifest: {url}")

        try:
            text = await self._get_text(url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"{LOG_OUTPUT} Manifest fetch failed: {e}")
            return None

        extensions = self.decode_manifest(text)
        if extensions is not None:
            logger.info(f"{LOG_OUTPUT} Manifest lists {len(extensions)} mods")
        return extensions

    async def load_manifest(self, path: Union[str, Path]) -> Optional[list[Extension]]:
        """
        Read and decode a manifest file from disk.

        Args:
            path: Manifest file

        Returns:
            Decoded extensions, or None if the file cannot be read or decoded
        """
        logger.info(f"{LOG_INPUT} Loading manifest file: {path}")

        try:
            async with aiofiles.open(path, 'r', encoding='utf-8') as f:
                text = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"{LOG_OUTPUT} Manifest file unreadable: {e}")
            return None

        extensions = self.decode_manifest(text)
        if extensions is not None:
            logger.info(f"{LOG_OUTPUT} Manifest file lists {len(extensions)} mods")
        return extensions

    @staticmethod
    def decode_manifest(text: str) -> Optional[list[Extension]]:
        """
        Decode manifest JSON.

        Accepts a list of extensions. Entries without an id are skipped.

        Args:
            text: Manifest document

        Returns:
            Extensions, or None if the document cannot be decoded
        """
        try:
            raw: Any = json.loads(text)
        except ValueError as e:
            logger.error(f"Manifest is not valid JSON: {e}")
            return None

        if not isinstance(raw, list):
            logger.error(f"Manifest must be a list, got {type(raw).__name__}")
            return None

        extensions = []
        for entry in raw:
            if not isinstance(entry, dict) or 'id' not in entry:
                logger.warning(f"Skipping manifest entry without id: {entry!r}")
                continue
            try:
                extensions.append(Extension.from_dict(entry))
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed manifest entry {entry.get('id')}: {e}")

        return extensions

    async def _get_text(self, url: str) -> str:
        retrying = retry(
            stop=stop_after_attempt(max(1, self.retry_attempts)),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type((aiohttp.ClientError, asyncio.TimeoutError)),
            reraise=True
        )
        return await retrying(self._make_request)(url)

    async def _make_request(self, url: str) -> str:
        """
        Make one HTTP request.

        Args:
            url: URL to fetch

        Returns:
            Response body as text
        """
        session = await self._get_session()

        logger.debug(f"{LOG_PROCESS} Making request to {url}")

        async with session.get(
            url,
            headers={HEADER_USER_AGENT: DEFAULT_USER_AGENT, HEADER_ACCEPT: 'application/json'},
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        ) as response:

            if response.status in RETRYABLE_STATUS_CODES:
                logger.warning(f"Server error {response.status} - will retry")
                raise aiohttp.ClientError(f"Server error: {response.status}")

            response.raise_for_status()
            return await response.text()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()

        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()


__all__ = ['ManifestClient']
