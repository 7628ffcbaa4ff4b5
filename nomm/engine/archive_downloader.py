# Path: nomm/engine/archive_downloader.py
"""
Archive Downloader

Fetches mod archives into memory with retry.
Separated from the coordinator for better modularity.
"""

from typing import Optional

from nomm.core.logger import get_logger
from nomm.core.config_loader import ConfigLoader
from nomm.engine.protocol_handlers import HTTPHandler, ProgressCallback
from nomm.engine.retry_manager import RetryManager
from nomm.constants import LOG_PROCESS, LOG_OUTPUT

logger = get_logger(__name__, 'engine')


class ArchiveDownloader:
    """
    Downloads archive payloads.

    Handles:
    - HTTP retrieval through HTTPHandler
    - Linear-backoff retry through RetryManager
    - Progress forwarding to the caller

    Example:
        downloader = ArchiveDownloader()
        data = await downloader.fetch(url, on_progress=print)
    """

    def __init__(
        self,
        http_handler: Optional[HTTPHandler] = None,
        retry_manager: Optional[RetryManager] = None,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize archive downloader.

        Args:
            http_handler: HTTP download handler
            retry_manager: Retry manager for failed downloads
            config: Configuration loader
        """
        self.config = config if config else ConfigLoader()
        self.http_handler = http_handler if http_handler else HTTPHandler(self.config)
        self.retry_manager = retry_manager if retry_manager else RetryManager(config=self.config)

    async def fetch(self, url: str, on_progress: Optional[ProgressCallback] = None) -> bytes:
        """
        Download archive bytes.

        Args:
            url: Source URL
            on_progress: Progress callback (fraction or None)

        Returns:
            Payload bytes

        Raises:
            NetworkError: After all attempts failed
            asyncio.CancelledError: If cancelled
        """
        logger.info(f"{LOG_PROCESS} Fetching archive: {url}")

        data = await self.retry_manager.retry_async(
            self.http_handler.fetch,
            url,
            on_progress,
            url=url
        )

        logger.info(f"{LOG_OUTPUT} Fetched {len(data)} bytes from {url}")
        return data

    async def close(self):
        """Close the underlying HTTP session."""
        await self.http_handler.close()


__all__ = ['ArchiveDownloader']
