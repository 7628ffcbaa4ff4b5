# Path: nomm/engine/protocol_handlers.py
"""
Protocol Handlers

HTTP/HTTPS retrieval of mod archives into memory.
Handles headers, timeouts, streaming progress and connection management.

Architecture:
- Async HTTP client (aiohttp) with chunked reads
- Progress reported only when the server sends Content-Length
- Connection pooling via a shared session
"""

import time
from typing import Callable, Optional
import aiohttp

from nomm.core.logger import get_logger
from nomm.core.config_loader import ConfigLoader
from nomm.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
    DEFAULT_USER_AGENT,
    DEFAULT_ACCEPT_HEADER,
    DEFAULT_ACCEPT_ENCODING,
    HEADER_USER_AGENT,
    HEADER_ACCEPT,
    HEADER_ACCEPT_ENCODING,
)
from nomm.engine.constants import MAX_CONCURRENT_CONNECTIONS, FORCE_CLOSE_CONNECTIONS

logger = get_logger(__name__, 'engine')

ProgressCallback = Callable[[Optional[float]], None]


class HTTPHandler:
    """
    HTTP/HTTPS download handler.

    Features:
    - Async HTTP with aiohttp
    - Chunked streaming into an in-memory buffer
    - Progress callback with sent/total when the total is known
    - Configurable timeouts and headers

    Example:
        handler = HTTPHandler()
        data = await handler.fetch(
            'https://example.com/mod.zip',
            on_progress=lambda p: print(p)
        )
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize HTTP handler.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

        self.chunk_size = self.config.get('chunk_size', DEFAULT_CHUNK_SIZE)
        self.timeout = self.config.get('request_timeout', DEFAULT_TIMEOUT)
        self.connect_timeout = self.config.get('connect_timeout', DEFAULT_CONNECT_TIMEOUT)

        self._session: Optional[aiohttp.ClientSession] = None

    async def fetch(
        self,
        url: str,
        on_progress: Optional[ProgressCallback] = None,
        headers: Optional[dict[str, str]] = None
    ) -> bytes:
        """
        Download URL contents into memory.

        Args:
            url: Source URL
            on_progress: Called after each chunk with sent/total, or None
                when the server did not report a size
            headers: Optional custom headers

        Returns:
            Response body

        Raises:
            aiohttp.ClientError: On transport failure or non-2xx status
            asyncio.TimeoutError: On timeout
        """
        logger.info(f"{LOG_INPUT} Downloading: {url}")

        start_time = time.time()
        session = await self._get_session()

        async with session.get(
            url,
            headers=self._build_headers(headers),
            timeout=aiohttp.ClientTimeout(
                total=self.timeout,
                connect=self.connect_timeout
            )
        ) as response:
            response.raise_for_status()

            total_size = response.content_length
            if total_size:
                logger.info(f"{LOG_PROCESS} File size: {total_size} bytes")

            buffer = bytearray()
            async for chunk in response.content.iter_chunked(self.chunk_size):
                buffer.extend(chunk)
                if on_progress is not None:
                    on_progress(min(len(buffer) / total_size, 1.0) if total_size else None)

        duration = time.time() - start_time
        logger.info(
            f"{LOG_OUTPUT} Download complete: {len(buffer)} bytes in {duration:.2f}s"
        )

        return bytes(buffer)

    def _build_headers(self, custom_headers: Optional[dict[str, str]] = None) -> dict[str, str]:
        """
        Build HTTP request headers.

        Args:
            custom_headers: Optional custom headers

        Returns:
            Dictionary of headers
        """
        headers = {
            HEADER_USER_AGENT: DEFAULT_USER_AGENT,
            HEADER_ACCEPT: DEFAULT_ACCEPT_HEADER,
            HEADER_ACCEPT_ENCODING: DEFAULT_ACCEPT_ENCODING,
        }

        if custom_headers:
            headers.update(custom_headers)

        return headers

    async def _get_session(self) -> aiohttp.ClientSession:
        """
        Get or create aiohttp session.

        Returns:
            ClientSession instance
        """
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=MAX_CONCURRENT_CONNECTIONS,
                force_close=FORCE_CLOSE_CONNECTIONS
            )

            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )

        return self._session

    async def close(self):
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


__all__ = ['HTTPHandler', 'ProgressCallback']
