# Path: nomm/engine/retry_manager.py
"""
Retry Manager

Bounded retry with linear backoff for archive downloads.

Architecture:
- Fixed number of total attempts (default 3)
- Linear backoff: after failed attempt i (1-based) wait base_delay * i
- Cancellation is never retried and propagates immediately
- Exhaustion raises NetworkError carrying the last error
"""

import asyncio
from typing import Callable, Optional, Any

from nomm.core.logger import get_logger
from nomm.core.config_loader import ConfigLoader
from nomm.core.exceptions import NetworkError
from nomm.constants import (
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY,
    LOG_PROCESS,
)

logger = get_logger(__name__, 'engine')


class RetryManager:
    """
    Manages download attempts with linear backoff.

    With the defaults: attempt 1 fails -> wait 1s, attempt 2 fails ->
    wait 2s, attempt 3 is final.

    Example:
        manager = RetryManager(max_attempts=3, base_delay=1.0)
        data = await manager.retry_async(handler.fetch, url, on_progress, url=url)
    """

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        base_delay: Optional[float] = None,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize retry manager.

        Args:
            max_attempts: Total attempts (from config if None)
            base_delay: Delay multiplier in seconds (from config if None)
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

        self.max_attempts = max_attempts if max_attempts is not None else \
            self.config.get('retry_attempts', DEFAULT_RETRY_ATTEMPTS)

        self.base_delay = base_delay if base_delay is not None else \
            self.config.get('retry_delay', DEFAULT_RETRY_DELAY)

    def calculate_delay(self, attempt: int) -> float:
        """
        Calculate the wait after a failed attempt.

        Formula: base_delay * attempt

        Args:
            attempt: Failed attempt number (1-based)

        Returns:
            Delay in seconds
        """
        return self.base_delay * attempt

    async def retry_async(
        self,
        func: Callable[..., Any],
        *args,
        url: str = '',
        **kwargs
    ) -> Any:
        """
        Execute async function with retry logic.

        Args:
            func: Async function to execute
            *args: Positional arguments for func
            url: URL for error reporting
            **kwargs: Keyword arguments for func

        Returns:
            Result of successful execution

        Raises:
            NetworkError: If every attempt failed
            asyncio.CancelledError: If cancelled while fetching or waiting
        """
        last_exception: Optional[BaseException] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                result = await func(*args, **kwargs)

                if attempt > 1:
                    logger.info(f"{LOG_PROCESS} Retry succeeded on attempt {attempt}")

                return result

            except asyncio.CancelledError:
                logger.info(f"{LOG_PROCESS} Cancelled during attempt {attempt}")
                raise

            except Exception as e:
                last_exception = e

                if attempt >= self.max_attempts:
                    logger.error(f"All {attempt} attempts failed: {e}")
                    break

                delay = self.calculate_delay(attempt)

                logger.warning(
                    f"{LOG_PROCESS} Attempt {attempt} failed: {e}. "
                    f"Retrying in {delay:.1f}s..."
                )

                await asyncio.sleep(delay)

        raise NetworkError(url, self.max_attempts, last_exception) from last_exception


__all__ = ['RetryManager']
