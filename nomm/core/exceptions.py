# Path: nomm/core/exceptions.py
"""
Mod Manager Exceptions

Error taxonomy for install operations.

- NetworkError: transport/HTTP failure after retry exhaustion
- ExtractionError: malformed archive or I/O failure while writing
- ResolutionAbort: a dependency-walk branch that cannot be installed

Cancellation is asyncio.CancelledError and is never wrapped in these.
"""

from pathlib import Path
from typing import Optional


class NommError(Exception):
    """Base class for mod manager errors."""
    pass


class NetworkError(NommError):
    """Download failed after all attempts."""

    def __init__(self, url: str, attempts: int, last_error: Optional[BaseException] = None):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        if last_error is not None:
            detail = str(last_error) or last_error.__class__.__name__
        else:
            detail = 'Failed to download'
        super().__init__(f"{detail} ({url}, {attempts} attempts)")


class ExtractionError(NommError):
    """Archive could not be extracted into the target directory."""

    def __init__(self, message: str, source: str = '', target_dir: Optional[Path] = None):
        self.source = source
        self.target_dir = target_dir
        super().__init__(message)


class ResolutionAbort(NommError):
    """A branch of the dependency walk was abandoned."""

    def __init__(self, mod_id: str, outcome, reason: str = ''):
        self.mod_id = mod_id
        self.outcome = outcome
        super().__init__(reason or f"{mod_id}: {outcome}")


__all__ = [
    'NommError',
    'NetworkError',
    'ExtractionError',
    'ResolutionAbort',
]
