# Path: nomm/engine/result.py
"""
Install Result Objects

Type-safe, structured results for install operations.

Architecture:
- ExtractionResult: Single payload extraction
- InstallResult: Complete fetch + extract + finalize workflow
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional


@dataclass
class ExtractionResult:
    """
    Result of extracting one payload.

    Attributes:
        extract_directory: Directory files were written into
        extractor: Name of the extractor that handled the payload
        files_extracted: Number of files written
        files_skipped: Number of files left untouched (protected mode)
        directories_created: Number of directory entries processed
        entries: Archive entry names in archive order
        duration: Extraction duration in seconds
    """
    extract_directory: Optional[Path] = None
    extractor: str = ''
    files_extracted: int = 0
    files_skipped: int = 0
    directories_created: int = 0
    entries: list[str] = field(default_factory=list)
    duration: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, any]:
        """Convert to dictionary for logging/storage."""
        return {
            'extract_directory': str(self.extract_directory) if self.extract_directory else None,
            'extractor': self.extractor,
            'files_extracted': self.files_extracted,
            'files_skipped': self.files_skipped,
            'directories_created': self.directories_created,
            'entries': self.entries,
            'duration': self.duration,
            'timestamp': self.timestamp.isoformat(),
        }


@dataclass
class InstallResult:
    """
    Result of one coordinator install.

    Attributes:
        target_id: Target identifier (lock and state key)
        success: Whether fetch, extraction and the continuation succeeded
        url: Source URL
        target_dir: Extraction destination
        protected: Whether the install ran in no-overwrite mode
        bytes_downloaded: Payload size
        extraction_result: Extraction details on success
        error_message: Error message if failed
        duration: Time spent holding the target lock, in seconds
    """
    target_id: str
    success: bool = False
    url: str = ''
    target_dir: Optional[Path] = None
    protected: bool = False
    bytes_downloaded: int = 0
    extraction_result: Optional[ExtractionResult] = None
    error_message: Optional[str] = None
    duration: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, any]:
        """Convert to dictionary for logging/storage."""
        return {
            'target_id': self.target_id,
            'success': self.success,
            'url': self.url,
            'target_dir': str(self.target_dir) if self.target_dir else None,
            'protected': self.protected,
            'bytes_downloaded': self.bytes_downloaded,
            'extraction_result': self.extraction_result.to_dict() if self.extraction_result else None,
            'error_message': self.error_message,
            'duration': self.duration,
            'timestamp': self.timestamp.isoformat(),
        }


__all__ = [
    'ExtractionResult',
    'InstallResult',
]
