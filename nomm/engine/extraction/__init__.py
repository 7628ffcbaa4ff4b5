# Path: nomm/engine/extraction/__init__.py
"""
Extraction Module

Format-dispatching extraction of downloaded payloads.

Use ArchiveHandler; it picks ZipExtractor, SevenZipExtractor or
RarExtractor by extension and falls back to RawFileWriter.
"""

from nomm.engine.extraction.archive_handler import (
    ArchiveHandler,
    BaseExtractor,
    ZipExtractor,
    SevenZipExtractor,
    RarExtractor,
    RawFileWriter,
    source_filename,
    source_extension,
)

__all__ = [
    'ArchiveHandler',
    'BaseExtractor',
    'ZipExtractor',
    'SevenZipExtractor',
    'RarExtractor',
    'RawFileWriter',
    'source_filename',
    'source_extension',
]
