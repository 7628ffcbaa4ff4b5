# Path: nomm/engine/extraction/archive_handler.py
"""
Archive Handler Factory

Multi-format extraction of an in-memory payload into a directory.
Supports ZIP, 7Z and RAR; anything else is written verbatim.

Architecture:
- Format selected by the lowercase extension of the source name/URL
- Individual extractor classes per format
- Entries walked in archive order, file bytes streamed to disk
- Protected mode never overwrites existing files
- Failure wipes the target directory unless protected
"""

import io
import shutil
import time
import zipfile
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Callable, Optional, Type
from urllib.parse import urlsplit

import py7zr
import rarfile

from nomm.core.logger import get_logger
from nomm.core.config_loader import ConfigLoader
from nomm.core.exceptions import ExtractionError
from nomm.engine.result import ExtractionResult
from nomm.constants import (
    MAX_EXTRACTION_DEPTH,
    DEFAULT_RAW_FILENAME,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)
from nomm.engine.extraction.constants import (
    EXT_ZIP,
    EXT_7Z,
    EXT_RAR,
    EXTRACTOR_ZIP,
    EXTRACTOR_7Z,
    EXTRACTOR_RAR,
    EXTRACTOR_RAW,
    ZIP_READ_MODE,
    SEVENZIP_READ_MODE,
    WRITE_BINARY_MODE,
    COPY_BUFFER_SIZE,
)

logger = get_logger(__name__, 'extraction')


def source_filename(source: str) -> str:
    """
    Last path segment of a URL or file name.

    Args:
        source: URL or name the payload came from

    Returns:
        File name (query string and fragment dropped)
    """
    parts = urlsplit(source)
    path = parts.path if parts.scheme else source
    name = PurePosixPath(path.replace('\\', '/')).name
    return name or DEFAULT_RAW_FILENAME


def source_extension(source: str) -> str:
    """Lowercase extension of the source name, '' if it has none."""
    name = source_filename(source)
    if '.' not in name:
        return ''
    return name.rsplit('.', 1)[1].lower()


class BaseExtractor:
    """
    Base class for payload extractors.

    All format-specific extractors inherit from this.
    Provides entry validation and the shared write path.
    """

    name = ''

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize base extractor.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()
        self.max_extraction_depth = self.config.get(
            'max_extraction_depth',
            MAX_EXTRACTION_DEPTH
        )

    def extract(
        self,
        data: bytes,
        source: str,
        target_dir: Path,
        protect: bool = False
    ) -> ExtractionResult:
        """
        Extract payload into target directory.

        Must be implemented by subclasses.

        Args:
            data: Payload bytes
            source: URL or name the payload came from
            target_dir: Target directory for extraction
            protect: Skip files that already exist

        Returns:
            ExtractionResult with extraction details
        """
        raise NotImplementedError("Subclasses must implement extract()")

    def _new_result(self, target_dir: Path) -> ExtractionResult:
        return ExtractionResult(extract_directory=target_dir, extractor=self.name)

    def _resolve_member(self, member_name: str, target_dir: Path) -> Path:
        """
        Map an archive entry name to a safe destination path.

        Raises:
            ExtractionError: If the entry escapes the target or nests too deep
        """
        normalized = member_name.replace('\\', '/')
        depth = len(PurePosixPath(normalized).parts)
        if depth > self.max_extraction_depth:
            raise ExtractionError(
                f"Path too deep: {member_name} (depth={depth})",
                target_dir=target_dir
            )

        member_path = target_dir / normalized
        try:
            member_path.resolve().relative_to(target_dir.resolve())
        except ValueError:
            raise ExtractionError(f"Unsafe path detected: {member_name}", target_dir=target_dir)

        return member_path

    def _create_directory(self, path: Path, result: ExtractionResult) -> None:
        path.mkdir(parents=True, exist_ok=True)
        result.directories_created += 1

    def _write_entry(
        self,
        open_entry: Callable[[], BinaryIO],
        dest: Path,
        protect: bool,
        result: ExtractionResult
    ) -> None:
        """
        Stream one file entry to disk.

        Args:
            open_entry: Returns a readable stream for the entry
            dest: Destination file
            protect: Leave an existing destination untouched
            result: Counters to update
        """
        if protect and dest.exists():
            logger.debug(f"{LOG_PROCESS} Keeping existing file: {dest}")
            result.files_skipped += 1
            return

        dest.parent.mkdir(parents=True, exist_ok=True)
        with open_entry() as src, open(dest, WRITE_BINARY_MODE) as out:
            shutil.copyfileobj(src, out, COPY_BUFFER_SIZE)
        result.files_extracted += 1


class ZipExtractor(BaseExtractor):
    """
    ZIP extractor.

    Handles: .zip
    """

    name = EXTRACTOR_ZIP

    def extract(self, data, source, target_dir, protect=False):
        result = self._new_result(target_dir)

        with zipfile.ZipFile(io.BytesIO(data), ZIP_READ_MODE) as zf:
            for info in zf.infolist():
                dest = self._resolve_member(info.filename, target_dir)
                result.entries.append(info.filename)

                if info.is_dir():
                    self._create_directory(dest, result)
                else:
                    self._write_entry(lambda: zf.open(info), dest, protect, result)

        return result


class SevenZipExtractor(BaseExtractor):
    """
    7-Zip extractor (py7zr).

    Handles: .7z

    py7zr decompresses solid blocks itself, so file entries are selected
    up front and written in one pass; protected files are left out of
    the selection.
    """

    name = EXTRACTOR_7Z

    def extract(self, data, source, target_dir, protect=False):
        result = self._new_result(target_dir)
        targets: list[str] = []

        with py7zr.SevenZipFile(io.BytesIO(data), mode=SEVENZIP_READ_MODE) as sz:
            for info in sz.list():
                dest = self._resolve_member(info.filename, target_dir)
                result.entries.append(info.filename)

                if info.is_directory:
                    self._create_directory(dest, result)
                elif protect and dest.exists():
                    logger.debug(f"{LOG_PROCESS} Keeping existing file: {dest}")
                    result.files_skipped += 1
                else:
                    dest.parent.mkdir(parents=True, exist_ok=True)
                    targets.append(info.filename)

            if targets:
                sz.extract(path=target_dir, targets=targets)
                result.files_extracted += len(targets)

        return result


class RarExtractor(BaseExtractor):
    """
    RAR extractor (rarfile).

    Handles: .rar
    """

    name = EXTRACTOR_RAR

    def extract(self, data, source, target_dir, protect=False):
        result = self._new_result(target_dir)

        with rarfile.RarFile(io.BytesIO(data)) as rf:
            for info in rf.infolist():
                dest = self._resolve_member(info.filename, target_dir)
                result.entries.append(info.filename)

                if info.is_dir():
                    self._create_directory(dest, result)
                else:
                    self._write_entry(lambda: rf.open(info), dest, protect, result)

        return result


class RawFileWriter(BaseExtractor):
    """
    Writer for payloads that are not archives.

    The payload is stored as a single file named after the last path
    segment of the source.
    """

    name = EXTRACTOR_RAW

    def extract(self, data, source, target_dir, protect=False):
        result = self._new_result(target_dir)
        filename = source_filename(source)
        dest = self._resolve_member(filename, target_dir)
        result.entries.append(filename)

        self._write_entry(lambda: io.BytesIO(data), dest, protect, result)
        return result


class ArchiveHandler:
    """
    Archive handler factory.

    Detects the payload format from the source name and delegates to
    the matching extractor.

    Supported formats:
    - .zip
    - .7z
    - .rar
    - anything else: written verbatim as one file

    Example:
        handler = ArchiveHandler()
        result = handler.extract(
            data=payload,
            source='https://example.com/releases/MyMod.zip',
            target_dir=Path('/games/NO/BepInEx/disabledPlugins/MyMod'),
            protect=False
        )
    """

    EXTRACTORS: dict[str, Type[BaseExtractor]] = {
        EXT_ZIP: ZipExtractor,
        EXT_7Z: SevenZipExtractor,
        EXT_RAR: RarExtractor,
    }

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize archive handler.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

    def get_extractor(self, source: str) -> BaseExtractor:
        """
        Pick the extractor for a source name.

        Args:
            source: URL or file name

        Returns:
            Extractor instance (RawFileWriter for non-archives)
        """
        extractor_class = self.EXTRACTORS.get(source_extension(source), RawFileWriter)
        return extractor_class(self.config)

    def extract(
        self,
        data: bytes,
        source: str,
        target_dir: Path,
        protect: bool = False
    ) -> ExtractionResult:
        """
        Extract payload into target directory.

        On failure the target directory is deleted unless protect is set;
        the error is raised either way.

        Args:
            data: Payload bytes
            source: URL or name used for format detection
            target_dir: Destination directory (must exist)
            protect: Never overwrite, never delete on failure

        Returns:
            ExtractionResult

        Raises:
            ExtractionError: If extraction failed
        """
        extractor = self.get_extractor(source)
        logger.info(
            f"{LOG_INPUT} Extracting {source_filename(source)} with {extractor.name} "
            f"extractor into {target_dir} (protect={protect})"
        )

        start_time = time.time()
        try:
            result = extractor.extract(data, source, target_dir, protect)

        except Exception as e:
            if not protect:
                logger.warning(f"{LOG_PROCESS} Removing partial install: {target_dir}")
                shutil.rmtree(target_dir, ignore_errors=True)

            logger.error(f"{LOG_OUTPUT} Extraction failed for {source}: {e}")

            if isinstance(e, ExtractionError):
                e.source = source
                raise
            raise ExtractionError(
                f"{extractor.name} extraction failed: {e}",
                source=source,
                target_dir=target_dir
            ) from e

        result.duration = time.time() - start_time
        logger.info(
            f"{LOG_OUTPUT} Extraction complete: {result.files_extracted} files written, "
            f"{result.files_skipped} kept, {result.directories_created} directories "
            f"in {result.duration:.2f}s"
        )

        return result


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
