# Path: nomm/local/metadata.py
"""
Install Metadata

meta.json written into an installed mod's directory: identifier,
installed artifact and a cached copy of the catalog entry.

Written pretty-printed; read leniently (unknown keys ignored, an
undecodable file means no metadata).
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import aiofiles
from packaging.version import InvalidVersion

from nomm.core.logger import get_logger
from nomm.catalog.models import Artifact, Extension
from nomm.constants import META_FILENAME, META_JSON_INDENT, LOG_OUTPUT

logger = get_logger(__name__, 'local')


@dataclass(frozen=True)
class ModMeta:
    id: str
    artifact: Optional[Artifact] = None
    cached_extension: Optional[Extension] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'ModMeta':
        artifact = data.get('artifact')
        extension = data.get('cachedExtension')
        return cls(
            id=str(data['id']),
            artifact=Artifact.from_dict(artifact) if artifact else None,
            cached_extension=Extension.from_dict(extension) if extension else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'artifact': self.artifact.to_dict() if self.artifact else None,
            'cachedExtension': self.cached_extension.to_dict() if self.cached_extension else None,
        }


def meta_path(directory: Path) -> Path:
    return Path(directory) / META_FILENAME


async def write_meta(directory: Path, meta: ModMeta) -> Path:
    """
    Write meta.json into a mod directory, replacing any previous one.

    Args:
        directory: Installed mod directory
        meta: Metadata to persist

    Returns:
        Path of the written file
    """
    path = meta_path(directory)
    async with aiofiles.open(path, 'w', encoding='utf-8') as f:
        await f.write(json.dumps(meta.to_dict(), indent=META_JSON_INDENT))

    logger.info(f"{LOG_OUTPUT} Wrote {path}")
    return path


def read_meta(directory: Path) -> Optional[ModMeta]:
    """
    Read meta.json from a mod directory.

    Args:
        directory: Installed mod directory

    Returns:
        ModMeta, or None if the file is missing or cannot be decoded
    """
    path = meta_path(directory)
    if not path.is_file():
        return None

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return ModMeta.from_dict(json.load(f))
    except (OSError, ValueError, KeyError, TypeError, InvalidVersion) as e:
        logger.warning(f"Ignoring unreadable metadata {path}: {e}")
        return None


__all__ = ['ModMeta', 'write_meta', 'read_meta', 'meta_path']
