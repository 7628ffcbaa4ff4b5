# Path: nomm/catalog/models.py
"""
Catalog Data Models

Mods (extensions) and their installable artifacts as published in the
remote manifest.

Decoding is permissive: unknown keys are ignored, missing optional keys
take defaults. Keys are camelCase on the wire.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from packaging.version import Version, InvalidVersion

from nomm.core.logger import get_logger

logger = get_logger(__name__, 'catalog')


def parse_version(value: Union[str, Version, None]) -> Optional[Version]:
    """
    Parse a version string.

    Raises:
        InvalidVersion: If the string is not a valid version
    """
    if value is None or isinstance(value, Version):
        return value
    return Version(str(value).strip())


@dataclass(frozen=True)
class PackageReference:
    """A dependency or extends reference: mod id plus optional pinned version."""
    id: str
    version: Optional[Version] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'PackageReference':
        return cls(id=str(data['id']), version=parse_version(data.get('version')))

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'version': str(self.version) if self.version is not None else None,
        }


@dataclass(frozen=True)
class Artifact:
    """
    One installable version of a mod.

    Attributes:
        version: Ordered, comparable version
        download_url: Archive URL (extension selects the extractor)
        dependencies: Mods that must be installed alongside
        extends: Base mod this artifact augments
    """
    version: Version
    download_url: str
    dependencies: tuple[PackageReference, ...] = ()
    extends: Optional[PackageReference] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Artifact':
        extends = data.get('extends')
        return cls(
            version=parse_version(data['version']),
            download_url=str(data['downloadUrl']),
            dependencies=tuple(
                PackageReference.from_dict(dep) for dep in data.get('dependencies') or []
            ),
            extends=PackageReference.from_dict(extends) if extends else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'version': str(self.version),
            'downloadUrl': self.download_url,
            'dependencies': [dep.to_dict() for dep in self.dependencies],
            'extends': self.extends.to_dict() if self.extends else None,
        }


@dataclass(frozen=True)
class Extension:
    """
    A mod as listed in the catalog.

    Attributes:
        id: Target identifier
        display_name: Human readable name
        description: Short description
        tags: Free-form tags
        info_url: Project page
        authors: Author names
        artifacts: Published versions
    """
    id: str
    display_name: str = ''
    description: str = ''
    tags: tuple[str, ...] = ()
    info_url: str = ''
    authors: tuple[str, ...] = ()
    artifacts: tuple[Artifact, ...] = field(default=())

    @classmethod
    def from_dict(cls, data: dict[str, Any], skip_invalid: bool = True) -> 'Extension':
        """
        Decode an extension.

        Args:
            data: Manifest entry
            skip_invalid: Drop artifacts that fail to decode instead of raising

        Returns:
            Extension
        """
        artifacts = []
        for raw in data.get('artifacts') or []:
            try:
                artifacts.append(Artifact.from_dict(raw))
            except (KeyError, TypeError, InvalidVersion) as e:
                if not skip_invalid:
                    raise
                logger.warning(f"Skipping malformed artifact of {data.get('id')}: {e!r}")

        mod_id = str(data['id'])
        return cls(
            id=mod_id,
            display_name=str(data.get('displayName') or mod_id),
            description=str(data.get('description') or ''),
            tags=tuple(data.get('tags') or ()),
            info_url=str(data.get('infoUrl') or ''),
            authors=tuple(data.get('authors') or ()),
            artifacts=tuple(artifacts),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'displayName': self.display_name,
            'description': self.description,
            'tags': list(self.tags),
            'infoUrl': self.info_url,
            'authors': list(self.authors),
            'artifacts': [artifact.to_dict() for artifact in self.artifacts],
        }

    def latest_artifact(self) -> Optional[Artifact]:
        """Artifact with the greatest version, None if there are none."""
        if not self.artifacts:
            return None
        return max(self.artifacts, key=lambda artifact: artifact.version)

    def find_artifact(self, version: Version) -> Optional[Artifact]:
        """Artifact published with exactly this version."""
        for artifact in self.artifacts:
            if artifact.version == version:
                return artifact
        return None


__all__ = ['PackageReference', 'Artifact', 'Extension', 'parse_version']
