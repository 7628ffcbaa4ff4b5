# Path: nomm/catalog/__init__.py
"""
Catalog Module

Remote manifest retrieval and the cached catalog of installable mods.
"""

from nomm.catalog.models import PackageReference, Artifact, Extension, parse_version
from nomm.catalog.manifest_client import ManifestClient
from nomm.catalog.repository import ModCatalog

__all__ = [
    'PackageReference',
    'Artifact',
    'Extension',
    'parse_version',
    'ManifestClient',
    'ModCatalog',
]
