# Path: nomm/tests/helpers.py
"""
Test helpers: payload builders, catalog builders and a fake downloader.
"""

import asyncio
import io
import zipfile
from pathlib import Path

from nomm.catalog.models import Artifact, Extension, PackageReference, parse_version


def make_zip(files: dict, directories=()) -> bytes:
    """Build a zip payload from {name: bytes} plus empty directory entries."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w') as zf:
        for name, data in files.items():
            zf.writestr(name, data)
        for name in directories:
            zf.writestr(zipfile.ZipInfo(name.rstrip('/') + '/'), b'')
    return buffer.getvalue()


def tree(root: Path) -> list[str]:
    """Relative paths under root, directories with a trailing slash."""
    entries = []
    for path in sorted(Path(root).rglob('*')):
        rel = path.relative_to(root).as_posix()
        entries.append(rel + '/' if path.is_dir() else rel)
    return entries


def make_artifact(version: str, url: str, dependencies=(), extends=None) -> Artifact:
    return Artifact(
        version=parse_version(version),
        download_url=url,
        dependencies=tuple(PackageReference(dep) for dep in dependencies),
        extends=PackageReference(extends) if extends else None,
    )


def make_extension(mod_id: str, *artifacts: Artifact) -> Extension:
    return Extension(id=mod_id, display_name=mod_id, artifacts=tuple(artifacts))


class FakeDownloader:
    """
    Stands in for ArchiveDownloader.

    Serves payloads from a dict (an exception value is raised instead),
    reports progress and tracks how many fetches overlap.
    """

    def __init__(self, payloads: dict, delay: float = 0.0, hold: bool = False):
        self.payloads = payloads
        self.delay = delay
        self.hold = hold
        self.started = asyncio.Event()
        self.fetched: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def fetch(self, url, on_progress=None):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            self.fetched.append(url)
            if on_progress:
                on_progress(0.5)
            self.started.set()
            if self.hold:
                await asyncio.Event().wait()
            if self.delay:
                await asyncio.sleep(self.delay)
            payload = self.payloads[url]
            if isinstance(payload, BaseException):
                raise payload
            if on_progress:
                on_progress(1.0)
            return payload
        finally:
            self.in_flight -= 1

    async def close(self):
        self.closed = True


class RecordingCoordinator:
    """Stands in for InstallCoordinator; records install calls without running them."""

    def __init__(self):
        self.calls = []

    def install(self, target_id, url, target_dir, protected=False, on_success=None, clean_target=False):
        self.calls.append({
            'target_id': target_id,
            'url': url,
            'target_dir': Path(target_dir),
            'protected': protected,
            'on_success': on_success,
            'clean_target': clean_target,
        })
        return None

    @property
    def installed_ids(self) -> list[str]:
        return [call['target_id'] for call in self.calls]
