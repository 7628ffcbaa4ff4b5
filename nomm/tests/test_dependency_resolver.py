# Path: nomm/tests/test_dependency_resolver.py
"""
Tests for DependencyResolver.

Installs are recorded by a stand-in coordinator so the walk itself can
be checked: ordering, cycle safety, skip rules and branch aborts.
"""

import asyncio

import pytest

from nomm.catalog.repository import ModCatalog
from nomm.constants import DEFAULT_PREREQUISITE_URL
from nomm.core.data_paths import ModPaths
from nomm.engine.dependency_resolver import DependencyResolver, ResolveOutcome
from nomm.engine.result import InstallResult
from nomm.local.metadata import ModMeta, read_meta, write_meta
from nomm.local.registry import LocalModRegistry
from nomm.tests.helpers import RecordingCoordinator, make_artifact, make_extension


def url(mod_id, version='1.0.0'):
    return f'https://mods.test/{mod_id}-{version}.zip'


@pytest.fixture
def bepinex(game_folder):
    folder = game_folder / 'BepInEx'
    folder.mkdir()
    return folder


@pytest.fixture
def catalog(config):
    return ModCatalog(config=config)


@pytest.fixture
def registry(config):
    return LocalModRegistry(ModPaths(config), config)


@pytest.fixture
def coordinator():
    return RecordingCoordinator()


@pytest.fixture
def resolver(config, catalog, registry, coordinator):
    return DependencyResolver(catalog, registry, coordinator, config=config)


def test_missing_prerequisite_redirects(resolver, catalog, coordinator, game_folder):
    """Without BepInEx only the prerequisite is installed; the request is not resumed."""
    catalog.set_mods([make_extension('A', make_artifact('1.0.0', url('A')))])

    outcome = resolver.install_mod('A')

    assert outcome is ResolveOutcome.PREREQUISITE_MISSING
    assert len(coordinator.calls) == 1
    call = coordinator.calls[0]
    assert call['target_id'] == 'BepInEx'
    assert call['url'] == DEFAULT_PREREQUISITE_URL
    assert call['target_dir'] == game_folder
    assert call['protected'] is True


def test_prerequisite_without_game_folder(resolver, config, coordinator):
    config.set('game_folder', None)

    assert resolver.install_prerequisite() is None
    assert coordinator.calls == []


def test_dependencies_then_extends_then_dependent(resolver, catalog, coordinator, bepinex):
    catalog.set_mods([
        make_extension('A', make_artifact('1.0.0', url('A'), dependencies=['B', 'C'], extends='D')),
        make_extension('B', make_artifact('1.0.0', url('B'))),
        make_extension('C', make_artifact('1.0.0', url('C'))),
        make_extension('D', make_artifact('1.0.0', url('D'))),
    ])

    outcome = resolver.install_mod('A')

    assert outcome is ResolveOutcome.DISPATCHED
    assert coordinator.installed_ids == ['B', 'C', 'D', 'A']
    assert all(not call['protected'] for call in coordinator.calls)
    assert coordinator.calls[-1]['target_dir'] == bepinex / 'disabledPlugins' / 'A'
    assert (bepinex / 'disabledPlugins').is_dir()


def test_cycle_terminates_without_duplicates(resolver, catalog, coordinator, bepinex):
    """A -> B -> A installs each mod once."""
    catalog.set_mods([
        make_extension('A', make_artifact('1.0.0', url('A'), dependencies=['B'])),
        make_extension('B', make_artifact('1.0.0', url('B'), dependencies=['A'])),
    ])

    assert resolver.install_mod('A') is ResolveOutcome.DISPATCHED
    assert coordinator.installed_ids == ['B', 'A']


def test_shared_dependency_installed_once(resolver, catalog, coordinator, bepinex):
    catalog.set_mods([
        make_extension('A', make_artifact('1.0.0', url('A'), dependencies=['B', 'C'])),
        make_extension('B', make_artifact('1.0.0', url('B'), dependencies=['C'])),
        make_extension('C', make_artifact('1.0.0', url('C'))),
    ])

    processing = set()
    resolver.install_mod('A', processing=processing)

    assert coordinator.installed_ids == ['C', 'B', 'A']
    assert processing == {'A', 'B', 'C'}


def test_latest_version_selected(resolver, catalog, coordinator, bepinex):
    catalog.set_mods([make_extension(
        'A',
        make_artifact('1.9.0', url('A', '1.9.0')),
        make_artifact('1.10.0', url('A', '1.10.0')),
        make_artifact('1.2.0', url('A', '1.2.0')),
    )])

    resolver.install_mod('A')

    assert coordinator.calls[0]['url'] == url('A', '1.10.0')


def test_explicit_version_selected(resolver, catalog, coordinator, bepinex):
    catalog.set_mods([make_extension(
        'A',
        make_artifact('1.0.0', url('A', '1.0.0')),
        make_artifact('2.0.0', url('A', '2.0.0')),
    )])

    assert resolver.install_mod('A', '1.0.0') is ResolveOutcome.DISPATCHED
    assert coordinator.calls[0]['url'] == url('A', '1.0.0')


def test_unknown_version_aborts_branch(resolver, catalog, coordinator, bepinex):
    catalog.set_mods([make_extension('A', make_artifact('1.0.0', url('A')))])

    assert resolver.install_mod('A', '3.0.0') is ResolveOutcome.VERSION_NOT_FOUND
    assert resolver.install_mod('A', 'not-a-version') is ResolveOutcome.VERSION_NOT_FOUND
    assert coordinator.calls == []


def test_missing_catalog_entry_aborts_only_that_branch(resolver, catalog, coordinator, bepinex):
    catalog.set_mods([
        make_extension('A', make_artifact('1.0.0', url('A'), dependencies=['Ghost', 'B'])),
        make_extension('B', make_artifact('1.0.0', url('B'))),
    ])

    assert resolver.install_mod('Ghost') is ResolveOutcome.NOT_IN_CATALOG
    assert resolver.install_mod('A') is ResolveOutcome.DISPATCHED
    assert coordinator.installed_ids == ['B', 'A']


def test_already_installed_is_a_no_op(resolver, catalog, registry, coordinator, bepinex):
    """Same version installed and no explicit version: no network or filesystem work."""
    artifact = make_artifact('1.0.0', url('A'))
    extension = make_extension('A', artifact)
    catalog.set_mods([extension])

    installed = bepinex / 'plugins' / 'A'
    installed.mkdir(parents=True)
    (installed / 'A.dll').write_bytes(b'dll')
    asyncio.run(write_meta(installed, ModMeta('A', artifact, extension)))
    registry.refresh()

    assert resolver.install_mod('A') is ResolveOutcome.ALREADY_INSTALLED
    assert coordinator.calls == []
    assert not (bepinex / 'disabledPlugins').exists()
    assert (installed / 'A.dll').read_bytes() == b'dll'

    # An explicit version always reinstalls
    assert resolver.install_mod('A', '1.0.0') is ResolveOutcome.DISPATCHED


def test_older_install_is_replaced(resolver, catalog, registry, coordinator, bepinex):
    old = make_artifact('1.0.0', url('A', '1.0.0'))
    new = make_artifact('1.1.0', url('A', '1.1.0'))
    catalog.set_mods([make_extension('A', old, new)])

    installed = bepinex / 'plugins' / 'A'
    installed.mkdir(parents=True)
    asyncio.run(write_meta(installed, ModMeta('A', old)))
    registry.refresh()

    assert resolver.install_mod('A') is ResolveOutcome.DISPATCHED
    assert coordinator.calls[0]['url'] == url('A', '1.1.0')


def test_staging_directory_reset_left_to_coordinator(resolver, catalog, coordinator, bepinex):
    """Dispatch leaves existing files alone; the coordinator empties them under its lock."""
    staging = bepinex / 'disabledPlugins' / 'A'
    staging.mkdir(parents=True)
    (staging / 'stale.dll').write_bytes(b'old')
    catalog.set_mods([make_extension('A', make_artifact('1.0.0', url('A')))])

    resolver.install_mod('A')

    assert (staging / 'stale.dll').exists()
    assert coordinator.calls[0]['target_dir'] == staging
    assert coordinator.calls[0]['clean_target'] is True


def test_directory_failure_aborts_branch(resolver, catalog, coordinator, bepinex):
    # A file where the staging root should be makes mkdir fail
    (bepinex / 'disabledPlugins').write_bytes(b'')
    catalog.set_mods([make_extension('A', make_artifact('1.0.0', url('A')))])

    assert resolver.install_mod('A') is ResolveOutcome.DIRECTORY_FAILED
    assert coordinator.calls == []


def test_continuation_writes_metadata_and_enables(resolver, catalog, registry, coordinator, bepinex):
    artifact = make_artifact('1.0.0', url('A'))
    extension = make_extension('A', artifact)
    catalog.set_mods([extension])

    resolver.install_mod('A')
    call = coordinator.calls[0]
    call['target_dir'].mkdir()
    (call['target_dir'] / 'A.dll').write_bytes(b'dll')

    result = InstallResult(target_id='A', success=True, url=call['url'], target_dir=call['target_dir'])
    asyncio.run(call['on_success'](result))

    enabled = bepinex / 'plugins' / 'A'
    assert not call['target_dir'].exists()
    assert (enabled / 'A.dll').read_bytes() == b'dll'

    meta = read_meta(enabled)
    assert meta.id == 'A'
    assert meta.artifact.version == artifact.version
    assert meta.cached_extension == extension

    mod = registry.get('A')
    assert mod.enabled
    assert registry.installed_version('A') == artifact.version
