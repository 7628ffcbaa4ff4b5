# Path: nomm/tests/test_catalog.py
"""
Tests for catalog models, manifest decoding and the cached catalog.
"""

import asyncio
import json

from aiohttp import web
from aiohttp import test_utils
from packaging.version import Version

from nomm.catalog.manifest_client import ManifestClient
from nomm.catalog.models import Extension
from nomm.catalog.repository import ModCatalog
from nomm.tests.helpers import make_artifact, make_extension


MANIFEST = [
    {
        'id': 'MyMod',
        'displayName': 'My Mod',
        'description': 'Adds things',
        'tags': ['qol'],
        'infoUrl': 'https://mods.test/MyMod',
        'authors': ['someone'],
        'homepageBadge': 'ignored',
        'artifacts': [
            {
                'version': '1.2.0',
                'downloadUrl': 'https://mods.test/MyMod-1.2.0.zip',
                'dependencies': [{'id': 'Lib', 'version': '0.3.0'}],
                'extends': {'id': 'Base'},
                'sha256': 'ignored',
            },
            {'version': '1.10.0', 'downloadUrl': 'https://mods.test/MyMod-1.10.0.zip'},
            {'version': 'broken', 'downloadUrl': 'https://mods.test/broken.zip'},
            {'version': '2.0.0'},
        ],
    },
    {'displayName': 'No id'},
    {'id': 'Lib', 'artifacts': []},
]


def test_decode_is_permissive():
    """Unknown keys ignored, entries without id and malformed artifacts skipped."""
    mods = ManifestClient.decode_manifest(json.dumps(MANIFEST))

    assert [mod.id for mod in mods] == ['MyMod', 'Lib']
    mod = mods[0]
    assert mod.display_name == 'My Mod'
    assert mod.tags == ('qol',)
    assert mod.info_url == 'https://mods.test/MyMod'
    assert [str(a.version) for a in mod.artifacts] == ['1.2.0', '1.10.0']

    first = mod.artifacts[0]
    assert first.dependencies[0].id == 'Lib'
    assert first.dependencies[0].version == Version('0.3.0')
    assert first.extends.id == 'Base'
    assert first.extends.version is None

    assert mods[1].display_name == 'Lib'
    assert mods[1].latest_artifact() is None


def test_decode_rejects_non_list_documents():
    assert ManifestClient.decode_manifest('{"id": "MyMod"}') is None
    assert ManifestClient.decode_manifest('not json') is None


def test_extension_round_trip_uses_camel_case():
    data = MANIFEST[0]
    mod = Extension.from_dict(data)

    encoded = mod.to_dict()

    assert encoded['displayName'] == 'My Mod'
    assert encoded['artifacts'][0]['downloadUrl'] == 'https://mods.test/MyMod-1.2.0.zip'
    assert Extension.from_dict(encoded) == mod


def test_latest_and_find_artifact():
    mod = make_extension(
        'MyMod',
        make_artifact('1.9.0', 'u1'),
        make_artifact('1.10.0', 'u2'),
    )

    assert mod.latest_artifact().download_url == 'u2'
    assert mod.find_artifact(Version('1.9.0')).download_url == 'u1'
    assert mod.find_artifact(Version('3.0')) is None


class StaticClient:
    def __init__(self, result):
        self.result = result
        self.urls = []

    async def fetch_manifest(self, url):
        self.urls.append(url)
        await asyncio.sleep(0)
        return self.result

    async def close(self):
        pass


def test_refresh_replaces_catalog(config):
    mods = [make_extension('MyMod', make_artifact('1.0.0', 'u'))]
    catalog = ModCatalog(client=StaticClient(mods), config=config)

    assert asyncio.run(catalog.refresh('https://mods.test/manifest.json')) is True
    assert catalog.find('MyMod') is mods[0]
    assert catalog.latest_artifact('MyMod').download_url == 'u'
    assert catalog.find('Other') is None
    assert catalog.latest_artifact('Other') is None
    assert not catalog.is_loading


def test_failed_refresh_keeps_previous_catalog(config):
    previous = [make_extension('MyMod', make_artifact('1.0.0', 'u'))]
    catalog = ModCatalog(client=StaticClient(None), config=config)
    catalog.set_mods(previous)

    assert asyncio.run(catalog.refresh('https://mods.test/manifest.json')) is False
    assert catalog.mods == previous


def test_refresh_is_not_reentrant(config):
    client = StaticClient([])
    catalog = ModCatalog(client=client, config=config)

    async def scenario():
        return await asyncio.gather(catalog.refresh('u'), catalog.refresh('u'))

    assert asyncio.run(scenario()) == [True, False]
    assert client.urls == ['u']


def test_refresh_uses_configured_url(config):
    config.set('manifest_url', 'https://mods.test/configured.json')
    client = StaticClient([])

    asyncio.run(ModCatalog(client=client, config=config).refresh())

    assert client.urls == ['https://mods.test/configured.json']


def test_manifest_client_over_http(config):
    config.set('manifest_retry_attempts', 1)

    async def manifest(request):
        return web.json_response(MANIFEST)

    async def scenario():
        app = web.Application()
        app.router.add_get('/manifest.json', manifest)
        server = test_utils.TestServer(app)
        await server.start_server()
        client = ManifestClient(config)
        try:
            found = await client.fetch_manifest(str(server.make_url('/manifest.json')))
            missing = await client.fetch_manifest(str(server.make_url('/nope.json')))
        finally:
            await client.close()
            await server.close()
        return found, missing

    found, missing = asyncio.run(scenario())

    assert [mod.id for mod in found] == ['MyMod', 'Lib']
    assert missing is None


def test_manifest_client_without_url(config):
    assert asyncio.run(ManifestClient(config).fetch_manifest(None)) is None


def test_manifest_file_replaces_network_fetch(config, tmp_path):
    manifest_file = tmp_path / 'manifest.json'
    manifest_file.write_text(json.dumps(MANIFEST), encoding='utf-8')
    config.set('manifest_url', 'https://mods.test/configured.json')
    config.set('manifest_path', manifest_file)
    catalog = ModCatalog(client=ManifestClient(config), config=config)

    async def scenario():
        refreshed = await catalog.refresh()
        await catalog.close()
        return refreshed

    assert asyncio.run(scenario()) is True
    assert [extension.id for extension in catalog.mods] == ['MyMod', 'Lib']


def test_missing_manifest_file_keeps_previous_catalog(config, tmp_path):
    config.set('manifest_path', tmp_path / 'absent.json')
    catalog = ModCatalog(client=ManifestClient(config), config=config)
    catalog.set_mods([make_extension('Old', make_artifact('1.0.0', 'u'))])

    assert asyncio.run(catalog.refresh()) is False
    assert catalog.find('Old') is not None


def test_explicit_url_overrides_manifest_file(config, tmp_path):
    config.set('manifest_path', tmp_path / 'manifest.json')
    client = StaticClient([])

    asyncio.run(ModCatalog(client=client, config=config).refresh('https://mods.test/other.json'))

    assert client.urls == ['https://mods.test/other.json']
