# Path: nomm/tests/test_fetcher.py
"""
Tests for payload retrieval.

Tests:
- RetryManager: linear backoff, cancellation, exhaustion
- HTTPHandler: progress with and without Content-Length, HTTP errors
- ArchiveDownloader: retry wired around the handler
"""

import asyncio

import aiohttp
import pytest
from aiohttp import web
from aiohttp import test_utils

from nomm.core.exceptions import NetworkError
from nomm.engine import retry_manager as retry_module
from nomm.engine.retry_manager import RetryManager
from nomm.engine.protocol_handlers import HTTPHandler
from nomm.engine.archive_downloader import ArchiveDownloader


PAYLOAD = bytes(range(256)) * 40


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff waits instead of sleeping."""
    recorded = []

    async def fake_sleep(delay):
        recorded.append(delay)

    monkeypatch.setattr(retry_module.asyncio, 'sleep', fake_sleep)
    return recorded


class FlakyFetch:
    """Fails a fixed number of times, then returns the payload."""

    def __init__(self, failures: int, error: Exception = None):
        self.failures = failures
        self.error = error or aiohttp.ClientConnectionError('connection reset')
        self.calls = 0

    async def __call__(self, url, on_progress=None):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return PAYLOAD


def test_calculate_delay_is_linear(config):
    """Wait after attempt i is base_delay * i."""
    manager = RetryManager(config=config)

    assert manager.max_attempts == 3
    assert manager.calculate_delay(1) == 1.0
    assert manager.calculate_delay(2) == 2.0


def test_succeeds_on_third_attempt(config, sleeps):
    """Two failures then success: waits 1s + 2s and returns the payload."""
    manager = RetryManager(config=config)
    fetch = FlakyFetch(failures=2)

    data = asyncio.run(manager.retry_async(fetch, 'http://mods.test/a.zip', url='http://mods.test/a.zip'))

    assert data == PAYLOAD
    assert fetch.calls == 3
    assert sleeps == [1.0, 2.0]
    assert sum(sleeps) >= 3.0


def test_exhaustion_raises_network_error(config, sleeps):
    """The last error is carried by NetworkError after the final attempt."""
    manager = RetryManager(config=config)
    error = aiohttp.ClientConnectionError('refused')
    fetch = FlakyFetch(failures=10, error=error)

    with pytest.raises(NetworkError) as excinfo:
        asyncio.run(manager.retry_async(fetch, 'http://mods.test/a.zip', url='http://mods.test/a.zip'))

    assert fetch.calls == 3
    assert excinfo.value.attempts == 3
    assert excinfo.value.last_error is error
    assert 'refused' in str(excinfo.value)
    # No wait after the final attempt
    assert sleeps == [1.0, 2.0]


def test_cancellation_is_not_retried(config, sleeps):
    calls = []

    async def cancelled_fetch():
        calls.append(1)
        raise asyncio.CancelledError()

    manager = RetryManager(config=config)

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(manager.retry_async(cancelled_fetch, url='http://mods.test/a.zip'))

    assert len(calls) == 1
    assert sleeps == []


def _make_app() -> web.Application:
    async def sized(request):
        return web.Response(body=PAYLOAD)

    async def unsized(request):
        response = web.StreamResponse()
        response.enable_chunked_encoding()
        await response.prepare(request)
        await response.write(PAYLOAD[:5000])
        await response.write(PAYLOAD[5000:])
        await response.write_eof()
        return response

    async def missing(request):
        raise web.HTTPNotFound()

    app = web.Application()
    app.router.add_get('/sized.zip', sized)
    app.router.add_get('/unsized.zip', unsized)
    app.router.add_get('/missing.zip', missing)
    return app


async def _fetch_from_server(config, path):
    server = test_utils.TestServer(_make_app())
    await server.start_server()
    handler = HTTPHandler(config)
    progress = []
    try:
        data = await handler.fetch(str(server.make_url(path)), on_progress=progress.append)
    finally:
        await handler.close()
        await server.close()
    return data, progress


def test_progress_with_content_length(config):
    """Known size: fractions rise to exactly 1.0."""
    config.set('chunk_size', 1024)

    data, progress = asyncio.run(_fetch_from_server(config, '/sized.zip'))

    assert data == PAYLOAD
    assert len(progress) > 1
    assert progress == sorted(progress)
    assert all(0.0 < p <= 1.0 for p in progress)
    assert progress[-1] == 1.0


def test_progress_without_content_length(config):
    """Unknown size: progress is reported as None."""
    config.set('chunk_size', 1024)

    data, progress = asyncio.run(_fetch_from_server(config, '/unsized.zip'))

    assert data == PAYLOAD
    assert progress
    assert all(p is None for p in progress)


def test_http_error_status_raises(config):
    with pytest.raises(aiohttp.ClientResponseError) as excinfo:
        asyncio.run(_fetch_from_server(config, '/missing.zip'))

    assert excinfo.value.status == 404


def test_archive_downloader_retries_http_errors(config):
    """A permanently missing archive fails with NetworkError after three requests."""
    config.set('retry_delay', 0.01)
    hits = []

    async def missing(request):
        hits.append(request.path)
        raise web.HTTPNotFound()

    async def scenario():
        app = web.Application()
        app.router.add_get('/gone.zip', missing)
        server = test_utils.TestServer(app)
        await server.start_server()
        downloader = ArchiveDownloader(config=config)
        try:
            await downloader.fetch(str(server.make_url('/gone.zip')))
        finally:
            await downloader.close()
            await server.close()

    with pytest.raises(NetworkError) as excinfo:
        asyncio.run(scenario())

    assert len(hits) == 3
    assert isinstance(excinfo.value.last_error, aiohttp.ClientResponseError)
