# Path: nomm/tests/conftest.py
"""
Shared fixtures for mod manager tests.
"""

from pathlib import Path

import pytest

from nomm.core.config_loader import ConfigLoader


NOMM_ENV_VARS = (
    'NOMM_GAME_FOLDER',
    'NOMM_MANIFEST_URL',
    'NOMM_MANIFEST_PATH',
    'NOMM_BEPINEX_URL',
    'NOMM_REQUEST_TIMEOUT',
    'NOMM_CONNECT_TIMEOUT',
    'NOMM_CHUNK_SIZE',
    'NOMM_RETRY_ATTEMPTS',
    'NOMM_RETRY_DELAY',
    'NOMM_MANIFEST_RETRY_ATTEMPTS',
    'NOMM_MAX_CONCURRENT',
    'NOMM_MAX_EXTRACTION_DEPTH',
    'NOMM_LOG_DIR',
    'NOMM_LOG_LEVEL',
)


@pytest.fixture
def game_folder(tmp_path) -> Path:
    folder = tmp_path / 'NuclearOption'
    folder.mkdir()
    return folder


@pytest.fixture
def config(monkeypatch, game_folder):
    """Fresh ConfigLoader pointed at a temporary game folder."""
    for name in NOMM_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv('NOMM_GAME_FOLDER', str(game_folder))
    monkeypatch.setenv('NOMM_LOG_CONSOLE', 'false')

    ConfigLoader.reset()
    loader = ConfigLoader()
    yield loader
    ConfigLoader.reset()
