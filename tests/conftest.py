"""Shared pytest fixtures for all tests"""
import io
import json
import zipfile
from pathlib import Path
from typing import Dict

import pytest
import respx
from rich.console import Console

from constants import OAUTH_TOKEN_URL
from settings import BootstrapSettings
from tests.fixtures.loader import get_credentials

NOW = 1_800_000_000


@pytest.fixture
def now():
    """Fixed 'current time' used by the refresher tests"""
    return NOW


@pytest.fixture
def clock(now):
    return lambda: now


@pytest.fixture
def valid_credentials():
    return get_credentials('valid_credentials')


@pytest.fixture
def expired_credentials():
    return get_credentials('expired_credentials')


@pytest.fixture
def server_dir(tmp_path):
    """Empty server directory"""
    path = tmp_path / "server"
    path.mkdir()
    return path


@pytest.fixture
def downloader_path(server_dir):
    """Server directory with a Unix downloader binary"""
    path = server_dir / "hytale-downloader"
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(0o755)
    return path


@pytest.fixture
def settings(server_dir):
    return BootstrapSettings(work_dir=server_dir)


@pytest.fixture
def console():
    """Rich console that records into a string buffer"""
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def mock_token_endpoint():
    """Mock the OAuth token endpoint using respx"""
    with respx.mock(assert_all_called=False) as router:
        yield router.post(OAUTH_TOKEN_URL)


def build_zip(path: Path, files: Dict[str, str]) -> Path:
    """Write a zip archive containing the given name -> text entries"""
    with zipfile.ZipFile(path, 'w') as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return path


@pytest.fixture
def make_zip():
    return build_zip


def credentials_env(data: Dict) -> Dict[str, str]:
    return {"HYTALE_CREDENTIALS_JSON": json.dumps(data)}


@pytest.fixture
def make_env():
    return credentials_env


# Markers for convenience
def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
