"""Shared pytest fixtures

Every test that touches the post store gets its own SQLite file, and outbound HTTP
goes through httpx.MockTransport instead of the network.
"""

import httpx
import pytest

import database
from services import http_client


@pytest.fixture
async def db(tmp_path):
    """Fresh posts table in a temporary SQLite file"""
    await database.init_db(str(tmp_path / "posts.db"))
    yield
    await database.close_db()


@pytest.fixture
def photos_dir(tmp_path):
    path = tmp_path / "photos"
    path.mkdir()
    return path


@pytest.fixture
async def mock_http():
    """Install a MockTransport-backed shared client: mock_http(handler)"""

    def install(handler):
        http_client._http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return http_client._http_client

    yield install
    await http_client.close_client()


@pytest.fixture
def telegram_files(mock_http):
    """Telegram file server serving the given {file_path: bytes}; anything else is 404"""

    def install(files: dict[str, bytes]):
        def handler(request: httpx.Request) -> httpx.Response:
            for file_path, content in files.items():
                if request.url.path.endswith("/" + file_path):
                    return httpx.Response(200, content=content)
            return httpx.Response(404)

        return mock_http(handler)

    return install
