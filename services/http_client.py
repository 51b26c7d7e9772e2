"""
Shared HTTP-клиент для исходящих запросов (скачивание фото, Google Fonts).
Переиспользует TCP-соединения.
"""
import httpx

from config import HTTP_TIMEOUT
from errors import FetchError

_http_client: httpx.AsyncClient | None = None


def get_client() -> httpx.AsyncClient:
    """Возвращает shared httpx-клиент."""
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(timeout=HTTP_TIMEOUT, follow_redirects=True)
    return _http_client


async def fetch(url: str) -> httpx.Response:
    """GET с проверкой статуса. Не 2xx и сетевые ошибки → FetchError."""
    try:
        response = await get_client().get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(f"HTTP {e.response.status_code} {e.response.reason_phrase}") from e
    except httpx.HTTPError as e:
        raise FetchError(f"{type(e).__name__}: {e}") from e
    return response


async def close_client():
    global _http_client
    if _http_client and not _http_client.is_closed:
        await _http_client.aclose()
    _http_client = None
