"""
Список шрифтов из Google Fonts API.

API docs: https://developers.google.com/fonts/docs/developer_api
"""
from urllib.parse import urlencode

from config import GOOGLE_FONTS_API_KEY, GOOGLE_FONTS_URL
from errors import FetchError
from services.http_client import fetch


async def get_font_families() -> list[str]:
    """GET /webfonts/v1/webfonts → названия семейств в порядке API."""
    url = f"{GOOGLE_FONTS_URL}?{urlencode({'key': GOOGLE_FONTS_API_KEY})}"
    response = await fetch(url)
    try:
        items = response.json()["items"]
        return [font["family"] for font in items]
    except (ValueError, KeyError, TypeError) as e:
        raise FetchError(f"Неожиданный ответ Google Fonts: {e}") from e
