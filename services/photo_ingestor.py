"""
Скачивание фото в локальную папку photos/.

Каждый файл получает новое уникальное имя <миллисекунды>_<счётчик>_<исходное имя>,
которое и хранится в посте как ссылка на фото.
"""
import asyncio
import itertools
import os
import time

from config import BOT_TOKEN, PHOTOS_DIR, TELEGRAM_FILE_URL
from errors import FetchError, StoreError
from services.http_client import fetch
from utils.logger import log_warn

# Счётчик в имени — два файла в одну миллисекунду не перезапишут друг друга
_seq = itertools.count(1)


def telegram_file_url(file_path: str) -> str:
    return TELEGRAM_FILE_URL.format(token=BOT_TOKEN, file_path=file_path)


def make_photo_filename(source_name: str) -> str:
    base = os.path.basename(source_name) or "photo.jpg"
    return f"{int(time.time() * 1000)}_{next(_seq)}_{base}"


def _write_file(path: str, data: bytes):
    with open(path, "wb") as f:
        f.write(data)


async def ingest_photo(url: str, source_name: str, photos_dir: str = PHOTOS_DIR) -> str:
    """Скачивает фото по url и сохраняет в photos_dir. Возвращает имя файла.

    FetchError — источник недоступен, StoreError — не удалось записать файл.
    """
    response = await fetch(url)
    filename = make_photo_filename(source_name)
    path = os.path.join(photos_dir, filename)
    try:
        await asyncio.to_thread(_write_file, path, response.content)
    except OSError as e:
        raise StoreError(f"Не удалось записать {filename}: {e}") from e

    print(f"[INGEST] {source_name} → {filename} ({len(response.content)} байт)")
    return filename


async def ingest_telegram_file(file_path: str, source_name: str | None = None,
                               photos_dir: str = PHOTOS_DIR) -> str:
    """Скачивает файл с файлового сервера Telegram по file_path из getFile."""
    return await ingest_photo(telegram_file_url(file_path), source_name or file_path, photos_dir)


async def ingest_many(file_paths: list[str], photos_dir: str = PHOTOS_DIR) -> list[str]:
    """Скачивает несколько файлов Telegram. Неудачные пропускаются, порядок сохраняется."""
    saved = []
    for file_path in file_paths:
        try:
            saved.append(await ingest_telegram_file(file_path, photos_dir=photos_dir))
        except FetchError as e:
            await log_warn(f"Фото {file_path} пропущено: {e}")
    return saved
