"""
HTTP API для сайта: посты, фото, шрифты, заявки на сеанс.
Слушает на HOST:PORT рядом с polling бота в том же event loop.
"""
import json
import os
from aiohttp import web
from aiogram import Bot

from config import CORS_ORIGIN, HOST, PHOTOS_DIR, PORT
from errors import FetchError, StoreError, ValidationError
from models.post import create_post, delete_post, get_all_posts
from models.schemas import AppointmentRequest, NewPostRequest, parse_request
from services.fonts import get_font_families
from services.notifier import send_appointment
from services.photo_ingestor import ingest_many
from utils.logger import log_error, log_info, log_warn

BOT_KEY = web.AppKey("bot", Bot)
PHOTOS_DIR_KEY = web.AppKey("photos_dir", str)

_runner: web.AppRunner | None = None

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": CORS_ORIGIN,
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


@web.middleware
async def cors_middleware(request: web.Request, handler):
    if request.method == "OPTIONS":
        return web.Response(headers=_CORS_HEADERS)
    try:
        response = await handler(request)
    except web.HTTPException as e:
        e.headers.update(_CORS_HEADERS)
        raise
    response.headers.update(_CORS_HEADERS)
    return response


async def _read_json(request: web.Request):
    try:
        return await request.json()
    except ValueError:
        return None


async def _handle_list_posts(request: web.Request) -> web.Response:
    """GET /posts — photo_paths отдаётся JSON-строкой, как хранится в таблице."""
    try:
        posts = await get_all_posts()
    except StoreError as e:
        await log_error(f"GET /posts: {e}")
        return web.Response(status=500, text=str(e))

    return web.json_response([
        {
            "id": p["id"],
            "photo_paths": json.dumps(p["photo_paths"], ensure_ascii=False),
            "caption": p["caption"],
        }
        for p in posts
    ])


async def _handle_new_post(request: web.Request) -> web.Response:
    """POST /newpost — {photo_paths: [file_path из Telegram], caption}."""
    try:
        payload = parse_request(NewPostRequest, await _read_json(request))
    except ValidationError as e:
        return web.Response(status=400, text=str(e))

    try:
        saved = await ingest_many(payload.photo_paths, photos_dir=request.app[PHOTOS_DIR_KEY])
        if not saved:
            return web.Response(status=400, text="Немає дійсних фото для збереження")
        post_id = await create_post(saved, payload.caption)
    except StoreError as e:
        await log_error(f"POST /newpost: {e}")
        return web.Response(status=500, text="Помилка при збереженні постів у базі даних")

    await log_info(f"Новий пост #{post_id} через API: {len(saved)} фото")
    return web.Response(text="Пост успішно збережено у базі даних")


async def _handle_delete_post(request: web.Request) -> web.Response:
    """DELETE /posts/{id}"""
    try:
        post_id = int(request.match_info["id"])
    except ValueError:
        return web.Response(status=404, text="Пост не знайдено")

    try:
        deleted = await delete_post(post_id)
    except StoreError as e:
        await log_error(f"DELETE /posts/{post_id}: {e}")
        return web.Response(status=500, text="Помилка при видаленні посту")

    if not deleted:
        return web.Response(status=404, text="Пост не знайдено")
    await log_info(f"Пост #{post_id} видалено через API")
    return web.Response(text="Пост успішно видалено")


async def _handle_photo(request: web.Request) -> web.StreamResponse:
    """GET /photos/{photo_id} — только файлы прямо в папке photos/."""
    photos_dir = os.path.realpath(request.app[PHOTOS_DIR_KEY])
    path = os.path.realpath(os.path.join(photos_dir, request.match_info["photo_id"]))

    if os.path.dirname(path) != photos_dir or not os.path.isfile(path):
        print(f"[API] Фото не найдено: {request.match_info['photo_id']}")
        return web.Response(status=404, text="Зображення не знайдено")
    return web.FileResponse(path)


async def _handle_fonts(request: web.Request) -> web.Response:
    """GET /fonts — список семейств из Google Fonts."""
    try:
        families = await get_font_families()
    except FetchError as e:
        await log_warn(f"Google Fonts недоступен: {e}")
        return web.Response(status=500, text="Не вдалося завантажити шрифти")
    return web.json_response(families)


async def _handle_appointment(request: web.Request) -> web.Response:
    """POST /appointment — {name, phone} → сообщение в TELEGRAM_CHAT_ID."""
    try:
        payload = parse_request(AppointmentRequest, await _read_json(request))
    except ValidationError as e:
        return web.Response(status=400, text=str(e))

    if await send_appointment(request.app[BOT_KEY], payload.name, payload.phone):
        return web.Response(text="Заявка успішно відправлена")
    return web.Response(status=500, text="Помилка при відправці заявки")


def create_app(bot: Bot, photos_dir: str = PHOTOS_DIR) -> web.Application:
    app = web.Application(middlewares=[cors_middleware])
    app[BOT_KEY] = bot
    app[PHOTOS_DIR_KEY] = photos_dir

    app.router.add_get("/posts", _handle_list_posts)
    app.router.add_post("/newpost", _handle_new_post)
    app.router.add_delete("/posts/{id}", _handle_delete_post)
    app.router.add_get("/photos/{photo_id}", _handle_photo)
    app.router.add_get("/fonts", _handle_fonts)
    app.router.add_post("/appointment", _handle_appointment)
    return app


async def start_api_server(bot: Bot, host: str = HOST, port: int = PORT):
    """Запускает HTTP API."""
    global _runner

    _runner = web.AppRunner(create_app(bot))
    await _runner.setup()

    site = web.TCPSite(_runner, host, port)
    try:
        await site.start()
        print(f"[STARTUP] HTTP API запущен на {host}:{port}")
    except OSError as e:
        print(f"[STARTUP] HTTP API: не удалось запустить на {host}:{port} — {e}")
        await _runner.cleanup()
        _runner = None


async def stop_api_server():
    """Останавливает HTTP API."""
    global _runner
    if _runner:
        await _runner.cleanup()
        _runner = None
        print("[SHUTDOWN] HTTP API остановлен")
