"""
Бот и HTTP API фото-постов.
Точка входа. Запуск: python bot.py
"""
import asyncio
import os
import sys
from aiogram import Bot, Dispatcher
from aiogram.enums import ParseMode
from aiogram.client.default import DefaultBotProperties

from config import BOT_TOKEN, PHOTOS_DIR, MEDIA_GROUP_DELAY
from database import init_db, close_db
from handlers.post_router import router as post_router
from models.post import create_post
from services.api_server import start_api_server, stop_api_server
from services.http_client import close_client
from utils.logger import set_bot
from utils.media_group import MediaGroupAggregator


async def main():
    # === Проверка конфигурации ===
    if not BOT_TOKEN:
        print("❌ TELEGRAM_BOT_TOKEN не задан! Скопируйте .env.example → .env и заполните.")
        sys.exit(1)

    print("[STARTUP] Запуск бота постов...")

    # Хранилище
    os.makedirs(PHOTOS_DIR, exist_ok=True)
    await init_db()
    print(f"[STARTUP] Фото: {PHOTOS_DIR}")

    # Бот
    bot = Bot(
        token=BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    set_bot(bot)

    # Сборщик альбомов — один на процесс
    aggregator = MediaGroupAggregator(commit=create_post)
    print(f"[STARTUP] Медиагруппы: задержка {MEDIA_GROUP_DELAY} с")

    # Диспетчер
    dp = Dispatcher()
    dp["aggregator"] = aggregator
    dp.include_router(post_router)

    bot_info = await bot.get_me()
    print(f"[STARTUP] Бот: @{bot_info.username} (ID: {bot_info.id})")

    await start_api_server(bot)

    print("[STARTUP] Запуск polling...")
    try:
        await dp.start_polling(bot)
    finally:
        print("[SHUTDOWN] Остановка бота...")
        await stop_api_server()
        await aggregator.drain()
        await close_client()
        await close_db()
        await bot.session.close()
        print("[SHUTDOWN] Бот остановлен")


if __name__ == "__main__":
    asyncio.run(main())
