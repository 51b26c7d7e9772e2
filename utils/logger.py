"""
Журнал событий постов: консоль + служебный Telegram-чат (LOG_CHAT_ID).

В консоль попадает всё. В чат — только уровни не ниже LOG_CHAT_LEVEL:
по умолчанию INFO (новые и удалённые посты), WARN (потерянные фото,
несохранённые альбомы из одного фото), ERROR (сбои записи и отправки).
"""
from datetime import datetime
from aiogram import Bot
from config import LOG_CHAT_ID, LOG_CHAT_LEVEL

LEVELS = {"INFO": 1, "WARN": 2, "ERROR": 3}
_ICONS = {"INFO": "🔵", "WARN": "🟡", "ERROR": "🔴"}

# Ссылка на бота устанавливается при старте
_bot: Bot | None = None


def set_bot(bot: Bot | None):
    global _bot
    _bot = bot


def _mirrored(level: str) -> bool:
    return LEVELS.get(level, 0) >= LEVELS.get(LOG_CHAT_LEVEL, 1)


async def log(level: str, text: str):
    now = datetime.now().strftime("%H:%M:%S")
    print(f"[{level}] {now} {text}")

    if not _bot or not LOG_CHAT_ID or not _mirrored(level):
        return

    msg = f"{_ICONS.get(level, '⚪')} {text}"
    try:
        # parse_mode=None — подписи и имена файлов идут как есть, без HTML
        await _bot.send_message(chat_id=LOG_CHAT_ID, text=msg, parse_mode=None)
    except Exception as e:
        print(f"[LOG ERROR] {e}: {msg}")


async def log_info(text: str):
    await log("INFO", text)

async def log_warn(text: str):
    await log("WARN", text)

async def log_error(text: str):
    await log("ERROR", text)
