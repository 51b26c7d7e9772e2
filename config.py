"""
Конфигурация бота и HTTP-сервера постов.
Все секреты берутся из .env файла.
"""
import os
import sys
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _int_env(name: str, default: int = 0) -> int:
    """Читает int из .env с понятной ошибкой при невалидном значении."""
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        print(f"❌ {name}={raw!r} — должно быть целым числом")
        sys.exit(1)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, str(default))
    try:
        return float(raw)
    except ValueError:
        print(f"❌ {name}={raw!r} — должно быть числом")
        sys.exit(1)


# === Telegram ===
BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
# Чат для заявок на сеанс (id или @username канала)
TELEGRAM_CHAT_ID = os.getenv("TELEGRAM_CHAT_ID", "")
# Чат для служебных логов, пусто — только консоль
LOG_CHAT_ID = os.getenv("LOG_CHAT_ID", "")
# Минимальный уровень для чата: INFO, WARN или ERROR
LOG_CHAT_LEVEL = os.getenv("LOG_CHAT_LEVEL", "INFO").upper()

TELEGRAM_FILE_URL = "https://api.telegram.org/file/bot{token}/{file_path}"

# === Google Fonts ===
GOOGLE_FONTS_API_KEY = os.getenv("GOOGLE_FONTS_API_KEY", "")
GOOGLE_FONTS_URL = "https://www.googleapis.com/webfonts/v1/webfonts"

# === HTTP-сервер ===
HOST = os.getenv("HOST", "0.0.0.0")
PORT = _int_env("PORT", 3001)
CORS_ORIGIN = os.getenv("CORS_ORIGIN", "http://localhost:3000")
HTTP_TIMEOUT = _float_env("HTTP_TIMEOUT", 15.0)

# === Хранилище ===
DB_PATH = os.getenv("DB_PATH", os.path.join(BASE_DIR, "posts.db"))
PHOTOS_DIR = os.getenv("PHOTOS_DIR", os.path.join(BASE_DIR, "photos"))

# === Медиагруппы ===
# Сколько секунд после первого фото альбома ждём остальные части
MEDIA_GROUP_DELAY = _float_env("MEDIA_GROUP_DELAY", 2.0)
# 1 — сохранять и альбомы, в которых к дедлайну пришло одно фото
MEDIA_GROUP_FLUSH_SINGLE = os.getenv("MEDIA_GROUP_FLUSH_SINGLE", "0") == "1"
