"""
База данных SQLite — инициализация таблицы постов и общее соединение.
Использует единое разделяемое соединение с WAL-mode.
"""
import aiosqlite

from config import DB_PATH

# Единое разделяемое соединение
_shared_db: aiosqlite.Connection | None = None
_db_path = DB_PATH


async def _open(path: str) -> aiosqlite.Connection:
    db = await aiosqlite.connect(path)
    db.row_factory = aiosqlite.Row
    await db.execute("PRAGMA journal_mode=WAL")
    return db


async def init_db(db_path: str | None = None):
    """Создаёт таблицу posts если её нет и открывает shared-соединение."""
    global _shared_db, _db_path

    _db_path = db_path or DB_PATH
    async with aiosqlite.connect(_db_path) as db:
        # photo_paths — JSON-массив имён файлов в папке photos/
        await db.execute("""
            CREATE TABLE IF NOT EXISTS posts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                photo_paths TEXT,
                caption TEXT
            )
        """)
        await db.commit()

    _shared_db = await _open(_db_path)
    print(f"✅ База данных инициализирована: {_db_path}")


async def get_db() -> aiosqlite.Connection:
    """Возвращает shared-соединение с БД. НЕ закрывайте его!"""
    global _shared_db
    if _shared_db is None:
        _shared_db = await _open(_db_path)
    return _shared_db


async def close_db():
    """Закрывает shared-соединение. Вызывать при остановке бота."""
    global _shared_db
    if _shared_db:
        await _shared_db.close()
        _shared_db = None
