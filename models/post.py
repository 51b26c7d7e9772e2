"""
CRUD-операции с постами (фото + подпись).
"""
import json
import aiosqlite

from database import get_db
from errors import StoreError, ValidationError

# SQLite INTEGER — знаковое 64-битное, ID за пределами заведомо не существует
_MAX_SQLITE_INT = 2 ** 63 - 1


def _row_to_post(row) -> dict:
    post = dict(row)
    post["photo_paths"] = json.loads(post["photo_paths"] or "[]")
    return post


async def create_post(photo_paths: list[str], caption: str) -> int:
    """Сохраняет пост, возвращает его ID. photo_paths — непустой список в порядке показа."""
    if not photo_paths:
        raise ValidationError("Пост без фото не сохраняется")

    try:
        db = await get_db()
        cursor = await db.execute(
            "INSERT INTO posts (photo_paths, caption) VALUES (?, ?)",
            (json.dumps(list(photo_paths), ensure_ascii=False), caption)
        )
        await db.commit()
    except aiosqlite.Error as e:
        raise StoreError(f"Не удалось сохранить пост: {e}") from e

    post_id = cursor.lastrowid
    print(f"[POST] Новый пост #{post_id}: {len(photo_paths)} фото, подпись {caption[:50]!r}")
    return post_id


async def get_all_posts() -> list[dict]:
    """Все посты по возрастанию ID. photo_paths уже раскодирован в list."""
    try:
        db = await get_db()
        cursor = await db.execute("SELECT * FROM posts ORDER BY id")
        rows = await cursor.fetchall()
    except aiosqlite.Error as e:
        raise StoreError(f"Не удалось прочитать посты: {e}") from e
    return [_row_to_post(r) for r in rows]


async def delete_post(post_id: int) -> bool:
    """Удаляет пост. Возвращает False если такого ID нет."""
    if not -_MAX_SQLITE_INT - 1 <= post_id <= _MAX_SQLITE_INT:
        return False

    try:
        db = await get_db()
        cursor = await db.execute("DELETE FROM posts WHERE id = ?", (post_id,))
        await db.commit()
    except aiosqlite.Error as e:
        raise StoreError(f"Не удалось удалить пост #{post_id}: {e}") from e

    if cursor.rowcount == 0:
        return False
    print(f"[POST] Пост #{post_id} удалён")
    return True
