"""
Сборщик медиагрупп Telegram.

Telegram отправляет фото одного альбома как несколько отдельных Message с общим
media_group_id и никак не сообщает, что альбом закончился. Граница альбома — тишина:
через MEDIA_GROUP_DELAY секунд после ПЕРВОГО фото группа проверяется и, если в ней
больше одного фото, сохраняется одним постом.

Таймер одноразовый: последующие фото его не продлевают и не перезапускают.
Всё работает в одном event loop, поэтому словарь групп не требует блокировок.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from config import MEDIA_GROUP_DELAY, MEDIA_GROUP_FLUSH_SINGLE
from utils.logger import log_error, log_warn

# (photo_paths, caption) → ID поста
CommitFunc = Callable[[list[str], str], Awaitable[int]]
# ID поста → None; вызывается после успешного сохранения
CommittedCallback = Callable[[int], Awaitable[None]]


@dataclass
class PendingMediaGroup:
    caption: str = ""
    photo_paths: list[str] = field(default_factory=list)
    count: int = 0
    on_committed: CommittedCallback | None = None


class MediaGroupAggregator:
    """Собирает фото альбома в один пост."""

    def __init__(self, commit: CommitFunc, delay: float = MEDIA_GROUP_DELAY,
                 flush_single: bool = MEDIA_GROUP_FLUSH_SINGLE):
        self._commit = commit
        self._delay = delay
        self._flush_single = flush_single
        # media_group_id → накопленная группа
        self._groups: dict[str, PendingMediaGroup] = {}
        self._tasks: set[asyncio.Task] = set()

    def pending(self, group_id: str) -> PendingMediaGroup | None:
        return self._groups.get(group_id)

    @property
    def pending_count(self) -> int:
        return len(self._groups)

    async def observe_photo(self, group_id: str | None, photo_path: str,
                            caption: str | None = None,
                            on_committed: CommittedCallback | None = None) -> int | None:
        """Принимает одно скачанное фото.

        Без group_id — сразу сохраняет пост из одного фото и возвращает его ID
        (StoreError пробрасывается вызывающему). С group_id — добавляет фото
        в группу и возвращает None: пост сохранит отложенная проверка.
        """
        if not group_id:
            post_id = await self._commit([photo_path], caption or "")
            await self._notify(on_committed, post_id)
            return post_id

        group = self._groups.get(group_id)
        if group is None:
            group = PendingMediaGroup(caption=caption or "", on_committed=on_committed)
            self._groups[group_id] = group
            self._schedule(group_id)
        elif caption and not group.caption:
            # Подпись берётся из первого фото, у которого она есть
            group.caption = caption

        group.photo_paths.append(photo_path)
        group.count += 1
        print(f"[MEDIA-GROUP] {group_id}: фото #{group.count} ({photo_path})")
        return None

    def _schedule(self, group_id: str):
        task = asyncio.create_task(self._complete_later(group_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _complete_later(self, group_id: str):
        await asyncio.sleep(self._delay)
        await self._complete(group_id)

    async def _complete(self, group_id: str):
        group = self._groups.get(group_id)
        if group is None:
            return

        if group.count <= 1 and not self._flush_single:
            # Одиночное фото к дедлайну: группа остаётся в памяти несохранённой
            await log_warn(f"Альбом {group_id}: к дедлайну одно фото ({group.photo_paths[0]}), пост не создан")
            return

        # Убираем до await — фото с тем же id, пришедшее во время записи, начнёт новую группу
        del self._groups[group_id]
        print(f"[MEDIA-GROUP] {group_id}: сохраняем {group.count} фото после задержки")

        try:
            post_id = await self._commit(group.photo_paths, group.caption)
        except Exception as e:
            await log_error(f"Альбом {group_id} ({group.count} фото) не сохранён: {e}")
            return

        await self._notify(group.on_committed, post_id)

    @staticmethod
    async def _notify(on_committed: CommittedCallback | None, post_id: int):
        """Пост уже сохранён — ошибка ответа пользователю только логируется."""
        if not on_committed:
            return
        try:
            await on_committed(post_id)
        except Exception as e:
            await log_error(f"Пост #{post_id} сохранён, но уведомление не отправлено: {e}")

    async def drain(self):
        """Дожидается всех запланированных проверок (для остановки и тестов)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
