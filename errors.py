"""
Ошибки бота. Каждая завершает только свой запрос/событие, процесс продолжает работу.
"""


class PostBotError(Exception):
    """Базовая ошибка."""


class ValidationError(PostBotError):
    """Не хватает обязательных полей в запросе. Текст — для пользователя."""


class FetchError(PostBotError):
    """Удалённый источник не отдал данные (статус не 2xx или сетевая ошибка)."""


class StoreError(PostBotError):
    """Не удалось прочитать или записать данные (SQLite, диск)."""
