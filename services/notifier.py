"""
Уведомления о заявках на сеанс в Telegram-чат.
"""
import html
from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from config import TELEGRAM_CHAT_ID
from utils.logger import log_error, log_warn


def format_appointment(name: str, phone: str) -> str:
    return (
        "Нова заявка на сеанс:\n"
        f"Ім'я: {html.escape(name)}\n"
        f"Номер телефону: {html.escape(phone)}"
    )


async def send_appointment(bot: Bot, name: str, phone: str) -> bool:
    """Отправляет заявку в TELEGRAM_CHAT_ID. Возвращает True если сообщение доставлено."""
    if not TELEGRAM_CHAT_ID:
        await log_warn(f"TELEGRAM_CHAT_ID не задан — заявка от {name} не отправлена")
        return False

    try:
        await bot.send_message(TELEGRAM_CHAT_ID, format_appointment(name, phone))
    except TelegramAPIError as e:
        await log_error(f"Заявка от {name} не доставлена: {e}")
        return False

    print(f"[NOTIFY] Заявка от {name} отправлена")
    return True
