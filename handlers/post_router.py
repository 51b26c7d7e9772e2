"""
Роутер сообщений бота — фото становятся постами, /deletepost удаляет пост.

Фото без альбома сохраняется сразу. Фото из альбома (media_group_id) собираются
MediaGroupAggregator и сохраняются одним постом после паузы.
"""
from aiogram import Router, F, Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import Command
from aiogram.types import Message

from errors import FetchError, StoreError
from models.post import delete_post
from services.photo_ingestor import ingest_telegram_file
from utils.logger import log_error, log_info, log_warn
from utils.media_group import MediaGroupAggregator

router = Router()

SAVED_MSG = "Фото та текст успішно завантажено і збережено в базі даних"
DOWNLOAD_ERROR_MSG = "Помилка при завантаженні фотографії"
PROCESS_ERROR_MSG = "Помилка при обробці фотографії"
INSTRUCTION_MSG = "Будь ласка, надішліть фотографію з підписом."
DELETE_USAGE_MSG = "Використання: /deletepost [ID]"
DELETE_OK_MSG = "Пост успішно видалено"
DELETE_NOT_FOUND_MSG = "Пост не знайдено"
DELETE_ERROR_MSG = "Помилка при видаленні посту"


@router.message(F.photo)
async def handle_photo(message: Message, bot: Bot, aggregator: MediaGroupAggregator):
    """Скачивает самое большое превью фото и передаёт его сборщику постов."""
    photo = message.photo[-1]
    group_id = message.media_group_id

    try:
        tg_file = await bot.get_file(photo.file_id)
        photo_path = await ingest_telegram_file(tg_file.file_path, f"{tg_file.file_unique_id}.jpg")
    except FetchError as e:
        await log_warn(f"Фото {photo.file_id} не завантажено: {e}")
        await message.reply(DOWNLOAD_ERROR_MSG)
        return
    except (TelegramAPIError, StoreError) as e:
        await log_error(f"Фото {photo.file_id} не оброблено: {e}")
        await message.reply(PROCESS_ERROR_MSG)
        return

    if group_id:
        print(f"[PHOTO] Фото для медиагруппы {group_id}")

    async def on_committed(post_id: int):
        await message.reply(SAVED_MSG)
        await log_info(f"Новий пост #{post_id} від @{message.from_user.username if message.from_user else '?'}")

    try:
        await aggregator.observe_photo(group_id, photo_path, message.caption, on_committed=on_committed)
    except StoreError as e:
        await log_error(f"Пост не збережено: {e}")
        await message.reply(PROCESS_ERROR_MSG)


@router.message(Command("deletepost"))
async def handle_delete_post(message: Message):
    """/deletepost <ID>"""
    args = (message.text or "").split(" ")
    if len(args) != 2:
        await message.reply(DELETE_USAGE_MSG)
        return

    try:
        post_id = int(args[1])
    except ValueError:
        await message.reply(DELETE_NOT_FOUND_MSG)
        return

    try:
        deleted = await delete_post(post_id)
    except StoreError as e:
        await log_error(f"Пост #{post_id} не видалено: {e}")
        await message.reply(DELETE_ERROR_MSG)
        return

    if not deleted:
        await message.reply(DELETE_NOT_FOUND_MSG)
        return
    await message.reply(DELETE_OK_MSG)
    await log_info(f"Пост #{post_id} видалено командою")


@router.message(F.text)
async def handle_text(message: Message):
    await message.reply(INSTRUCTION_MSG)
