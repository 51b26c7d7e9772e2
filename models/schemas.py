"""
Схемы тел HTTP-запросов. Проверяются до того, как данные попадут в хранилище.
"""
from typing import ClassVar

import pydantic
from pydantic import BaseModel, Field

from errors import ValidationError


class NewPostRequest(BaseModel):
    error_message: ClassVar[str] = "Потрібно надіслати photo_paths та caption"

    photo_paths: list[str] = Field(min_length=1)
    caption: str = Field(min_length=1)


class AppointmentRequest(BaseModel):
    error_message: ClassVar[str] = "Потрібно надіслати ім'я та номер телефону"

    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)


def parse_request(model: type[BaseModel], data) -> BaseModel:
    """Проверяет тело запроса по схеме. Любая ошибка → ValidationError с текстом схемы."""
    if not isinstance(data, dict):
        raise ValidationError(model.error_message)
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(model.error_message) from e
