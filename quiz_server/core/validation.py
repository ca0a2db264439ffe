# quiz_server/core/validation.py

from typing import Type, TypeVar
from fastapi import Request
from pydantic import BaseModel, ValidationError as PydanticValidationError

from quiz_server.core.errors import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def format_schema_errors(exc: PydanticValidationError) -> str:
    """Склеивает ошибки pydantic в одну строку: «поле: сообщение; ...»"""
    parts = []
    for err in exc.errors():
        loc = err.get("loc") or ("body",)
        field = ".".join(str(item) for item in loc)
        msg = err.get("msg", "Некорректное значение")
        # Удаляем префикс "Value error, " если он присутствует
        prefix = "Value error, "
        if msg.startswith(prefix):
            msg = msg[len(prefix):]
        parts.append(f"{field}: {msg}")
    return "; ".join(parts)


async def read_payload(request: Request, schema: Type[SchemaT], message: str) -> SchemaT:
    """
    Читает JSON-тело запроса и валидирует его по схеме.

    Пустое тело, битый JSON, не объект и ошибки полей одинаково превращаются
    в ValidationError с сообщением маршрута; подробности идут в details для логов.
    """
    raw = await request.body()
    try:
        return schema.model_validate_json(raw)
    except PydanticValidationError as e:
        raise ValidationError(message, details=format_schema_errors(e)) from e
