# quiz_server/core/response.py

from typing import Any
from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def encode(data: Any) -> Any:
    """JSON-совместимое представление: ObjectId -> hex строка, datetime -> ISO"""
    return jsonable_encoder(data, custom_encoder={ObjectId: str})


def success(data: Any = None):
    return JSONResponse(status_code=200, content=encode(data))


def message(text: str, **extra):
    return JSONResponse(status_code=200, content={"message": text, **encode(extra)})


def error(code: int = 400, message: str = "Ошибка", field: str = "error"):
    # Большинство маршрутов отдают {"error": ...}, /api/scores исторически {"message": ...}
    return JSONResponse(status_code=code, content={field: message})
