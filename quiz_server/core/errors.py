# quiz_server/core/errors.py

"""
Ошибки сервиса.

Набор закрыт: всё, что выходит за пределы адаптеров хранилищ и чтения тела
запроса, приводится к одному из видов ErrorKind.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    STORAGE = "storage"
    NOT_READY = "not_ready"
    FATAL_STARTUP = "fatal_startup"


class QuizServerError(Exception):
    """Базовая ошибка сервиса"""

    kind: ErrorKind
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(QuizServerError):
    """Некорректное или неполное тело запроса (400)"""

    kind = ErrorKind.VALIDATION
    status_code = 400

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.details = details


class StorageError(QuizServerError):
    """Любой сбой MongoDB или MySQL. Детали только в логах"""

    kind = ErrorKind.STORAGE
    status_code = 500

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        detail = f"{operation}: {cause}" if cause is not None else operation
        super().__init__(detail)
        self.operation = operation
        self.cause = cause


class NotReadyError(QuizServerError):
    """Подключение к MongoDB ещё не установлено (503)"""

    kind = ErrorKind.NOT_READY
    status_code = 503

    def __init__(self, message: str = "MongoDB not connected yet, please try again shortly."):
        super().__init__(message)


class FatalStartupError(QuizServerError):
    """Не удалось подключиться к MongoDB при старте. Процесс завершается"""

    kind = ErrorKind.FATAL_STARTUP
    status_code = 500
