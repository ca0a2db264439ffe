from enum import Enum
from typing import Dict, Any, Optional
from datetime import datetime
import json
import os
import uuid
import pytz


class LogLevel(Enum):
    """Уровни серьезности логов"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogSection(Enum):
    """Основные разделы системы"""
    API = "api"
    QUESTIONS = "questions"
    SCORES = "scores"
    DATABASE = "database"
    SYSTEM = "system"


class LogSubsection:
    """Подразделы для каждого раздела"""

    # API подразделы
    class API:
        REQUEST = "request"
        ERROR = "error"
        VALIDATION = "validation"
        NOT_READY = "not_ready"

    # QUESTIONS подразделы
    class QUESTIONS:
        LIST = "list"
        CREATE = "create"
        UPDATE = "update"
        DELETE = "delete"
        NOT_MATCHED = "not_matched"

    # SCORES подразделы
    class SCORES:
        SUBMIT = "submit"
        LIST = "list"

    # DATABASE подразделы
    class DATABASE:
        CONNECTION = "connection"
        DISCONNECTION = "disconnection"
        POOL = "pool"
        SCHEMA = "schema"
        QUERY = "query"
        ERROR = "error"

    # SYSTEM подразделы
    class SYSTEM:
        INITIALIZATION = "initialization"
        STARTUP = "startup"
        SHUTDOWN = "shutdown"
        READINESS = "readiness"
        FATAL = "fatal"
        ERROR = "error"


def _log_timezone():
    try:
        return pytz.timezone(os.getenv("LOG_TIMEZONE", "UTC"))
    except pytz.UnknownTimeZoneError:
        return pytz.utc


class StructuredLogEntry:
    """Модель структурированного лог-сообщения"""

    def __init__(
        self,
        level: LogLevel,
        section: LogSection,
        subsection: str,
        message: str,
        extra_data: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None
    ):
        self.timestamp = datetime.now(_log_timezone()).strftime('%Y-%m-%d %H:%M:%S %Z')
        self.log_id = str(uuid.uuid4())[:8]  # Короткий уникальный ID
        self.level = level.value
        self.section = section.value
        self.subsection = subsection
        self.message = message
        self.extra_data = extra_data or {}
        self.ip_address = ip_address

    def to_dict(self) -> Dict[str, Any]:
        """Преобразование в словарь для логирования"""
        log_dict = {
            "timestamp": self.timestamp,
            "log_id": self.log_id,
            "level": self.level,
            "section": self.section,
            "subsection": self.subsection,
            "message": self.message
        }

        # Добавляем опциональные поля если они есть
        if self.ip_address:
            log_dict["ip_address"] = self.ip_address
        if self.extra_data:
            log_dict["extra_data"] = self.extra_data

        return log_dict

    def to_json_string(self) -> str:
        """Преобразование в JSON строку"""
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)
