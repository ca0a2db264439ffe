# quiz_server/logging/logger_setup.py

import logging
import os
import inspect
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger
from logging.handlers import RotatingFileHandler

from .log_models import StructuredLogEntry, LogLevel, LogSection, LogSubsection


class StructuredFormatter(logging.Formatter):
    """Кастомный форматтер для структурированных логов"""

    def __init__(self):
        super().__init__()
        # Записи сторонних библиотек (uvicorn, драйверы БД) пишем обычным JSON
        self._fallback = jsonlogger.JsonFormatter(
            fmt="%(asctime)%(levelname)%(name)%(message)",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    def format(self, record):
        # Если в record есть structured_data, используем его
        if hasattr(record, 'structured_data'):
            return record.structured_data.to_json_string()
        return self._fallback.format(record)


class StructuredLogger:
    """Обертка для создания структурированных логов"""

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)

    def _get_caller_info(self) -> Dict[str, Any]:
        """
        Автоматически определяет файл и функцию, откуда был вызван лог

        Returns:
            Dict с информацией о файле и функции
        """
        # [0] - _get_caller_info, [1] - _log, [2] - info/warning/..., [3] - вызывающий код
        frame = inspect.currentframe()
        caller_frame = frame.f_back.f_back.f_back if frame else None
        if caller_frame is None:
            return {
                "source_file": "unknown",
                "source_function": "unknown",
                "source_line": 0
            }
        return {
            "source_file": os.path.basename(caller_frame.f_code.co_filename),
            "source_function": caller_frame.f_code.co_name,
            "source_line": caller_frame.f_lineno
        }

    def _log(
        self,
        level: LogLevel,
        section: LogSection,
        subsection: str,
        message: str,
        extra_data: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None
    ):
        """Внутренний метод для логирования"""
        numeric_level = getattr(logging, level.value)
        if not self.logger.isEnabledFor(numeric_level):
            return

        combined_extra_data = {**(extra_data or {}), **self._get_caller_info()}

        entry = StructuredLogEntry(
            level=level,
            section=section,
            subsection=subsection,
            message=message,
            extra_data=combined_extra_data,
            ip_address=ip_address
        )

        # Создаем LogRecord с нашими структурированными данными
        log_record = self.logger.makeRecord(
            name=self.logger.name,
            level=numeric_level,
            fn="",
            lno=0,
            msg=message,
            args=(),
            exc_info=None
        )
        log_record.structured_data = entry

        self.logger.handle(log_record)

    def debug(self, section: LogSection, subsection: str, message: str, **kwargs):
        """DEBUG уровень"""
        self._log(LogLevel.DEBUG, section, subsection, message, **kwargs)

    def info(self, section: LogSection, subsection: str, message: str, **kwargs):
        """INFO уровень"""
        self._log(LogLevel.INFO, section, subsection, message, **kwargs)

    def warning(self, section: LogSection, subsection: str, message: str, **kwargs):
        """WARNING уровень"""
        self._log(LogLevel.WARNING, section, subsection, message, **kwargs)

    def error(self, section: LogSection, subsection: str, message: str, **kwargs):
        """ERROR уровень"""
        self._log(LogLevel.ERROR, section, subsection, message, **kwargs)

    def critical(self, section: LogSection, subsection: str, message: str, **kwargs):
        """CRITICAL уровень"""
        self._log(LogLevel.CRITICAL, section, subsection, message, **kwargs)


def setup_application_logging():
    """
    Настройка централизованного логирования приложения

    Особенности:
    - Структурированные JSON логи (таймзона из LOG_TIMEZONE)
    - Уникальный ID для каждого лога
    - Стандартизированные разделы и подразделы
    - Ротация файла логов, если задан LOG_FILE
    """
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_file = os.getenv("LOG_FILE", "")
    console_logging = os.getenv("CONSOLE_LOGGING", "true").lower() == "true"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Удаляем все существующие хендлеры
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    formatter = StructuredFormatter()
    handlers = []

    # ===== КОНСОЛЬНЫЙ ХЕНДЛЕР =====
    if console_logging:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.setLevel(log_level)
        handlers.append(console_handler)

    # ===== ФАЙЛОВЫЙ ХЕНДЛЕР С РОТАЦИЕЙ =====
    max_bytes = int(os.getenv("LOG_MAX_BYTES", "10485760"))  # 10 MB по умолчанию
    backup_count = int(os.getenv("LOG_BACKUP_COUNT", "5"))
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = RotatingFileHandler(
            filename=log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    # ===== НАСТРОЙКА UVICORN ЛОГГЕРА =====
    uvicorn_logger = logging.getLogger("uvicorn")
    uvicorn_logger.handlers = list(handlers)
    uvicorn_logger.setLevel(log_level)
    uvicorn_logger.propagate = False

    init_logger = get_structured_logger("system.init")
    init_logger.info(
        section=LogSection.SYSTEM,
        subsection=LogSubsection.SYSTEM.INITIALIZATION,
        message="Система структурированного логирования успешно инициализирована",
        extra_data={
            "log_level": log_level,
            "log_file": log_file or "disabled",
            "console_logging": console_logging,
            "max_file_size_mb": max_bytes / 1024 / 1024,
            "backup_files": backup_count
        }
    )


def get_structured_logger(name: str) -> StructuredLogger:
    """
    Получить структурированный логгер для модуля

    Args:
        name: Имя модуля/компонента (например: "questions", "db.mysql")

    Returns:
        StructuredLogger: Настроенный структурированный логгер
    """
    return StructuredLogger(name)
