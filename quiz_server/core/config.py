# quiz_server/core/config.py

import re
from functools import lru_cache
from typing import List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Загружаем переменные окружения из .env (если нужен dotenv)
load_dotenv()


class Settings(BaseSettings):
    # Настройки MongoDB (вопросы)
    MONGO_URI: str
    MONGO_DB_NAME: str
    MONGO_QUESTIONS_COLLECTION: str = "questions"
    MONGO_CONNECT_TIMEOUT_MS: int = 30000

    # Настройки MySQL (результаты студентов)
    MYSQL_HOST: str = "localhost"
    MYSQL_PORT: int = 3306
    MYSQL_USER: str = "root"
    MYSQL_PASSWORD: str = ""
    MYSQL_DATABASE: Optional[str] = None
    MYSQL_POOL_MIN: int = 1
    MYSQL_POOL_MAX: int = 10
    MYSQL_SCORES_TABLE: str = "studentscores"
    MYSQL_CREATE_TABLE: bool = False

    # HTTP сервер
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("MYSQL_SCORES_TABLE")
    @classmethod
    def validate_table_name(cls, v):
        # Имя таблицы подставляется в SQL напрямую, поэтому только [A-Za-z0-9_]
        if not re.fullmatch(r"[A-Za-z0-9_]+", v):
            raise ValueError(f"Недопустимое имя таблицы: {v!r}")
        return v

    @field_validator("MYSQL_POOL_MAX")
    @classmethod
    def validate_pool_bounds(cls, v, info):
        pool_min = info.data.get("MYSQL_POOL_MIN", 1)
        if v < max(pool_min, 1):
            raise ValueError("MYSQL_POOL_MAX должен быть не меньше MYSQL_POOL_MIN и больше нуля")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
