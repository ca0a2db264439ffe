# quiz_server/db/mysql.py

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

import aiomysql

from quiz_server.core.errors import StorageError
from quiz_server.logging import get_logger, LogSection, LogSubsection

logger = get_logger("db.mysql")

# Ошибки драйвера, которые превращаются в StorageError
DRIVER_ERRORS = (aiomysql.MySQLError, OSError, RuntimeError, asyncio.TimeoutError)


@dataclass(frozen=True)
class MySQLConfig:
    host: str
    port: int
    user: str
    password: str
    db: Optional[str]
    minsize: int = 1
    maxsize: int = 10


class ScoreStore:
    """
    Результаты студентов в таблице MySQL.

    Пул создаётся лениво при первом запросе, поэтому старт процесса он не блокирует.
    Соединение берётся из пула на каждый запрос. Повторов нет.
    """

    def __init__(self, config: MySQLConfig, table: str = "studentscores"):
        self._config = config
        self._table = table
        self._pool: Optional[aiomysql.Pool] = None
        self._lock: Optional[asyncio.Lock] = None

    @property
    def table(self) -> str:
        return self._table

    async def _create_pool(self) -> aiomysql.Pool:
        pool = await aiomysql.create_pool(
            host=self._config.host,
            port=self._config.port,
            user=self._config.user,
            password=self._config.password,
            db=self._config.db,
            minsize=self._config.minsize,
            maxsize=self._config.maxsize,
            autocommit=True,
            charset="utf8mb4",
        )
        logger.info(
            section=LogSection.DATABASE,
            subsection=LogSubsection.DATABASE.POOL,
            message=f"Пул MySQL создан ({self._config.host}:{self._config.port})"
        )
        return pool

    async def pool(self) -> aiomysql.Pool:
        if self._pool is None:
            if self._lock is None:
                self._lock = asyncio.Lock()
            async with self._lock:
                if self._pool is None:
                    self._pool = await self._create_pool()
        return self._pool

    async def _execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        pool = await self.pool()
        async with pool.acquire() as conn, conn.cursor() as cur:
            await cur.execute(sql, params)
            return int(cur.rowcount or 0)

    async def _fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        pool = await self.pool()
        async with pool.acquire() as conn, conn.cursor(aiomysql.DictCursor) as cur:
            await cur.execute(sql, params)
            return list(await cur.fetchall())

    async def insert_score(self, email: str, name: str, score: Union[int, float]) -> None:
        sql = f"INSERT INTO {self._table} (email, name, score) VALUES (%s, %s, %s)"
        try:
            await self._execute(sql, (email, name, score))
        except DRIVER_ERRORS as e:
            raise StorageError("ошибка сохранения результата", e) from e

    async def list_scores(self) -> List[Dict[str, Any]]:
        """Все записи, новые первыми"""
        sql = f"SELECT * FROM {self._table} ORDER BY submitted_at DESC"
        try:
            return await self._fetch_all(sql)
        except DRIVER_ERRORS as e:
            raise StorageError("ошибка чтения результатов", e) from e

    async def ensure_table(self) -> None:
        """Создаёт таблицу результатов, если её нет"""
        sql = (
            f"CREATE TABLE IF NOT EXISTS {self._table} ("
            "id INT AUTO_INCREMENT PRIMARY KEY, "
            "email VARCHAR(255) NOT NULL, "
            "name VARCHAR(255) NOT NULL, "
            "score DOUBLE NOT NULL, "
            "submitted_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP, "
            "INDEX idx_submitted_at (submitted_at)"
            ") CHARACTER SET utf8mb4"
        )
        try:
            await self._execute(sql)
        except DRIVER_ERRORS as e:
            raise StorageError("ошибка создания таблицы результатов", e) from e
        logger.info(
            section=LogSection.DATABASE,
            subsection=LogSubsection.DATABASE.SCHEMA,
            message=f"Таблица {self._table} готова"
        )

    async def close(self) -> None:
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        pool.close()
        await pool.wait_closed()
        logger.info(
            section=LogSection.DATABASE,
            subsection=LogSubsection.DATABASE.DISCONNECTION,
            message="Пул MySQL закрыт"
        )
