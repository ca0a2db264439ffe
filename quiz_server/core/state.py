# quiz_server/core/state.py

import logging
import os
from typing import Awaitable, Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from quiz_server.core.errors import FatalStartupError, NotReadyError
from quiz_server.core.response import error
from quiz_server.db.mongo import QuestionStore
from quiz_server.db.mysql import ScoreStore
from quiz_server.logging import get_logger, LogSection, LogSubsection

logger = get_logger("state")

QuestionConnector = Callable[[], Awaitable[QuestionStore]]


def terminate_process(exc: BaseException) -> None:
    """Без MongoDB сервису работать нельзя: завершаем процесс с кодом 1"""
    logging.shutdown()
    os._exit(1)


class AppState:
    """
    Состояние приложения.

    scores доступен всегда, questions появляется только после успешного
    подключения к MongoDB. Переход «не готов» -> «готов» происходит один раз.
    """

    def __init__(
        self,
        scores: ScoreStore,
        connect_questions: QuestionConnector,
        on_fatal: Callable[[BaseException], None] = terminate_process
    ):
        self.scores = scores
        self.questions: Optional[QuestionStore] = None
        self._connect_questions = connect_questions
        self._on_fatal = on_fatal

    @property
    def ready(self) -> bool:
        return self.questions is not None

    def mark_ready(self, store: QuestionStore) -> None:
        if self.questions is not None:
            raise RuntimeError("Хранилище вопросов уже подключено")
        self.questions = store
        logger.info(
            section=LogSection.SYSTEM,
            subsection=LogSubsection.SYSTEM.READINESS,
            message="Сервис готов принимать запросы"
        )

    def require_questions(self) -> QuestionStore:
        if self.questions is None:
            raise NotReadyError()
        return self.questions

    async def connect(self) -> None:
        """Подключение к MongoDB при старте; при неудаче вызывается on_fatal"""
        try:
            store = await self._connect_questions()
        except Exception as e:
            fatal = e if isinstance(e, FatalStartupError) else FatalStartupError(f"MongoDB недоступна: {e}")
            logger.critical(
                section=LogSection.SYSTEM,
                subsection=LogSubsection.SYSTEM.FATAL,
                message=f"Ошибка подключения к MongoDB, завершаем работу: {fatal}"
            )
            self._on_fatal(fatal)
            return
        self.mark_ready(store)

    async def close(self) -> None:
        if self.questions is not None:
            await self.questions.close()
        await self.scores.close()


class ReadinessGateMiddleware(BaseHTTPMiddleware):
    """
    Пока нет подключения к MongoDB, любой запрос (включая /api/submit и /)
    получает 503 и до маршрутизации не доходит.
    """

    def __init__(self, app: ASGIApp, state: AppState):
        super().__init__(app)
        self.state = state

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.state.ready:
            exc = NotReadyError()
            logger.warning(
                section=LogSection.API,
                subsection=LogSubsection.API.NOT_READY,
                message=f"Запрос {request.method} {request.url.path} отклонён: MongoDB ещё не подключена",
                ip_address=request.client.host if request.client else None
            )
            return error(code=exc.status_code, message=exc.message)
        return await call_next(request)
