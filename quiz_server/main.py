# quiz_server/main.py

import asyncio
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from quiz_server.core.config import Settings, get_settings
from quiz_server.core.errors import QuizServerError, StorageError, ValidationError
from quiz_server.core.response import error
from quiz_server.core.state import AppState, QuestionConnector, ReadinessGateMiddleware, terminate_process
from quiz_server.db.mongo import QuestionStore
from quiz_server.db.mysql import MySQLConfig, ScoreStore
from quiz_server.logging import setup_application_logging, get_logger, LogSection, LogSubsection
from quiz_server.routers import questions_router, scores_router, system_router

logger = get_logger("main")


def build_score_store(settings: Settings) -> ScoreStore:
    config = MySQLConfig(
        host=settings.MYSQL_HOST,
        port=settings.MYSQL_PORT,
        user=settings.MYSQL_USER,
        password=settings.MYSQL_PASSWORD,
        db=settings.MYSQL_DATABASE,
        minsize=settings.MYSQL_POOL_MIN,
        maxsize=settings.MYSQL_POOL_MAX,
    )
    return ScoreStore(config, table=settings.MYSQL_SCORES_TABLE)


def build_question_connector(settings: Settings) -> QuestionConnector:
    async def connect() -> QuestionStore:
        return await QuestionStore.connect(
            settings.MONGO_URI,
            settings.MONGO_DB_NAME,
            collection_name=settings.MONGO_QUESTIONS_COLLECTION,
            timeout_ms=settings.MONGO_CONNECT_TIMEOUT_MS,
        )
    return connect


async def prepare_score_table(scores: ScoreStore) -> None:
    try:
        await scores.ensure_table()
    except StorageError as e:
        logger.error(
            section=LogSection.DATABASE,
            subsection=LogSubsection.DATABASE.SCHEMA,
            message=f"Не удалось подготовить таблицу результатов: {e}"
        )


def create_app(
    settings: Optional[Settings] = None,
    scores: Optional[ScoreStore] = None,
    connect_questions: Optional[QuestionConnector] = None,
    on_fatal: Callable[[BaseException], None] = terminate_process,
) -> FastAPI:
    """
    Собирает приложение.

    Хранилища и подключение к MongoDB можно передать явно (так делают тесты),
    иначе они строятся из настроек.
    """
    if scores is None or connect_questions is None:
        settings = settings or get_settings()
    if scores is None:
        scores = build_score_store(settings)
    if connect_questions is None:
        connect_questions = build_question_connector(settings)

    state = AppState(scores=scores, connect_questions=connect_questions, on_fatal=on_fatal)

    app = FastAPI(
        title="Quiz API",
        description="Вопросы (MongoDB) и результаты студентов (MySQL)",
        version="1.0.0",
    )
    app.state.quiz = state

    # Шлюз готовности внутри CORS, чтобы 503 тоже получал CORS-заголовки
    app.add_middleware(ReadinessGateMiddleware, state=state)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS if settings else ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(questions_router, prefix="/api", tags=["Questions"])
    app.include_router(scores_router, prefix="/api", tags=["Scores"])
    app.include_router(system_router, tags=["System"])

    @app.exception_handler(QuizServerError)
    async def quiz_error_handler(request: Request, exc: QuizServerError):
        if isinstance(exc, ValidationError):
            logger.warning(
                section=LogSection.API,
                subsection=LogSubsection.API.VALIDATION,
                message=f"Ошибка валидации запроса {request.method} {request.url.path}: {exc.details or exc.message}",
                ip_address=request.client.host if request.client else None
            )
        elif exc.status_code >= 500:
            logger.error(
                section=LogSection.API,
                subsection=LogSubsection.API.ERROR,
                message=f"Ошибка {exc.kind.value} для {request.method} {request.url.path}: {exc.message}"
            )
        else:
            logger.warning(
                section=LogSection.API,
                subsection=LogSubsection.API.ERROR,
                message=f"Ошибка {exc.kind.value} для {request.method} {request.url.path}: {exc.message}"
            )
        return error(code=exc.status_code, message=exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            section=LogSection.API,
            subsection=LogSubsection.API.ERROR,
            message=f"HTTP исключение {exc.status_code} для пути {request.url.path} (метод: {request.method}) - {exc.detail}"
        )
        return error(code=exc.status_code, message=str(exc.detail))

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            section=LogSection.SYSTEM,
            subsection=LogSubsection.SYSTEM.STARTUP,
            message="Запуск приложения"
        )
        # Подключение к MongoDB не блокирует старт: до него работает шлюз готовности
        app.state.connect_task = asyncio.create_task(state.connect())

        if settings is not None and settings.MYSQL_CREATE_TABLE:
            app.state.schema_task = asyncio.create_task(prepare_score_table(state.scores))

    @app.on_event("shutdown")
    async def shutdown_event():
        for name in ("connect_task", "schema_task"):
            task = getattr(app.state, name, None)
            if task is not None and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        await state.close()
        logger.info(
            section=LogSection.SYSTEM,
            subsection=LogSubsection.SYSTEM.SHUTDOWN,
            message="Приложение успешно завершено"
        )

    return app


def run():
    """Точка входа console script quiz-server"""
    import uvicorn

    setup_application_logging()
    settings = get_settings()
    logger.info(
        section=LogSection.SYSTEM,
        subsection=LogSubsection.SYSTEM.STARTUP,
        message=f"Сервер запускается на http://{settings.HOST}:{settings.PORT}"
    )
    uvicorn.run(
        "quiz_server.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
