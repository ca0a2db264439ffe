# quiz_server/routers/scores_router.py

from fastapi import APIRouter, Depends, Request

from quiz_server.core.errors import StorageError
from quiz_server.core.response import error, message, success
from quiz_server.core.validation import read_payload
from quiz_server.db.mysql import ScoreStore
from quiz_server.logging import get_logger, LogSection, LogSubsection
from quiz_server.routers.deps import client_ip, get_score_store
from quiz_server.schemas import ScoreSubmission

router = APIRouter()

logger = get_logger(__name__)


@router.post("/submit")
async def submit_score(request: Request, store: ScoreStore = Depends(get_score_store)):
    submission = await read_payload(request, ScoreSubmission, "Invalid data")
    try:
        await store.insert_score(submission.email, submission.name, submission.score)
    except StorageError as e:
        logger.error(
            section=LogSection.SCORES,
            subsection=LogSubsection.SCORES.SUBMIT,
            message=f"Ошибка сохранения результата {submission.email}: {e}",
            ip_address=client_ip(request)
        )
        return error(500, "Failed to save score")

    logger.info(
        section=LogSection.SCORES,
        subsection=LogSubsection.SCORES.SUBMIT,
        message=f"Сохранён результат {submission.email}: {submission.score}",
        ip_address=client_ip(request)
    )
    return message("Score submitted")


@router.get("/scores")
async def list_scores(request: Request, store: ScoreStore = Depends(get_score_store)):
    try:
        scores = await store.list_scores()
    except StorageError as e:
        logger.error(
            section=LogSection.SCORES,
            subsection=LogSubsection.SCORES.LIST,
            message=f"Ошибка получения результатов: {e}",
            ip_address=client_ip(request)
        )
        # Здесь поле message, а не error
        return error(500, "Database error", field="message")
    return success(scores)
