# quiz_server/routers/questions_router.py

from fastapi import APIRouter, Depends, Request

from quiz_server.core.errors import StorageError
from quiz_server.core.response import error, message, success
from quiz_server.core.validation import read_payload
from quiz_server.db.mongo import QuestionStore
from quiz_server.logging import get_logger, LogSection, LogSubsection
from quiz_server.routers.deps import client_ip, get_question_store
from quiz_server.schemas import QuestionPayload

router = APIRouter()

logger = get_logger(__name__)


@router.get("/questions")
async def list_questions(request: Request, store: QuestionStore = Depends(get_question_store)):
    try:
        questions = await store.list_questions()
    except StorageError as e:
        logger.error(
            section=LogSection.QUESTIONS,
            subsection=LogSubsection.QUESTIONS.LIST,
            message=f"Ошибка получения списка вопросов: {e}",
            ip_address=client_ip(request)
        )
        return error(500, "Failed to fetch questions")
    return success(questions)


@router.post("/questions")
async def create_question(request: Request, store: QuestionStore = Depends(get_question_store)):
    payload = await read_payload(request, QuestionPayload, "Invalid question data")
    try:
        inserted_id = await store.create_question(payload.question, payload.options, payload.correct_option)
    except StorageError as e:
        logger.error(
            section=LogSection.QUESTIONS,
            subsection=LogSubsection.QUESTIONS.CREATE,
            message=f"Ошибка добавления вопроса: {e}",
            ip_address=client_ip(request)
        )
        return error(500, "Failed to add question")

    logger.info(
        section=LogSection.QUESTIONS,
        subsection=LogSubsection.QUESTIONS.CREATE,
        message=f"Добавлен вопрос {inserted_id}",
        ip_address=client_ip(request)
    )
    return message("Question added", id=inserted_id)


@router.put("/questions/{question_id}")
async def update_question(question_id: str, request: Request, store: QuestionStore = Depends(get_question_store)):
    payload = await read_payload(request, QuestionPayload, "Invalid update data")
    try:
        matched = await store.update_question(question_id, payload.question, payload.options, payload.correct_option)
    except StorageError as e:
        logger.error(
            section=LogSection.QUESTIONS,
            subsection=LogSubsection.QUESTIONS.UPDATE,
            message=f"Ошибка обновления вопроса {question_id}: {e}",
            ip_address=client_ip(request)
        )
        return error(500, "Failed to update question")

    if not matched:
        # Ответ всё равно успешный, как и раньше
        logger.warning(
            section=LogSection.QUESTIONS,
            subsection=LogSubsection.QUESTIONS.NOT_MATCHED,
            message=f"Обновление: вопрос {question_id} не найден",
            ip_address=client_ip(request)
        )
    return message("Question updated")


@router.delete("/questions/{question_id}")
async def delete_question(question_id: str, request: Request, store: QuestionStore = Depends(get_question_store)):
    try:
        deleted = await store.delete_question(question_id)
    except StorageError as e:
        logger.error(
            section=LogSection.QUESTIONS,
            subsection=LogSubsection.QUESTIONS.DELETE,
            message=f"Ошибка удаления вопроса {question_id}: {e}",
            ip_address=client_ip(request)
        )
        return error(500, "Failed to delete question")

    if not deleted:
        logger.warning(
            section=LogSection.QUESTIONS,
            subsection=LogSubsection.QUESTIONS.NOT_MATCHED,
            message=f"Удаление: вопрос {question_id} не найден",
            ip_address=client_ip(request)
        )
    return message("Question deleted")
