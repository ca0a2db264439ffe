# quiz_server/db/mongo.py

from typing import Any, Dict, List, Optional
from bson import ObjectId
from bson.errors import BSONError, InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from quiz_server.core.errors import FatalStartupError, StorageError
from quiz_server.logging import get_logger, LogSection, LogSubsection

logger = get_logger("db.mongo")

# Ошибки драйвера и BSON-кодирования, которые превращаются в StorageError
DRIVER_ERRORS = (PyMongoError, BSONError, OverflowError)


def parse_object_id(question_id: str) -> ObjectId:
    # ObjectId(None) сгенерировал бы новый идентификатор
    if not isinstance(question_id, str):
        raise StorageError(f"некорректный идентификатор вопроса: {question_id!r}")
    try:
        return ObjectId(question_id)
    except (InvalidId, TypeError) as e:
        raise StorageError("некорректный идентификатор вопроса", e) from e


class QuestionStore:
    """
    Вопросы в коллекции MongoDB через одно общее подключение.

    Автоматического переподключения нет: упавшее соединение проявится
    как StorageError на следующей операции.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        collection_name: str = "questions",
        client: Optional[AsyncIOMotorClient] = None
    ):
        self.db = db
        self.collection = db[collection_name]
        self._client = client

    @classmethod
    async def connect(
        cls,
        uri: str,
        db_name: str,
        collection_name: str = "questions",
        timeout_ms: int = 30000
    ) -> "QuestionStore":
        """Создаёт клиент и проверяет соединение через ping"""
        client = None
        try:
            client = AsyncIOMotorClient(uri, serverSelectionTimeoutMS=timeout_ms)
            await client.admin.command("ping")
        except (PyMongoError, ValueError, TypeError) as e:
            if client is not None:
                client.close()
            raise FatalStartupError(f"MongoDB недоступна: {e}") from e

        logger.info(
            section=LogSection.DATABASE,
            subsection=LogSubsection.DATABASE.CONNECTION,
            message=f"Подключение к MongoDB установлено (база {db_name})"
        )
        return cls(client[db_name], collection_name=collection_name, client=client)

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
            logger.info(
                section=LogSection.DATABASE,
                subsection=LogSubsection.DATABASE.DISCONNECTION,
                message="Подключение к MongoDB закрыто"
            )

    async def list_questions(self) -> List[Dict[str, Any]]:
        try:
            return await self.collection.find({}).to_list(length=None)
        except DRIVER_ERRORS as e:
            raise StorageError("ошибка чтения вопросов", e) from e

    async def create_question(self, question: str, options: List[str], correct_option: Any) -> ObjectId:
        document = {
            "question": question,
            "options": options,
            "correctOption": correct_option,
        }
        try:
            result = await self.collection.insert_one(document)
        except DRIVER_ERRORS as e:
            raise StorageError("ошибка добавления вопроса", e) from e
        return result.inserted_id

    async def update_question(self, question_id: str, question: str, options: List[str], correct_option: Any) -> int:
        """
        Перезаписывает все три поля вопроса.

        Если документ не найден, это не ошибка: возвращается matched_count == 0.
        """
        object_id = parse_object_id(question_id)
        try:
            result = await self.collection.update_one(
                {"_id": object_id},
                {"$set": {
                    "question": question,
                    "options": options,
                    "correctOption": correct_option,
                }}
            )
        except DRIVER_ERRORS as e:
            raise StorageError("ошибка обновления вопроса", e) from e
        return result.matched_count

    async def delete_question(self, question_id: str) -> int:
        """Удаляет вопрос; отсутствие документа тоже успех (deleted_count == 0)"""
        object_id = parse_object_id(question_id)
        try:
            result = await self.collection.delete_one({"_id": object_id})
        except DRIVER_ERRORS as e:
            raise StorageError("ошибка удаления вопроса", e) from e
        return result.deleted_count
