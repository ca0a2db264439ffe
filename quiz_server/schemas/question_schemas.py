from typing import Any, Dict, List, Union
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator


class QuestionPayload(BaseModel):
    """Тело POST /api/questions и PUT /api/questions/{id}"""

    model_config = ConfigDict(populate_by_name=True)

    question: StrictStr = Field(..., min_length=1)
    options: List[StrictStr] = Field(..., min_length=1)
    # Вариант ответа (текст) или его номер; пустая строка и 0 не принимаются
    correct_option: Union[StrictStr, StrictInt] = Field(..., alias="correctOption")

    @field_validator("correct_option")
    @classmethod
    def validate_correct_option(cls, value):
        if isinstance(value, str) and not value:
            raise ValueError("Правильный вариант не может быть пустым")
        if isinstance(value, int) and value == 0:
            raise ValueError("Правильный вариант не может быть нулём")
        return value

    def to_document(self) -> Dict[str, Any]:
        """Поля документа в коллекции questions"""
        return {
            "question": self.question,
            "options": list(self.options),
            "correctOption": self.correct_option,
        }
