import math
from typing import Union
from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr, field_validator


class ScoreSubmission(BaseModel):
    """Тело POST /api/submit"""

    email: StrictStr = Field(..., min_length=1)
    name: StrictStr = Field(..., min_length=1)
    # Только JSON-число: строка "95" и true/false отклоняются
    score: Union[StrictInt, StrictFloat]

    @field_validator("score")
    @classmethod
    def validate_score(cls, value):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError("Результат должен быть конечным числом")
        return value
