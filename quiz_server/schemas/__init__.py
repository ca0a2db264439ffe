from .question_schemas import QuestionPayload
from .score_schemas import ScoreSubmission

__all__ = ["QuestionPayload", "ScoreSubmission"]
