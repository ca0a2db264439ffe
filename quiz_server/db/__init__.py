from .mongo import QuestionStore, parse_object_id
from .mysql import MySQLConfig, ScoreStore

__all__ = ["QuestionStore", "parse_object_id", "MySQLConfig", "ScoreStore"]
