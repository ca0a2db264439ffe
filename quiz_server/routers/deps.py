# quiz_server/routers/deps.py

from typing import Optional
from fastapi import Request

from quiz_server.core.state import AppState
from quiz_server.db.mongo import QuestionStore
from quiz_server.db.mysql import ScoreStore


def get_app_state(request: Request) -> AppState:
    return request.app.state.quiz


def get_question_store(request: Request) -> QuestionStore:
    return get_app_state(request).require_questions()


def get_score_store(request: Request) -> ScoreStore:
    return get_app_state(request).scores


def client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None
