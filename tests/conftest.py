"""
Shared fixtures for quiz_server tests.

This module provides:
- In-memory question and score stores with the same interface as the real adapters
- App / TestClient fixtures with the readiness gate open or held closed
- Fake aiomysql pool/connection/cursor objects for adapter tests
"""

import asyncio
import threading
import time
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from quiz_server.core.errors import StorageError
from quiz_server.db.mongo import parse_object_id
from quiz_server.main import create_app


# =============================================================================
# In-memory stores
# =============================================================================


class FakeQuestionStore:
    """Questions kept in a dict, keyed by ObjectId like the real collection."""

    def __init__(self):
        self.documents: Dict[ObjectId, Dict[str, Any]] = {}
        self.fail = False
        self.closed = False

    def _check(self, operation: str):
        if self.fail:
            raise StorageError(operation, ConnectionError("connection reset"))

    async def list_questions(self) -> List[Dict[str, Any]]:
        self._check("list")
        return [dict(doc) for doc in self.documents.values()]

    async def create_question(self, question, options, correct_option) -> ObjectId:
        self._check("create")
        object_id = ObjectId()
        self.documents[object_id] = {
            "_id": object_id,
            "question": question,
            "options": list(options),
            "correctOption": correct_option,
        }
        return object_id

    async def update_question(self, question_id, question, options, correct_option) -> int:
        object_id = parse_object_id(question_id)
        self._check("update")
        if object_id not in self.documents:
            return 0
        self.documents[object_id].update(
            question=question, options=list(options), correctOption=correct_option
        )
        return 1

    async def delete_question(self, question_id) -> int:
        object_id = parse_object_id(question_id)
        self._check("delete")
        return 1 if self.documents.pop(object_id, None) is not None else 0

    async def close(self):
        self.closed = True


class FakeScoreStore:
    """Append-only rows; submitted_at is assigned on insert, one second apart."""

    def __init__(self):
        self.rows: List[Dict[str, Any]] = []
        self.fail = False
        self.closed = False
        self.table_ensured = False
        self._clock = datetime(2024, 1, 1, 12, 0, 0)

    async def insert_score(self, email, name, score) -> None:
        if self.fail:
            raise StorageError("insert", ConnectionError("pool exhausted"))
        self._clock += timedelta(seconds=1)
        self.rows.append({
            "id": len(self.rows) + 1,
            "email": email,
            "name": name,
            "score": score,
            "submitted_at": self._clock,
        })

    async def list_scores(self) -> List[Dict[str, Any]]:
        if self.fail:
            raise StorageError("select", ConnectionError("pool exhausted"))
        return sorted(self.rows, key=lambda row: row["submitted_at"], reverse=True)

    async def ensure_table(self) -> None:
        self.table_ensured = True

    async def close(self):
        self.closed = True


class FatalRecorder:
    def __init__(self):
        self.calls: List[BaseException] = []

    def __call__(self, exc: BaseException) -> None:
        self.calls.append(exc)


def wait_for(predicate, timeout: float = 2.0) -> bool:
    """Poll until predicate() is true; the TestClient loop runs in another thread."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


# =============================================================================
# App fixtures
# =============================================================================


@pytest.fixture
def question_store() -> FakeQuestionStore:
    return FakeQuestionStore()


@pytest.fixture
def score_store() -> FakeScoreStore:
    return FakeScoreStore()


@pytest.fixture
def fatal_recorder() -> FatalRecorder:
    return FatalRecorder()


@pytest.fixture
def connect_gate() -> threading.Event:
    """Set it to let the MongoDB connection complete."""
    return threading.Event()


@pytest.fixture
def app(question_store, score_store, fatal_recorder, connect_gate):
    async def connect():
        while not connect_gate.is_set():
            await asyncio.sleep(0.01)
        return question_store

    return create_app(scores=score_store, connect_questions=connect, on_fatal=fatal_recorder)


@pytest.fixture
def pending_client(app):
    """Client whose MongoDB connection has not completed yet."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def client(app, connect_gate):
    """Client with the readiness gate open."""
    connect_gate.set()
    with TestClient(app) as client:
        assert wait_for(lambda: app.state.quiz.ready)
        yield client


# =============================================================================
# aiomysql fakes
# =============================================================================


class FakeCursor:
    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, error: Optional[BaseException] = None):
        self.rows = rows or []
        self.error = error
        self.executed: List[tuple] = []
        self.rowcount = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def execute(self, sql, params=()):
        if self.error is not None:
            raise self.error
        self.executed.append((sql, params))
        self.rowcount = 1

    async def fetchall(self):
        return tuple(self.rows)


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.cursor_classes: List[Any] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    def cursor(self, cursor_class=None):
        self.cursor_classes.append(cursor_class)
        return self._cursor


class FakePool:
    def __init__(self, cursor: FakeCursor):
        self.cursor = cursor
        self.connection = FakeConnection(cursor)
        self.closed = False
        self.acquired = 0

    def acquire(self):
        self.acquired += 1
        return self.connection

    def close(self):
        self.closed = True

    async def wait_closed(self):
        pass
