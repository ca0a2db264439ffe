"""
Application-level behaviour: health check, unknown routes, CORS
"""
from fastapi.testclient import TestClient

from conftest import FakeQuestionStore, FakeScoreStore, FatalRecorder, wait_for
from quiz_server.core.config import Settings
from quiz_server.db.mysql import ScoreStore
from quiz_server.main import create_app
from quiz_server.routers.system_router import HEALTH_MESSAGE


def make_settings(**overrides):
    values = {"MONGO_URI": "mongodb://localhost:27017", "MONGO_DB_NAME": "quiz", **overrides}
    return Settings(_env_file=None, **values)


async def connect_fake():
    return FakeQuestionStore()


def test_score_store_built_from_settings():
    app = create_app(settings=make_settings(MYSQL_SCORES_TABLE="scores_test"), connect_questions=connect_fake)
    scores = app.state.quiz.scores
    assert isinstance(scores, ScoreStore)
    assert scores.table == "scores_test"


def test_table_bootstrap_runs_when_enabled():
    scores = FakeScoreStore()
    app = create_app(
        settings=make_settings(MYSQL_CREATE_TABLE=True),
        scores=scores,
        connect_questions=connect_fake,
        on_fatal=FatalRecorder(),
    )
    with TestClient(app):
        assert wait_for(lambda: scores.table_ensured)


def test_table_bootstrap_skipped_by_default(client, score_store):
    assert score_store.table_ensured is False


def test_health_is_plain_text(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == HEALTH_MESSAGE
    assert response.headers["content-type"].startswith("text/plain")


def test_unknown_route_uses_error_body(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert "error" in response.json()


def test_wrong_method(client):
    response = client.patch("/api/scores")
    assert response.status_code == 405
    assert "error" in response.json()


def test_cors_allows_any_origin(client):
    response = client.get("/api/questions", headers={"Origin": "http://example.com"})
    assert response.headers.get("access-control-allow-origin") == "*"


def test_cors_header_on_not_ready_response(pending_client):
    response = pending_client.get("/api/questions", headers={"Origin": "http://example.com"})
    assert response.status_code == 503
    assert response.headers.get("access-control-allow-origin") == "*"
