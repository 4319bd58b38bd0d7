import asyncio
import time

from fastapi.testclient import TestClient
from sqlalchemy import func, select, text
from sqlalchemy.exc import OperationalError

from core.config import Settings
from database.repository import Repository
from main import create_app
from models.user import User


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_unhandled_error_is_generic_500(app, monkeypatch):
    def boom(self):
        raise RuntimeError("boom")

    monkeypatch.setattr(Repository, "find_all", boom)

    with TestClient(app, raise_server_exceptions=False) as client:
        resp = client.get("/users")

    assert resp.status_code == 500
    assert resp.json() == {"message": "Something went wrong!", "error": "boom"}


def test_database_failure_is_500_with_error_payload(client, session, make_user, make_chat):
    user = make_user()
    chat = make_chat(user["id"])
    session.execute(text("DROP TABLE message"))

    resp = client.get(f"/users/{user['id']}/chats/{chat['id']}/messages")

    assert resp.status_code == 500
    body = resp.json()
    assert body["message"].startswith("Error during")
    assert "error" in body


def test_slow_request_times_out(database):
    settings = Settings()
    settings.request_timeout_seconds = 0.05
    app = create_app(database=database, settings=settings)

    @app.get("/slow")
    async def slow():
        await asyncio.sleep(0.5)
        return {"done": True}

    with TestClient(app) as client:
        resp = client.get("/slow")

    assert resp.status_code == 504
    assert resp.json() == {"message": "Request timed out"}


def test_slow_write_is_rolled_back_not_committed(database, session, monkeypatch):
    settings = Settings()
    settings.request_timeout_seconds = 0.05
    app = create_app(database=database, settings=settings)
    original_create = Repository.create

    def slow_create(self, **fields):
        time.sleep(0.3)
        return original_create(self, **fields)

    monkeypatch.setattr(Repository, "create", slow_create)

    with TestClient(app) as client:
        resp = client.post("/users", json={"firstName": "Late", "lastName": "Writer", "age": 30})

    assert resp.status_code == 504
    assert resp.json() == {"message": "Request timed out"}
    assert session.scalar(select(func.count()).select_from(User)) == 0


def test_write_within_deadline_commits(database, session):
    settings = Settings()
    settings.request_timeout_seconds = 5
    app = create_app(database=database, settings=settings)

    with TestClient(app) as client:
        resp = client.post("/users", json={"firstName": "On", "lastName": "Time", "age": 30})

    assert resp.status_code == 201
    assert session.scalar(select(func.count()).select_from(User)) == 1


def test_unhandled_error_keeps_cors_headers(app, monkeypatch):
    def boom(self):
        raise RuntimeError("boom")

    monkeypatch.setattr(Repository, "find_all", boom)

    with TestClient(app) as client:
        resp = client.get("/users", headers={"Origin": "http://frontend.test"})

    assert resp.status_code == 500
    assert resp.json() == {"message": "Something went wrong!", "error": "boom"}
    assert "access-control-allow-origin" in resp.headers


def test_raw_database_error_uses_persistence_error_body(app, monkeypatch):
    def gone_away(self):
        raise OperationalError("SELECT 1", {}, Exception("server has gone away"))

    monkeypatch.setattr(Repository, "find_all", gone_away)

    with TestClient(app) as client:
        resp = client.get("/users", headers={"Origin": "http://frontend.test"})

    assert resp.status_code == 500
    assert resp.json() == {"message": "Database error", "error": "server has gone away"}
    assert "access-control-allow-origin" in resp.headers
