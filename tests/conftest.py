import pytest
from fastapi.testclient import TestClient

from core.config import get_settings
from database.database import Database
from database.migrations import upgrade
from main import create_app


@pytest.fixture
def database():
    db = Database("sqlite://")
    upgrade(db.engine)
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    db = database.session()
    yield db
    db.close()


@pytest.fixture
def app(database):
    return create_app(database=database)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_user(client):
    def _make(first_name="Ada", last_name="Lovelace", age=36):
        resp = client.post("/users", json={"firstName": first_name, "lastName": last_name, "age": age})
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make


@pytest.fixture
def make_chat(client):
    def _make(user_id, title="First chat"):
        resp = client.post(f"/users/{user_id}/chats", json={"title": title})
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make


@pytest.fixture
def make_message(client):
    def _make(user_id, chat_id, question="Why?", answer="Because."):
        resp = client.post(
            f"/users/{user_id}/chats/{chat_id}/messages",
            json={"question": question, "answer": answer},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make
