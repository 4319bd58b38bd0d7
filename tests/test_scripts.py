import pytest

from database.database import Database
from database.migrations import current_version
from database.repository import Repository
from models.messages import Message
from scripts import migrate
from scripts.create_chat import EXAMPLE_MESSAGES, create_chat_with_messages
from scripts.create_user import create_user


def test_migrate_script_upgrades_file_database(tmp_path, monkeypatch, clear_settings_cache, capsys):
    url = f"sqlite:///{tmp_path / 'chat_store.db'}"
    monkeypatch.setenv("DATABASE_URL", url)

    assert migrate.main(["--status"]) == 0
    assert "pending 1" in capsys.readouterr().out

    assert migrate.main([]) == 0

    db = Database(url)
    try:
        assert current_version(db.engine) == 1
    finally:
        db.dispose()


def test_seed_scripts(session):
    user = create_user(session, "Ada", "Lovelace", 36)
    chat = create_chat_with_messages(session, user.id, title="Seeded")

    assert chat.title == "Seeded"
    assert len(Repository(session, Message).find_by(chat_id=chat.id)) == len(EXAMPLE_MESSAGES)


def test_create_user_script_rejects_negative_age(session):
    with pytest.raises(ValueError):
        create_user(session, "A", "B", -1)
