# scripts/create_chat.py

import sys
import os
import argparse
from datetime import datetime

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from core.config import get_settings
from core.dependencies import require_user
from database.database import Database
from database.repository import Repository, transaction
from models.chat import Chat
from models.messages import Message


EXAMPLE_MESSAGES = [
    {
        "question": "What is the capital of Italy?",
        "answer": "The capital of Italy is Rome.",
    },
    {
        "question": "And how many people live there?",
        "answer": "Roughly 2.8 million people live in the city of Rome.",
    },
]


def create_chat_with_messages(db, user_id: int, title: str = "Sample chat") -> Chat:
    with transaction(db):
        require_user(db, user_id)
        chat = Repository(db, Chat).create(
            user_id=user_id,
            title=title,
            created_at=datetime.utcnow(),
        )
        messages = Repository(db, Message)
        for msg in EXAMPLE_MESSAGES:
            messages.create(chat_id=chat.id, question=msg["question"], answer=msg["answer"])
    db.refresh(chat)
    return chat


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("user_id", type=int)
    parser.add_argument("--title", default="Sample chat")
    args = parser.parse_args()

    database = Database(get_settings().database_url)
    session = database.session()
    try:
        chat = create_chat_with_messages(session, args.user_id, args.title)
        print(f"✅ Chat {chat.id} created for user {args.user_id} with {len(EXAMPLE_MESSAGES)} messages")
    finally:
        session.close()
        database.dispose()
