from typing import Iterable

from sqlalchemy.orm import Session

from core.errors import NotFoundError
from database.repository import Repository
from models.chat import Chat
from models.user import User


def require_user(db: Session, user_id: int) -> User:
    user = Repository(db, User).find_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def require_owned_chat(db: Session, user_id: int, chat_id: int, relations: Iterable[str] = ()) -> Chat:
    """Chat ``chat_id`` if it belongs to ``user_id``; one 404 covers both misses."""
    chat = Repository(db, Chat).find_one_by(
        Chat.id == chat_id,
        Chat.user_id == user_id,
        relations=relations,
    )
    if not chat:
        raise NotFoundError("Chat or User not found")
    return chat
