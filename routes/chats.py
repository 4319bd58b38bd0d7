import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.dependencies import require_owned_chat, require_user
from core.errors import NotFoundError
from database.database import get_db
from database.repository import Repository, transaction
from models.chat import Chat
from models.messages import Message
from models.user import User
from schemas.chat import ChatCreate, ChatDetailOut, ChatListOut, ChatOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/{user_id}/chats", tags=["chats"])


@router.get("", response_model=ChatListOut)
def list_user_chats(user_id: int, db: Session = Depends(get_db)):
    if not Repository(db, User).find_by_id(user_id):
        raise NotFoundError("No chats found for this user")
    chats = Repository(db, Chat).find_by(user_id=user_id)
    return {"data": chats, "meta": {"total": len(chats)}}


@router.post("", response_model=ChatOut, status_code=201)
def create_user_chat(user_id: int, body: ChatCreate, db: Session = Depends(get_db)):
    with transaction(db):
        require_user(db, user_id)
        chat = Repository(db, Chat).create(
            user_id=user_id,
            title=body.title,
            created_at=datetime.utcnow(),
        )
    db.refresh(chat)
    logger.info("Created chat %s for user %s", chat.id, user_id)
    return chat


@router.get("/{chat_id}", response_model=ChatDetailOut)
def get_user_chat(user_id: int, chat_id: int, db: Session = Depends(get_db)):
    return require_owned_chat(db, user_id, chat_id, relations=["messages"])


@router.delete("/{chat_id}", status_code=204)
def delete_user_chat(user_id: int, chat_id: int, db: Session = Depends(get_db)):
    # messages first; both deletes commit or neither does
    with transaction(db):
        require_owned_chat(db, user_id, chat_id)
        messages = Repository(db, Message).delete_by(chat_id=chat_id)
        Repository(db, Chat).delete_by_id(chat_id)
    logger.info("Deleted chat %s of user %s (%s messages)", chat_id, user_id, messages)
