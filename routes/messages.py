import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from core.dependencies import require_owned_chat
from core.errors import NotFoundError
from database.database import get_db
from database.repository import Repository, transaction
from models.chat import Chat
from models.messages import Message
from schemas.message import MessageCreate, MessageOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/{user_id}/chats/{chat_id}/messages", tags=["messages"])


@router.get("", response_model=List[MessageOut])
def list_chat_messages(user_id: int, chat_id: int, db: Session = Depends(get_db)):
    require_owned_chat(db, user_id, chat_id)
    return Repository(db, Message).find_by(chat_id=chat_id)


@router.post("", response_model=MessageOut, status_code=201)
def create_chat_message(user_id: int, chat_id: int, body: MessageCreate, db: Session = Depends(get_db)):
    with transaction(db):
        require_owned_chat(db, user_id, chat_id)
        message = Repository(db, Message).create(chat_id=chat_id, **body.model_dump())
    db.refresh(message)
    logger.info("Created message %s in chat %s", message.id, chat_id)
    return message


@router.delete("/{message_id}", status_code=204)
def delete_chat_message(user_id: int, chat_id: int, message_id: int, db: Session = Depends(get_db)):
    owned_chats = select(Chat.id).where(Chat.user_id == user_id)
    with transaction(db):
        affected = Repository(db, Message).delete_by(
            Message.id == message_id,
            Message.chat_id == chat_id,
            Message.chat_id.in_(owned_chats),
        )
        if affected == 0:
            raise NotFoundError("Message not found for this user's chat")
