import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from core.dependencies import require_user
from core.errors import NotFoundError
from database.database import get_db
from database.repository import Repository, transaction
from models.chat import Chat
from models.messages import Message
from models.user import User
from schemas.user import UserCreate, UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserOut])
def list_users(db: Session = Depends(get_db)):
    return Repository(db, User).find_all()


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return require_user(db, user_id)


@router.post("", response_model=UserOut, status_code=201)
def create_user(body: UserCreate, db: Session = Depends(get_db)):
    with transaction(db):
        user = Repository(db, User).create(**body.model_dump())
    db.refresh(user)
    logger.info("Created user %s", user.id)
    return user


@router.delete("/{user_id}", status_code=204)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    """Delete a user together with every chat and message they own."""
    with transaction(db):
        owned_chats = select(Chat.id).where(Chat.user_id == user_id)
        messages = Repository(db, Message).delete_by(Message.chat_id.in_(owned_chats))
        chats = Repository(db, Chat).delete_by(user_id=user_id)
        if Repository(db, User).delete_by_id(user_id) == 0:
            raise NotFoundError("User not found")
    logger.info("Deleted user %s (%s chats, %s messages)", user_id, chats, messages)
