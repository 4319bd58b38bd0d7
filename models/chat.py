from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from models.base import Base


class Chat(Base):
    __tablename__ = "chat"

    id         = Column(Integer, primary_key=True, index=True)
    user_id    = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    title      = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False)

    user     = relationship("User", back_populates="chats", lazy="raise")
    messages = relationship("Message", back_populates="chat", lazy="raise",
                            order_by="Message.id")

from models.messages import Message  # noqa: E402,F401
