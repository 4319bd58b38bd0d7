from sqlalchemy import Column, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from models.base import Base


class Message(Base):
    __tablename__ = "message"

    id       = Column(Integer, primary_key=True, index=True)
    chat_id  = Column(Integer, ForeignKey("chat.id"), nullable=False, index=True)
    question = Column(Text, nullable=False)
    answer   = Column(Text, nullable=False)

    chat = relationship("Chat", back_populates="messages", lazy="raise")
