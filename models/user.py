from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from models.base import Base


class User(Base):
    __tablename__ = "user"

    id         = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(255), nullable=False)
    last_name  = Column(String(255), nullable=False)
    age        = Column(Integer, nullable=False)

    # no ORM cascade: owned chats are removed explicitly by the routes
    chats = relationship("Chat", back_populates="user", lazy="raise")
