from models.base import Base
from models.user import User
from models.chat import Chat
from models.messages import Message

__all__ = ["Base", "User", "Chat", "Message"]
