from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, StrictStr

from schemas.message import MessageOut


class ChatCreate(BaseModel):
    title: StrictStr = Field(..., min_length=1)


class ChatOut(BaseModel):
    id: int
    title: Optional[str] = None
    created_at: datetime
    user_id: int = Field(serialization_alias="userId")

    class Config:
        from_attributes = True


class ChatDetailOut(ChatOut):
    messages: List[MessageOut] = []


class ListMeta(BaseModel):
    total: int


class ChatListOut(BaseModel):
    """List envelope; ``total`` is simply the number of rows returned."""
    data: List[ChatOut]
    meta: ListMeta
