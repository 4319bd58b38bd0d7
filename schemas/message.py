from pydantic import BaseModel, Field, StrictStr


class MessageCreate(BaseModel):
    question: StrictStr = Field(..., min_length=1)
    answer: StrictStr = Field(..., min_length=1)


class MessageOut(BaseModel):
    id: int
    question: str
    answer: str
    chat_id: int = Field(serialization_alias="chatId")

    class Config:
        from_attributes = True
