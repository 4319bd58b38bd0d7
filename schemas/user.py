from pydantic import BaseModel, Field, StrictInt, StrictStr


class UserCreate(BaseModel):
    first_name: StrictStr = Field(..., alias="firstName", min_length=1)
    last_name: StrictStr = Field(..., alias="lastName", min_length=1)
    age: StrictInt = Field(..., ge=0)


class UserOut(BaseModel):
    id: int
    first_name: str = Field(serialization_alias="firstName")
    last_name: str = Field(serialization_alias="lastName")
    age: int

    class Config:
        from_attributes = True
