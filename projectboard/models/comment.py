from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from .base import PyObjectId, UserRef, common_config

class CommentCreate(BaseModel):
    content: Optional[str] = None

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, value):
        return value.strip() if isinstance(value, str) else value

class CommentDelete(BaseModel):
    """Body of the comment removal request: the id of the comment to drop."""
    id: PyObjectId = Field(alias="_id")
    model_config = common_config

class CommentInDB(BaseModel):
    id: PyObjectId = Field(alias="_id")
    project: PyObjectId
    content: str
    user: Optional[UserRef] = None
    created: datetime
    model_config = common_config
