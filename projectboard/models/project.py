from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from .base import PyObjectId, UserRef, common_config

class ProjectBase(BaseModel):
    description: Optional[str] = ""
    industry: Optional[str] = ""
    tags: Optional[str] = ""
    location: Optional[str] = ""
    referred: Optional[str] = ""

class ProjectCreate(ProjectBase):
    # Emptiness is reported by the handler with its own message, not by pydantic
    title: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value

class ProjectUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    industry: Optional[str] = None
    tags: Optional[str] = None
    location: Optional[str] = None
    referred: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value

class ProjectInDB(ProjectBase):
    id: PyObjectId = Field(alias="_id")
    title: str
    created: datetime
    user: Optional[UserRef] = None
    model_config = common_config
