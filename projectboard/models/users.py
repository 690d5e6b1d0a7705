from pydantic import BaseModel, Field, EmailStr
from typing import Optional
from datetime import datetime
from .base import PyObjectId, common_config

class UserBase(BaseModel):
    firstName: str = ""
    lastName: str = ""
    email: EmailStr
    username: str = Field(..., min_length=1)

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)

class UserCredentials(BaseModel):
    username: str
    password: str

class UserInDB(UserBase):
    """Public view of a user; the password hash never leaves the service."""
    id: PyObjectId = Field(alias="_id")
    displayName: str = ""
    provider: str = "local"
    created: Optional[datetime] = None
    model_config = common_config
