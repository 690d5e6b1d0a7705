from typing import Optional

from fastapi import APIRouter, Depends

from ..core.guards import current_user
from ..models.users import UserInDB

router = APIRouter()

@router.get("/me", response_model=Optional[UserInDB])
async def read_current_user(user: Optional[UserInDB] = Depends(current_user)):
    """Returns the signed-in user, or null without a session."""
    return user
