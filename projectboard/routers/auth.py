import logging

from fastapi import APIRouter, Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..core.exceptions import ValidationFailed
from ..core.guards import SESSION_USER_KEY
from ..db.mongodb import get_database
from ..models.users import UserCreate, UserCredentials, UserInDB
from ..services import users as user_service

router = APIRouter()

logger = logging.getLogger(__name__)

@router.post("/signup", response_model=UserInDB)
async def signup(
    user: UserCreate,
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Registers a local user and signs them in."""
    created_user = await user_service.create_user(user, db)
    request.session[SESSION_USER_KEY] = str(created_user.id)
    return created_user

@router.post("/signin", response_model=UserInDB)
async def signin(
    credentials: UserCredentials,
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Checks the credentials and stores the user id in the session."""
    user = await user_service.authenticate(credentials.username, credentials.password, db)
    if user is None:
        raise ValidationFailed("Unknown user or invalid password")
    request.session[SESSION_USER_KEY] = str(user.id)
    logger.info("User %s signed in", user.username)
    return user

@router.get("/signout")
async def signout(request: Request):
    request.session.clear()
    return {"message": "Signed out"}
