import base64
import hashlib
import hmac
import logging
import os
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from ..core.exceptions import ValidationFailed
from ..db.mongodb import USERS_COLLECTION
from ..models.users import UserCreate, UserInDB
from ..utils.dependencies import to_object_id

COLLECTION_NAME = USERS_COLLECTION
HASH_ITERATIONS = 10000
HASH_ALGORITHM = "sha256"

logger = logging.getLogger(__name__)

def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    """Returns ``pbkdf2_<alg>$<iterations>$<salt>$<hash>`` with base64 salt and hash."""
    salt = salt or os.urandom(16)
    digest = hashlib.pbkdf2_hmac(HASH_ALGORITHM, password.encode("utf-8"), salt, HASH_ITERATIONS)
    return "$".join([
        f"pbkdf2_{HASH_ALGORITHM}",
        str(HASH_ITERATIONS),
        base64.b64encode(salt).decode("ascii"),
        base64.b64encode(digest).decode("ascii"),
    ])

def verify_password(password: str, stored: str) -> bool:
    try:
        scheme, iterations, salt_b64, hash_b64 = stored.split("$")
        algorithm = scheme.split("_", 1)[1]
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(hash_b64)
        # Unknown algorithms and bad iteration counts raise ValueError too
        digest = hashlib.pbkdf2_hmac(algorithm, password.encode("utf-8"), salt, int(iterations))
    except (ValueError, IndexError, AttributeError):
        return False
    return hmac.compare_digest(digest, expected)

async def create_user(user_data: UserCreate, db: AsyncIOMotorDatabase) -> UserInDB:
    collection = db[COLLECTION_NAME]
    if await collection.find_one({"username": user_data.username}):
        raise ValidationFailed("Username already exists")

    user_dict = user_data.model_dump(exclude={"password"})
    user_dict["email"] = str(user_dict["email"])
    user_dict["displayName"] = f"{user_data.firstName} {user_data.lastName}".strip()
    user_dict["provider"] = "local"
    user_dict["password"] = hash_password(user_data.password)
    user_dict["created"] = datetime.now(timezone.utc)

    try:
        result = await collection.insert_one(user_dict)
    except DuplicateKeyError:
        # A concurrent signup took the name between the lookup and the insert
        raise ValidationFailed("Username already exists")
    created_user = await collection.find_one({"_id": result.inserted_id})
    logger.info("Created user %s (%s)", user_data.username, result.inserted_id)
    return UserInDB.model_validate(created_user)

async def authenticate(username: str, password: str, db: AsyncIOMotorDatabase) -> Optional[UserInDB]:
    user = await db[COLLECTION_NAME].find_one({"username": username})
    if not user or not verify_password(password, user.get("password", "")):
        logger.warning("Failed sign-in attempt for username=%s", username)
        return None
    return UserInDB.model_validate(user)

async def get_user_by_id(user_id, db: AsyncIOMotorDatabase) -> Optional[UserInDB]:
    oid = to_object_id(user_id)
    if oid is None:
        return None
    user = await db[COLLECTION_NAME].find_one({"_id": oid})
    if user:
        return UserInDB.model_validate(user)
    return None

async def get_user_refs(user_ids, db: AsyncIOMotorDatabase) -> dict[ObjectId, dict]:
    """Maps each user id to its ``{_id, displayName}`` reference."""
    ids = list({uid for uid in user_ids if uid is not None})
    if not ids:
        return {}
    cursor = db[COLLECTION_NAME].find({"_id": {"$in": ids}}, {"displayName": 1})
    users = await cursor.to_list(length=None)
    return {user["_id"]: {"_id": user["_id"], "displayName": user.get("displayName", "")} for user in users}

async def populate_user(documents: list[dict], db: AsyncIOMotorDatabase) -> list[dict]:
    """Replaces the ``user`` id of each document with the owner reference."""
    refs = await get_user_refs((doc.get("user") for doc in documents), db)
    for doc in documents:
        owner = doc.get("user")
        if owner is not None:
            doc["user"] = refs.get(owner, {"_id": owner})
    return documents
