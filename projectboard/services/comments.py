import logging
from datetime import datetime, timezone
from typing import List

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..core.exceptions import NotFound, ValidationFailed
from ..db.mongodb import COMMENTS_COLLECTION
from ..models.comment import CommentCreate, CommentInDB
from . import users as user_service

COLLECTION_NAME = COMMENTS_COLLECTION
CONTENT_REQUIRED = "Please fill Comment content"

logger = logging.getLogger(__name__)

async def create_comment(project: dict, comment: CommentCreate, author_id, db: AsyncIOMotorDatabase) -> CommentInDB:
    """Adds a comment to the project; ``author_id`` is None for anonymous comments."""
    if not comment.content:
        raise ValidationFailed(CONTENT_REQUIRED)

    comment_dict = {
        "project": project["_id"],
        "content": comment.content,
        "user": ObjectId(author_id) if author_id else None,
        "created": datetime.now(timezone.utc),
    }
    insert_result = await db[COLLECTION_NAME].insert_one(comment_dict)
    created_comment = await db[COLLECTION_NAME].find_one({"_id": insert_result.inserted_id})
    logger.info("Comment %s added to project %s", insert_result.inserted_id, project["_id"])
    populated = await user_service.populate_user([created_comment], db)
    return CommentInDB(**populated[0])

async def list_comments(project: dict, db: AsyncIOMotorDatabase) -> List[CommentInDB]:
    comments = await db[COLLECTION_NAME].find(
        {"project": project["_id"]}, sort=[("_id", 1)]
    ).to_list(length=None)
    comments = await user_service.populate_user(comments, db)
    return [CommentInDB(**c) for c in comments]

async def delete_comment(project: dict, comment_id, db: AsyncIOMotorDatabase) -> CommentInDB:
    """Removes one comment of the project."""
    removed = await db[COLLECTION_NAME].find_one_and_delete(
        {"_id": ObjectId(comment_id), "project": project["_id"]}
    )
    if not removed:
        raise NotFound("Comment not found")
    logger.info("Comment %s removed from project %s", removed["_id"], project["_id"])
    populated = await user_service.populate_user([removed], db)
    return CommentInDB(**populated[0])
