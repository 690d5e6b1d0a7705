"""
Project persistence.

Plain functions over the Motor database; the route handlers in
``projectboard.routers.projects`` resolve the caller and the project and
have run the guards before any of these are called.
"""

import logging
from datetime import datetime, timezone
from typing import List

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from ..core.exceptions import NotFound, ValidationFailed
from ..db.mongodb import COMMENTS_COLLECTION, IMAGES_COLLECTION, PROJECTS_COLLECTION
from ..models.project import ProjectCreate, ProjectInDB, ProjectUpdate
from ..utils.dependencies import to_object_id
from . import users as user_service

COLLECTION_NAME = PROJECTS_COLLECTION
TITLE_REQUIRED = "Please fill Project name"

logger = logging.getLogger(__name__)

async def get_project(project_id: str, db: AsyncIOMotorDatabase) -> dict:
    """The stored project document for ``project_id``."""
    oid = to_object_id(project_id)
    if oid is None:
        raise NotFound("Project is invalid")
    project = await db[COLLECTION_NAME].find_one({"_id": oid})
    if not project:
        raise NotFound("Project not found")
    return project

async def to_project_response(project: dict, db: AsyncIOMotorDatabase) -> ProjectInDB:
    populated = await user_service.populate_user([dict(project)], db)
    return ProjectInDB(**populated[0])

async def list_projects(db: AsyncIOMotorDatabase) -> List[ProjectInDB]:
    """Every project in insertion order with its owner populated."""
    projects = await db[COLLECTION_NAME].find({}, sort=[("_id", 1)]).to_list(length=None)
    projects = await user_service.populate_user(projects, db)
    return [ProjectInDB(**p) for p in projects]

async def create_project(project: ProjectCreate, owner_id, db: AsyncIOMotorDatabase) -> ProjectInDB:
    if not project.title:
        raise ValidationFailed(TITLE_REQUIRED)

    project_dict = {field: ("" if value is None else value) for field, value in project.model_dump().items()}
    project_dict["created"] = datetime.now(timezone.utc)
    project_dict["user"] = ObjectId(owner_id)

    insert_result = await db[COLLECTION_NAME].insert_one(project_dict)
    created_project = await db[COLLECTION_NAME].find_one({"_id": insert_result.inserted_id})
    logger.info("User %s created project %s", owner_id, insert_result.inserted_id)
    return await to_project_response(created_project, db)

async def update_project(project: dict, project_update: ProjectUpdate, db: AsyncIOMotorDatabase) -> ProjectInDB:
    """Applies the fields present in ``project_update``."""
    project_dict = project_update.model_dump(exclude_unset=True)
    if "title" in project_dict and not project_dict["title"]:
        raise ValidationFailed(TITLE_REQUIRED)
    project_dict = {field: ("" if value is None else value) for field, value in project_dict.items()}

    if not project_dict:
        return await to_project_response(project, db)

    updated_project = await db[COLLECTION_NAME].find_one_and_update(
        {"_id": project["_id"]},
        {"$set": project_dict},
        return_document=ReturnDocument.AFTER
    )
    if not updated_project:
        raise NotFound("Project not found")
    logger.info("Updated project %s fields=%s", project["_id"], sorted(project_dict))
    return await to_project_response(updated_project, db)

async def delete_project(project: dict, db: AsyncIOMotorDatabase) -> ProjectInDB:
    """Removes a project together with its comments and images."""
    delete_result = await db[COLLECTION_NAME].delete_one({"_id": project["_id"]})
    if delete_result.deleted_count == 0:
        raise NotFound("Project not found")
    await db[COMMENTS_COLLECTION].delete_many({"project": project["_id"]})
    await db[IMAGES_COLLECTION].delete_many({"project": project["_id"]})
    logger.info("Deleted project %s", project["_id"])
    return await to_project_response(project, db)
