"""
Project routes.

The handlers below are thin wrappers over ``projectboard.services``. They are
not registered with decorators: ``ROUTES`` names the verb, the path, the
guards that must pass and the handler for every route, and ``build_router``
turns that table into an ``APIRouter``. Routes whose path carries
``{projectId}`` resolve the project before their guards run.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from fastapi import APIRouter, Depends, File, Path, UploadFile
from fastapi.responses import Response
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..core.config import settings
from ..core.guards import Guard, current_user, guard_chain, has_authorization, requires_login
from ..db.mongodb import get_database
from ..models.comment import CommentCreate, CommentDelete, CommentInDB
from ..models.image import ImageInfo
from ..models.project import ProjectCreate, ProjectInDB, ProjectUpdate
from ..models.users import UserInDB
from ..services import comments as comment_service
from ..services import images as image_service
from ..services import projects as project_service

PROJECT_PARAM = "{projectId}"

async def project_by_id(
    projectId: str = Path(..., description="The BSON ObjectId of the project as a string"),
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> dict:
    """Resolves the ``projectId`` path segment to the stored project document."""
    return await project_service.get_project(projectId, db)

# --- Projects ---

async def list_projects(db: AsyncIOMotorDatabase = Depends(get_database)):
    return await project_service.list_projects(db)

async def create_project(
    project: ProjectCreate,
    user: Optional[UserInDB] = Depends(current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Creates a project owned by the signed-in caller."""
    return await project_service.create_project(project, user.id, db)

async def read_project(
    project: dict = Depends(project_by_id),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await project_service.to_project_response(project, db)

async def update_project(
    project_update: ProjectUpdate,
    project: dict = Depends(project_by_id),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await project_service.update_project(project, project_update, db)

async def delete_project(
    project: dict = Depends(project_by_id),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await project_service.delete_project(project, db)

# --- Comments ---

async def create_comment(
    comment: CommentCreate,
    project: dict = Depends(project_by_id),
    user: Optional[UserInDB] = Depends(current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Adds a comment; the author is recorded when signed in."""
    return await comment_service.create_comment(project, comment, user.id if user else None, db)

async def list_comments(
    project: dict = Depends(project_by_id),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return await comment_service.list_comments(project, db)

async def delete_comment(
    comment: CommentDelete,
    project: dict = Depends(project_by_id),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Removes the comment named by ``_id`` in the body."""
    return await comment_service.delete_comment(project, comment.id, db)

# --- Images ---

async def store_image(
    filename: str = Path(..., min_length=1),
    file: UploadFile = File(...),
    project: dict = Depends(project_by_id),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    content = await image_service.read_upload(file, settings.MAX_IMAGE_BYTES)
    return await image_service.store_image(project, filename, content, file.content_type, db)

async def fetch_image(
    filename: str = Path(..., min_length=1),
    project: dict = Depends(project_by_id),
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> Response:
    image = await image_service.fetch_image(project, filename, db)
    return Response(
        content=bytes(image["data"]),
        media_type=image.get("contentType", image_service.DEFAULT_CONTENT_TYPE),
    )


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    endpoint: Callable
    guards: Tuple[Guard, ...] = ()
    response_model: Any = None


ROUTES: Tuple[Route, ...] = (
    Route("GET", "/projects", list_projects,
          response_model=List[ProjectInDB]),
    Route("POST", "/projects", create_project,
          guards=(requires_login,), response_model=ProjectInDB),

    Route("GET", "/projects/{projectId}", read_project,
          response_model=ProjectInDB),
    Route("PUT", "/projects/{projectId}", update_project,
          guards=(requires_login, has_authorization), response_model=ProjectInDB),
    Route("DELETE", "/projects/{projectId}", delete_project,
          guards=(requires_login, has_authorization), response_model=ProjectInDB),

    # Removal is exposed on PUT for compatibility with existing clients
    Route("POST", "/projects/{projectId}/comment", create_comment,
          response_model=CommentInDB),
    Route("GET", "/projects/{projectId}/comment", list_comments,
          response_model=List[CommentInDB]),
    Route("PUT", "/projects/{projectId}/comment", delete_comment,
          response_model=CommentInDB),

    Route("POST", "/projects/img/{projectId}/{filename}", store_image,
          response_model=ImageInfo),
    Route("GET", "/projects/img/{projectId}/{filename}", fetch_image),
)


def build_router(routes: Tuple[Route, ...] = ROUTES) -> APIRouter:
    router = APIRouter(tags=["Projects"])
    for route in routes:
        resolver = project_by_id if PROJECT_PARAM in route.path else None
        router.add_api_route(
            route.path,
            route.endpoint,
            methods=[route.method],
            response_model=route.response_model,
            dependencies=[Depends(guard_chain(route.guards, resolver))],
            name=route.endpoint.__name__,
        )
    return router
