"""
Application error hierarchy.

Every error carries a human readable ``message`` and the HTTP status it maps
to. Handlers registered in ``projectboard.main`` render them as
``{"message": ...}`` JSON bodies.

    ProjectBoardError
    ├── ValidationFailed   → 400
    ├── Unauthenticated    → 401
    ├── Forbidden          → 403
    ├── NotFound           → 404
    └── PayloadTooLarge    → 413
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ProjectBoardError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(ProjectBoardError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthenticated(ProjectBoardError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "User is not logged in"


class Forbidden(ProjectBoardError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "User is not authorized"


class NotFound(ProjectBoardError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class PayloadTooLarge(ProjectBoardError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    default_message = "Uploaded file is too large"


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{loc}: {error.get('msg')}" if loc else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as ``{"message": ...}``."""

    @app.exception_handler(ProjectBoardError)
    async def handle_app_error(request: Request, exc: ProjectBoardError):
        level = logging.INFO if isinstance(exc, NotFound) else logging.WARNING
        logger.log(level, "%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = _format_validation_errors(exc)
        logger.warning("%s %s -> 400: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )
