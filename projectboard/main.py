import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from .core.config import settings
from .core.exceptions import register_exception_handlers
from .db.mongodb import close_mongo_connection, connect_to_mongo
from .routers import auth, users
from .routers.projects import build_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up...")
    await connect_to_mongo()
    yield
    logger.info("Shutting down...")
    await close_mongo_connection()

def create_app() -> FastAPI:
    app = FastAPI(title=settings.PROJECT_NAME, version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET_KEY,
        session_cookie=settings.SESSION_COOKIE,
        max_age=settings.SESSION_MAX_AGE,
    )
    register_exception_handlers(app)

    app.include_router(auth.router, prefix="/auth", tags=["Auth"])
    app.include_router(users.router, prefix="/users", tags=["Users"])
    app.include_router(build_router())

    @app.get("/")
    async def root():
        """Root endpoint providing basic info."""
        return {"message": f"Welcome to {settings.PROJECT_NAME} API"}

    return app

app = create_app()
