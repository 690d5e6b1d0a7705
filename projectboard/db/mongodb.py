import logging
from urllib.parse import urlparse

import motor.motor_asyncio
from ..core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "projectboard"

USERS_COLLECTION = "users"
PROJECTS_COLLECTION = "projects"
COMMENTS_COLLECTION = "comments"
IMAGES_COLLECTION = "project_images"

class DataBase:
    client: motor.motor_asyncio.AsyncIOMotorClient | None = None
    db: motor.motor_asyncio.AsyncIOMotorDatabase | None = None

db = DataBase()

async def get_database() -> motor.motor_asyncio.AsyncIOMotorDatabase:
    if db.db is None:
        raise RuntimeError("Database not initialized. Call connect_to_mongo first.")
    return db.db

def database_name(connection_string: str) -> str:
    """Database name from the URL path, or the default when the path is empty."""
    name = urlparse(connection_string).path.lstrip('/')
    return name or DEFAULT_DB_NAME

async def ensure_indexes(database: motor.motor_asyncio.AsyncIOMotorDatabase):
    """Indexes the application relies on; usernames are unique."""
    await database[USERS_COLLECTION].create_index("username", unique=True)

async def connect_to_mongo():
    """Connects to MongoDB using the URL from settings."""
    connection_string = str(settings.MONGODB_URL)
    db_name = database_name(connection_string)
    logger.info("Connecting to MongoDB database %s", db_name)
    try:
        db.client = motor.motor_asyncio.AsyncIOMotorClient(connection_string)
        db.db = db.client[db_name]
        await db.client.admin.command('ping')
        await ensure_indexes(db.db)
    except Exception:
        logger.exception("Error connecting to MongoDB")
        raise
    logger.info("Successfully connected to MongoDB database: %s", db_name)

async def close_mongo_connection():
    """Closes the MongoDB connection."""
    if db.client:
        db.client.close()
        db.client = None
        db.db = None
        logger.info("MongoDB connection closed.")
