"""
Project image attachments.

Images are stored in MongoDB, one document per ``(project, filename)``, with
the raw bytes in a BSON binary field. Uploading under an existing key
replaces the previous image.
"""

import logging
import mimetypes
from datetime import datetime, timezone

from bson import Binary
from fastapi import UploadFile
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..core.exceptions import NotFound, PayloadTooLarge, ValidationFailed
from ..db.mongodb import IMAGES_COLLECTION
from ..models.image import ImageInfo

COLLECTION_NAME = IMAGES_COLLECTION
DEFAULT_CONTENT_TYPE = "application/octet-stream"

logger = logging.getLogger(__name__)

def guess_content_type(filename: str, declared: str | None = None) -> str:
    if declared and declared != DEFAULT_CONTENT_TYPE:
        return declared
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or DEFAULT_CONTENT_TYPE

async def read_upload(upload: UploadFile, limit: int) -> bytes:
    """Reads the upload, failing as soon as it grows past ``limit`` bytes."""
    chunks = []
    size = 0
    while True:
        chunk = await upload.read(64 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > limit:
            raise PayloadTooLarge(f"Image exceeds the {limit} byte limit")
        chunks.append(chunk)
    return b"".join(chunks)

async def store_image(
    project: dict,
    filename: str,
    content: bytes,
    declared_type: str | None,
    db: AsyncIOMotorDatabase,
) -> ImageInfo:
    if not content:
        raise ValidationFailed("No file uploaded")

    image_dict = {
        "project": project["_id"],
        "filename": filename,
        "contentType": guess_content_type(filename, declared_type),
        "length": len(content),
        "data": Binary(content),
        "uploaded": datetime.now(timezone.utc),
    }
    await db[COLLECTION_NAME].replace_one(
        {"project": project["_id"], "filename": filename},
        image_dict,
        upsert=True,
    )
    logger.info("Stored image %s (%d bytes) for project %s", filename, len(content), project["_id"])
    return ImageInfo(**image_dict)

async def fetch_image(project: dict, filename: str, db: AsyncIOMotorDatabase) -> dict:
    image = await db[COLLECTION_NAME].find_one({"project": project["_id"], "filename": filename})
    if not image:
        raise NotFound("Image not found")
    return image
