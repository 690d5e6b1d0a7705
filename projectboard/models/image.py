from pydantic import BaseModel
from datetime import datetime
from .base import PyObjectId, common_config

class ImageInfo(BaseModel):
    project: PyObjectId
    filename: str
    contentType: str
    length: int
    uploaded: datetime
    model_config = common_config
