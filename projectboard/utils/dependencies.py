from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId

def to_object_id(id_str) -> Optional[ObjectId]:
    """
    Converts an ID string to a BSON ObjectId.
    Returns None if the value is not a valid ObjectId.
    """
    if isinstance(id_str, ObjectId):
        return id_str
    if not id_str or not isinstance(id_str, str):
        return None
    try:
        return ObjectId(id_str)
    except (InvalidId, TypeError):
        return None
