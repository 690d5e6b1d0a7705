from __future__ import annotations

from pydantic import (
    BaseModel, Field, ConfigDict,
    GetCoreSchemaHandler, GetJsonSchemaHandler
)
from pydantic_core import core_schema
from bson import ObjectId
from typing import Any

class PyObjectId(ObjectId):
    """
    Custom Pydantic type for MongoDB ObjectId
    """
    @classmethod
    def validate(cls, v: Any, _: core_schema.ValidationInfo) -> ObjectId:
        """Validate input during parsing"""
        if isinstance(v, ObjectId):
            return v
        if isinstance(v, str) and ObjectId.is_valid(v):
            return ObjectId(v)
        raise ValueError("Invalid ObjectId")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: type[Any], handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """
        Validates from Python ObjectId/str and JSON str, serializes to str.
        """
        from_python_schema = core_schema.with_info_plain_validator_function(cls.validate)

        from_json_schema = core_schema.chain_schema(
            [
                core_schema.str_schema(),
                from_python_schema,
            ]
        )

        return core_schema.json_or_python_schema(
            python_schema=from_python_schema,
            json_schema=from_json_schema,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda instance: str(instance)
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, _core_schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> dict[str, Any]:
        return {
            "type": "string",
            "format": "objectid",
            "example": "60c72b2f9b1e8a3f4c8a1b2c"
        }

# Common Model Config for handling MongoDB _id and ObjectId serialization
common_config = ConfigDict(
    populate_by_name=True,
    arbitrary_types_allowed=True,
)

class UserRef(BaseModel):
    """Owner/author reference as embedded in project and comment responses."""
    id: PyObjectId = Field(alias="_id")
    displayName: str = ""

    model_config = common_config
