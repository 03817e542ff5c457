"""
Shared pieces of the document models.

Documents reference each other by the hex string of the target's
``ObjectId`` (``owner_id``, ``board_id``, membership lists); only ``_id``
itself is stored as an ``ObjectId``.
"""
from datetime import datetime
from typing import Annotated, Any, List, Optional

from bson import ObjectId
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic_core import core_schema

from pinboard.core.exceptions import ValidationException


class PyObjectId(str):
    """A document id as its 24-character hex string; ``ObjectId`` values are accepted."""

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler):
        return core_schema.no_info_plain_validator_function(cls.validate)

    @classmethod
    def __get_pydantic_json_schema__(cls, schema, handler):
        return {"type": "string", "pattern": "^[0-9a-f]{24}$"}

    @classmethod
    def validate(cls, v):
        if v is None or isinstance(v, ObjectId):
            return v if v is None else str(v)
        if isinstance(v, str) and ObjectId.is_valid(v):
            return v
        raise ValueError(f"Not a valid document id: {v!r}")


def parse_object_id(value: str, label: str = "ID") -> ObjectId:
    """Convert a path/body id to ObjectId, raising a 400 on malformed input."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise ValidationException(f"Invalid {label}")
    return ObjectId(value)


def _dedupe(values: List[str]) -> List[str]:
    return list(dict.fromkeys(values))


# Ordered set of string ids. Writes go through $addToSet / $pull; loading
# a document collapses any duplicates while keeping first-seen order.
IdSet = Annotated[List[str], AfterValidator(_dedupe)]


class BaseDocument(BaseModel):
    """
    Validated shape of a stored document.

    Services build a document model from validated input plus server-owned
    fields, then call ``to_insert()`` for the dict handed to ``insert_one``.
    Reads stay plain dicts.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )

    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def to_insert(self) -> dict[str, Any]:
        """Dict for ``insert_one``: no ``_id`` (the server assigns it), fresh timestamps."""
        data = self.model_dump(by_alias=True, exclude={"id"})
        data["created_at"] = data["updated_at"] = datetime.utcnow()
        return data
