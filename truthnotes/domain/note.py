"""Note domain models."""

import base64
from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field, PlainSerializer

from truthnotes.domain.result import Err
from truthnotes.domain.verified_set import decode_verified_by, encode_verified_by, unique_ids


def verified_by_before_validator(x: Any) -> list[str]:
    if x is None or isinstance(x, str):
        result = decode_verified_by(x)
        if isinstance(result, Err):
            raise ValueError(result.error.message)
        return result.value
    return unique_ids(x)


VerifiedSet = Annotated[
    list[str],
    BeforeValidator(verified_by_before_validator),
    PlainSerializer(encode_verified_by, return_type=str),
]

Base64Bytes = Annotated[
    bytes,
    BeforeValidator(lambda x: base64.b64decode(x, validate=True) if isinstance(x, str) else x),
    PlainSerializer(lambda x: base64.b64encode(x).decode(), return_type=str),
]


class Location(BaseModel):
    """Where a note was written."""

    lat: float | None = None
    long: float | None = None

    model_config = {"frozen": True}


class Note(BaseModel):
    """A user-authored text entry.

    Attributes:
        id: Client-generated v4 UUID, never changed after creation
        content: The note text
        is_done: Completion flag carried by the remote schema
        created_at: Assigned by the remote service on creation
        updated_at: Assigned by the remote service on every write
        location: Optional coordinates captured when the note was written
        image: Optional photo, base64 encoded on the wire
        verified_by: Ids of the verifiers that approved the note, in order of approval
    """

    id: str
    content: str
    is_done: bool = Field(default=False, alias="isDone")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    location: Location | None = None
    image: Base64Bytes | None = None
    verified_by: VerifiedSet = Field(default_factory=list, alias="verifiedBy")

    model_config = {"frozen": True, "populate_by_name": True}

    def to_record(self) -> dict[str, Any]:
        """Wire-shaped dict as sent to the remote service."""
        return self.model_dump(mode="json", by_alias=True)
