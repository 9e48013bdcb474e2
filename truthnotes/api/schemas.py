"""Request and response bodies of the HTTP API."""

import base64
from datetime import datetime, tzinfo

from pydantic import BaseModel, Field

from truthnotes.domain.note import Base64Bytes, Location, Note
from truthnotes.domain.verifier import Verifier
from truthnotes.grouping import format_display_date, format_time


class NoteIn(BaseModel):
    content: str
    location: Location | None = None
    image: Base64Bytes | None = None


class ImageIn(BaseModel):
    image: Base64Bytes


class VerificationIn(BaseModel):
    verifier_id: str
    passcode: str = Field(..., description="The passcode as typed, checked digit for digit")


class VerifierIn(BaseModel):
    name: str
    passcode: str = Field(..., description="Six digits, first digit not zero")


class VerifierOut(BaseModel):
    """A verifier as shown to users. The passcode is never exposed."""

    id: str
    name: str

    @classmethod
    def from_verifier(cls, verifier: Verifier) -> "VerifierOut":
        return cls(id=verifier.id, name=verifier.name)


class NoteOut(BaseModel):
    id: str
    content: str
    is_done: bool
    created_at: datetime | None
    time: str | None = Field(None, description="Local creation time as HH:MM")
    location: Location | None
    image: str | None = Field(None, description="Base64 encoded photo")
    verified_by: list[str]

    @classmethod
    def from_note(cls, note: Note, tz: tzinfo | None = None) -> "NoteOut":
        return cls(
            id=note.id,
            content=note.content,
            is_done=note.is_done,
            created_at=note.created_at,
            time=format_time(note.created_at, tz) if note.created_at else None,
            location=note.location,
            image=base64.b64encode(note.image).decode() if note.image is not None else None,
            verified_by=list(note.verified_by),
        )


class DateGroup(BaseModel):
    date: str
    label: str
    notes: list[NoteOut]


class NotesPage(BaseModel):
    groups: list[DateGroup] = []

    @classmethod
    def from_groups(cls, groups: dict[str, list[Note]], tz: tzinfo | None = None) -> "NotesPage":
        return cls(
            groups=[
                DateGroup(
                    date=key,
                    label=format_display_date(key),
                    notes=[NoteOut.from_note(note, tz) for note in notes],
                )
                for key, notes in groups.items()
            ]
        )


class RefreshOut(BaseModel):
    notes: int
    verifiers: int
