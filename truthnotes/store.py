"""Local snapshot of the notes and verifiers held by the remote service."""

import json
from typing import Any, Callable, TypeVar

from loguru import logger
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from truthnotes.domain.errors import DecodeError, SyncError
from truthnotes.domain.note import Note
from truthnotes.domain.result import Err, Ok
from truthnotes.domain.verifier import Verifier
from truthnotes.sync.base import RemoteSyncAdapter

M = TypeVar("M", bound=BaseModel)

Listener = Callable[[tuple[Note, ...]], None]


class NoteStore:
    """Holds the last fetched snapshot of notes and verifiers.

    The remote service is the system of record. Snapshots are only ever replaced
    as a whole after a complete fetch, and every successful write is followed by
    a full refresh. Nothing is updated optimistically or retried.
    """

    def __init__(self, adapter: RemoteSyncAdapter) -> None:
        self._adapter = adapter
        self._notes: tuple[Note, ...] = ()
        self._verifiers: tuple[Verifier, ...] = ()
        self._listeners: list[Listener] = []

    @property
    def notes(self) -> tuple[Note, ...]:
        return self._notes

    @property
    def verifiers(self) -> tuple[Verifier, ...]:
        return self._verifiers

    def get_note(self, note_id: str) -> Note | None:
        return next((note for note in self._notes if note.id == note_id), None)

    def get_verifier(self, verifier_id: str) -> Verifier | None:
        return next((v for v in self._verifiers if v.id == verifier_id), None)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` with the new notes after every successful refresh.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _fetch(self, model: type[M]) -> Ok[tuple[M, ...]] | Err[SyncError | DecodeError]:
        name = model.__name__
        try:
            response = self._adapter.list_records(model)
        except Exception as e:
            logger.error(f"Listing {name} failed: {e}")
            return Err(error=SyncError(message=f"Listing {name} failed", errors=[str(e)]))

        if response.errors:
            logger.error(f"Listing {name} returned errors: {response.errors}")
            return Err(error=SyncError(message=f"Listing {name} failed", errors=response.errors))

        records = []
        for item in response.items:
            try:
                records.append(model.model_validate(item))
            except PydanticValidationError as e:
                logger.error(f"Could not decode {name} {item.get('id')}: {e}")
                return Err(
                    error=DecodeError(
                        message=f"Could not decode {name} {item.get('id')}",
                        raw=json.dumps(item, default=str),
                    )
                )
        return Ok(value=tuple(records))

    def refresh(self) -> Ok[tuple[Note, ...]] | Err[SyncError | DecodeError]:
        """Replace the snapshots with the remote lists.

        On any failure the current snapshots are kept and the error returned.
        """
        notes = self._fetch(Note)
        if isinstance(notes, Err):
            return notes
        verifiers = self._fetch(Verifier)
        if isinstance(verifiers, Err):
            return verifiers

        self._notes, self._verifiers = notes.value, verifiers.value
        if not self._notes:
            logger.info("No notes found.")
        else:
            logger.info(f"Refreshed {len(self._notes)} notes and {len(self._verifiers)} verifiers")

        for listener in list(self._listeners):
            listener(self._notes)
        return Ok(value=self._notes)

    def _write(
        self,
        action: str,
        send: Callable[[type[BaseModel], dict[str, Any]], list[str]],
        record: Note | Verifier,
    ) -> Ok[None] | Err[SyncError | DecodeError]:
        name = type(record).__name__
        try:
            errors = send(type(record), record.to_record())
        except Exception as e:
            logger.error(f"{action} {name} {record.id} failed: {e}")
            return Err(error=SyncError(message=f"{action} {name} failed", errors=[str(e)]))

        if errors:
            logger.error(f"{action} {name} {record.id} failed: {errors}")
            return Err(error=SyncError(message=f"{action} {name} failed", errors=errors))

        logger.info(f"{action} {name} {record.id} successful.")
        refreshed = self.refresh()
        if isinstance(refreshed, Err):
            return refreshed
        return Ok(value=None)

    def create(self, record: Note | Verifier) -> Ok[None] | Err[SyncError | DecodeError]:
        """Create a record remotely, then refresh."""
        return self._write("Creating", self._adapter.create_record, record)

    def update(self, record: Note | Verifier) -> Ok[None] | Err[SyncError | DecodeError]:
        """Replace a record remotely with `record`, then refresh."""
        return self._write("Updating", self._adapter.update_record, record)
