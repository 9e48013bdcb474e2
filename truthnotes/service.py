"""User actions on notes and verifiers."""

import uuid
from datetime import tzinfo

from loguru import logger

from truthnotes.domain.errors import DecodeError, InputError, NotFound, PasscodeError, SyncError
from truthnotes.domain.note import Location, Note
from truthnotes.domain.result import Err, Ok
from truthnotes.domain.verifier import Verifier
from truthnotes.grouping import filter_groups, group_by_day
from truthnotes.store import NoteStore
from truthnotes.verification import (
    check_passcode,
    is_verified,
    record_verification,
    validate_new_passcode,
)

ActionError = InputError | PasscodeError | NotFound | SyncError | DecodeError


class NotesService:
    """Runs the add/attach/verify flows against a `NoteStore`.

    Input is checked before anything is sent to the remote service. Each write
    goes through the store, which refreshes its snapshot afterwards.
    """

    def __init__(self, store: NoteStore, tz: tzinfo | None = None) -> None:
        """Initialize the service.

        Args:
            store: Store owning the note and verifier snapshots
            tz: Zone used to group notes by day; the process local zone when None
        """
        self.store = store
        self.tz = tz

    def grouped_notes(self, query: str = "") -> dict[str, list[Note]]:
        return filter_groups(group_by_day(self.store.notes, self.tz), query)

    def add_note(
        self,
        content: str,
        location: Location | None = None,
        image: bytes | None = None,
    ) -> Ok[Note] | Err[ActionError]:
        content = content.strip()
        if not content:
            logger.warning("Note content cannot be empty.")
            return Err(error=InputError.EMPTY_CONTENT)

        note = Note(
            id=str(uuid.uuid4()),
            content=content,
            is_done=False,
            location=location,
            image=image,
            verified_by=[],
        )
        result = self.store.create(note)
        if isinstance(result, Err):
            return result
        return Ok(value=self.store.get_note(note.id) or note)

    def attach_image(self, note_id: str, image: bytes) -> Ok[Note] | Err[ActionError]:
        note = self.store.get_note(note_id)
        if note is None:
            return Err(error=NotFound(model="Note", id=note_id))

        updated = note.model_copy(update={"image": image})
        result = self.store.update(updated)
        if isinstance(result, Err):
            return result
        return Ok(value=self.store.get_note(note_id) or updated)

    def add_verifier(self, name: str, passcode: str) -> Ok[Verifier] | Err[ActionError]:
        name = name.strip()
        if not name:
            return Err(error=InputError.EMPTY_NAME)

        validated = validate_new_passcode(passcode)
        if isinstance(validated, Err):
            logger.warning(f"Rejected passcode for new verifier {name!r}: {validated.error.value}")
            return validated

        verifier = Verifier(id=str(uuid.uuid4()), name=name, passcode=validated.value)
        result = self.store.create(verifier)
        if isinstance(result, Err):
            return result
        return Ok(value=verifier)

    def verify_note(
        self, note_id: str, verifier_id: str, passcode: str
    ) -> Ok[Note] | Err[ActionError]:
        """Approve a note as a verifier after checking the verifier's passcode.

        A note already approved by the verifier is returned as is, without a
        remote write.
        """
        note = self.store.get_note(note_id)
        if note is None:
            return Err(error=NotFound(model="Note", id=note_id))
        verifier = self.store.get_verifier(verifier_id)
        if verifier is None:
            return Err(error=NotFound(model="Verifier", id=verifier_id))

        checked = check_passcode(verifier, passcode)
        if isinstance(checked, Err):
            logger.warning(
                f"Verification of note {note_id} by {verifier_id} rejected: {checked.error.value}"
            )
            return checked

        if is_verified(note, verifier_id):
            return Ok(value=note)

        result = self.store.update(record_verification(note, verifier_id))
        if isinstance(result, Err):
            return result
        logger.info(f"Note {note_id} verified by {verifier.name}")
        return Ok(value=self.store.get_note(note_id) or record_verification(note, verifier_id))
