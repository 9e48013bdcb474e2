from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from truthnotes.api.auth import verify_credentials
from truthnotes.api.schemas import (
    ImageIn,
    NoteIn,
    NoteOut,
    NotesPage,
    RefreshOut,
    VerificationIn,
    VerifierIn,
    VerifierOut,
)
from truthnotes.domain.errors import DecodeError, InputError, NotFound, PasscodeError, SyncError
from truthnotes.domain.result import Err
from truthnotes.service import ActionError, NotesService

PASSCODE_MESSAGES = {
    PasscodeError.EMPTY_INPUT: "Please enter the passcode.",
    PasscodeError.WRONG_LENGTH: "Passcode must be exactly 6 digits.",
    PasscodeError.NOT_NUMERIC: "Passcode must contain only digits.",
    PasscodeError.MISMATCH: "Incorrect passcode.",
    PasscodeError.OUT_OF_RANGE: "Passcode must be a number between 100000 and 999999.",
}

INPUT_MESSAGES = {
    InputError.EMPTY_CONTENT: "Note content cannot be empty.",
    InputError.EMPTY_NAME: "Verifier name cannot be empty.",
}


def raise_for_error(error: ActionError, action: str) -> NoReturn:
    """Translate a failed action into an HTTP error with a user-facing message."""
    if isinstance(error, PasscodeError):
        code = (
            status.HTTP_403_FORBIDDEN
            if error is PasscodeError.MISMATCH
            else status.HTTP_400_BAD_REQUEST
        )
        detail = {"message": PASSCODE_MESSAGES[error], "kind": error.value}
    elif isinstance(error, InputError):
        code = status.HTTP_400_BAD_REQUEST
        detail = {"message": INPUT_MESSAGES[error], "kind": error.value}
    elif isinstance(error, NotFound):
        code = status.HTTP_404_NOT_FOUND
        detail = {"message": str(error), "kind": "not_found"}
    elif isinstance(error, DecodeError):
        logger.error(f"{action} failed: {error}")
        code = status.HTTP_502_BAD_GATEWAY
        message = f"Failed to {action}. Stored data could not be read."
        detail = {"message": message, "kind": "decode"}
    elif isinstance(error, SyncError):
        logger.error(f"{action} failed: {error}")
        code = status.HTTP_502_BAD_GATEWAY
        detail = {"message": f"Failed to {action}. Please try again.", "kind": "sync"}
    else:
        raise TypeError(f"Unhandled error {error!r}")
    raise HTTPException(status_code=code, detail=detail)


def _create_list_notes_endpoint(service: NotesService):
    """Create the grouped notes listing handler."""

    async def list_notes(q: str = "", _: str = Depends(verify_credentials)) -> NotesPage:
        return NotesPage.from_groups(service.grouped_notes(q), service.tz)

    return list_notes


def _create_add_note_endpoint(service: NotesService):
    def add_note(body: NoteIn, _: str = Depends(verify_credentials)) -> NoteOut:
        result = service.add_note(body.content, location=body.location, image=body.image)
        if isinstance(result, Err):
            raise_for_error(result.error, "add note")
        return NoteOut.from_note(result.value, service.tz)

    return add_note


def _create_attach_image_endpoint(service: NotesService):
    def attach_image(note_id: str, body: ImageIn, _: str = Depends(verify_credentials)) -> NoteOut:
        result = service.attach_image(note_id, body.image)
        if isinstance(result, Err):
            raise_for_error(result.error, "attach image")
        return NoteOut.from_note(result.value, service.tz)

    return attach_image


def _create_verify_note_endpoint(service: NotesService):
    def verify_note(
        note_id: str, body: VerificationIn, _: str = Depends(verify_credentials)
    ) -> NoteOut:
        result = service.verify_note(note_id, body.verifier_id, body.passcode)
        if isinstance(result, Err):
            raise_for_error(result.error, "verify note")
        return NoteOut.from_note(result.value, service.tz)

    return verify_note


def _create_verifier_endpoints(service: NotesService):
    async def list_verifiers(_: str = Depends(verify_credentials)) -> list[VerifierOut]:
        return [VerifierOut.from_verifier(v) for v in service.store.verifiers]

    def add_verifier(body: VerifierIn, _: str = Depends(verify_credentials)) -> VerifierOut:
        result = service.add_verifier(body.name, body.passcode)
        if isinstance(result, Err):
            raise_for_error(result.error, "add verifier")
        return VerifierOut.from_verifier(result.value)

    return list_verifiers, add_verifier


def _create_refresh_endpoint(service: NotesService):
    def refresh(_: str = Depends(verify_credentials)) -> RefreshOut:
        result = service.store.refresh()
        if isinstance(result, Err):
            raise_for_error(result.error, "refresh notes")
        return RefreshOut(notes=len(service.store.notes), verifiers=len(service.store.verifiers))

    return refresh


def get_endpoints_router(*, service: NotesService) -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    async def health_check():
        return {"status": "healthy"}

    list_verifiers, add_verifier = _create_verifier_endpoints(service)

    router.get("/api/notes")(_create_list_notes_endpoint(service))
    router.post("/api/notes", status_code=201)(_create_add_note_endpoint(service))
    router.put("/api/notes/{note_id}/image")(_create_attach_image_endpoint(service))
    router.post("/api/notes/{note_id}/verifications")(_create_verify_note_endpoint(service))
    router.get("/api/verifiers")(list_verifiers)
    router.post("/api/verifiers", status_code=201)(add_verifier)
    router.post("/api/refresh")(_create_refresh_endpoint(service))

    return router
