"""Verifier approvals of notes and passcode checks.

All functions here are pure. Callers translate failures into user feedback and
persist the notes returned by `record_verification` through the store.
"""

from truthnotes.domain.errors import PasscodeError
from truthnotes.domain.note import Note
from truthnotes.domain.result import Err, Ok
from truthnotes.domain.verified_set import decode_verified_by, encode_verified_by
from truthnotes.domain.verifier import PASSCODE_LENGTH, PASSCODE_MAX, PASSCODE_MIN, Verifier

__all__ = [
    "check_passcode",
    "decode_verified_by",
    "encode_verified_by",
    "is_verified",
    "record_verification",
    "validate_new_passcode",
]


def is_verified(note: Note, verifier_id: str) -> bool:
    return verifier_id in note.verified_by


def record_verification(note: Note, verifier_id: str) -> Note:
    """Return a copy of `note` approved by `verifier_id`.

    Recording an approval that is already present returns an equal note.
    """
    if is_verified(note, verifier_id):
        return note
    return note.model_copy(update={"verified_by": [*note.verified_by, verifier_id]})


def _parse_passcode(candidate: str) -> Ok[int] | Err[PasscodeError]:
    candidate = candidate.strip()
    if not candidate:
        return Err(error=PasscodeError.EMPTY_INPUT)
    if len(candidate) != PASSCODE_LENGTH:
        return Err(error=PasscodeError.WRONG_LENGTH)
    # int() would also accept signs and non-ASCII digits
    if not (candidate.isascii() and candidate.isdigit()):
        return Err(error=PasscodeError.NOT_NUMERIC)
    return Ok(value=int(candidate))


def check_passcode(verifier: Verifier, candidate: str) -> Ok[Verifier] | Err[PasscodeError]:
    """Check a passcode entered to approve a note as `verifier`.

    Args:
        verifier: The verifier the user claims to be
        candidate: The raw text the user typed

    Returns:
        Ok with the verifier, or Err with the first failing check in the order
        empty input, wrong length, not numeric, mismatch
    """
    parsed = _parse_passcode(candidate)
    if isinstance(parsed, Err):
        return parsed
    if parsed.value != verifier.passcode:
        return Err(error=PasscodeError.MISMATCH)
    return Ok(value=verifier)


def validate_new_passcode(candidate: str) -> Ok[int] | Err[PasscodeError]:
    """Validate the passcode chosen for a new verifier.

    Passcodes are stored as integers, so a leading zero would be lost. Such
    entries fall below the allowed range and are rejected rather than truncated.
    """
    parsed = _parse_passcode(candidate)
    if isinstance(parsed, Err):
        return parsed
    if not PASSCODE_MIN <= parsed.value <= PASSCODE_MAX:
        return Err(error=PasscodeError.OUT_OF_RANGE)
    return parsed
