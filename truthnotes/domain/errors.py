"""Error kinds surfaced by the store, the verification checks and the service."""

from enum import Enum

from pydantic import BaseModel


class PasscodeError(str, Enum):
    """Why a passcode entry was rejected. The user may re-enter immediately."""

    EMPTY_INPUT = "empty_input"
    WRONG_LENGTH = "wrong_length"
    NOT_NUMERIC = "not_numeric"
    MISMATCH = "mismatch"
    OUT_OF_RANGE = "out_of_range"


class InputError(str, Enum):
    """User input rejected before any remote call is made."""

    EMPTY_CONTENT = "empty_content"
    EMPTY_NAME = "empty_name"


class SyncError(BaseModel):
    """The remote service returned errors or the call raised.

    Attributes:
        message: Short description of the failed operation.
        errors: Error messages reported by the remote service.
    """

    message: str
    errors: list[str] = []

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        return f"{self.message}: {'; '.join(self.errors)}"


class DecodeError(BaseModel):
    """A serialized value (typically the verified set) could not be parsed."""

    message: str
    raw: str | None = None

    def __str__(self) -> str:
        return self.message


class NotFound(BaseModel):
    """A note or verifier id is not present in the current snapshot."""

    model: str
    id: str

    def __str__(self) -> str:
        return f"{self.model} {self.id} not found"
