"""Verifier domain model."""

from typing import Any

from pydantic import BaseModel, Field

PASSCODE_MIN = 100000
PASSCODE_MAX = 999999
PASSCODE_LENGTH = 6


class Verifier(BaseModel):
    """A named holder of a 6-digit passcode who approves notes."""

    id: str
    name: str
    passcode: int = Field(ge=PASSCODE_MIN, le=PASSCODE_MAX)

    model_config = {"frozen": True}

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
