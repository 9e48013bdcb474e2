from typing import Any, Protocol

from pydantic import BaseModel


class SyncResponse(BaseModel):
    """Result of listing a model from the remote service.

    Attributes:
        items: Wire-shaped records as returned by the service.
        errors: Error messages. Any entry means the listing failed, whatever `items` holds.
    """

    items: list[dict[str, Any]] = []
    errors: list[str] = []


class RemoteSyncAdapter(Protocol):
    """Protocol for the remote data service holding notes and verifiers."""

    def list_records(self, model: type[BaseModel]) -> SyncResponse:
        """List every record of a model."""
        ...

    def create_record(self, model: type[BaseModel], record: dict[str, Any]) -> list[str]:
        """Create a record, returning the errors reported by the service."""
        ...

    def update_record(self, model: type[BaseModel], record: dict[str, Any]) -> list[str]:
        """Replace an existing record, returning the errors reported by the service."""
        ...
