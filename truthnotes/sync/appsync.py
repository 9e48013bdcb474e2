"""Remote sync adapter for an AppSync GraphQL API.

Queries follow the shape generated for Amplify models: ``listNotes`` returns
``items`` and a ``nextToken``; ``createNote``/``updateNote`` take an ``input``
object. Requests are authorised with the API key header.
"""

from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel

from truthnotes.sync.base import RemoteSyncAdapter, SyncResponse

# Fields the service manages itself and rejects in mutation inputs.
SERVER_MANAGED_FIELDS = ("createdAt", "updatedAt")

SELECTIONS = {
    "Note": "id content isDone createdAt updatedAt location { lat long } image verifiedBy",
    "Verifier": "id name passcode",
}


def _plural(name: str) -> str:
    return f"{name}s"


def _list_query(name: str) -> str:
    return (
        f"query List{_plural(name)}($nextToken: String) {{\n"
        f"  list{_plural(name)}(nextToken: $nextToken) {{\n"
        f"    items {{ {SELECTIONS[name]} }}\n"
        f"    nextToken\n"
        f"  }}\n"
        f"}}"
    )


def _mutation(action: str, name: str) -> str:
    operation = f"{action}{name}"
    return (
        f"mutation {operation[0].upper()}{operation[1:]}($input: {action.capitalize()}{name}Input!) {{\n"
        f"  {operation}(input: $input) {{ id }}\n"
        f"}}"
    )


def _error_messages(payload: dict[str, Any]) -> list[str]:
    return [str(error.get("message", error)) for error in payload.get("errors") or []]


class AppSyncAdapter(RemoteSyncAdapter):
    """Talks to the GraphQL endpoint of the remote service over HTTP."""

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            url: GraphQL endpoint URL
            api_key: API key sent in the ``x-api-key`` header
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests to stub the service
        """
        self.url = url
        self._client = httpx.Client(
            timeout=timeout,
            headers={"x-api-key": api_key, "Content-Type": "application/json"},
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _execute(self, query: str, variables: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
        try:
            response = self._client.post(self.url, json={"query": query, "variables": variables})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            logger.error(f"GraphQL request failed: {e}")
            return {}, [str(e)]
        except ValueError as e:
            logger.error(f"GraphQL response is not JSON: {e}")
            return {}, [f"Invalid response from remote service: {e}"]

        errors = _error_messages(payload)
        if errors:
            logger.warning(f"GraphQL errors: {errors}")
        return payload.get("data") or {}, errors

    def list_records(self, model: type[BaseModel]) -> SyncResponse:
        name = model.__name__
        field = f"list{_plural(name)}"
        query = _list_query(name)

        items: list[dict[str, Any]] = []
        next_token: str | None = None
        while True:
            data, errors = self._execute(query, {"nextToken": next_token})
            if errors:
                return SyncResponse(items=items, errors=errors)
            page = data.get(field) or {}
            items.extend(item for item in page.get("items") or [] if item is not None)
            next_token = page.get("nextToken")
            if not next_token:
                return SyncResponse(items=items)

    def _mutate(self, action: str, model: type[BaseModel], record: dict[str, Any]) -> list[str]:
        record_input = {k: v for k, v in record.items() if k not in SERVER_MANAGED_FIELDS}
        _, errors = self._execute(_mutation(action, model.__name__), {"input": record_input})
        return errors

    def create_record(self, model: type[BaseModel], record: dict[str, Any]) -> list[str]:
        return self._mutate("create", model, record)

    def update_record(self, model: type[BaseModel], record: dict[str, Any]) -> list[str]:
        return self._mutate("update", model, record)
