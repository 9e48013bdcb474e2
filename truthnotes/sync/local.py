import copy
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict

from loguru import logger
from pydantic import BaseModel

from truthnotes.sync.base import RemoteSyncAdapter, SyncResponse


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LocalSyncAdapter(RemoteSyncAdapter):
    """Local stand-in for the remote service that keeps records in a JSON file.

    Like the remote service it owns the `createdAt` and `updatedAt` fields:
    they are assigned on create, `createdAt` is kept on update.
    """

    def __init__(
        self,
        filepath: str | Path | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize LocalSyncAdapter.

        Args:
            filepath: Path to the records file. If provided and exists, will auto-load.
                     If provided, every successful write is saved to this path.
                     If not provided, records are kept in memory only.
            clock: Source of the timestamps assigned to records.
        """
        self._filepath = str(filepath) if filepath else None
        self._clock = clock

        if self._filepath and Path(self._filepath).exists():
            with open(self._filepath, "r") as f:
                data = json.load(f)
            self._records: Dict[str, Dict[str, dict[str, Any]]] = data["records"]
        else:
            self._records = {}

    @classmethod
    def from_records(cls, records: Dict[str, list[dict[str, Any]]]) -> "LocalSyncAdapter":
        """Create an in-memory adapter holding the given records per model name (useful for testing)."""
        adapter = cls()
        for model_name, items in records.items():
            adapter._records[model_name] = {item["id"]: copy.deepcopy(item) for item in items}
        return adapter

    def list_records(self, model: type[BaseModel]) -> SyncResponse:
        items = self._records.get(model.__name__, {})
        return SyncResponse(items=[copy.deepcopy(item) for item in items.values()])

    def create_record(self, model: type[BaseModel], record: dict[str, Any]) -> list[str]:
        table = self._records.setdefault(model.__name__, {})
        record_id = record.get("id")
        if not record_id:
            return [f"{model.__name__} record has no id"]
        if record_id in table:
            return [f"{model.__name__} {record_id} already exists"]

        now = _timestamp(self._clock())
        table[record_id] = {**copy.deepcopy(record), "createdAt": now, "updatedAt": now}
        try:
            self._autosave()
        except OSError:
            del table[record_id]
            raise
        logger.debug(f"Created {model.__name__} {record_id}")
        return []

    def update_record(self, model: type[BaseModel], record: dict[str, Any]) -> list[str]:
        table = self._records.get(model.__name__, {})
        record_id = record.get("id")
        if record_id not in table:
            return [f"{model.__name__} {record_id} not found"]

        previous = table[record_id]
        table[record_id] = {
            **copy.deepcopy(record),
            "createdAt": previous.get("createdAt"),
            "updatedAt": _timestamp(self._clock()),
        }
        try:
            self._autosave()
        except OSError:
            table[record_id] = previous
            raise
        logger.debug(f"Updated {model.__name__} {record_id}")
        return []

    def _autosave(self) -> None:
        if self._filepath:
            self.save()

    def save(self, filepath: str | None = None) -> None:
        """Save the records to a JSON file.

        Args:
            filepath: Path to save to. If not provided, uses the filepath from initialization.
        """
        save_path = filepath or self._filepath
        if not save_path:
            raise ValueError(
                "No filepath provided and no default filepath set during initialization"
            )

        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        with open(str(save_path), "w") as f:
            json.dump({"records": self._records}, f)
