import base64
import os
from datetime import timedelta, timezone, tzinfo
from typing import Any

os.environ.setdefault("AUTH_USERNAME", "admin")
os.environ.setdefault("AUTH_PASSWORD", "password")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from tests.fakes import FakeSyncAdapter  # noqa: E402
from truthnotes.api import create_app  # noqa: E402
from truthnotes.domain.note import Note  # noqa: E402
from truthnotes.domain.verifier import Verifier  # noqa: E402
from truthnotes.service import NotesService  # noqa: E402
from truthnotes.store import NoteStore  # noqa: E402

UTC_PLUS_2 = timezone(timedelta(hours=2))


@pytest.fixture
def tz() -> tzinfo:
    return UTC_PLUS_2


@pytest.fixture
def note_records() -> list[dict[str, Any]]:
    return [
        {
            "id": "note1",
            "content": "Buy milk",
            "isDone": False,
            "createdAt": "2024-01-01T10:00:00.000Z",
            "verifiedBy": None,
        },
        {
            "id": "note2",
            "content": "Call mom",
            "isDone": False,
            "createdAt": "2024-01-01T23:30:00.000Z",
            "location": {"lat": 52.52, "long": 13.405},
            "verifiedBy": '["verifier1"]',
        },
        {
            "id": "note3",
            "content": "Milk the cow",
            "isDone": False,
            "createdAt": "2024-01-02T08:15:00.000Z",
            "image": base64.b64encode(b"fake image data").decode(),
            "verifiedBy": "[]",
        },
    ]


@pytest.fixture
def verifier_records() -> list[dict[str, Any]]:
    return [
        {"id": "verifier1", "name": "Alice", "passcode": 123456},
        {"id": "verifier2", "name": "Bob", "passcode": 654321},
    ]


@pytest.fixture
def fake_adapter(
    note_records: list[dict[str, Any]], verifier_records: list[dict[str, Any]]
) -> FakeSyncAdapter:
    return FakeSyncAdapter({"Note": note_records, "Verifier": verifier_records})


@pytest.fixture
def store(fake_adapter: FakeSyncAdapter) -> NoteStore:
    """Store already refreshed from the fake adapter."""
    store = NoteStore(fake_adapter)
    store.refresh()
    return store


@pytest.fixture
def service(store: NoteStore, tz: tzinfo) -> NotesService:
    return NotesService(store, tz=tz)


@pytest.fixture
def alice() -> Verifier:
    return Verifier(id="verifier1", name="Alice", passcode=123456)


@pytest.fixture
def plain_note() -> Note:
    return Note(id="note1", content="Buy milk")


@pytest.fixture(autouse=True)
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Override settings for testing."""
    monkeypatch.setattr("truthnotes.config.settings.auth_username", "admin")
    monkeypatch.setattr("truthnotes.config.settings.auth_password", "password")


@pytest.fixture
def test_client(service: NotesService) -> TestClient:
    app = create_app(service=service)
    token = base64.b64encode(b"admin:password").decode()
    return TestClient(app, headers={"Authorization": f"Basic {token}"})


@pytest.fixture
def anonymous_client(service: NotesService) -> TestClient:
    return TestClient(create_app(service=service))
