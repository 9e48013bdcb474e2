import base64

from fastapi.testclient import TestClient

from tests.fakes import FakeSyncAdapter
from truthnotes.api import create_app
from truthnotes.service import NotesService


def test_health(anonymous_client: TestClient) -> None:
    response = anonymous_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_unauthorized_access_without_credentials(anonymous_client: TestClient) -> None:
    """Test that API endpoints require authentication."""
    response = anonymous_client.get("/api/notes")
    assert response.status_code == 401

    response = anonymous_client.post("/api/notes", json={"content": "hello"})
    assert response.status_code == 401


def test_unauthorized_access_with_wrong_credentials(anonymous_client: TestClient) -> None:
    token = base64.b64encode(b"wrong:credentials").decode()
    response = anonymous_client.get("/api/notes", headers={"Authorization": f"Basic {token}"})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Basic"


def test_list_notes_grouped_by_day(test_client: TestClient) -> None:
    response = test_client.get("/api/notes")
    assert response.status_code == 200

    groups = response.json()["groups"]
    assert [(g["date"], g["label"]) for g in groups] == [
        ("2024-01-01", "January 1, 2024"),
        ("2024-01-02", "January 2, 2024"),
    ]
    assert [n["id"] for n in groups[1]["notes"]] == ["note2", "note3"]

    call_mom = groups[1]["notes"][0]
    assert call_mom["time"] == "01:30"
    assert call_mom["verified_by"] == ["verifier1"]
    assert call_mom["location"] == {"lat": 52.52, "long": 13.405}
    assert base64.b64decode(groups[1]["notes"][1]["image"]) == b"fake image data"


def test_list_notes_with_query(test_client: TestClient) -> None:
    response = test_client.get("/api/notes", params={"q": "MOM"})
    assert response.status_code == 200

    groups = response.json()["groups"]
    assert len(groups) == 1
    assert [n["content"] for n in groups[0]["notes"]] == ["Call mom"]


def test_list_notes_no_match(test_client: TestClient) -> None:
    response = test_client.get("/api/notes", params={"q": "nothing like this"})
    assert response.json() == {"groups": []}


def test_add_note(test_client: TestClient) -> None:
    image = base64.b64encode(b"photo").decode()
    response = test_client.post(
        "/api/notes",
        json={"content": " Water plants ", "location": {"lat": 1.5, "long": 2.5}, "image": image},
    )
    assert response.status_code == 201

    note = response.json()
    assert note["content"] == "Water plants"
    assert note["verified_by"] == []
    assert note["image"] == image

    contents = [
        n["content"] for g in test_client.get("/api/notes").json()["groups"] for n in g["notes"]
    ]
    assert "Water plants" in contents


def test_add_note_empty_content(test_client: TestClient) -> None:
    response = test_client.post("/api/notes", json={"content": "   "})
    assert response.status_code == 400
    assert response.json()["detail"] == {
        "message": "Note content cannot be empty.",
        "kind": "empty_content",
    }


def test_add_note_remote_failure(test_client: TestClient, fake_adapter: FakeSyncAdapter) -> None:
    fake_adapter.write_errors = ["Not Authorized"]

    response = test_client.post("/api/notes", json={"content": "hello"})
    assert response.status_code == 502
    assert response.json()["detail"] == {
        "message": "Failed to add note. Please try again.",
        "kind": "sync",
    }


def test_attach_image(test_client: TestClient) -> None:
    image = base64.b64encode(b"new photo").decode()
    response = test_client.put("/api/notes/note1/image", json={"image": image})
    assert response.status_code == 200
    assert response.json()["image"] == image


def test_attach_image_unknown_note(test_client: TestClient) -> None:
    image = base64.b64encode(b"new photo").decode()
    response = test_client.put("/api/notes/missing/image", json={"image": image})
    assert response.status_code == 404
    assert response.json()["detail"]["kind"] == "not_found"


def test_attach_image_invalid_base64(test_client: TestClient) -> None:
    response = test_client.put("/api/notes/note1/image", json={"image": "not base64!"})
    assert response.status_code == 422


def test_verify_note(test_client: TestClient) -> None:
    response = test_client.post(
        "/api/notes/note1/verifications",
        json={"verifier_id": "verifier1", "passcode": "123456"},
    )
    assert response.status_code == 200
    assert response.json()["verified_by"] == ["verifier1"]


def test_verify_note_passcode_errors(test_client: TestClient) -> None:
    cases = [
        ("", 400, "empty_input"),
        ("12345", 400, "wrong_length"),
        ("12345a", 400, "not_numeric"),
        ("999999", 403, "mismatch"),
    ]
    for passcode, status_code, kind in cases:
        response = test_client.post(
            "/api/notes/note1/verifications",
            json={"verifier_id": "verifier1", "passcode": passcode},
        )
        assert response.status_code == status_code, f"Unexpected status for {passcode!r}"
        assert response.json()["detail"]["kind"] == kind


def test_verifiers_never_expose_passcodes(test_client: TestClient) -> None:
    response = test_client.get("/api/verifiers")
    assert response.status_code == 200
    assert response.json() == [
        {"id": "verifier1", "name": "Alice"},
        {"id": "verifier2", "name": "Bob"},
    ]


def test_add_verifier(test_client: TestClient) -> None:
    response = test_client.post("/api/verifiers", json={"name": "Carol", "passcode": "246810"})
    assert response.status_code == 201
    assert set(response.json()) == {"id", "name"}

    names = [v["name"] for v in test_client.get("/api/verifiers").json()]
    assert names == ["Alice", "Bob", "Carol"]


def test_add_verifier_leading_zero_passcode(test_client: TestClient) -> None:
    response = test_client.post("/api/verifiers", json={"name": "Carol", "passcode": "000001"})
    assert response.status_code == 400
    assert response.json()["detail"]["kind"] == "out_of_range"


def test_refresh(test_client: TestClient, fake_adapter: FakeSyncAdapter) -> None:
    fake_adapter.records["Note"].append(
        {"id": "note4", "content": "Added elsewhere", "createdAt": "2024-01-05T12:00:00Z"}
    )

    response = test_client.post("/api/refresh")
    assert response.status_code == 200
    assert response.json() == {"notes": 4, "verifiers": 2}


def test_refresh_decode_failure(test_client: TestClient, fake_adapter: FakeSyncAdapter) -> None:
    fake_adapter.records["Note"].append({"id": "bad", "content": "x", "verifiedBy": "{"})

    response = test_client.post("/api/refresh")
    assert response.status_code == 502
    assert response.json()["detail"]["kind"] == "decode"


def test_shutdown_hook_runs_once(service: NotesService) -> None:
    calls: list[str] = []
    app = create_app(service=service, on_shutdown=lambda: calls.append("closed"))

    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        assert calls == []

    assert calls == ["closed"]
