"""
Luminar Notes Backend: Notes API Tests
=======================================

What:  End-to-end tests of the six /api/notes endpoints through HTTPX
       ASGITransport and an in-memory store.
"""

import uuid

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies import get_note_store
from app.exceptions import StoreError

NOTES_URL = "/api/notes"


async def create(client, **body):
    response = await client.post(NOTES_URL, json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_returns_201_with_note(self, test_client, sample_note_payload):
        response = await test_client.post(NOTES_URL, json=sample_note_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Groceries"
        assert body["content"] == "Milk, eggs, bread"
        assert body["date"] == "Jan 1, 2026"
        assert body["id"]
        assert body["_id"] == body["id"]
        assert isinstance(body["timestamp"], int)
        assert "createdAt" in body
        assert "updatedAt" in body

    @pytest.mark.asyncio
    async def test_create_defaults_title(self, test_client):
        body = await create(test_client, content="hello", date="Jan 1")
        assert body["title"] == "Untitled Page"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   "])
    async def test_create_blank_content_400(self, test_client, content):
        response = await test_client.post(NOTES_URL, json={"content": content, "date": "Jan 1"})

        assert response.status_code == 400
        assert response.json()["message"] == "Note content cannot be empty"

        listing = await test_client.get(NOTES_URL)
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_create_missing_content_400(self, test_client):
        response = await test_client.post(NOTES_URL, json={"date": "Jan 1"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_create_missing_date_400(self, test_client):
        response = await test_client.post(NOTES_URL, json={"content": "hello"})

        assert response.status_code == 400
        assert response.json()["message"] == "Date is required"

    @pytest.mark.asyncio
    async def test_create_whitespace_date_accepted(self, test_client):
        body = await create(test_client, content="hello", date=" ")
        assert body["date"] == " "

    @pytest.mark.asyncio
    async def test_create_malformed_json_400(self, test_client):
        response = await test_client.post(
            NOTES_URL,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert "message" in response.json()


class TestRead:

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get(NOTES_URL)
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_newest_first(self, test_client):
        await create(test_client, content="first", date="d", timestamp=1000)
        await create(test_client, content="third", date="d", timestamp=3000)
        await create(test_client, content="second", date="d", timestamp=2000)

        response = await test_client.get(NOTES_URL)

        assert [n["content"] for n in response.json()] == ["third", "second", "first"]

    @pytest.mark.asyncio
    async def test_get_by_id(self, test_client):
        created = await create(test_client, content="hello", date="Jan 1")

        response = await test_client.get(f"{NOTES_URL}/{created['id']}")

        assert response.status_code == 200
        assert response.json()["content"] == "hello"
        assert response.json()["date"] == "Jan 1"

    @pytest.mark.asyncio
    async def test_get_absent_404(self, test_client):
        response = await test_client.get(f"{NOTES_URL}/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["message"] == "Note not found"

    @pytest.mark.asyncio
    async def test_get_malformed_id_400(self, test_client):
        response = await test_client.get(f"{NOTES_URL}/not-a-uuid")
        assert response.status_code == 400


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_partial(self, test_client):
        created = await create(test_client, title="Old", content="body", date="Jan 1")

        response = await test_client.put(f"{NOTES_URL}/{created['id']}", json={"title": "New"})

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == created["id"]
        assert body["title"] == "New"
        assert body["content"] == "body"
        assert body["date"] == "Jan 1"
        assert body["timestamp"] >= created["timestamp"]

    @pytest.mark.asyncio
    async def test_update_ignores_id_in_body(self, test_client):
        created = await create(test_client, content="body", date="Jan 1")

        response = await test_client.put(
            f"{NOTES_URL}/{created['id']}",
            json={"id": str(uuid.uuid4()), "_id": "x", "content": "v2"},
        )

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]
        assert response.json()["content"] == "v2"

    @pytest.mark.asyncio
    async def test_update_blank_content_400(self, test_client):
        created = await create(test_client, content="body", date="Jan 1")

        response = await test_client.put(f"{NOTES_URL}/{created['id']}", json={"content": " "})

        assert response.status_code == 400
        fetched = await test_client.get(f"{NOTES_URL}/{created['id']}")
        assert fetched.json()["content"] == "body"

    @pytest.mark.asyncio
    async def test_update_absent_404(self, test_client):
        response = await test_client.put(f"{NOTES_URL}/{uuid.uuid4()}", json={"title": "x"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_malformed_id_400(self, test_client):
        response = await test_client.put(f"{NOTES_URL}/nope", json={"title": "x"})
        assert response.status_code == 400


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_one(self, test_client):
        created = await create(test_client, content="body", date="Jan 1")

        response = await test_client.delete(f"{NOTES_URL}/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Note deleted successfully"}

    @pytest.mark.asyncio
    async def test_delete_absent_404(self, test_client):
        response = await test_client.delete(f"{NOTES_URL}/{uuid.uuid4()}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_malformed_id_400(self, test_client):
        response = await test_client.delete(f"{NOTES_URL}/nope")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_clear_all(self, test_client):
        for i in range(3):
            await create(test_client, content=f"note {i}", date="Jan 1")

        response = await test_client.delete(f"{NOTES_URL}/clear/all")

        assert response.status_code == 200
        assert response.json() == {"message": "Deleted 3 notes", "deletedCount": 3}
        listing = await test_client.get(NOTES_URL)
        assert listing.json() == []


class TestScenario:

    @pytest.mark.asyncio
    async def test_create_update_delete_lifecycle(self, test_client):
        created = await test_client.post(NOTES_URL, json={"content": "hello", "date": "Jan 1"})
        assert created.status_code == 201
        note = created.json()
        assert note["title"] == "Untitled Page"
        note_url = f"{NOTES_URL}/{note['id']}"

        updated = await test_client.put(note_url, json={"title": "Hi"})
        assert updated.status_code == 200
        assert updated.json()["title"] == "Hi"
        assert updated.json()["content"] == "hello"
        assert updated.json()["timestamp"] > note["timestamp"]

        deleted = await test_client.delete(note_url)
        assert deleted.status_code == 200

        missing = await test_client.get(note_url)
        assert missing.status_code == 404


class FailingStore:
    """Stands in for NoteStore; every operation raises StoreError."""

    async def _fail(self, *args, **kwargs):
        raise StoreError(context={"error_type": "OperationalError"})

    insert = find_all = find_by_id = update_by_id = delete_by_id = delete_all = _fail


class TestStoreFailures:

    @pytest.fixture(autouse=True)
    def failing_store(self, app):
        app.dependency_overrides[get_note_store] = lambda: FailingStore()
        yield
        app.dependency_overrides.clear()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path, body, expected",
        [
            ("GET", "", None, 500),
            ("POST", "", {"content": "x", "date": "d"}, 400),
            ("GET", "/{id}", None, 500),
            ("PUT", "/{id}", {"title": "x"}, 400),
            ("DELETE", "/{id}", None, 400),
            ("DELETE", "/clear/all", None, 500),
        ],
    )
    async def test_status_by_endpoint(self, test_client, method, path, body, expected):
        url = NOTES_URL + path.format(id=uuid.uuid4())

        response = await test_client.request(method, url, json=body)

        assert response.status_code == expected
        payload = response.json()
        assert payload["error"] == "store_error"
        assert payload["message"]
        assert "OperationalError" not in response.text


def failing_session_method():
    async def fail(self, *args, **kwargs):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))
    return fail


class TestDriverFailures:
    """Driver errors raised inside the real NoteStore reach the client."""

    @pytest.mark.asyncio
    async def test_failed_commit_on_create_400(self, test_client, monkeypatch):
        monkeypatch.setattr(AsyncSession, "commit", failing_session_method())

        response = await test_client.post(NOTES_URL, json={"content": "x", "date": "d"})

        assert response.status_code == 400
        assert response.json()["error"] == "store_error"

        monkeypatch.undo()
        listing = await test_client.get(NOTES_URL)
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_failed_commit_on_update_keeps_note(self, test_client, monkeypatch):
        created = await create(test_client, title="Old", content="body", date="Jan 1")
        monkeypatch.setattr(AsyncSession, "commit", failing_session_method())

        response = await test_client.put(f"{NOTES_URL}/{created['id']}", json={"title": "New"})

        assert response.status_code == 400
        monkeypatch.undo()
        fetched = await test_client.get(f"{NOTES_URL}/{created['id']}")
        assert fetched.json()["title"] == "Old"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "session_method, method, path, body, expected",
        [
            ("execute", "GET", "", None, 500),
            ("get", "GET", "/{id}", None, 500),
            ("get", "PUT", "/{id}", {"title": "x"}, 400),
            ("execute", "DELETE", "/{id}", None, 400),
            ("execute", "DELETE", "/clear/all", None, 500),
        ],
    )
    async def test_status_by_endpoint(
        self, test_client, monkeypatch, session_method, method, path, body, expected
    ):
        monkeypatch.setattr(AsyncSession, session_method, failing_session_method())
        url = NOTES_URL + path.format(id=uuid.uuid4())

        response = await test_client.request(method, url, json=body)

        assert response.status_code == expected
        assert response.json()["error"] == "store_error"
        assert "disk I/O error" not in response.text
