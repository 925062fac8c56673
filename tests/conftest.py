"""Shared fixtures: an in-memory festival API behind httpx.MockTransport."""
import json
from datetime import timedelta, timezone

import httpx
import pytest

from festival_admin.services.api_client import ApiClient
from festival_admin.services.notifications import NotificationCenter
from festival_admin.services.programme_service import ProgrammeService
from festival_admin.services.query_cache import QueryCache
from festival_admin.services.speaker_service import SpeakerService


EDITOR_TZ = timezone(timedelta(hours=5, minutes=30))


class FakeFestivalApi:
    """Minimal stand-in for the festival REST backend."""

    def __init__(self):
        self.programmes = {}
        self.speakers = {}
        self.calls = []
        self.canned = {}
        self.upload_status = 200
        self._next_id = 1

    def seed_programme(self, **fields):
        record = {"_id": f"p{self._next_id}", **fields}
        self._next_id += 1
        self.programmes[record["_id"]] = record
        return record

    def seed_speaker(self, **fields):
        record = {"id": f"s{self._next_id}", **fields}
        self._next_id += 1
        self.speakers[record["id"]] = record
        return record

    def fail(self, method, path, status=500, body=None):
        """Answer the next matching request with ``status``."""
        self.canned[(method, path)] = (status, body or {"message": "boom"})

    def answer(self, method, path, status, body=None):
        """Answer the next matching request with ``status`` and ``body`` (no body if None)."""
        self.canned[(method, path)] = (status, body)

    def calls_to(self, method, path):
        return [c for c in self.calls if c[0] == method and c[1] == path]

    def handle(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        body = None
        if request.content and request.headers.get("content-type", "").startswith("application/json"):
            body = json.loads(request.content)
        self.calls.append((method, path, body))

        if (method, path) in self.canned:
            status, payload = self.canned.pop((method, path))
            if payload is None:
                return httpx.Response(status)
            return httpx.Response(status, json=payload)

        if path == "/upload-image":
            if self.upload_status != 200:
                return httpx.Response(self.upload_status, json={"error": "upload failed"})
            assert b'name="image"' in request.content
            return httpx.Response(200, json={"url": "https://img.example.com/photo.png"})

        parts = path.strip("/").split("/")
        if parts[0] == "programmes":
            return self._collection(self.programmes, "_id", "p", method, parts, body)
        if parts[0] == "speakers":
            return self._collection(self.speakers, "id", "s", method, parts, body)
        return httpx.Response(404, json={"message": "no route"})

    def _collection(self, store, id_key, prefix, method, parts, body):
        if len(parts) == 1:
            if method == "GET":
                return httpx.Response(200, json=list(store.values()))
            if method == "POST":
                record = {id_key: f"{prefix}{self._next_id}", **body}
                self._next_id += 1
                store[record[id_key]] = record
                return httpx.Response(201, json=record)
            return httpx.Response(405)

        entity_id = parts[1]
        if entity_id not in store:
            return httpx.Response(404, json={"message": "not found"})
        if method == "GET":
            return httpx.Response(200, json=store[entity_id])
        if method == "PUT":
            store[entity_id] = {id_key: entity_id, **body}
            return httpx.Response(200, json=store[entity_id])
        if method == "DELETE":
            del store[entity_id]
            return httpx.Response(204)
        return httpx.Response(405)


@pytest.fixture
def editor_tz():
    return EDITOR_TZ


@pytest.fixture
def fake_api():
    return FakeFestivalApi()


@pytest.fixture
def api_client(fake_api):
    return ApiClient("http://festival.test", transport=httpx.MockTransport(fake_api.handle))


@pytest.fixture
def programme_service(api_client, editor_tz):
    return ProgrammeService(api_client, editor_tz)


@pytest.fixture
def speaker_service(api_client):
    return SpeakerService(api_client)


@pytest.fixture
def cache():
    return QueryCache()


@pytest.fixture
def notifications():
    return NotificationCenter()


@pytest.fixture
def programme_record():
    """Programme as the API stores it: 09:00-10:30 in the editor's zone."""
    return {
        "name": "Keynote",
        "day_number": 1,
        "date": "2025-03-10",
        "start_datetime": "2025-03-10T03:30:00.000Z",
        "end_datetime": "2025-03-10T05:00:00.000Z",
        "venue": "Main Hall",
    }
