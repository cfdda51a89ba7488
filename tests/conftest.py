"""Test fixtures for meilikit: an in-memory fake of the search service."""

import re
import typing  # noqa: F401
from datetime import datetime, timezone

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from meilikit.client import Client


TEST_URL = "http://testserver"
INDEX_UID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,400}$")


def timestamp():
    # type: () -> str
    """RFC 3339 timestamp with nanosecond precision, as emitted by the service."""
    now = datetime.now(timezone.utc)
    return f"{now:%Y-%m-%dT%H:%M:%S}.{now.microsecond:06d}321Z"


def error_response(status_code, code, message, type_="invalid_request"):
    # type: (int, str, str, str) -> JSONResponse
    return JSONResponse(status_code=status_code, content=error_body(code, message, type_))


def error_body(code, message, type_="invalid_request"):
    # type: (str, str, str) -> dict
    return {"message": message, "code": code, "type": type_, "link": f"https://docs.meilisearch.com/errors#{code}"}


def create_fake_service(api_key=None):
    # type: (str|None) -> FastAPI
    """
    Build a FastAPI app emulating the index-management API.

    Tasks are processed synchronously when enqueued unless ``app.state.hold_tasks``
    is set, in which case they stay ``enqueued`` forever.

    :param api_key: Require this bearer token on every request when set
    :return: FastAPI application
    """
    app = FastAPI()
    app.state.indexes = {}  # type: dict[str, dict]
    app.state.tasks = {}  # type: dict[int, dict]
    app.state.hold_tasks = False
    app.state.requests = []  # type: list[tuple[str, str]]

    @app.middleware("http")
    async def authenticate(request, call_next):
        app.state.requests.append((request.method, request.url.path))
        if api_key is not None:
            header = request.headers.get("authorization")
            if header is None:
                return error_response(401, "missing_authorization_header", "Missing header", "auth")
            if header != f"Bearer {api_key}":
                return error_response(403, "invalid_api_key", "The provided API key is invalid.", "auth")
        return await call_next(request)

    def index_view(data):
        # type: (dict) -> dict
        return {k: data[k] for k in ("uid", "primaryKey", "createdAt", "updatedAt")}

    def enqueue(index_uid, type_, process):
        # type: (str, str, typing.Callable[[], dict|None]) -> JSONResponse
        task_uid = len(app.state.tasks)
        enqueued_at = timestamp()
        task = {
            "uid": task_uid,
            "indexUid": index_uid,
            "status": "enqueued",
            "type": type_,
            "details": {},
            "error": None,
            "duration": None,
            "enqueuedAt": enqueued_at,
            "startedAt": None,
            "finishedAt": None,
        }
        app.state.tasks[task_uid] = task
        if not app.state.hold_tasks:
            task["startedAt"] = timestamp()
            error = process()
            task["status"] = "failed" if error else "succeeded"
            task["error"] = error
            task["duration"] = "PT0.001S"
            task["finishedAt"] = timestamp()
        summary = {
            "taskUid": task_uid,
            "indexUid": index_uid,
            "status": "enqueued",
            "type": type_,
            "enqueuedAt": enqueued_at,
        }
        return JSONResponse(status_code=202, content=summary)

    def create(uid, primary_key):
        # type: (str, str|None) -> None
        now = timestamp()
        app.state.indexes[uid] = {
            "uid": uid,
            "primaryKey": primary_key,
            "createdAt": now,
            "updatedAt": now,
            "documents": {},
        }

    def not_found(uid):
        # type: (str) -> dict
        return error_body("index_not_found", f"Index `{uid}` not found.")

    @app.get("/indexes")
    async def list_indexes(offset: int = 0, limit: int = 20):
        indexes = sorted(app.state.indexes.values(), key=lambda d: d["uid"])
        return {
            "results": [index_view(d) for d in indexes[offset : offset + limit]],
            "offset": offset,
            "limit": limit,
            "total": len(indexes),
        }

    @app.post("/indexes")
    async def create_index(request: Request):
        body = await request.json()
        uid = body.get("uid")
        if uid is None:
            return error_response(400, "missing_index_uid", "Missing field `uid`")
        if not isinstance(uid, str) or not INDEX_UID_PATTERN.match(uid):
            return error_response(
                400,
                "invalid_index_uid",
                f"`{uid}` is not a valid index uid. Index uid can be an integer or a string containing only "
                "alphanumeric characters, hyphens (-) and underscores (_).",
            )
        primary_key = body.get("primaryKey")

        def process():
            if uid in app.state.indexes:
                return error_body("index_already_exists", f"Index `{uid}` already exists.")
            create(uid, primary_key)
            return None

        return enqueue(uid, "indexCreation", process)

    @app.get("/indexes/{uid}")
    async def get_index(uid: str):
        if uid not in app.state.indexes:
            return JSONResponse(status_code=404, content=not_found(uid))
        return index_view(app.state.indexes[uid])

    @app.patch("/indexes/{uid}")
    async def update_index(uid: str, request: Request):
        body = await request.json()
        primary_key = body.get("primaryKey")

        def process():
            data = app.state.indexes.get(uid)
            if data is None:
                return not_found(uid)
            if data["documents"] and data["primaryKey"] not in (None, primary_key):
                return error_body(
                    "index_primary_key_already_exists",
                    f"Index `{uid}`: Index already has a primary key: `{data['primaryKey']}`.",
                )
            data["primaryKey"] = primary_key
            data["updatedAt"] = timestamp()
            return None

        return enqueue(uid, "indexUpdate", process)

    @app.delete("/indexes/{uid}")
    async def delete_index(uid: str):
        def process():
            if app.state.indexes.pop(uid, None) is None:
                return not_found(uid)
            return None

        return enqueue(uid, "indexDeletion", process)

    @app.get("/indexes/{uid}/stats")
    async def index_stats(uid: str):
        data = app.state.indexes.get(uid)
        if data is None:
            return JSONResponse(status_code=404, content=not_found(uid))
        distribution = {}  # type: dict[str, int]
        for document in data["documents"].values():
            for field in document:
                distribution[field] = distribution.get(field, 0) + 1
        return {
            "numberOfDocuments": len(data["documents"]),
            "isIndexing": False,
            "fieldDistribution": distribution,
        }

    @app.post("/indexes/{uid}/documents")
    async def add_documents(uid: str, request: Request, primaryKey: str | None = None):
        documents = await request.json()

        def process():
            if uid not in app.state.indexes:
                create(uid, None)
            data = app.state.indexes[uid]
            if data["primaryKey"] is None:
                candidates = [f for f in documents[0] if f.lower().endswith("id")] if documents else []
                data["primaryKey"] = primaryKey or (candidates[0] if candidates else None)
            if data["primaryKey"] is None:
                return error_body("index_primary_key_no_candidate_found", "The primary key inference failed.")
            for document in documents:
                data["documents"][str(document[data["primaryKey"]])] = document
            data["updatedAt"] = timestamp()
            return None

        return enqueue(uid, "documentAdditionOrUpdate", process)

    @app.get("/tasks/{task_uid}")
    async def get_task(task_uid: int):
        task = app.state.tasks.get(task_uid)
        if task is None:
            return error_response(404, "task_not_found", f"Task `{task_uid}` not found.")
        return task

    return app


@pytest.fixture
def make_fake_service():
    # type: () -> typing.Callable[..., FastAPI]
    """Factory for fake services with custom options (e.g. a required API key)."""
    return create_fake_service


@pytest.fixture
def fake_service(make_fake_service):
    # type: (typing.Callable[..., FastAPI]) -> FastAPI
    """Fresh in-memory service per test."""
    return make_fake_service()


@pytest.fixture
def make_http_client():
    # type: () -> typing.Callable[[FastAPI], httpx.AsyncClient]
    """Factory for httpx clients bound to a fake service app."""

    def factory(app):
        # type: (FastAPI) -> httpx.AsyncClient
        return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=TEST_URL)

    return factory


@pytest_asyncio.fixture
async def client(fake_service, make_http_client):
    # type: (FastAPI, typing.Callable) -> typing.AsyncIterator[Client]
    """Client wired to the fake service through an ASGI transport."""
    http_client = make_http_client(fake_service)
    client = Client(url=TEST_URL, http_client=http_client, task_timeout=1.0, task_interval=0.001)
    yield client
    await client.aclose()
    await http_client.aclose()


@pytest.fixture
def primary_key():
    # type: () -> str
    return "movieId"
