"""Shared test fixtures for request_board tests."""

from __future__ import annotations

import asyncio
from typing import Callable, Dict, List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from request_board.app.core import db as db_module
from request_board.app.core.config import settings
from request_board.app.schemas.request import RequestCreate, RequestRead
from request_board.app.services.request_service import RequestService
from request_board.client.reconcile import ReconciliationLoop
from request_board.client.session import ListSession
from request_board.errors import InvalidStatus, NotFound, TransientTransportError


def run(coro):
    """Run a service coroutine to completion."""
    return asyncio.run(coro)


@pytest.fixture
def database(tmp_path, monkeypatch) -> str:
    """Point the service at a fresh SQLite file and migrate it."""
    path = str(tmp_path / "requests.db")
    monkeypatch.setattr(settings, "database_url", path)
    monkeypatch.setattr(settings, "discord_bot_token", "")
    monkeypatch.setattr(settings, "discord_channel_id", "")
    db_module.init_db()
    return path


@pytest.fixture
def add_request(database) -> Callable[..., int]:
    """Create a request through the service and return its id."""

    def _add(text: str, submitted_by: str = "Dana", priority: bool = False, **extra) -> int:
        data = RequestCreate(text=text, submitted_by=submitted_by, priority=priority, **extra)
        return run(RequestService.create_request(data))

    return _add


@pytest.fixture
def client(database):
    """FastAPI test client bound to the temporary database."""
    from request_board.app.main import app

    with TestClient(app) as test_client:
        yield test_client


# ============================================================================
# Client-side fakes
# ============================================================================


def make_request(request_id: int, text: Optional[str] = None, **fields) -> RequestRead:
    values = {
        "id": request_id,
        "text": text or f"request {request_id}",
        "submitted_by": "Dana",
        "submitted_at": f"2024-05-01T12:00:{request_id:02d}+00:00",
        "sort_position": request_id,
    }
    values.update(fields)
    return RequestRead(**values)


class FakeAPI:
    """In-memory stand-in for RequestBoardAPI.

    Keeps the server list in display order and records every call.
    ``fail`` maps an operation name to an exception raised on its next
    calls; ``hooks`` maps an operation name to a callable run while the
    call is "in flight".
    """

    def __init__(self, items: Sequence[RequestRead] = ()) -> None:
        self.items: List[RequestRead] = list(items)
        self.calls: List[tuple] = []
        self.fail: Dict[str, Exception] = {}
        self.hooks: Dict[str, Callable[[], None]] = {}
        self._next_id = max((item.id for item in self.items), default=0) + 1

    def _enter(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        hook = self.hooks.get(name)
        if hook is not None:
            hook()
        if name in self.fail:
            raise self.fail[name]

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    def list_requests(self) -> List[RequestRead]:
        self._enter("list_requests")
        return [item.model_copy() for item in self.items]

    def create_request(self, text, submitted_by, *, priority=False, year=None, request_type=None) -> int:
        self._enter("create_request", text, submitted_by)
        request_id = self._next_id
        self._next_id += 1
        self.items.append(
            make_request(request_id, text, submitted_by=submitted_by, priority=priority,
                         year=year, type=request_type)
        )
        return request_id

    def set_status(self, request_id: int, status: str) -> None:
        self._enter("set_status", request_id, status)
        if status not in ("pending", "in-progress", "completed"):
            raise InvalidStatus(status)
        for index, item in enumerate(self.items):
            if item.id == request_id:
                self.items[index] = item.model_copy(update={"status": status})
                return
        raise NotFound(request_id)

    def reorder(self, ordered_ids: Sequence[int]) -> None:
        self._enter("reorder", list(ordered_ids))
        by_id = {item.id: item for item in self.items}
        known = [by_id[i] for i in ordered_ids if i in by_id]
        rest = [item for item in self.items if item.id not in set(ordered_ids)]
        self.items = [
            item.model_copy(update={"sort_position": index}) for index, item in enumerate(known)
        ] + rest

    def delete_request(self, request_id: int) -> None:
        self._enter("delete_request", request_id)
        before = len(self.items)
        self.items = [item for item in self.items if item.id != request_id]
        if len(self.items) == before:
            raise NotFound(request_id)


class RedrawRecorder:
    """Redraw callback that remembers every list it was given."""

    def __init__(self) -> None:
        self.frames: List[List[RequestRead]] = []

    def __call__(self, requests: List[RequestRead]) -> None:
        self.frames.append(list(requests))

    @property
    def count(self) -> int:
        return len(self.frames)


@pytest.fixture
def abcd() -> List[RequestRead]:
    return [make_request(i, text) for i, text in enumerate("ABCD", start=1)]


@pytest.fixture
def fake_api(abcd) -> FakeAPI:
    return FakeAPI(abcd)


@pytest.fixture
def session(abcd) -> ListSession:
    return ListSession(abcd)


@pytest.fixture
def redraw() -> RedrawRecorder:
    return RedrawRecorder()


@pytest.fixture
def loop(fake_api, session, redraw) -> ReconciliationLoop:
    return ReconciliationLoop(fake_api, session, redraw, interval=5.0)


@pytest.fixture
def network_down() -> TransientTransportError:
    return TransientTransportError("Connection refused")
