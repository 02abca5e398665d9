"""Shared fixtures: an in-memory stand-in for `core.db.Database` and app builders."""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import Any, Callable

import pytest
from fastapi import APIRouter, FastAPI
from fastapi.testclient import TestClient

from core.db import get_db
from core.errors import install_error_handlers

_DEFAULTS = {"fetch_one": None, "fetch_all": [], "execute": 1}


class FakeDatabase:
    """
    Records every call and answers from per-method queues.

    Queued values are returned in order; an exception instance is raised
    instead. An optional `handler(method, sql, args)` is consulted first and
    wins when it returns anything but `NotImplemented`.
    """

    def __init__(self, handler: Callable[[str, str, tuple], Any] | None = None):
        self.calls: list[tuple[str, str, tuple]] = []
        self.events: list[str] = []
        self.handler = handler
        self.queued: dict[str, list[Any]] = {method: [] for method in _DEFAULTS}
        self._bound = False

    def queue(self, method: str, *results: Any) -> "FakeDatabase":
        self.queued[method].extend(results)
        return self

    @property
    def in_transaction(self) -> bool:
        return self._bound

    def sql(self, method: str | None = None) -> list[str]:
        return [sql for (m, sql, _args) in self.calls if method is None or m == method]

    async def _dispatch(self, method: str, sql: str, args: tuple) -> Any:
        flat = " ".join(sql.split())
        self.calls.append((method, flat, args))
        self.events.append(method)
        if self.handler is not None:
            result = self.handler(method, flat, args)
            if result is not NotImplemented:
                return result
        if self.queued[method]:
            result = self.queued[method].pop(0)
            if isinstance(result, BaseException):
                raise result
            return result
        default = _DEFAULTS[method]
        return list(default) if isinstance(default, list) else default

    async def fetch_one(self, sql: str, *args: Any) -> dict | None:
        return await self._dispatch("fetch_one", sql, args)

    async def fetch_all(self, sql: str, *args: Any) -> list[dict]:
        return await self._dispatch("fetch_all", sql, args)

    async def execute(self, sql: str, *args: Any) -> int:
        return await self._dispatch("execute", sql, args)

    @asynccontextmanager
    async def transaction(self):
        self.events.append("BEGIN")
        self._bound = True
        try:
            yield self
        except BaseException:
            self.events.append("ROLLBACK")
            raise
        else:
            self.events.append("COMMIT")
        finally:
            self._bound = False

    async def ping(self) -> bool:
        return True


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def make_client(fake_db: FakeDatabase) -> Callable[..., TestClient]:
    """Build a TestClient for the given routers with the fake database injected."""

    def _make(*routers: APIRouter) -> TestClient:
        app = FastAPI()
        install_error_handlers(app)
        for router in routers:
            app.include_router(router)
        app.dependency_overrides[get_db] = lambda: fake_db
        return TestClient(app, raise_server_exceptions=False)

    return _make


@pytest.fixture
def artisan_data() -> dict:
    return {
        "name": "Rashid",
        "father_name": "Karim",
        "cnic": "3520212345671",
        "gender": "Male",
        "date_of_birth": "1985-04-12",
        "contact_no": "03001234567",
        "tehsil_id": 3,
        "dependents_count": 4,
        "skill_id": 2,
        "major_product": "Pottery",
        "experience": 12,
        "avg_monthly_income": 25000,
        "employment_type_id": 1,
        "has_machinery": True,
        "loan_status": "No",
        "user_id": 7,
    }


def sse_events(text: str) -> list[dict]:
    """Decode the `data: <json>` frames of an SSE body."""
    frames = [chunk for chunk in text.split("\n\n") if chunk.strip()]
    return [json.loads(frame.removeprefix("data: ")) for frame in frames]


@pytest.fixture
def parse_sse() -> Callable[[str], list[dict]]:
    return sse_events
