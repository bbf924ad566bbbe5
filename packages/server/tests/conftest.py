"""
Shared fixtures: an isolated app per test backed by in-memory SQLite, an
httpx client over ASGI, and a controllable clock for token expiry.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func
from sqlmodel import select

from app.core.auth import TokenService
from app.core.config import Settings
from app.main import create_app

TEST_SECRET = "orgpass-test-secret-0123456789abcdef"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime.now(timezone.utc).replace(microsecond=0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite://",
        secret_key=TEST_SECRET,
        jwt_expire_minutes=60,
        bcrypt_rounds=4,
        log_level="warning",
        log_format="text",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def tokens(settings, clock) -> TokenService:
    return TokenService(settings, clock=clock)


@pytest.fixture
async def app(settings, tokens):
    application = create_app(settings, tokens=tokens)
    await application.state.db.create_all()
    yield application
    await application.state.db.dispose()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def count_rows(app):
    """Count rows of a table model using a fresh session."""

    async def _count(model) -> int:
        async with app.state.db.session_factory() as session:
            result = await session.execute(select(func.count()).select_from(model))
            return result.scalar_one()

    return _count


_counter = {"n": 0}


def make_user_payload(**overrides) -> dict:
    _counter["n"] += 1
    n = _counter["n"]
    payload = {
        "firstName": f"First{n}",
        "lastName": f"Last{n}",
        "email": f"user{n}@example.com",
        "password": "secret123",
        "phone": "08000000000",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def register(client):
    """Register a user through the API and return ``(token, user, payload)``."""

    async def _register(**overrides):
        payload = make_user_payload(**overrides)
        resp = await client.post("/auth/register", json=payload)
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        return data["accessToken"], data["user"], payload

    return _register
