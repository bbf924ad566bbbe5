"""
Health check and HTTP middleware tests.
"""

import pytest
from httpx import AsyncClient

from app.core.middleware import SECURITY_HEADERS


@pytest.mark.asyncio
async def test_home(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "this is the default page"}


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Health endpoint should return status ok."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_ready_check(client: AsyncClient):
    """Ready endpoint should return status ready."""
    response = await client.get("/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready"}


@pytest.mark.asyncio
async def test_ready_check_store_down(client: AsyncClient, app, monkeypatch):
    async def unreachable():
        return False

    monkeypatch.setattr(app.state.db, "ping", unreachable)
    response = await client.get("/ready")
    assert response.status_code == 503
    assert response.json() == {"status": "unavailable"}


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/health", "/api/organisations"])
async def test_security_headers(client: AsyncClient, path):
    response = await client.get(path)
    for header, value in SECURITY_HEADERS.items():
        assert response.headers[header] == value


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient):
    response = await client.get("/health")
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_echoed(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


@pytest.mark.asyncio
async def test_unknown_route(client: AsyncClient):
    response = await client.get("/nowhere")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_openapi_documents_error_bodies(client: AsyncClient):
    response = await client.get("/openapi.json")
    assert response.status_code == 200
    schemas = response.json()["components"]["schemas"]
    assert "GuardErrorResponse" in schemas
    assert "ValidationErrorResponse" in schemas
    assert "/api/organisations/{orgId}/users" in response.json()["paths"]
