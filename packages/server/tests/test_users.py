"""
Integration tests for the user profile endpoint.
"""

from __future__ import annotations

import uuid

import pytest


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestGetUser:
    @pytest.mark.asyncio
    async def test_get_self(self, client, register):
        token, user, payload = await register()
        resp = await client.get(f"/api/users/{user['userId']}", headers=_auth(token))
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "success"
        assert body["message"] == "user found"
        assert body["statusCode"] == 200
        assert body["data"] == {
            "userId": user["userId"],
            "firstName": payload["firstName"],
            "lastName": payload["lastName"],
            "email": payload["email"],
            "phone": payload["phone"],
        }

    @pytest.mark.asyncio
    async def test_any_authenticated_caller_can_fetch(self, client, register):
        _, other, _ = await register()
        token, _, _ = await register()
        resp = await client.get(f"/api/users/{other['userId']}", headers=_auth(token))
        assert resp.status_code == 200
        assert resp.json()["data"]["userId"] == other["userId"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", [str(uuid.uuid4()), "not-a-uuid", "0"])
    async def test_unknown_user(self, client, register, user_id):
        token, _, _ = await register()
        resp = await client.get(f"/api/users/{user_id}", headers=_auth(token))
        assert resp.status_code == 404
        assert resp.json() == {
            "status": "Not Found",
            "message": "user not found",
            "statusCode": 404,
        }

    @pytest.mark.asyncio
    async def test_requires_token(self, client, register):
        _, user, _ = await register()
        resp = await client.get(f"/api/users/{user['userId']}")
        assert resp.status_code == 401
        assert resp.json() == {"error": "Authorization header is missing"}


class TestUserResponse:
    def test_built_from_public_fields_only(self):
        from types import SimpleNamespace

        from orgpass_shared.schemas.users import UserResponse

        user = SimpleNamespace(
            id=uuid.uuid4(),
            first_name="Jane",
            last_name="Doe",
            email="Jane@EXAMPLE.COM",
            phone="0",
            password_hash="$2b$04$hash",
        )
        dumped = UserResponse.from_user(user).model_dump(by_alias=True)
        assert dumped == {
            "userId": str(user.id),
            "firstName": "Jane",
            "lastName": "Doe",
            "email": "Jane@EXAMPLE.COM",
            "phone": "0",
        }
