"""
Authentication endpoints.

POST /auth/register - create an account (and its default organisation)
POST /auth/login    - exchange email/password for a session token
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import TokenService, get_token_service
from app.core.database import get_session
from app.services import accounts as account_service
from orgpass_shared.schemas.common import APIResponse, ValidationErrorResponse
from orgpass_shared.schemas.users import (
    AuthData,
    UserLoginRequest,
    UserRegisterRequest,
    UserResponse,
)

router = APIRouter(responses={422: {"model": ValidationErrorResponse}})


@router.post("/register", response_model=APIResponse[AuthData], status_code=201)
async def register(
    body: UserRegisterRequest,
    request: Request,
    session: AsyncSession = Depends(get_session),
    tokens: TokenService = Depends(get_token_service),
):
    """Register a user. Their default organisation is created in the same transaction."""
    user, _org = await account_service.register_user(
        body, session, bcrypt_rounds=request.app.state.settings.bcrypt_rounds
    )
    token = tokens.issue(user)
    return APIResponse[AuthData](
        status="success",
        message="Registration successful",
        status_code=201,
        data=AuthData(access_token=token, user=UserResponse.from_user(user)),
    )


@router.post("/login", response_model=APIResponse[AuthData])
async def login(
    body: UserLoginRequest,
    session: AsyncSession = Depends(get_session),
    tokens: TokenService = Depends(get_token_service),
):
    """Authenticate with email/password and receive a session token."""
    user = await account_service.authenticate(body, session)
    token = tokens.issue(user)
    return APIResponse[AuthData](
        status="success",
        message="Login successful",
        status_code=200,
        data=AuthData(access_token=token, user=UserResponse.from_user(user)),
    )
