"""
User endpoints.

GET /api/users/{userId} - fetch a user's public profile
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.services import accounts as account_service
from orgpass_shared.schemas.common import APIResponse
from orgpass_shared.schemas.users import UserResponse

router = APIRouter()


@router.get("/{userId}", response_model=APIResponse[UserResponse])
async def get_user(
    userId: str,
    session: AsyncSession = Depends(get_session),
):
    user = await account_service.get_user(userId, session)
    return APIResponse[UserResponse](
        status="success",
        message="user found",
        status_code=200,
        data=UserResponse.from_user(user),
    )
