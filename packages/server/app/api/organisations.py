"""
Organisation endpoints.

GET  /api/organisations                - list organisations the caller belongs to
POST /api/organisations                - create an organisation (caller becomes a member)
GET  /api/organisations/{orgId}        - fetch one of the caller's organisations
POST /api/organisations/{orgId}/users  - add a user (caller must be a member)
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import require_bearer
from app.core.database import get_session
from app.services import organisations as org_service
from orgpass_shared.schemas.common import APIResponse
from orgpass_shared.schemas.organisations import (
    OrgAddUserRequest,
    OrgCreateRequest,
    OrgListData,
    OrgResponse,
)
from orgpass_shared.schemas.users import UserResponse

router = APIRouter()


def _caller_id(identity: UserResponse) -> uuid.UUID:
    return uuid.UUID(identity.user_id)


@router.get("", response_model=APIResponse[OrgListData])
async def list_orgs(
    identity: UserResponse = Depends(require_bearer),
    session: AsyncSession = Depends(get_session),
):
    orgs = await org_service.list_user_orgs(_caller_id(identity), session)
    return APIResponse[OrgListData](
        status="success",
        message=f"found {len(orgs)} organisation(s)",
        status_code=200,
        data=OrgListData(organisations=[OrgResponse.from_org(org) for org in orgs]),
    )


@router.post("", response_model=APIResponse[OrgResponse], status_code=201)
async def create_org(
    body: OrgCreateRequest,
    identity: UserResponse = Depends(require_bearer),
    session: AsyncSession = Depends(get_session),
):
    org = await org_service.create_org(body, _caller_id(identity), session)
    return APIResponse[OrgResponse](
        status="success",
        message="Organisation created successfully",
        status_code=201,
        data=OrgResponse.from_org(org),
    )


@router.get("/{orgId}", response_model=APIResponse[OrgResponse])
async def get_org(
    orgId: str,
    identity: UserResponse = Depends(require_bearer),
    session: AsyncSession = Depends(get_session),
):
    org = await org_service.get_user_org(orgId, _caller_id(identity), session)
    return APIResponse[OrgResponse](
        status="success",
        message="found organisation",
        status_code=200,
        data=OrgResponse.from_org(org),
    )


@router.post(
    "/{orgId}/users",
    response_model=APIResponse[None],
    response_model_exclude_none=True,
)
async def add_user(
    orgId: str,
    body: OrgAddUserRequest,
    identity: UserResponse = Depends(require_bearer),
    session: AsyncSession = Depends(get_session),
):
    await org_service.add_user_to_org(orgId, body, _caller_id(identity), session)
    return APIResponse[None](
        status="success",
        message="User added to organisation successfully",
        status_code=200,
    )
