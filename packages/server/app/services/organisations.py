"""
Organisation service - creation, listing, lookup and membership changes.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.database import atomic
from app.core.errors import BadRequest, Forbidden, InternalError, NotFound
from app.models.organisation import Organisation
from app.models.user import User
from app.models.user_organisation import UserOrganisation
from app.services import memberships
from app.services.accounts import parse_id
from orgpass_shared.schemas.organisations import OrgAddUserRequest, OrgCreateRequest

log = structlog.get_logger()

NOT_A_MEMBER = "user is not a member of this organisation"


async def list_user_orgs(user_id: uuid.UUID, session: AsyncSession) -> list[Organisation]:
    """List every organisation the user belongs to (store order, not contractual)."""
    if not await session.get(User, user_id):
        raise NotFound("user not found")

    result = await session.execute(
        select(Organisation)
        .join(UserOrganisation, UserOrganisation.org_id == Organisation.id)
        .where(UserOrganisation.user_id == user_id)
    )
    return list(result.scalars().all())


async def create_org(
    req: OrgCreateRequest,
    creator_id: uuid.UUID,
    session: AsyncSession,
) -> Organisation:
    """Create an organisation and make the creator its first member, atomically."""
    creator = await session.get(User, creator_id)
    if not creator:
        raise BadRequest("invalid user")

    org = Organisation(
        name=req.name,
        description=req.description,
        created_by_id=creator.id,
    )
    try:
        async with atomic(session):
            session.add(org)
            await session.flush()
            await memberships.add_member(session, creator.id, org.id)
    except IntegrityError as exc:
        log.error("store.error", error=type(exc).__name__)
        raise InternalError() from exc

    log.info("org.created", org_id=str(org.id), creator=str(creator.id))
    return org


async def get_user_org(org_id: str, user_id: uuid.UUID, session: AsyncSession) -> Organisation:
    """Return an organisation the caller belongs to.

    Non-members get NotFound, same as for an organisation that does not exist.
    """
    oid = parse_id(org_id)
    if oid is None or not await memberships.is_member(session, user_id, oid):
        raise NotFound("organisation not found")

    org = await session.get(Organisation, oid)
    if not org:
        raise NotFound("organisation not found")
    return org


async def add_user_to_org(
    org_id: str,
    req: OrgAddUserRequest,
    caller_id: uuid.UUID,
    session: AsyncSession,
) -> None:
    """Add ``req.user_id`` to the organisation. Only existing members may add users."""
    oid = parse_id(org_id)
    if oid is None or not await memberships.is_member(session, caller_id, oid):
        raise Forbidden(NOT_A_MEMBER)

    if not await session.get(Organisation, oid):
        raise NotFound("organisation not found")

    target_id = parse_id(req.user_id)
    target = await session.get(User, target_id) if target_id else None
    if not target:
        raise NotFound("user not found")

    if await memberships.is_member(session, target.id, oid):
        log.info("org.member_exists", org_id=str(oid), user_id=str(target.id))
        return

    try:
        async with atomic(session):
            await memberships.add_member(session, target.id, oid)
    except IntegrityError:
        # a concurrent request inserted the same pair first
        log.info("org.member_exists", org_id=str(oid), user_id=str(target.id))
        return

    log.info("org.member_added", org_id=str(oid), user_id=str(target.id), by=str(caller_id))
