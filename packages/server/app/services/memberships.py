"""
Membership authorization - the one place that answers "is this user a member
of that organisation" and the one place that writes membership rows.
"""

from __future__ import annotations

import uuid

from sqlalchemy import func, insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.user_organisation import UserOrganisation


async def is_member(session: AsyncSession, user_id: uuid.UUID, org_id: uuid.UUID) -> bool:
    """True iff a membership row exists for the pair (existence count, no materialisation)."""
    result = await session.execute(
        select(func.count())
        .select_from(UserOrganisation)
        .where(UserOrganisation.user_id == user_id, UserOrganisation.org_id == org_id)
    )
    return result.scalar_one() >= 1


async def add_member(session: AsyncSession, user_id: uuid.UUID, org_id: uuid.UUID) -> None:
    """Insert a membership row. The caller owns the surrounding transaction."""
    await session.execute(
        insert(UserOrganisation).values(user_id=user_id, org_id=org_id)
    )
