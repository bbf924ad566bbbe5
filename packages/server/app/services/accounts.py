"""
Account service - registration, login and user lookup.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.auth import DEFAULT_BCRYPT_ROUNDS, hash_password, verify_password
from app.core.database import atomic
from app.core.errors import AppError, Conflict, NotFound
from app.models.organisation import Organisation
from app.models.user import User
from app.services import memberships
from orgpass_shared.schemas.users import UserLoginRequest, UserRegisterRequest

log = structlog.get_logger()

DUPLICATE_EMAIL = "email already exists"


class AuthenticationFailed(AppError):
    """Login rejected. Unknown email and wrong password are indistinguishable."""

    status_code = 401
    default_message = "Authentication failed"

    def __init__(self):
        super().__init__(status="Bad request")


def default_org_name(first_name: str) -> str:
    return f"{first_name}'s Organisation"


def parse_id(raw: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


async def get_user_by_email(email: str, session: AsyncSession) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user(user_id: str, session: AsyncSession) -> User:
    """Fetch a user by id; unknown and unparseable ids are both 404."""
    uid = parse_id(user_id)
    user = await session.get(User, uid) if uid else None
    if not user:
        raise NotFound("user not found")
    return user


async def register_user(
    req: UserRegisterRequest,
    session: AsyncSession,
    *,
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> tuple[User, Organisation]:
    """Create a user, their default organisation and the membership linking them.

    The three rows are committed together or not at all.
    """
    if await get_user_by_email(req.email, session):
        raise Conflict("email", DUPLICATE_EMAIL)

    password_hash = hash_password(req.password, rounds=bcrypt_rounds)

    user = User(
        first_name=req.first_name,
        last_name=req.last_name,
        email=req.email,
        password_hash=password_hash,
        phone=req.phone,
    )
    try:
        async with atomic(session):
            session.add(user)
            await session.flush()

            org = Organisation(
                name=default_org_name(user.first_name),
                created_by_id=user.id,
            )
            session.add(org)
            await session.flush()

            await memberships.add_member(session, user.id, org.id)
    except IntegrityError as exc:
        # lost a race with a concurrent registration for the same email
        log.warning("user.register_conflict", error=type(exc).__name__)
        raise Conflict("email", DUPLICATE_EMAIL) from exc

    log.info("user.registered", user_id=str(user.id), org_id=str(org.id))
    return user, org


async def authenticate(req: UserLoginRequest, session: AsyncSession) -> User:
    """Return the user whose credentials match, else raise AuthenticationFailed."""
    user = await get_user_by_email(req.email, session)
    if not user or not verify_password(req.password, user.password_hash):
        log.warning("auth.login_failure", reason="bad_credentials")
        raise AuthenticationFailed()

    log.info("auth.login_success", user_id=str(user.id))
    return user
