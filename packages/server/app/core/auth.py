"""
Authentication for orgpass.

- Password hashing (bcrypt)
- Stateless JWT sessions carrying a snapshot of the user's public profile
- Bearer-token access guard for protected routes

There is no revocation list: a token stays valid until its expiry.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import bcrypt
import jwt
import structlog
from fastapi import Depends, Request
from pydantic import ValidationError as PydanticValidationError

from app.core.config import Settings
from app.core.errors import ConfigError, HashingError, Unauthenticated
from orgpass_shared.schemas.users import UserResponse

log = structlog.get_logger()

DEFAULT_BCRYPT_ROUNDS = 12

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password using bcrypt with a random salt."""
    try:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()
    except (ValueError, TypeError) as exc:
        raise HashingError("password could not be hashed") from exc


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash. Never raises on mismatch."""
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except (ValueError, TypeError):
        return False


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

class TokenError(Exception):
    """Base class for session token verification failures."""


class InvalidSignature(TokenError):
    pass


class MalformedToken(TokenError):
    pass


class TokenExpired(TokenError):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and verifies signed, time-limited session tokens.

    ``clock`` returns the current aware datetime; it is injectable so expiry
    can be exercised without sleeping.
    """

    def __init__(self, settings: Settings, clock: Optional[Callable[[], datetime]] = None):
        self._secret = settings.secret_key
        self.algorithm = settings.jwt_algorithm
        self.ttl = timedelta(minutes=settings.jwt_expire_minutes)
        self._now = clock or _utcnow

    def _signing_key(self) -> str:
        if not self._secret:
            raise ConfigError("token signing secret is not configured")
        return self._secret

    def issue(self, user) -> str:
        """Create a signed JWT embedding a snapshot of ``user``."""
        key = self._signing_key()
        now = self._now()
        snapshot = UserResponse.from_user(user)
        payload = {
            "sub": str(user.id),
            "user": snapshot.model_dump(by_alias=True),
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        return jwt.encode(payload, key, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        """Check signature, algorithm and expiry. Returns the claims.

        Raises InvalidSignature, MalformedToken or TokenExpired.
        """
        key = self._signing_key()
        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": ["sub", "exp"]},
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            raise InvalidSignature("invalid token") from exc
        except jwt.PyJWTError as exc:
            raise MalformedToken("invalid token") from exc

        expires_at = claims.get("exp")
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise MalformedToken("invalid token")
        if self._now().timestamp() > expires_at:
            raise TokenExpired("expired token")
        return claims

    def decode_identity(self, token: str) -> UserResponse:
        """Return the user snapshot embedded at issue time (may be stale)."""
        try:
            claims = self.verify(token)
            snapshot = UserResponse.model_validate(claims.get("user"))
        except TokenError as exc:
            raise Unauthenticated(str(exc)) from exc
        except PydanticValidationError as exc:
            raise Unauthenticated("invalid token") from exc
        if snapshot.user_id != claims["sub"]:
            raise Unauthenticated("invalid token")
        return snapshot


# ---------------------------------------------------------------------------
# Access guard
# ---------------------------------------------------------------------------

def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def parse_bearer(header: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header:
        raise Unauthenticated("Authorization header is missing")
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise Unauthenticated("Authorization header is malformed")
    return parts[1]


async def require_bearer(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> UserResponse:
    """Reject the request unless it carries a valid, unexpired bearer token."""
    try:
        token = parse_bearer(request.headers.get("Authorization"))
        identity = tokens.decode_identity(token)
    except Unauthenticated as exc:
        log.info("auth.token_rejected", path=request.url.path, reason=exc.message)
        raise
    request.state.identity = identity
    return identity
