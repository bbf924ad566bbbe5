"""User and authentication schemas."""

from __future__ import annotations

from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def _check_email(value: str) -> str:
    """Reject malformed addresses but store exactly what the caller sent."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(str(exc)) from exc
    return value


def _check_password_bytes(value: str) -> str:
    if len(value.encode()) > MAX_PASSWORD_BYTES:
        raise ValueError(f"must not be more than {MAX_PASSWORD_BYTES} bytes")
    return value


Email = Annotated[str, AfterValidator(_check_email)]
Password = Annotated[str, Field(min_length=1, max_length=64), AfterValidator(_check_password_bytes)]


class UserRegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(alias="firstName", min_length=1, max_length=64)
    last_name: str = Field(alias="lastName", min_length=1, max_length=64)
    email: Email
    password: Password
    phone: str = Field(min_length=1)


class UserLoginRequest(BaseModel):
    email: Email
    password: Password


class UserResponse(BaseModel):
    """Public view of a user. Also the identity snapshot carried in session tokens."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    phone: str

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            user_id=str(user.id),
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone=user.phone,
        )


class AuthData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    user: UserResponse
