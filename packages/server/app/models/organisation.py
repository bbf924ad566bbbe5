"""Organisation model."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Organisation(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "organisations"

    name: str = Field(nullable=False, index=True, max_length=255)
    description: Optional[str] = None
    created_by_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
