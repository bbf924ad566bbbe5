"""User-Organisation membership (join table)."""

import uuid

from sqlmodel import Field, SQLModel


class UserOrganisation(SQLModel, table=True):
    __tablename__ = "users_organisations"

    user_id: uuid.UUID = Field(foreign_key="users.id", primary_key=True)
    org_id: uuid.UUID = Field(foreign_key="organisations.id", primary_key=True)
