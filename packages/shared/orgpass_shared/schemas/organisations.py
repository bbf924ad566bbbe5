"""Organisation schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OrgCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)


class OrgAddUserRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)


class OrgResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    org_id: str = Field(alias="orgId")
    name: str
    description: Optional[str] = None

    @classmethod
    def from_org(cls, org) -> "OrgResponse":
        return cls(org_id=str(org.id), name=org.name, description=org.description)


class OrgListData(BaseModel):
    organisations: List[OrgResponse]
