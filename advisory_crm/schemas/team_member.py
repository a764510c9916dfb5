from typing import Optional

from pydantic import EmailStr, field_validator

from advisory_crm.schemas.common import CamelModel, UTCDateTime, require_min_length


# Properties to receive on creation (seed data / admin tooling)
class TeamMemberCreate(CamelModel):
    name: str
    email: EmailStr
    role: str
    avatar_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return require_min_length(v, "Name")

    @field_validator("role")
    @classmethod
    def check_role(cls, v: str) -> str:
        return require_min_length(v, "Role")


# Public fields joined into project listings
class TeamMemberSummary(CamelModel):
    id: int
    name: str
    avatar_url: Optional[str] = None


# Properties to return to client
class TeamMemberRead(TeamMemberSummary):
    email: str
    role: str
    created_at: UTCDateTime
    updated_at: UTCDateTime
