from datetime import datetime
from typing import Any, Optional

from pydantic import field_validator, model_validator

from advisory_crm.models.project import ProjectStatus
from advisory_crm.schemas.common import (
    CamelModel, UTCDateTime, blank_to_none, parse_optional_datetime,
    reject_explicit_nulls, require_min_length,
)


class ClientCreate(CamelModel):
    """Schema for creating a client."""
    name: str
    status: str = ProjectStatus.active.value
    last_contacted: Optional[datetime] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return require_min_length(v, "Name")

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        return blank_to_none(v) or ProjectStatus.active.value

    @field_validator("last_contacted", mode="before")
    @classmethod
    def parse_last_contacted(cls, v: Any) -> Optional[datetime]:
        return parse_optional_datetime(v)


class ClientUpdate(CamelModel):
    """Schema for updating a client. Only fields present in the payload are applied."""
    name: Optional[str] = None
    status: Optional[str] = None
    last_contacted: Optional[datetime] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return require_min_length(v, "Name")

    @field_validator("status")
    @classmethod
    def check_status(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v:
            raise ValueError("Status is required")
        return v

    @field_validator("last_contacted", mode="before")
    @classmethod
    def parse_last_contacted(cls, v: Any) -> Optional[datetime]:
        return parse_optional_datetime(v)

    @model_validator(mode="after")
    def check_nulls(self) -> "ClientUpdate":
        reject_explicit_nulls(self, {"name": "name", "status": "status"})
        return self


class ClientRead(CamelModel):
    """Schema for reading a client, with the number of documents filed under it."""
    id: int
    name: str
    status: str
    last_contacted: Optional[UTCDateTime] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime
    document_count: int = 0


class ClientStats(CamelModel):
    total_clients: int
    active_clients: int
