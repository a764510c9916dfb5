from typing import Any, Optional

from pydantic import Field, field_validator

from advisory_crm.schemas.common import CamelModel, UTCDateTime, require_min_length


class DocumentCreate(CamelModel):
    """Metadata for a file that has already been written to storage."""
    name: str
    file_path: str
    mime_type: Optional[str] = None
    size: Optional[int] = None
    client_id: Optional[int] = Field(default=None, validate_default=True)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return require_min_length(v, "Name")

    @field_validator("file_path")
    @classmethod
    def check_file_path(cls, v: str) -> str:
        if not v:
            raise ValueError("File path is required")
        return v

    @field_validator("client_id", mode="after")
    @classmethod
    def check_client_id(cls, v: Any) -> int:
        if v is None or v <= 0:
            raise ValueError("Client ID is required")
        return v


class DocumentRead(CamelModel):
    id: int
    name: str
    file_path: str
    mime_type: Optional[str] = None
    size: Optional[int] = None
    client_id: int
    created_at: UTCDateTime
    updated_at: UTCDateTime
