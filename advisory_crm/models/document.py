"""
Document Model Module

This module defines the Document model: metadata for a file filed under a
client. The file itself lives on disk under the upload directory.
"""
from datetime import datetime
from typing import Optional

from sqlmodel import DateTime, SQLModel, Field

from advisory_crm.core.clock import utcnow


class Document(SQLModel, table=True):
    """
    Document model for a file attached to a client.

    A document row is only created after the uploaded file has been written
    to disk. Deleting the row also removes the file (best effort).

    Attributes:
        id: Auto-incrementing primary key
        name: Display name, also used as the download filename
        file_path: Location of the stored file
        mime_type: MIME type reported by the uploader
        size: File size in bytes
        client_id: Foreign key to the owning Client (required)
        created_at: When the record was created (naive UTC)
        updated_at: When the record was last modified (naive UTC)
    """
    __tablename__ = "documents"

    # Primary key
    id: Optional[int] = Field(default=None, primary_key=True)

    name: str = Field(nullable=False)
    file_path: str = Field(nullable=False)
    mime_type: Optional[str] = None
    size: Optional[int] = None

    # Ownership
    client_id: int = Field(foreign_key="clients.id", nullable=False, index=True)

    # Audit timestamps, stored as naive UTC
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
