"""
Client Model Module

This module defines the Client model representing organizations that receive
advisory services. A client owns its documents and is referenced by projects.
"""
from datetime import datetime
from typing import Optional

from sqlmodel import DateTime, SQLModel, Field

from advisory_crm.core.clock import utcnow


class Client(SQLModel, table=True):
    """
    Client model representing an organization receiving advisory services.

    Clients are created explicitly by a user, or implicitly when a "direct"
    project is created without a client reference. Deleting a client removes
    its documents (including the stored files) and its projects.

    Attributes:
        id: Auto-incrementing primary key
        name: Organization name (required)
        status: One of "active", "pending", "completed", "on-hold"
        last_contacted: Most recent contact with this client or any of its
            projects. Propagation from projects only ever moves it forward.
        created_at: When the record was created (naive UTC)
        updated_at: When the record was last modified (naive UTC)
    """
    __tablename__ = "clients"

    # Primary key
    id: Optional[int] = Field(default=None, primary_key=True)

    name: str = Field(nullable=False)

    # Status tracking - shares the project status vocabulary
    status: str = Field(default="active", nullable=False)

    last_contacted: Optional[datetime] = Field(default=None, sa_type=DateTime)

    # Audit timestamps, stored as naive UTC
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
