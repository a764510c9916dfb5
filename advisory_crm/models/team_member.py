"""
Team Member Model Module

This module defines the TeamMember model for the advisory staff that projects
are assigned to. Team members are created administratively (seed data) and are
never deleted by the application.
"""
from datetime import datetime
from typing import Optional

from sqlmodel import DateTime, SQLModel, Field

from advisory_crm.core.clock import utcnow


class TeamMember(SQLModel, table=True):
    """
    Team member model representing a staff member who can own projects.

    Attributes:
        id: Auto-incrementing primary key
        name: Display name (required)
        email: Work email address (required, unique)
        role: Job title, e.g. "Senior Advisor" (required)
        avatar_url: URL to the member's avatar image
        created_at: When the record was created (naive UTC)
        updated_at: When the record was last modified (naive UTC)
    """
    __tablename__ = "team_members"

    # Primary key
    id: Optional[int] = Field(default=None, primary_key=True)

    name: str = Field(nullable=False)
    email: str = Field(unique=True, index=True, nullable=False)
    role: str = Field(nullable=False)
    avatar_url: Optional[str] = None

    # Audit timestamps, stored as naive UTC
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
