"""
Project Model Module

This module defines the Project model for leads and engagements, together with
the value sets the dashboard offers for project fields.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import DateTime, SQLModel, Field, Relationship

from advisory_crm.core.clock import utcnow
from advisory_crm.models.team_member import TeamMember


class ProjectStatus(str, Enum):
    """Status vocabulary shared by projects and clients."""
    active = "active"
    pending = "pending"
    completed = "completed"
    on_hold = "on-hold"


class ProjectType(str, Enum):
    direct = "direct"
    affiliate = "affiliate"
    other = "other"


class AffiliatePartner(str, Enum):
    """Partner organizations that refer affiliate projects."""
    kotak = "kotak"
    wealth_360 = "360-wealth"
    lgt = "lgt"
    pandion = "pandion"


class ProjectCategory(str, Enum):
    """Buckets for projects of type "other"."""
    phdcci = "phdcci"
    idc = "idc"
    marketing = "marketing"
    pr = "pr"


class ActiveStage(str, Enum):
    """Deal pipeline stages, meaningful while a project is active."""
    nda = "nda"
    im_financial_model = "im_financial_model"
    el = "el"
    term_sheet = "term_sheet"
    due_diligence = "due_diligence"
    agreement = "agreement"
    investor_tracker = "investor_tracker"


class Project(SQLModel, table=True):
    """
    Project model representing a lead or engagement.

    Attributes:
        id: Auto-incrementing primary key
        name: Project name/title (required)
        phone_number: Contact phone number
        poc: Name of the point of contact
        type: One of "direct", "affiliate", "other"
        affiliate_partner: Referring partner, set when type is "affiliate"
        category: Category bucket, set when type is "other"
        last_contacted: When the project was last contacted
        status: One of "active", "pending", "completed", "on-hold"
        active_stage: Pipeline stage while the project is active
        has_invoice: "yes" or "no", stored as text rather than a boolean
        assigned_to_id: Foreign key to the TeamMember owning the project
        client_id: Foreign key to the Client this project is for
        created_at: When the record was created (naive UTC)
        updated_at: When the record was last modified (naive UTC)
    """
    __tablename__ = "projects"

    # Primary key
    id: Optional[int] = Field(default=None, primary_key=True)

    # Basic project information
    name: str = Field(nullable=False)
    phone_number: Optional[str] = None
    poc: Optional[str] = None

    # Classification
    type: str = Field(default=ProjectType.direct.value, nullable=False)
    affiliate_partner: Optional[str] = None
    category: Optional[str] = None

    last_contacted: Optional[datetime] = Field(default=None, sa_type=DateTime)

    # Status tracking
    status: str = Field(default=ProjectStatus.active.value, nullable=False)
    active_stage: Optional[str] = None

    # Text flag, "yes" or "no"
    has_invoice: str = Field(default="no")

    # Relationships
    assigned_to_id: int = Field(foreign_key="team_members.id", nullable=False)
    client_id: Optional[int] = Field(default=None, foreign_key="clients.id")

    # Audit timestamps, stored as naive UTC
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)

    # Assignee, joined into every project listing
    assigned_to: Optional[TeamMember] = Relationship()
