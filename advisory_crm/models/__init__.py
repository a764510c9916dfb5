from .team_member import TeamMember
from .client import Client
from .project import (
    Project, ProjectStatus, ProjectType,
    AffiliatePartner, ProjectCategory, ActiveStage,
)
from .document import Document

__all__ = [
    "TeamMember",
    "Client",
    "Project", "ProjectStatus", "ProjectType",
    "AffiliatePartner", "ProjectCategory", "ActiveStage",
    "Document",
]
