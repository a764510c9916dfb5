"""
Team Member Service Module

Team members are configuration: they are listed, created by the seed script,
and supply the fallback assignee for new projects.
"""
import logging
from datetime import datetime
from typing import Any, List

from sqlmodel import Session, select

from advisory_crm.core.errors import ValidationError
from advisory_crm.db.session import transaction
from advisory_crm.models.team_member import TeamMember
from advisory_crm.schemas.common import validate_payload
from advisory_crm.schemas.team_member import TeamMemberCreate, TeamMemberRead

logger = logging.getLogger(__name__)


def list_team_members(session: Session) -> List[TeamMemberRead]:
    members = session.exec(select(TeamMember).order_by(TeamMember.name, TeamMember.id)).all()
    return [TeamMemberRead.model_validate(m) for m in members]


def create_team_member(session: Session, payload: Any, now: datetime) -> TeamMemberRead:
    data = validate_payload(TeamMemberCreate, payload)

    existing = session.exec(select(TeamMember).where(TeamMember.email == data.email)).first()
    if existing:
        raise ValidationError.single("email", "A team member with this email already exists")

    member = TeamMember(**data.model_dump(), created_at=now, updated_at=now)
    with transaction(session):
        session.add(member)
    session.refresh(member)
    logger.info("Created team member %s (%s)", member.id, member.email)
    return TeamMemberRead.model_validate(member)


def default_assignee_id(session: Session) -> int:
    """
    Fallback assignee for projects created without one.

    Policy: the first team member in name order. Kept in one place so the rule
    can be changed without touching project creation.
    """
    member = session.exec(select(TeamMember).order_by(TeamMember.name, TeamMember.id)).first()
    if member is None:
        raise ValidationError.single("assignedToId", "No team member available to assign")
    return member.id
