from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from advisory_crm.api import deps
from advisory_crm.schemas.team_member import TeamMemberRead
from advisory_crm.services import team_members as team_member_service

router = APIRouter()


@router.get("", response_model=List[TeamMemberRead])
def list_team_members(db: Session = Depends(deps.get_db)):
    """Retrieve all team members sorted by name."""
    return team_member_service.list_team_members(db)
