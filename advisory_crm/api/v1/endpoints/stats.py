from fastapi import APIRouter, Depends
from sqlmodel import Session

from advisory_crm.api import deps
from advisory_crm.core.clock import Clock
from advisory_crm.schemas.client import ClientStats
from advisory_crm.schemas.project import ProjectStats
from advisory_crm.services import stats as stats_service

router = APIRouter()


@router.get("/projects", response_model=ProjectStats)
def project_stats(db: Session = Depends(deps.get_db), clock: Clock = Depends(deps.get_clock)):
    """
    Dashboard numbers for projects: totals, status breakdown, completion rate,
    pending follow-ups and the five most recent updates.
    """
    return stats_service.project_stats(db, clock())


@router.get("/clients", response_model=ClientStats)
def client_stats(db: Session = Depends(deps.get_db)):
    """Total and active client counts."""
    return stats_service.client_stats(db)
