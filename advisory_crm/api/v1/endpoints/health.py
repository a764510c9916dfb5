from fastapi import APIRouter, Depends
from sqlmodel import Session, text
from typing import Any

from advisory_crm.api import deps

router = APIRouter()

@router.get("", response_model=dict[str, Any])
def health_check(db: Session = Depends(deps.get_db)) -> Any:
    """
    Health check endpoint. Round-trips the database.
    """
    db.connection().execute(text("SELECT 1"))
    return {"status": "ok", "database": "ok"}
