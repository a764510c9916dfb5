"""
Project Endpoints Module

This module provides the endpoints for listing, creating, updating and deleting
projects. Request bodies are passed through to the project service, which owns
normalization and the client propagation rules.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlmodel import Session

from advisory_crm.api import deps
from advisory_crm.core.clock import Clock
from advisory_crm.schemas.project import ProjectFilters, ProjectRead
from advisory_crm.services import projects as project_service

router = APIRouter()


@router.get("", response_model=List[ProjectRead])
def list_projects(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    assigned_to: Optional[str] = Query(default=None, alias="assignedTo"),
    project_type: Optional[str] = Query(default=None, alias="type"),
    last_contacted: Optional[str] = Query(default=None, alias="lastContacted"),
    db: Session = Depends(deps.get_db),
    clock: Clock = Depends(deps.get_clock),
):
    """
    Retrieve projects, most recently updated first.

    Args:
        status_filter: Exact status to match ("all" or omitted for any)
        assigned_to: Team member ID to match ("all" or omitted for any)
        project_type: Exact project type to match ("all" or omitted for any)
        last_contacted: One of "today", "week", "month", "quarter"

    Returns:
        List[ProjectRead]: Matching projects joined with their assignee
    """
    filters = ProjectFilters(
        status=status_filter,
        assigned_to_id=assigned_to,
        type=project_type,
        last_contacted=last_contacted,
    )
    return project_service.list_projects(db, filters, clock())


@router.get("/affiliate/{partner}", response_model=List[ProjectRead])
def list_affiliate_projects(partner: str, db: Session = Depends(deps.get_db)):
    """Retrieve affiliate projects referred by ``partner``."""
    return project_service.list_projects_by_affiliate_partner(db, partner)


@router.get("/other/{category}", response_model=List[ProjectRead])
def list_other_projects(category: str, db: Session = Depends(deps.get_db)):
    """Retrieve projects of type "other" in ``category``."""
    return project_service.list_projects_by_category(db, category)


@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(
    project_data: Dict[str, Any] = Body(...),
    db: Session = Depends(deps.get_db),
    clock: Clock = Depends(deps.get_clock),
):
    """
    Create a new project.

    If no assignee is given the project goes to the first team member by name.
    A direct project without a client gets a new client named after it.

    Raises:
        400: If the payload fails validation
    """
    return project_service.create_project(db, project_data, clock())


@router.patch("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    project_update: Dict[str, Any] = Body(...),
    db: Session = Depends(deps.get_db),
    clock: Clock = Depends(deps.get_clock),
):
    """
    Update an existing project. Only the fields present in the body change.

    Raises:
        400: If the payload fails validation
        404: If the project doesn't exist
    """
    return project_service.update_project(db, project_id, project_update, clock())


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: int, db: Session = Depends(deps.get_db)):
    """Delete a project. Its client is left untouched."""
    project_service.delete_project(db, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
