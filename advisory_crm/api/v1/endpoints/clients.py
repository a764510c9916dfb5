"""
Client Endpoints Module

This module provides CRUD endpoints for clients and the listing of a client's
projects. Deleting a client also deletes its documents and projects.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlmodel import Session

from advisory_crm.api import deps
from advisory_crm.core.clock import Clock
from advisory_crm.schemas.client import ClientRead
from advisory_crm.schemas.project import ProjectRead
from advisory_crm.services import clients as client_service
from advisory_crm.services import projects as project_service
from advisory_crm.services.files import FileStore

router = APIRouter()


@router.get("", response_model=List[ClientRead])
def list_clients(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    db: Session = Depends(deps.get_db),
):
    """
    Retrieve clients, most recently updated first, each with its document count.

    Args:
        status_filter: Exact status to match ("all" or omitted for any)
    """
    return client_service.list_clients(db, status_filter)


@router.get("/{client_id}", response_model=ClientRead)
def read_client(client_id: int, db: Session = Depends(deps.get_db)):
    """
    Get a specific client by ID.

    Raises:
        404: If the client doesn't exist
    """
    return client_service.get_client(db, client_id)


@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
def create_client(
    client_data: Dict[str, Any] = Body(...),
    db: Session = Depends(deps.get_db),
    clock: Clock = Depends(deps.get_clock),
):
    """Create a new client."""
    return client_service.create_client(db, client_data, clock())


@router.patch("/{client_id}", response_model=ClientRead)
def update_client(
    client_id: int,
    client_update: Dict[str, Any] = Body(...),
    db: Session = Depends(deps.get_db),
    clock: Clock = Depends(deps.get_clock),
):
    """
    Update an existing client. Only the fields present in the body change.

    Raises:
        400: If the payload fails validation
        404: If the client doesn't exist
    """
    return client_service.update_client(db, client_id, client_update, clock())


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: int,
    db: Session = Depends(deps.get_db),
    file_store: FileStore = Depends(deps.get_file_store),
):
    """Delete a client with all of its documents and projects."""
    client_service.delete_client(db, client_id, file_store)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{client_id}/projects", response_model=List[ProjectRead])
def list_client_projects(client_id: int, db: Session = Depends(deps.get_db)):
    """Retrieve the projects linked to a client."""
    return project_service.list_projects_by_client(db, client_id)
