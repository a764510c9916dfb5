"""
Project Service Module

CRUD for projects plus the rules that keep a project's client consistent with
it:

- creating a direct project without a client creates one from the project;
- a project's last-contacted date is merged onto its client monotonically
  (the client's value only ever moves forward);
- a project's status change is copied onto its client (last writer wins).

Every mutation runs inside a single ``transaction`` so a failure partway
rolls back the project change together with any client change.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, List, Optional

from sqlalchemy.orm import selectinload
from sqlmodel import Session, col, select

from advisory_crm.core.errors import NotFoundError, ValidationError
from advisory_crm.db.session import transaction
from advisory_crm.models.client import Client
from advisory_crm.models.project import Project, ProjectType
from advisory_crm.models.team_member import TeamMember
from advisory_crm.schemas.common import validate_payload
from advisory_crm.schemas.project import (
    ProjectCreate, ProjectFilters, ProjectRead, ProjectUpdate, raw_id, raw_value,
    type_requirement_errors,
)
from advisory_crm.services.team_members import default_assignee_id

logger = logging.getLogger(__name__)

LAST_CONTACTED_BUCKETS = ("today", "week", "month", "quarter")


def bucket_start(bucket: str, now: datetime) -> Optional[datetime]:
    """
    Start of the current calendar bucket containing ``now``.

    Weeks start on Sunday. Returns None for an unknown bucket.
    """
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if bucket == "today":
        return today
    if bucket == "week":
        return today - timedelta(days=(today.weekday() + 1) % 7)
    if bucket == "month":
        return today.replace(day=1)
    if bucket == "quarter":
        return today.replace(month=3 * ((today.month - 1) // 3) + 1, day=1)
    return None


def _is_set(value: Optional[str]) -> bool:
    return value is not None and value != "" and value != "all"


def _project_query():
    return (
        select(Project)
        .options(selectinload(Project.assigned_to))
        .order_by(col(Project.updated_at).desc(), col(Project.id).desc())
    )


def _read_all(session: Session, statement) -> List[ProjectRead]:
    return [ProjectRead.model_validate(p) for p in session.exec(statement).all()]


def _get_read(session: Session, project_id: int) -> ProjectRead:
    project = session.exec(_project_query().where(Project.id == project_id)).first()
    if project is None:
        raise NotFoundError("Project", project_id)
    return ProjectRead.model_validate(project)


def _reference_errors(session: Session, assigned_to_id: Optional[int], client_id: Optional[int]) -> List[str]:
    errors = []
    if assigned_to_id is not None and session.get(TeamMember, assigned_to_id) is None:
        errors.append(f'Team member {assigned_to_id} does not exist at "assignedToId"')
    if client_id is not None and session.get(Client, client_id) is None:
        errors.append(f'Client {client_id} does not exist at "clientId"')
    return errors


def _raise_if_any(errors: List[str]) -> None:
    if errors:
        raise ValidationError(errors)


def _validate_all(session: Session, schema, payload: Any):
    """
    Validate ``payload`` against ``schema``.

    When the payload fails field validation, the foreign keys that can still be
    read from it are checked too, so the caller sees every problem at once.
    """
    try:
        return validate_payload(schema, payload)
    except ValidationError as exc:
        extra = _reference_errors(session, raw_id(payload, "assigned_to_id"), raw_id(payload, "client_id"))
        raise ValidationError(exc.errors + [e for e in extra if e not in exc.errors]) from exc


def _merged_type_errors(project: Project, payload: Any) -> List[str]:
    """Type rule for a raw update payload merged over the stored project."""
    merged = {}
    touched = False
    for field in ("type", "affiliate_partner", "category"):
        present, value = raw_value(payload, field)
        touched = touched or present
        merged[field] = value if present else getattr(project, field)
    if not touched:
        return []
    return type_requirement_errors(merged["type"], merged["affiliate_partner"], merged["category"])


def list_projects(
    session: Session,
    filters: Optional[ProjectFilters],
    now: datetime,
) -> List[ProjectRead]:
    """
    All projects matching every supplied filter, most recently updated first.

    ``last_contacted`` selects a bucket (today/week/month/quarter) running from
    the bucket start up to ``now``; projects never contacted never match.
    """
    filters = filters or ProjectFilters()
    statement = _project_query()

    if _is_set(filters.status):
        statement = statement.where(Project.status == filters.status)

    if _is_set(filters.assigned_to_id):
        try:
            assigned_to_id = int(filters.assigned_to_id)
        except ValueError:
            raise ValidationError.single("assignedTo", "Assignee filter must be a number")
        statement = statement.where(Project.assigned_to_id == assigned_to_id)

    if _is_set(filters.type):
        statement = statement.where(Project.type == filters.type)

    if _is_set(filters.last_contacted):
        start = bucket_start(filters.last_contacted, now)
        if start is None:
            logger.warning("Ignoring unknown lastContacted filter %r", filters.last_contacted)
        else:
            statement = statement.where(
                col(Project.last_contacted).is_not(None),
                col(Project.last_contacted) >= start,
                col(Project.last_contacted) <= now,
            )

    projects = _read_all(session, statement)
    logger.debug("Listed %d projects with filters %s", len(projects), filters.model_dump(exclude_none=True))
    return projects


def list_projects_by_affiliate_partner(session: Session, partner: str) -> List[ProjectRead]:
    return _read_all(session, _project_query().where(
        Project.type == ProjectType.affiliate.value,
        Project.affiliate_partner == partner,
    ))


def list_projects_by_category(session: Session, category: str) -> List[ProjectRead]:
    return _read_all(session, _project_query().where(
        Project.type == ProjectType.other.value,
        Project.category == category,
    ))


def list_projects_by_client(session: Session, client_id: int) -> List[ProjectRead]:
    return _read_all(session, _project_query().where(Project.client_id == client_id))


def create_project(session: Session, payload: Any, now: datetime) -> ProjectRead:
    """
    Create a project from an untyped payload.

    A direct project sent without a client gets a new client named after it,
    sharing its status and last-contacted date.
    """
    values = _validate_all(session, ProjectCreate, payload).model_dump()
    if values["assigned_to_id"] is None:
        values["assigned_to_id"] = default_assignee_id(session)
    _raise_if_any(_reference_errors(session, values["assigned_to_id"], values["client_id"]))

    with transaction(session):
        if values["type"] == ProjectType.direct.value and values["client_id"] is None and values["name"]:
            client = Client(
                name=values["name"],
                status=values["status"],
                last_contacted=values["last_contacted"],
                created_at=now,
                updated_at=now,
            )
            session.add(client)
            session.flush()
            values["client_id"] = client.id
            logger.info("Created client %s for direct project %r", client.id, values["name"])

        project = Project(**values, created_at=now, updated_at=now)
        session.add(project)
        session.flush()

        if project.client_id is not None and project.last_contacted is not None:
            propagate_last_contacted(session, project.client_id, project.last_contacted, now)

    logger.info("Created project %s (%s)", project.id, project.type)
    return _get_read(session, project.id)


def update_project(session: Session, project_id: int, payload: Any, now: datetime) -> ProjectRead:
    """
    Apply a partial update and propagate the result to the project's client.

    Raises:
        NotFoundError: no project with ``project_id``
        ValidationError: the payload violates a field rule
    """
    project = session.get(Project, project_id)
    if project is None:
        raise NotFoundError("Project", project_id)

    try:
        changes = _validate_all(session, ProjectUpdate, payload).changes()
    except ValidationError as exc:
        extra = _merged_type_errors(project, payload)
        raise ValidationError(exc.errors + [e for e in extra if e not in exc.errors]) from exc

    errors = []
    if {"type", "affiliate_partner", "category"} & changes.keys():
        errors = type_requirement_errors(
            changes.get("type", project.type),
            changes.get("affiliate_partner", project.affiliate_partner),
            changes.get("category", project.category),
        )
    errors += _reference_errors(session, changes.get("assigned_to_id"), changes.get("client_id"))
    _raise_if_any(errors)

    previous_last_contacted = project.last_contacted
    previous_status = project.status

    with transaction(session):
        for key, value in changes.items():
            setattr(project, key, value)
        project.updated_at = now
        session.add(project)
        session.flush()

        if project.client_id is not None:
            if project.last_contacted is not None and project.last_contacted != previous_last_contacted:
                propagate_last_contacted(session, project.client_id, project.last_contacted, now)
            if project.status != previous_status:
                propagate_status(session, project.client_id, project.status, now)

    logger.info("Updated project %s fields %s", project_id, sorted(changes))
    return _get_read(session, project_id)


def delete_project(session: Session, project_id: int) -> None:
    """Delete a project. The client and its documents are left alone; a missing id is a no-op."""
    project = session.get(Project, project_id)
    with transaction(session):
        if project is not None:
            session.delete(project)
    logger.info("Deleted project %s", project_id)


def propagate_last_contacted(session: Session, client_id: int, candidate: datetime, now: datetime) -> bool:
    """
    Monotonic merge of a project's last-contacted date onto its client.

    The client is only written when it has no value yet or ``candidate`` is
    strictly more recent. Runs inside the caller's transaction. Returns
    whether the client changed.
    """
    client = session.get(Client, client_id)
    if client is None:
        return False
    if client.last_contacted is not None and candidate <= client.last_contacted:
        return False
    client.last_contacted = candidate
    client.updated_at = now
    session.add(client)
    return True


def propagate_status(session: Session, client_id: int, status: str, now: datetime) -> bool:
    """Copy a project's new status onto its client. Last writer wins."""
    client = session.get(Client, client_id)
    if client is None:
        return False
    client.status = status
    client.updated_at = now
    session.add(client)
    return True
