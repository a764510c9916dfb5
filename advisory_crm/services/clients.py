"""
Client Service Module

CRUD for clients. Listings carry a computed ``documentCount``. Deleting a
client cascades to its documents (rows and stored files) and its projects.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlmodel import Session, col, func, select

from advisory_crm.core.errors import NotFoundError
from advisory_crm.db.session import transaction
from advisory_crm.models.client import Client
from advisory_crm.models.document import Document
from advisory_crm.models.project import Project
from advisory_crm.schemas.client import ClientCreate, ClientRead, ClientUpdate
from advisory_crm.schemas.common import validate_payload
from advisory_crm.services.files import FileStore

logger = logging.getLogger(__name__)


def _document_counts(session: Session, client_ids: List[int]) -> Dict[int, int]:
    if not client_ids:
        return {}
    rows = session.exec(
        select(Document.client_id, func.count(Document.id))
        .where(col(Document.client_id).in_(client_ids))
        .group_by(Document.client_id)
    ).all()
    return {client_id: count for client_id, count in rows}


def _to_read(client: Client, document_count: int = 0) -> ClientRead:
    # Read through attributes so expired instances reload after a commit
    return ClientRead.model_validate(client).model_copy(update={"document_count": document_count})


def list_clients(session: Session, status: Optional[str] = None) -> List[ClientRead]:
    statement = select(Client).order_by(col(Client.updated_at).desc(), col(Client.id).desc())
    if status and status != "all":
        statement = statement.where(Client.status == status)

    clients = session.exec(statement).all()
    counts = _document_counts(session, [c.id for c in clients])
    return [_to_read(c, counts.get(c.id, 0)) for c in clients]


def get_client(session: Session, client_id: int) -> ClientRead:
    client = session.get(Client, client_id)
    if client is None:
        raise NotFoundError("Client", client_id)
    return _to_read(client, _document_counts(session, [client_id]).get(client_id, 0))


def create_client(session: Session, payload: Any, now: datetime) -> ClientRead:
    data = validate_payload(ClientCreate, payload)
    client = Client(**data.model_dump(), created_at=now, updated_at=now)
    with transaction(session):
        session.add(client)
    session.refresh(client)
    logger.info("Created client %s", client.id)
    return _to_read(client)


def update_client(session: Session, client_id: int, payload: Any, now: datetime) -> ClientRead:
    """
    Apply a partial update to a client.

    Raises:
        NotFoundError: no client with ``client_id``
        ValidationError: the payload violates a field rule
    """
    client = session.get(Client, client_id)
    if client is None:
        raise NotFoundError("Client", client_id)

    changes = validate_payload(ClientUpdate, payload).model_dump(exclude_unset=True)
    with transaction(session):
        for key, value in changes.items():
            setattr(client, key, value)
        client.updated_at = now
        session.add(client)

    logger.info("Updated client %s fields %s", client_id, sorted(changes))
    return get_client(session, client_id)


def _delete_rows(session: Session, rows: Iterable[Any]) -> None:
    for row in rows:
        session.delete(row)
    session.flush()


def delete_client(session: Session, client_id: int, file_store: FileStore) -> None:
    """
    Delete a client together with its documents and projects.

    The row deletions form one transaction: if any step fails nothing is
    deleted and the error propagates. Stored files are removed only after the
    commit, best effort, so a rolled-back delete never loses a file.
    """
    client = session.get(Client, client_id)
    documents = session.exec(select(Document).where(Document.client_id == client_id)).all()
    projects = session.exec(select(Project).where(Project.client_id == client_id)).all()
    file_paths = [d.file_path for d in documents if d.file_path]

    with transaction(session):
        _delete_rows(session, documents)
        _delete_rows(session, projects)
        if client is not None:
            _delete_rows(session, [client])

    for path in file_paths:
        file_store.remove(path)

    logger.info(
        "Deleted client %s with %d documents and %d projects",
        client_id, len(documents), len(projects),
    )

