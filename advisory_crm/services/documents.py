"""
Document Service Module

Metadata for files filed under a client. The files themselves are handled by
``FileStore``; this module only records, lists and removes them.
"""
import logging
from datetime import datetime
from typing import Any, List, Optional

from sqlmodel import Session, col, select

from advisory_crm.core.errors import NotFoundError
from advisory_crm.db.session import transaction
from advisory_crm.models.client import Client
from advisory_crm.models.document import Document
from advisory_crm.schemas.common import validate_payload
from advisory_crm.schemas.document import DocumentCreate, DocumentRead
from advisory_crm.services.files import FileStore

logger = logging.getLogger(__name__)


def list_documents_by_client(session: Session, client_id: int) -> List[DocumentRead]:
    documents = session.exec(
        select(Document)
        .where(Document.client_id == client_id)
        .order_by(col(Document.created_at).desc(), col(Document.id).desc())
    ).all()
    return [DocumentRead.model_validate(d) for d in documents]


def get_document(session: Session, document_id: int) -> Optional[DocumentRead]:
    document = session.get(Document, document_id)
    return DocumentRead.model_validate(document) if document else None


def create_document(session: Session, payload: Any, now: datetime) -> DocumentRead:
    """
    Record metadata for a file that is already stored.

    Raises:
        ValidationError: name too short, empty path or missing client id
        NotFoundError: the client does not exist
    """
    data = validate_payload(DocumentCreate, payload)
    if session.get(Client, data.client_id) is None:
        raise NotFoundError("Client", data.client_id)

    document = Document(**data.model_dump(), created_at=now, updated_at=now)
    with transaction(session):
        session.add(document)
    logger.info("Created document %s for client %s", document.id, data.client_id)
    return DocumentRead.model_validate(document)


def delete_document(session: Session, document_id: int, file_store: FileStore) -> None:
    """
    Remove a document's stored file (best effort) and then its row.

    A missing file or a failed removal does not stop the row delete; a missing
    row is a no-op.
    """
    document = session.get(Document, document_id)
    if document is not None and document.file_path:
        file_store.remove(document.file_path)

    with transaction(session):
        if document is not None:
            session.delete(document)
    logger.info("Deleted document %s", document_id)
