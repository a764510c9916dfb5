"""
Document Endpoints Module

Upload, list, download and delete the files filed under a client. Uploads are
written to the file store first; the metadata row is only created once the
file is safely on disk.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from fastapi.responses import FileResponse
from sqlmodel import Session

from advisory_crm.api import deps
from advisory_crm.core.clock import Clock
from advisory_crm.schemas.document import DocumentRead
from advisory_crm.services import clients as client_service
from advisory_crm.services import documents as document_service
from advisory_crm.services.files import FileStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{client_id}/documents", response_model=List[DocumentRead])
def list_documents(client_id: int, db: Session = Depends(deps.get_db)):
    """Retrieve a client's documents, newest first."""
    return document_service.list_documents_by_client(db, client_id)


@router.post("/{client_id}/documents", response_model=DocumentRead, status_code=status.HTTP_201_CREATED)
def upload_document(
    client_id: int,
    file: Optional[UploadFile] = File(default=None),
    name: Optional[str] = Form(default=None),
    db: Session = Depends(deps.get_db),
    clock: Clock = Depends(deps.get_clock),
    file_store: FileStore = Depends(deps.get_file_store),
):
    """
    Upload a file for a client.

    The multipart body carries the file in ``file`` and an optional display
    ``name`` (defaults to the uploaded filename).

    Raises:
        400: If no file part is present or the metadata fails validation
        404: If the client doesn't exist
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    # Raises 404 before anything is written
    client_service.get_client(db, client_id)

    stored = file_store.save(client_id, file.file, file.filename, file.content_type)
    try:
        return document_service.create_document(
            db,
            {
                "name": (name or "").strip() or file.filename,
                "filePath": stored.path,
                "mimeType": stored.mime_type,
                "size": stored.size,
                "clientId": client_id,
            },
            clock(),
        )
    except Exception:
        file_store.remove(stored.path)
        raise


@router.get("/{client_id}/documents/{document_id}/download")
def download_document(
    client_id: int,
    document_id: int,
    db: Session = Depends(deps.get_db),
    file_store: FileStore = Depends(deps.get_file_store),
):
    """
    Stream a stored document back under its display name.

    Raises:
        404: If the document doesn't exist, belongs to another client, or its
            file is missing from storage
    """
    document = document_service.get_document(db, document_id)
    if not document or document.client_id != client_id:
        raise HTTPException(status_code=404, detail="Document not found")

    if not file_store.exists(document.file_path):
        logger.warning("Document %s points at missing file %s", document_id, document.file_path)
        raise HTTPException(status_code=404, detail="Document not found")

    return FileResponse(
        document.file_path,
        filename=document.name,
        media_type=document.mime_type or "application/octet-stream",
    )


@router.delete("/{client_id}/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    client_id: int,
    document_id: int,
    db: Session = Depends(deps.get_db),
    file_store: FileStore = Depends(deps.get_file_store),
):
    """Delete a document and its stored file."""
    document_service.delete_document(db, document_id, file_store)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
