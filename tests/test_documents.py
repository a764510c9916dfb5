"""Tests for document upload, download and deletion over HTTP."""

import io
import os
from datetime import timedelta

import pytest

from advisory_crm.core.errors import NotFoundError, ValidationError
from advisory_crm.services import documents as document_service
from advisory_crm.services.clients import create_client


@pytest.fixture
def client_id(session, clock):
    return create_client(session, {"name": "Meridian Holdings"}, clock()).id


def _upload(client, client_id, content=b"%PDF-1.4 term sheet", filename="term sheet.pdf", name=None):
    data = {"name": name} if name is not None else None
    return client.post(
        f"/api/clients/{client_id}/documents",
        files={"file": (filename, content, "application/pdf")},
        data=data,
    )


class TestUpload:

    def test_upload_stores_file_and_row(self, client, client_id, file_store):
        response = _upload(client, client_id, name="Signed_Term_Sheet")
        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Signed_Term_Sheet"
        assert body["clientId"] == client_id
        assert body["mimeType"] == "application/pdf"
        assert body["size"] == len(b"%PDF-1.4 term sheet")

        path = body["filePath"]
        assert os.path.dirname(path) == str(file_store.client_dir(client_id))
        assert os.path.basename(path).startswith("file-")
        assert path.endswith(".pdf")
        with open(path, "rb") as f:
            assert f.read() == b"%PDF-1.4 term sheet"

    def test_name_defaults_to_filename(self, client, client_id):
        response = _upload(client, client_id, name="   ")
        assert response.status_code == 201
        assert response.json()["name"] == "term sheet.pdf"

    def test_no_file(self, client, client_id):
        response = client.post(f"/api/clients/{client_id}/documents", data={"name": "Nothing"})
        assert response.status_code == 400
        assert response.json()["detail"] == "No file uploaded"

    def test_unknown_client(self, client, file_store):
        response = _upload(client, 999)
        assert response.status_code == 404
        assert not file_store.client_dir(999).exists()

    def test_too_large(self, client, client_id, file_store):
        response = _upload(client, client_id, content=b"x" * 2048)
        assert response.status_code == 400
        assert list(file_store.client_dir(client_id).iterdir()) == []

    def test_short_name_removes_stored_file(self, client, client_id, file_store):
        response = _upload(client, client_id, name="x")
        assert response.status_code == 400
        assert list(file_store.client_dir(client_id).iterdir()) == []

    def test_listed_newest_first(self, client, client_id, clock):
        _upload(client, client_id, name="First Upload")
        clock.now = clock.now + timedelta(minutes=1)
        _upload(client, client_id, name="Second Upload")

        response = client.get(f"/api/clients/{client_id}/documents")
        assert [d["name"] for d in response.json()] == ["Second Upload", "First Upload"]

        stats = client.get(f"/api/clients/{client_id}").json()
        assert stats["documentCount"] == 2


class TestDownload:

    def test_download(self, client, client_id):
        document = _upload(client, client_id, name="Signed_Term_Sheet").json()
        response = client.get(f"/api/clients/{client_id}/documents/{document['id']}/download")
        assert response.status_code == 200
        assert response.content == b"%PDF-1.4 term sheet"
        assert "Signed_Term_Sheet" in response.headers["content-disposition"]

    def test_wrong_client(self, client, client_id, session, clock):
        document = _upload(client, client_id).json()
        other = create_client(session, {"name": "Summit Capital"}, clock())
        response = client.get(f"/api/clients/{other.id}/documents/{document['id']}/download")
        assert response.status_code == 404

    def test_missing_document(self, client, client_id):
        assert client.get(f"/api/clients/{client_id}/documents/123/download").status_code == 404

    def test_missing_file(self, client, client_id):
        document = _upload(client, client_id).json()
        os.remove(document["filePath"])
        response = client.get(f"/api/clients/{client_id}/documents/{document['id']}/download")
        assert response.status_code == 404


class TestDelete:

    def test_delete_removes_file_and_row(self, client, client_id):
        document = _upload(client, client_id).json()
        response = client.delete(f"/api/clients/{client_id}/documents/{document['id']}")
        assert response.status_code == 204
        assert not os.path.exists(document["filePath"])
        assert client.get(f"/api/clients/{client_id}/documents").json() == []

    def test_file_already_gone(self, client, client_id):
        document = _upload(client, client_id).json()
        os.remove(document["filePath"])
        response = client.delete(f"/api/clients/{client_id}/documents/{document['id']}")
        assert response.status_code == 204
        assert client.get(f"/api/clients/{client_id}/documents").json() == []

    def test_missing_is_noop(self, client, client_id):
        assert client.delete(f"/api/clients/{client_id}/documents/55").status_code == 204


class TestDocumentService:

    def test_create_requires_existing_client(self, session, clock):
        with pytest.raises(NotFoundError):
            document_service.create_document(
                session, {"name": "Report", "filePath": "uploads/3/file-1.pdf", "clientId": 3}, clock()
            )

    def test_create_validates_before_lookup(self, session, clock):
        with pytest.raises(ValidationError):
            document_service.create_document(session, {"name": "Report", "filePath": ""}, clock())

    def test_failed_file_removal_still_deletes_row(self, session, clock, file_store, client_id, monkeypatch):
        stored = file_store.save(client_id, io.BytesIO(b"data"), "a.txt", "text/plain")
        document = document_service.create_document(
            session, {"name": "Notes", "filePath": stored.path, "clientId": client_id}, clock()
        )

        def failing_remove(path):
            return False

        monkeypatch.setattr(file_store, "remove", failing_remove)
        document_service.delete_document(session, document.id, file_store)

        assert document_service.get_document(session, document.id) is None
