"""Integration tests for the document endpoints

Tests the complete document workflow:
- Creation with and without identity cookie
- Listing own documents
- Deletion guarded by the modification secret
"""

import uuid

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from collabdoc.auth.jwt import create_identity_token
from collabdoc.config import get_settings
from collabdoc.dependencies import get_optional_storage
from collabdoc.models import Document, Image


def identity_cookie(pid: str, secret: str = None) -> dict:
    token = create_identity_token(pid, secret or get_settings().JWT_SECRET)
    return {"cookie": f"person_id={token}"}


class TestCreateDocument:
    """Tests for POST /documents"""

    def test_anonymous_create(self, client: TestClient, db_session: Session):
        response = client.post("/documents")

        assert response.status_code == 200
        data = response.json()
        assert data["owner_external_id"] is None
        assert data["modification_secret"]

        document = db_session.query(Document).filter(Document.id == uuid.UUID(data["id"])).first()
        assert document is not None
        assert document.modification_secret == data["modification_secret"]

    def test_create_with_identity(self, client: TestClient):
        response = client.post("/documents", headers=identity_cookie("person-1"))

        assert response.status_code == 200
        assert response.json()["owner_external_id"] == "person-1"


class TestListDocuments:
    """Tests for GET /documents"""

    def test_lists_own_documents(self, client: TestClient):
        mine = client.post("/documents", headers=identity_cookie("person-1")).json()
        client.post("/documents", headers=identity_cookie("person-2"))
        client.post("/documents")

        response = client.get("/documents", headers=identity_cookie("person-1"))

        assert response.status_code == 200
        assert [d["id"] for d in response.json()] == [mine["id"]]

    def test_anonymous_gets_empty_list(self, client: TestClient):
        client.post("/documents", headers=identity_cookie("person-1"))

        response = client.get("/documents")

        assert response.status_code == 200
        assert response.json() == []

    def test_cookie_signed_with_wrong_key(self, client: TestClient):
        client.post("/documents", headers=identity_cookie("person-1"))

        response = client.get("/documents", headers=identity_cookie("person-1", secret="wrong-key"))

        assert response.status_code == 200
        assert response.json() == []


class TestDeleteDocument:
    """Tests for DELETE /documents/{id}"""

    def test_delete_scenario(self, client: TestClient):
        created = client.post("/documents").json()
        url = f"/documents/{created['id']}"

        response = client.delete(url, headers={"Authorization": "wrong"})
        assert response.status_code == 403

        response = client.delete(url, headers={"Authorization": created["modification_secret"]})
        assert response.status_code == 200

        response = client.delete(url, headers={"Authorization": created["modification_secret"]})
        assert response.status_code == 404

    def test_missing_secret(self, client: TestClient, document: Document):
        response = client.delete(f"/documents/{document.id}")
        assert response.status_code == 403

    def test_unknown_document(self, client: TestClient):
        response = client.delete(f"/documents/{uuid.uuid4()}", headers={"Authorization": "secret"})
        assert response.status_code == 404

    def test_malformed_id(self, client: TestClient):
        response = client.delete("/documents/invalid", headers={"Authorization": "secret"})
        assert response.status_code == 404

    def test_delete_purges_images(self, client: TestClient, db_session: Session, storage, document_with_images):
        document, images = document_with_images

        response = client.delete(
            f"/documents/{document.id}",
            headers={"Authorization": document.modification_secret},
        )

        assert response.status_code == 200
        assert db_session.query(Image).count() == 0
        assert storage.objects == {}

    def test_delete_without_storage(self, client: TestClient, db_session: Session, storage, document_with_images):
        from collabdoc.main import app

        document, _ = document_with_images
        document_id = document.id
        app.dependency_overrides[get_optional_storage] = lambda: None

        response = client.delete(
            f"/documents/{document_id}",
            headers={"Authorization": document.modification_secret},
        )

        assert response.status_code == 200
        assert db_session.query(Document).filter(Document.id == document_id).first() is None
        assert db_session.query(Image).count() == 0
