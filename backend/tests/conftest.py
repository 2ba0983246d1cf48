"""Pytest fixtures for the collaboration backend.

Provides reusable test fixtures for:
- Database session on an in-memory SQLite database
- In-memory object storage
- Documents with and without images
- A FastAPI test client wired to the test database and storage

Usage:
    def test_delete(client, document):
        response = client.delete(f"/documents/{document.id}",
                                 headers={"Authorization": document.modification_secret})
        assert response.status_code == 200
"""

import os

# Set environment variables BEFORE any imports to ensure they take effect
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-jwt-secret-key-256-bits-minimum-length-required-for-security"
os.environ["IMAGE_ENCRYPTION_KEY"] = "test-image-encryption-key"
os.environ["LOG_JSON"] = "false"
os.environ.setdefault("MINIO_ROOT_USER", "minioadmin")
os.environ.setdefault("MINIO_ROOT_PASSWORD", "minioadmin")
os.environ.setdefault("MINIO_ENDPOINT", "localhost:9000")
os.environ.setdefault("MINIO_BUCKET", "test-bucket")

from typing import Dict, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from collabdoc.database import get_db
from collabdoc.dependencies import get_optional_storage, get_storage
from collabdoc.models import Base, Document, Image
from collabdoc.storage import ObjectStoragePort, StorageError


test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


class InMemoryStorage(ObjectStoragePort):
    """Object storage double keeping blobs in a dict.

    Set ``fail_with`` to make every operation raise StorageError.
    """

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.fail_with = None

    def _check(self):
        if self.fail_with:
            raise StorageError(self.fail_with)

    async def put_object(self, key: str, data: bytes, mime_type: str) -> None:
        self._check()
        self.objects[key] = data

    async def get_object(self, key: str) -> bytes:
        self._check()
        if key not in self.objects:
            raise FileNotFoundError(f"Object not found: {key}")
        return self.objects[key]

    async def delete_object(self, key: str) -> bool:
        self._check()
        return self.objects.pop(key, None) is not None

    async def object_exists(self, key: str) -> bool:
        self._check()
        return key in self.objects


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture(scope="function")
def document(db_session: Session) -> Document:
    """An anonymous, empty document."""
    doc = Document()
    db_session.add(doc)
    db_session.commit()
    db_session.refresh(doc)
    return doc


@pytest.fixture(scope="function")
def document_with_images(db_session: Session, storage: InMemoryStorage, document: Document):
    """A document with two images whose blobs are in storage."""
    images = []
    for i in range(2):
        image = Image(document_id=document.id, name="image.png", mimetype="image/png")
        db_session.add(image)
        db_session.commit()
        db_session.refresh(image)
        storage.objects[image.storage_key] = f"blob-{i}".encode()
        images.append(image)
    return document, images


@pytest.fixture(scope="function")
def client(db_session: Session, storage: InMemoryStorage) -> Generator[TestClient, None, None]:
    """Create a test client bound to the test database and in-memory storage."""
    from collabdoc.main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_optional_storage] = lambda: storage

    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def session_factory(db_session: Session):
    """Session factory bound to the test database (tables already created)."""
    return TestingSessionLocal
