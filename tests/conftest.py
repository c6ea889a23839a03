"""
Shared fixtures.

The API is wired with the in-memory Firestore and storage fakes, so no
test talks to Firebase or Cloudinary.
"""

import pytest
from fastapi.testclient import TestClient

from joe_learn.api.dependencies import AppServices
from joe_learn.config.settings import Settings
from joe_learn.infrastructure.firestore.client import MockFirestoreClient
from joe_learn.infrastructure.storage.client import MockStorageClient, StorageConfig
from joe_learn.main import create_app


TEST_API_SECRET = "test-api-secret"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        firestore_mock_mode=True,
        storage_mock_mode=True,
        cloudinary_cloud_name="test-cloud",
        cloudinary_api_key="test-api-key",
        cloudinary_api_secret=TEST_API_SECRET,
    )


@pytest.fixture
def storage_config() -> StorageConfig:
    return StorageConfig(
        cloud_name="test-cloud",
        api_key="test-api-key",
        api_secret=TEST_API_SECRET,
    )


@pytest.fixture
def metadata_store() -> MockFirestoreClient:
    return MockFirestoreClient()


@pytest.fixture
def storage(storage_config) -> MockStorageClient:
    return MockStorageClient(storage_config)


@pytest.fixture
def services(settings, metadata_store, storage) -> AppServices:
    return AppServices(settings=settings, metadata_store=metadata_store, storage=storage)


@pytest.fixture
def client(services) -> TestClient:
    """
    Client for an app built around the in-memory services.

    Server exceptions are turned into responses, so tests see the 500
    the global handler produces.
    """
    app = create_app(services=services)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def video_payload() -> dict:
    return {
        "title": "Fractions, part 1",
        "teacherName": "Mr. Joe",
        "subject": "Maths",
        "url": "https://res.cloudinary.com/test-cloud/video/upload/joe-learn-videos/frac1.mp4",
        "public_id": "joe-learn-videos/frac1",
        "duration": 312.5,
    }


@pytest.fixture
def assessment_payload() -> dict:
    return {
        "title": "Quiz 1",
        "teacherName": "Ms. Lee",
        "url": "https://res.cloudinary.com/test-cloud/raw/upload/joe-learn-assessments/q1.pdf",
        "public_id": "joe-learn-assessments/abc123",
    }
