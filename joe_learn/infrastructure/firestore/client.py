"""
Firestore client management.

Provides the client factory for the metadata store, plus an in-memory
mock for local development and tests.

Using the repository pattern means most code never touches this module
directly - it goes through the repositories, which handle the translation
between domain models and Firestore documents.
"""

import itertools
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterator, Optional, Protocol
from uuid import uuid4

import firebase_admin
from firebase_admin import credentials, firestore as firebase_firestore
from google.api_core.exceptions import NotFound
from google.cloud import firestore

from ...config.credentials import InvalidCredentialsError

logger = logging.getLogger(__name__)


class FirestoreClient(Protocol):
    """
    Protocol for the slice of the Firestore client we use.

    Using a protocol means tests can provide an in-memory store without
    a Firebase project.
    """

    def collection(self, name: str): ...


@dataclass
class FirestoreConfig:
    """Configuration for the Firestore client."""
    service_account: dict[str, Any]
    app_name: str = "joe-learn"


def create_firestore_client(config: FirestoreConfig) -> FirestoreClient:
    """
    Initialize firebase_admin and return a Firestore client.

    The firebase app is named so this process never touches the default
    app. Calling this twice with the same app name reuses the app.

    Raises InvalidCredentialsError if the key isn't a usable service
    account (e.g. a JSON object with the wrong fields).
    """
    try:
        app = firebase_admin.get_app(config.app_name)
    except ValueError:
        try:
            cred = credentials.Certificate(config.service_account)
        except ValueError as e:
            raise InvalidCredentialsError(f"Service account key is not usable: {e}") from e

        app = firebase_admin.initialize_app(cred, name=config.app_name)
        logger.info(
            "Firebase Admin SDK initialized",
            extra={"project_id": config.service_account.get("project_id")}
        )

    return firebase_firestore.client(app)


# ---------------------------------------------------------------------------
# Mock Firestore for Local Development
# ---------------------------------------------------------------------------

class MockDocumentSnapshot:
    """Point-in-time copy of a mock document."""

    def __init__(self, doc_id: str, data: Optional[dict[str, Any]]) -> None:
        self.id = doc_id
        self._data = dict(data) if data is not None else None

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[dict[str, Any]]:
        return dict(self._data) if self._data is not None else None


class MockDocumentReference:
    """Reference to a single document in a mock collection."""

    def __init__(self, collection: "MockCollectionReference", doc_id: str) -> None:
        self._collection = collection
        self.id = doc_id

    def get(self) -> MockDocumentSnapshot:
        return MockDocumentSnapshot(self.id, self._collection._documents.get(self.id))

    def set(self, data: dict[str, Any]) -> None:
        self._collection._write(self.id, data)

    def update(self, field_updates: dict[str, Any]) -> None:
        """Apply field updates. Like Firestore, fails if the document is absent."""
        current = self._collection._documents.get(self.id)
        if current is None:
            raise NotFound(f"No document to update: {self._collection.name}/{self.id}")

        for name, value in field_updates.items():
            if isinstance(value, firestore.Increment):
                current[name] = current.get(name, 0) + value.value
            else:
                current[name] = self._collection._resolve(value)

    def delete(self) -> None:
        self._collection._documents.pop(self.id, None)


class MockQuery:
    """Ordered view over a mock collection."""

    def __init__(self, collection: "MockCollectionReference", field_path: str, direction: str) -> None:
        self._collection = collection
        self._field_path = field_path
        self._descending = direction == firestore.Query.DESCENDING

    def stream(self) -> Iterator[MockDocumentSnapshot]:
        # Firestore leaves out documents that don't have the ordering field
        docs = [
            (doc_id, data)
            for doc_id, data in self._collection._documents.items()
            if self._field_path in data
        ]
        docs.sort(
            key=lambda item: (item[1][self._field_path], self._collection._sequence[item[0]]),
            reverse=self._descending,
        )
        for doc_id, data in docs:
            yield MockDocumentSnapshot(doc_id, data)


class MockCollectionReference:
    """In-memory collection: {document_id: fields}."""

    def __init__(self, name: str, counter: Iterator[int]) -> None:
        self.name = name
        self._documents: dict[str, dict[str, Any]] = {}
        # write order, breaks ties between equal server timestamps
        self._sequence: dict[str, int] = {}
        self._counter = counter

    def document(self, doc_id: Optional[str] = None) -> MockDocumentReference:
        return MockDocumentReference(self, doc_id or uuid4().hex)

    def add(self, data: dict[str, Any]) -> tuple[datetime, MockDocumentReference]:
        ref = self.document()
        ref.set(data)
        return datetime.now(timezone.utc), ref

    def order_by(self, field_path: str, direction: str = firestore.Query.ASCENDING) -> MockQuery:
        return MockQuery(self, field_path, direction)

    def stream(self) -> Iterator[MockDocumentSnapshot]:
        for doc_id, data in list(self._documents.items()):
            yield MockDocumentSnapshot(doc_id, data)

    def _write(self, doc_id: str, data: dict[str, Any]) -> None:
        self._documents[doc_id] = {name: self._resolve(value) for name, value in data.items()}
        self._sequence.setdefault(doc_id, next(self._counter))

    @staticmethod
    def _resolve(value: Any) -> Any:
        if value is firestore.SERVER_TIMESTAMP:
            return datetime.now(timezone.utc)
        return value


class MockFirestoreClient:
    """
    In-memory Firestore for local development.

    Supports the operations the repositories use: add, get, update
    (including Increment and SERVER_TIMESTAMP), delete, and ordered
    streaming. Not suitable for production, but perfect for development
    and testing.
    """

    def __init__(self) -> None:
        self._collections: dict[str, MockCollectionReference] = {}
        self._counter = itertools.count()
        logger.info("Initialized mock Firestore client (in-memory)")

    def collection(self, name: str) -> MockCollectionReference:
        if name not in self._collections:
            self._collections[name] = MockCollectionReference(name, self._counter)
        return self._collections[name]


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_metadata_store(
    config: Optional[FirestoreConfig] = None,
    mock_mode: bool = False,
) -> FirestoreClient:
    """
    Create the metadata store client based on configuration.

    Args:
        config: Firestore configuration (required if not mock_mode)
        mock_mode: If True, return the in-memory mock

    Returns:
        FirestoreClient implementation (Firestore or Mock)
    """
    if mock_mode:
        return MockFirestoreClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return create_firestore_client(config)
