"""
Shared plumbing for Firestore-backed record repositories.

Each repository owns exactly one collection. Documents are flat: the
document id is the record id and every other field sits at the top level.
"""

import logging
from typing import Any, Iterator

from google.cloud import firestore

from ..client import FirestoreClient

logger = logging.getLogger(__name__)


class RecordNotFoundError(Exception):
    """Raised when a requested record doesn't exist."""

    def __init__(self, collection: str, record_id: str) -> None:
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"{collection}/{record_id} not found")


class CollectionRepository:
    """
    Base repository over a single Firestore collection.

    Subclasses set ``collection_name`` and translate snapshots into
    domain models.
    """

    collection_name: str = ""

    def __init__(self, client: FirestoreClient) -> None:
        self._collection = client.collection(self.collection_name)

    def _stream_newest_first(self) -> Iterator[Any]:
        """Stream every document, newest ``createdAt`` first. Unbounded."""
        query = self._collection.order_by("createdAt", direction=firestore.Query.DESCENDING)
        return query.stream()

    def _add(self, data: dict[str, Any]) -> str:
        """
        Add a document with a store-assigned id.

        ``createdAt`` is always the store's server timestamp, whatever
        the caller passed.
        """
        data = {**data, "createdAt": firestore.SERVER_TIMESTAMP}
        _, doc_ref = self._collection.add(data)
        return doc_ref.id

    def _update(self, record_id: str, fields: dict[str, Any]) -> None:
        """
        Blind update: no existence check first.

        A missing document surfaces as the store's own NotFound error.
        """
        try:
            self._collection.document(record_id).update(fields)
        except Exception as e:
            logger.error(
                "Failed to update record",
                extra={
                    "collection": self.collection_name,
                    "record_id": record_id,
                    "fields": list(fields),
                    "error": str(e),
                }
            )
            raise

    def _get_snapshot(self, record_id: str):
        snapshot = self._collection.document(record_id).get()
        if not snapshot.exists:
            raise RecordNotFoundError(self.collection_name, record_id)
        return snapshot

    def exists(self, record_id: str) -> bool:
        return self._collection.document(record_id).get().exists

    def delete(self, record_id: str) -> None:
        """Delete a record. Raises RecordNotFoundError if it isn't there."""
        doc_ref = self._collection.document(record_id)
        if not doc_ref.get().exists:
            raise RecordNotFoundError(self.collection_name, record_id)

        doc_ref.delete()

        logger.info(
            "Deleted record",
            extra={"collection": self.collection_name, "record_id": record_id}
        )
