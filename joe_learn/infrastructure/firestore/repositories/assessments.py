"""
Firestore repository for assessments.
"""

import logging

from ....core.catalog.models import Assessment, MissingFieldsError, utc_now_iso
from .base import CollectionRepository

logger = logging.getLogger(__name__)


class AssessmentRepository(CollectionRepository):
    """Repository for the ``assessments`` collection."""

    collection_name = "assessments"

    def list_recent(self) -> list[Assessment]:
        """All assessments, newest first."""
        return [
            Assessment.from_document(snapshot.id, snapshot.to_dict())
            for snapshot in self._stream_newest_first()
        ]

    def create(self, assessment: Assessment) -> Assessment:
        """
        Persist a new assessment and return it with its id.

        Raises MissingFieldsError if a required field is missing.
        """
        assessment.validate()
        assessment.id = self._add(assessment.to_document())
        assessment.created_at = utc_now_iso()

        logger.info(
            "Created assessment",
            extra={"assessment_id": assessment.id, "public_id": assessment.public_id}
        )

        return assessment

    def get(self, assessment_id: str) -> Assessment:
        """Load one assessment. Raises RecordNotFoundError if absent."""
        snapshot = self._get_snapshot(assessment_id)
        return Assessment.from_document(snapshot.id, snapshot.to_dict())

    def update_title(self, assessment_id: str, title: str) -> None:
        """Rename an assessment. Blind update, like video counters."""
        if not title:
            raise MissingFieldsError(["title"])

        self._update(assessment_id, {"title": title})
