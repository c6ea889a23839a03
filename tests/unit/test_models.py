"""
Unit tests for the catalog domain models.

These tests verify the core rules without touching external services
(no Firestore, no Cloudinary, no HTTP).

Testing philosophy:
- Test behavior, not implementation
- Each test should have a clear "given/when/then" structure
- Use descriptive names that explain what we're testing
- Prefer real objects over mocks where practical
"""

from datetime import datetime, timezone

import pytest

from joe_learn.core.catalog.models import (
    Assessment,
    MissingFieldsError,
    Video,
    find_missing_fields,
)


def make_video(**overrides) -> Video:
    fields = {
        "title": "Fractions, part 1",
        "teacher": "Mr. Joe",
        "subject": "Maths",
        "url": "https://example.com/frac1.mp4",
        "public_id": "joe-learn-videos/frac1",
        "duration": 312,
    }
    fields.update(overrides)
    return Video(**fields)


# ---------------------------------------------------------------------------
# Required Field Tests
# ---------------------------------------------------------------------------

class TestFindMissingFields:
    """Tests for the required-field check shared by both record kinds."""

    def test_none_and_empty_string_are_missing(self):
        """Absent, None, and "" all count as missing."""
        values = {"title": "", "teacher": None}
        assert find_missing_fields(values, ("title", "teacher", "url")) == ["title", "teacher", "url"]

    def test_zero_is_present(self):
        """Zero is a real value, not a missing one."""
        assert find_missing_fields({"duration": 0}, ("duration",)) == []

    def test_order_follows_required_tuple(self):
        values = {"b": "x"}
        assert find_missing_fields(values, ("c", "a", "b")) == ["c", "a"]


# ---------------------------------------------------------------------------
# Video Tests
# ---------------------------------------------------------------------------

class TestVideo:
    """Tests for the Video record."""

    def test_new_video_starts_with_zero_counters(self):
        video = make_video()

        assert video.views == 0
        assert video.completions == 0
        assert video.id is None

    def test_zero_duration_is_valid(self):
        """A zero-length video is still a valid video."""
        video = make_video(duration=0)
        assert video.duration == 0

    def test_missing_duration_is_rejected(self):
        with pytest.raises(MissingFieldsError) as exc_info:
            make_video(duration=None).validate()

        assert exc_info.value.fields == ["duration"]

    def test_empty_title_is_rejected(self):
        with pytest.raises(MissingFieldsError, match="title"):
            make_video(title="").validate()

    def test_negative_counters_are_rejected(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            make_video(views=-1).validate()

    def test_document_uses_store_field_names(self):
        """The store keeps teacher, public_id and createdAt verbatim."""
        document = make_video().to_document()

        assert document["teacher"] == "Mr. Joe"
        assert document["public_id"] == "joe-learn-videos/frac1"
        assert "createdAt" in document
        assert "id" not in document

    def test_to_dict_formats_datetime_timestamps(self):
        """Timestamps read back from the store come out as ISO strings."""
        created = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        video = make_video(id="abc", created_at=created)

        data = video.to_dict()

        assert data["id"] == "abc"
        assert data["createdAt"] == "2024-05-01T12:30:00+00:00"

    def test_from_document_keeps_partial_records(self):
        """Stored records missing a field are read back, not rejected."""
        video = Video.from_document("legacy", {"title": "Old lesson", "createdAt": "2023-01-01"})

        assert video.title == "Old lesson"
        assert video.subject is None
        assert video.views == 0
        assert video.to_dict()["id"] == "legacy"

    def test_from_document_round_trips_counters(self):
        document = {**make_video().to_document(), "views": 7, "completions": 2}

        video = Video.from_document("doc-1", document)

        assert video.id == "doc-1"
        assert video.views == 7
        assert video.completions == 2


# ---------------------------------------------------------------------------
# Assessment Tests
# ---------------------------------------------------------------------------

class TestAssessment:
    """Tests for the Assessment record."""

    def test_all_fields_required(self):
        with pytest.raises(MissingFieldsError) as exc_info:
            Assessment(title="Quiz 1", teacher=None, url="", public_id="p").validate()

        assert exc_info.value.fields == ["teacher", "url"]

    def test_to_dict_keeps_string_timestamps(self):
        assessment = Assessment(
            title="Quiz 1",
            teacher="Ms. Lee",
            url="https://example.com/q1.pdf",
            public_id="joe-learn-assessments/abc123",
            id="a1",
            created_at="2024-05-01T12:30:00+00:00",
        )

        assert assessment.to_dict() == {
            "id": "a1",
            "title": "Quiz 1",
            "teacher": "Ms. Lee",
            "url": "https://example.com/q1.pdf",
            "public_id": "joe-learn-assessments/abc123",
            "createdAt": "2024-05-01T12:30:00+00:00",
        }

    def test_from_document_allows_missing_public_id(self):
        assessment = Assessment.from_document("a2", {"title": "Quiz 2", "teacher": "Ms. Lee"})

        assert assessment.public_id is None
        with pytest.raises(MissingFieldsError):
            assessment.validate()
