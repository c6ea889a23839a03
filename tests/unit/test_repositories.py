"""
Unit tests for the Firestore repositories, run against the in-memory store.
"""

import pytest
from google.api_core.exceptions import NotFound
from google.cloud import firestore

from joe_learn.core.catalog.models import Assessment, MissingFieldsError, Video, VideoCounter
from joe_learn.infrastructure.firestore.client import MockFirestoreClient
from joe_learn.infrastructure.firestore.repositories import (
    AssessmentRepository,
    RecordNotFoundError,
    VideoRepository,
)


@pytest.fixture
def store() -> MockFirestoreClient:
    return MockFirestoreClient()


@pytest.fixture
def videos(store) -> VideoRepository:
    return VideoRepository(store)


@pytest.fixture
def assessments(store) -> AssessmentRepository:
    return AssessmentRepository(store)


def new_video(title: str = "Fractions") -> Video:
    return Video(
        title=title,
        teacher="Mr. Joe",
        subject="Maths",
        url=f"https://example.com/{title}.mp4",
        public_id=f"joe-learn-videos/{title}",
        duration=60,
    )


def new_assessment(title: str = "Quiz 1") -> Assessment:
    return Assessment(
        title=title,
        teacher="Ms. Lee",
        url=f"https://example.com/{title}.pdf",
        public_id=f"joe-learn-assessments/{title}",
    )


# ---------------------------------------------------------------------------
# Video Repository Tests
# ---------------------------------------------------------------------------

class TestVideoRepository:
    """Tests for video persistence."""

    def test_create_assigns_unique_ids(self, videos):
        ids = {videos.create(new_video(f"v{i}")).id for i in range(5)}

        assert len(ids) == 5
        assert all(ids)

    def test_create_returns_usable_timestamp(self, videos):
        video = videos.create(new_video())
        assert isinstance(video.created_at, str)

    def test_create_resets_counters(self, videos):
        video = new_video()
        video.views = 10

        created = videos.create(video)

        assert created.views == 0
        assert videos.list_recent()[0].views == 0

    def test_list_is_newest_first(self, videos):
        for title in ("first", "second", "third"):
            videos.create(new_video(title))

        titles = [video.title for video in videos.list_recent()]

        assert titles == ["third", "second", "first"]

    def test_create_rejects_missing_fields(self, videos):
        with pytest.raises(MissingFieldsError):
            videos.create(Video(
                title="No subject",
                teacher="Mr. Joe",
                subject="",
                url="https://example.com/x.mp4",
                public_id="joe-learn-videos/x",
                duration=5,
            ))

        assert videos.list_recent() == []

    def test_list_includes_partial_documents(self, store, videos):
        """A stored document missing a field is listed, not an error."""
        videos.create(new_video("complete"))
        store.collection("videos").add({
            "title": "legacy",
            "teacher": "Mr. Joe",
            "url": "https://example.com/legacy.mp4",
            "public_id": "joe-learn-videos/legacy",
            "duration": 30,
            "createdAt": firestore.SERVER_TIMESTAMP,
        })

        listed = videos.list_recent()

        assert [video.title for video in listed] == ["legacy", "complete"]
        assert listed[0].subject is None

    def test_increment_adds_exactly_k(self, videos):
        video = videos.create(new_video())

        for _ in range(4):
            videos.increment(video.id, VideoCounter.VIEWS)
        videos.increment(video.id, VideoCounter.COMPLETIONS)

        stored = videos.list_recent()[0]
        assert stored.views == 4
        assert stored.completions == 1

    def test_increment_missing_video_raises_store_error(self, videos):
        """Increment is blind; the store reports the missing document."""
        with pytest.raises(NotFound):
            videos.increment("missing", VideoCounter.VIEWS)

    def test_counters_never_decrement(self, videos):
        video = videos.create(new_video())

        with pytest.raises(ValueError):
            videos.increment(video.id, VideoCounter.VIEWS, delta=-1)


# ---------------------------------------------------------------------------
# Assessment Repository Tests
# ---------------------------------------------------------------------------

class TestAssessmentRepository:
    """Tests for assessment persistence."""

    def test_get_returns_created_assessment(self, assessments):
        created = assessments.create(new_assessment())

        loaded = assessments.get(created.id)

        assert loaded.title == "Quiz 1"
        assert loaded.public_id == "joe-learn-assessments/Quiz 1"

    def test_get_missing_raises(self, assessments):
        with pytest.raises(RecordNotFoundError):
            assessments.get("missing")

    def test_update_title(self, assessments):
        created = assessments.create(new_assessment())

        assessments.update_title(created.id, "Quiz 1 (revised)")

        assert assessments.get(created.id).title == "Quiz 1 (revised)"

    def test_update_title_on_missing_raises_store_error(self, assessments):
        with pytest.raises(NotFound):
            assessments.update_title("missing", "New title")

    def test_delete_removes_from_list(self, assessments):
        keep = assessments.create(new_assessment("keep"))
        drop = assessments.create(new_assessment("drop"))

        assessments.delete(drop.id)

        assert [a.id for a in assessments.list_recent()] == [keep.id]
        assert not assessments.exists(drop.id)

    def test_delete_missing_raises(self, assessments):
        with pytest.raises(RecordNotFoundError):
            assessments.delete("missing")

    def test_collections_are_independent(self, videos, assessments):
        videos.create(new_video())
        assert assessments.list_recent() == []
