"""
Firestore repository for videos.

Videos are created once, listed newest first, and otherwise only have
their counters bumped. Counter updates use Firestore's atomic Increment
transform, so concurrent views never lose a count.
"""

import logging

from google.cloud import firestore

from ....core.catalog.models import Video, VideoCounter, utc_now_iso
from .base import CollectionRepository

logger = logging.getLogger(__name__)


class VideoRepository(CollectionRepository):
    """Repository for the ``videos`` collection."""

    collection_name = "videos"

    def list_recent(self) -> list[Video]:
        """All videos, newest first."""
        return [
            Video.from_document(snapshot.id, snapshot.to_dict())
            for snapshot in self._stream_newest_first()
        ]

    def create(self, video: Video) -> Video:
        """
        Persist a new video and return it with its id.

        Raises MissingFieldsError if a required field is missing. Counters
        start at zero regardless of what the caller set. The
        stored ``createdAt`` is the server timestamp; the returned one is
        the local wall clock, which may differ slightly.
        """
        video.validate()
        video.views = 0
        video.completions = 0

        video.id = self._add(video.to_document())
        video.created_at = utc_now_iso()

        logger.info(
            "Created video",
            extra={"video_id": video.id, "public_id": video.public_id}
        )

        return video

    def increment(self, video_id: str, counter: VideoCounter, delta: int = 1) -> None:
        """
        Atomically add ``delta`` to one of the video's counters.

        No existence check: incrementing a missing video raises the
        store's NotFound error.
        """
        if delta < 1:
            raise ValueError("Video counters can only be incremented")

        self._update(video_id, {counter.value: firestore.Increment(delta)})

        logger.debug(
            "Incremented video counter",
            extra={"video_id": video_id, "counter": counter.value, "delta": delta}
        )
