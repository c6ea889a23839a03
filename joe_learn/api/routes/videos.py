"""
Video API endpoints.

Videos are uploaded straight to Cloudinary by the client. These
endpoints only deal with the metadata record that points at the upload:
create it, list it, and count views and completions.
"""

import logging
from typing import Optional, Union

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from ...core.catalog.models import MissingFieldsError, Video, VideoCounter
from ...infrastructure.firestore.repositories import VideoRepository
from ..dependencies import VideoRepositoryDep
from .health import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class VideoCreateRequest(BaseModel):
    """
    Metadata for a video that has already been uploaded.

    Every field is optional here so a missing one can be reported as a
    400 with our own message rather than a schema error.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    teacher_name: Optional[str] = Field(None, alias="teacherName")
    subject: Optional[str] = None
    url: Optional[str] = None
    public_id: Optional[str] = None
    duration: Optional[Union[int, float]] = Field(None, description="Length in seconds; 0 is allowed")


class VideoResponse(BaseModel):
    """
    A stored video record.

    Records are returned as stored, so older or hand-edited ones may
    lack some fields.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: Optional[str] = None
    teacher: Optional[str] = None
    subject: Optional[str] = None
    url: Optional[str] = None
    public_id: Optional[str] = None
    duration: Union[int, float, None] = None
    views: int = 0
    completions: int = 0
    created_at: Optional[str] = Field(None, alias="createdAt")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/videos",
    response_model=list[VideoResponse],
    status_code=status.HTTP_200_OK,
    summary="List videos",
    description="All videos, newest first",
)
def list_videos(repository: VideoRepositoryDep) -> list[dict]:
    try:
        videos = repository.list_recent()
    except Exception as e:
        logger.error("Error fetching videos", extra={"error": str(e)})
        raise

    return [video.to_dict() for video in videos]


@router.post(
    "/upload-video",
    response_model=VideoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save video metadata",
    description="Record a video after the client finished a direct upload",
)
def create_video(
    repository: VideoRepositoryDep,
    payload: Optional[VideoCreateRequest] = None,
) -> dict:
    payload = payload or VideoCreateRequest()

    try:
        video = Video(
            title=payload.title,
            teacher=payload.teacher_name,
            subject=payload.subject,
            url=payload.url,
            public_id=payload.public_id,
            duration=payload.duration,
        )
        video.validate()
    except MissingFieldsError as e:
        logger.warning(
            "Rejected video with missing fields",
            extra={"missing_fields": e.fields}
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required video data.",
        )

    try:
        video = repository.create(video)
    except Exception as e:
        logger.error(
            "Error saving video metadata",
            extra={"public_id": video.public_id, "error": str(e)}
        )
        raise

    return video.to_dict()


def _increment(repository: VideoRepository, video_id: str, counter: VideoCounter) -> None:
    try:
        repository.increment(video_id, counter)
    except Exception as e:
        logger.error(
            "Error updating video counter",
            extra={"video_id": video_id, "counter": counter.value, "error": str(e)}
        )
        raise


@router.post(
    "/videos/{video_id}/view",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Count a view",
)
def record_view(video_id: str, repository: VideoRepositoryDep) -> MessageResponse:
    _increment(repository, video_id, VideoCounter.VIEWS)
    return MessageResponse(message="View count updated successfully.")


@router.post(
    "/videos/{video_id}/complete",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Count a completion",
)
def record_completion(video_id: str, repository: VideoRepositoryDep) -> MessageResponse:
    _increment(repository, video_id, VideoCounter.COMPLETIONS)
    return MessageResponse(message="Completion count updated successfully.")
