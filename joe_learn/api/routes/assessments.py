"""
Assessment API endpoints.

Assessments are PDFs stored in Cloudinary as raw files. Unlike videos
they can be renamed and deleted; deleting one also destroys the stored
file.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from ...core.catalog.models import Assessment, MissingFieldsError
from ...infrastructure.firestore.repositories import RecordNotFoundError
from ..dependencies import AssessmentRepositoryDep, StorageClientDep
from .health import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()

# Cloudinary resource type assessments are stored under
ASSESSMENT_RESOURCE_TYPE = "raw"


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class AssessmentCreateRequest(BaseModel):
    """Metadata for an assessment that has already been uploaded."""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    teacher_name: Optional[str] = Field(None, alias="teacherName")
    url: Optional[str] = None
    public_id: Optional[str] = None


class AssessmentUpdateRequest(BaseModel):
    """New title for an assessment."""
    title: Optional[str] = None


class AssessmentResponse(BaseModel):
    """A stored assessment record, returned as stored."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: Optional[str] = None
    teacher: Optional[str] = None
    url: Optional[str] = None
    public_id: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/assessments",
    response_model=list[AssessmentResponse],
    status_code=status.HTTP_200_OK,
    summary="List assessments",
    description="All assessments, newest first",
)
def list_assessments(repository: AssessmentRepositoryDep) -> list[dict]:
    try:
        assessments = repository.list_recent()
    except Exception as e:
        logger.error("Error fetching assessments", extra={"error": str(e)})
        raise

    return [assessment.to_dict() for assessment in assessments]


@router.post(
    "/upload-assessment",
    response_model=AssessmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save assessment metadata",
    description="Record an assessment after the client finished a direct upload",
)
def create_assessment(
    repository: AssessmentRepositoryDep,
    payload: Optional[AssessmentCreateRequest] = None,
) -> dict:
    payload = payload or AssessmentCreateRequest()

    try:
        assessment = Assessment(
            title=payload.title,
            teacher=payload.teacher_name,
            url=payload.url,
            public_id=payload.public_id,
        )
        assessment.validate()
    except MissingFieldsError as e:
        logger.warning(
            "Rejected assessment with missing fields",
            extra={"missing_fields": e.fields}
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required assessment data.",
        )

    try:
        assessment = repository.create(assessment)
    except Exception as e:
        logger.error(
            "Error saving assessment metadata",
            extra={"public_id": assessment.public_id, "error": str(e)}
        )
        raise

    return assessment.to_dict()


@router.put(
    "/assessments/{assessment_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Rename an assessment",
)
def update_assessment(
    assessment_id: str,
    repository: AssessmentRepositoryDep,
    payload: Optional[AssessmentUpdateRequest] = None,
) -> MessageResponse:
    title = payload.title if payload else None
    if not title:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="New title is required.",
        )

    try:
        repository.update_title(assessment_id, title)
    except Exception as e:
        logger.error(
            "Error updating assessment",
            extra={"assessment_id": assessment_id, "error": str(e)}
        )
        raise

    return MessageResponse(message="Assessment updated successfully.")


@router.delete(
    "/assessments/{assessment_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete an assessment",
    description="Destroy the stored file, then delete the record",
)
async def delete_assessment(
    assessment_id: str,
    repository: AssessmentRepositoryDep,
    storage: StorageClientDep,
) -> MessageResponse:
    """
    Delete an assessment and its file.

    The two deletes are independent: if the record delete fails after
    the file is gone, the record is left pointing at nothing. A record
    without a public_id has no file to destroy and is just deleted.
    """
    try:
        assessment = await asyncio.to_thread(repository.get, assessment_id)
    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Assessment not found.",
        )

    try:
        if assessment.public_id:
            result = await storage.destroy(
                assessment.public_id, resource_type=ASSESSMENT_RESOURCE_TYPE
            )
            if result != "ok":
                logger.warning(
                    "Storage did not confirm file deletion",
                    extra={"public_id": assessment.public_id, "result": result}
                )
        else:
            logger.warning(
                "Assessment has no public_id; skipping file deletion",
                extra={"assessment_id": assessment_id}
            )

        await asyncio.to_thread(repository.delete, assessment_id)
    except Exception as e:
        logger.error(
            "Error deleting assessment",
            extra={"assessment_id": assessment_id, "error": str(e)}
        )
        raise

    return MessageResponse(message="Assessment deleted successfully.")
