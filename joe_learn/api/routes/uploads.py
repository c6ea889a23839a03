"""
Raw-file upload endpoints.

The older upload path, kept alongside direct uploads: the client posts
the file to us as multipart form data and we forward it to storage
unmodified. Videos land in the video folder (mp4, mov, avi), assessments
in the assessment folder as raw files (pdf).

No metadata record is created here; the client still calls the
matching ``upload-*`` endpoint with the returned url and public_id.
"""

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile, status
from pydantic import BaseModel, Field

from ...infrastructure.storage.client import AssetKind, StorageClient, UnsupportedFormatError
from ..dependencies import StorageClientDep

logger = logging.getLogger(__name__)

router = APIRouter()


class UploadedFileResponse(BaseModel):
    """Where a forwarded file ended up."""
    url: str = Field(description="Delivery URL of the stored file")
    public_id: str = Field(description="Storage identifier, needed to delete the file later")


async def _forward(storage: StorageClient, file: UploadFile, kind: AssetKind) -> UploadedFileResponse:
    filename = file.filename or ""

    try:
        asset = await storage.upload(file.file, filename, kind)
    except UnsupportedFormatError as e:
        logger.warning(
            "Rejected upload with unsupported format",
            extra={"upload_name": filename, "kind": kind.value}
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file format: {e}",
        )
    except Exception as e:
        logger.error(
            "Error forwarding upload",
            extra={"upload_name": filename, "kind": kind.value, "error": str(e)}
        )
        raise
    finally:
        await file.close()

    return UploadedFileResponse(url=asset.url, public_id=asset.public_id)


@router.post(
    "/upload-video-file",
    response_model=UploadedFileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a video file through the API",
)
async def upload_video_file(
    storage: StorageClientDep,
    file: UploadFile = File(...),
) -> UploadedFileResponse:
    return await _forward(storage, file, AssetKind.VIDEO)


@router.post(
    "/upload-assessment-file",
    response_model=UploadedFileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an assessment PDF through the API",
)
async def upload_assessment_file(
    storage: StorageClientDep,
    file: UploadFile = File(...),
) -> UploadedFileResponse:
    return await _forward(storage, file, AssetKind.ASSESSMENT)
