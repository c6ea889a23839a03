"""
Upload signature endpoint.

Clients call this before every direct upload to Cloudinary. Whatever
fields the client will send along with the file (e.g. ``folder``) are
posted here, signed together with a server timestamp, and returned with
the public account identifiers. The API secret never leaves the server.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, HTTPException, status
from pydantic import BaseModel, Field

from ...core.catalog.signing import SigningError, sign_upload_request
from ..dependencies import StorageClientDep

logger = logging.getLogger(__name__)

router = APIRouter()


class SignatureResponse(BaseModel):
    """Everything the client needs to complete a direct upload."""
    signature: str = Field(description="Signature over the submitted fields and timestamp")
    timestamp: int = Field(description="Unix timestamp (seconds) that was signed")
    api_key: str = Field(description="Public Cloudinary API key")
    cloud_name: str = Field(description="Cloudinary cloud name")


@router.post(
    "/generate-signature",
    response_model=SignatureResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign a direct upload",
    description="Sign arbitrary upload fields plus a server timestamp for a direct Cloudinary upload",
)
async def generate_signature(
    storage: StorageClientDep,
    params: Optional[dict[str, Any]] = Body(default=None),
) -> SignatureResponse:
    try:
        signed = sign_upload_request(storage, params or {})
    except SigningError as e:
        logger.error(
            "Error generating Cloudinary signature",
            extra={"fields": sorted(params or {}), "error": str(e)},
            exc_info=e,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not generate upload signature.",
        )

    return SignatureResponse(
        signature=signed.signature,
        timestamp=signed.timestamp,
        api_key=signed.api_key,
        cloud_name=signed.cloud_name,
    )
