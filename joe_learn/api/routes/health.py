"""
Health check endpoint.

A single liveness check: is the process running and routing requests?
It deliberately doesn't touch Firestore or Cloudinary.
"""

from fastapi import APIRouter, status
from pydantic import BaseModel

router = APIRouter()


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str


@router.get(
    "/",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
)
async def health_check() -> MessageResponse:
    return MessageResponse(message="Joe Learn API is running!")
