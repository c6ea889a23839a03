"""
Catalog of learning content: videos and assessments.

Contains the domain models and the upload signing rules.
"""

from .models import (
    Assessment,
    MissingFieldsError,
    Video,
    VideoCounter,
)
from .signing import SigningError, UploadSignature, sign_upload_request

__all__ = [
    "Assessment",
    "MissingFieldsError",
    "Video",
    "VideoCounter",
    "SigningError",
    "UploadSignature",
    "sign_upload_request",
]
