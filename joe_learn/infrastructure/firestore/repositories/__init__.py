"""
Repository pattern implementations for Firestore.

Repositories translate between domain models and Firestore documents.
"""

from .assessments import AssessmentRepository
from .base import RecordNotFoundError
from .videos import VideoRepository

__all__ = ["AssessmentRepository", "RecordNotFoundError", "VideoRepository"]
