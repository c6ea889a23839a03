"""
Domain models for the learning-content catalog.

A catalog holds two independent kinds of records: videos and assessments.
Both describe a file that already lives in object storage; the record
only keeps the reference (url + public_id) plus a few descriptive fields.

These models don't know about Firestore or HTTP. The repositories
translate them to and from documents, the routes translate them to and
from JSON.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Union


class MissingFieldsError(ValueError):
    """Raised when a record is missing one or more required fields."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}")


class VideoCounter(Enum):
    """Counters a video keeps. Both only ever go up."""
    VIEWS = "views"
    COMPLETIONS = "completions"


def find_missing_fields(values: Mapping[str, Any], required: tuple[str, ...]) -> list[str]:
    """
    Return the required fields that are absent from ``values``.

    A field counts as missing when it is absent, ``None``, or an empty
    string. Zero is a real value (a zero-length video is still a video).
    """
    missing = []
    for name in required:
        value = values.get(name)
        if value is None or value == "":
            missing.append(name)
    return missing


def require_fields(values: Mapping[str, Any], required: tuple[str, ...]) -> None:
    """Raise MissingFieldsError if any required field is missing."""
    missing = find_missing_fields(values, required)
    if missing:
        raise MissingFieldsError(missing)


def _format_timestamp(value: Union[datetime, str, None]) -> Optional[str]:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def utc_now_iso() -> str:
    """Current wall-clock time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Video:
    """
    An educational video uploaded to object storage.

    ``id`` and ``created_at`` are assigned by the store, so they're
    None until the record has been persisted.

    Construction never validates: records read back from the store are
    kept as they are, even when a field is missing. New records go
    through ``validate()`` before they are saved.
    """
    title: Optional[str]
    teacher: Optional[str]
    subject: Optional[str]
    url: Optional[str]
    public_id: Optional[str]
    duration: Union[int, float, None]
    views: int = 0
    completions: int = 0
    id: Optional[str] = None
    created_at: Union[datetime, str, None] = None

    REQUIRED_FIELDS = ("title", "teacher", "subject", "url", "public_id", "duration")

    def validate(self) -> None:
        """Raise MissingFieldsError or ValueError if this can't be saved."""
        require_fields(vars(self), self.REQUIRED_FIELDS)
        if self.views < 0 or self.completions < 0:
            raise ValueError("Video counters cannot be negative")

    def to_document(self) -> dict[str, Any]:
        """Fields persisted in the store (everything but the id)."""
        return {
            "title": self.title,
            "subject": self.subject,
            "teacher": self.teacher,
            "url": self.url,
            "public_id": self.public_id,
            "duration": self.duration,
            "views": self.views,
            "completions": self.completions,
            "createdAt": self.created_at,
        }

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation, including id and createdAt."""
        data = {"id": self.id, **self.to_document()}
        data["createdAt"] = _format_timestamp(self.created_at)
        return data

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> "Video":
        return cls(
            id=doc_id,
            title=data.get("title"),
            teacher=data.get("teacher"),
            subject=data.get("subject"),
            url=data.get("url"),
            public_id=data.get("public_id"),
            duration=data.get("duration"),
            views=data.get("views") or 0,
            completions=data.get("completions") or 0,
            created_at=data.get("createdAt"),
        )


@dataclass
class Assessment:
    """An assessment (PDF) uploaded to object storage as a raw file."""
    title: Optional[str]
    teacher: Optional[str]
    url: Optional[str]
    public_id: Optional[str]
    id: Optional[str] = None
    created_at: Union[datetime, str, None] = None

    REQUIRED_FIELDS = ("title", "teacher", "url", "public_id")

    def validate(self) -> None:
        require_fields(vars(self), self.REQUIRED_FIELDS)

    def to_document(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "teacher": self.teacher,
            "url": self.url,
            "public_id": self.public_id,
            "createdAt": self.created_at,
        }

    def to_dict(self) -> dict[str, Any]:
        data = {"id": self.id, **self.to_document()}
        data["createdAt"] = _format_timestamp(self.created_at)
        return data

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> "Assessment":
        return cls(
            id=doc_id,
            title=data.get("title"),
            teacher=data.get("teacher"),
            url=data.get("url"),
            public_id=data.get("public_id"),
            created_at=data.get("createdAt"),
        )
