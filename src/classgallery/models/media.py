"""
Media item model for classgallery.

A media item points at a file on the media host and carries who it is for,
who uploaded it, and where it is in moderation.
"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

ALL_STUDENTS = "all"
ADMIN_UPLOADER = "admin"


class MediaType(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"


class MediaStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def media_type_for_mime(mime_type: str | None) -> MediaType:
    """Videos are anything under ``video/``; everything else is shown as a photo."""
    if mime_type and mime_type.lower().startswith("video/"):
        return MediaType.VIDEO
    return MediaType.PHOTO


def _parse_timestamp(value: datetime | str | None) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return datetime.now(UTC)


@dataclass
class MediaItem:
    """
    A photo or video shared through the portal.

    ``student_id`` is the audience: one student's login identifier, or
    ``ALL_STUDENTS``. ``uploaded_by`` is ``ADMIN_UPLOADER`` or the uploading
    student's identifier.
    """

    id: str
    title: str
    type: MediaType
    url: str
    description: str
    student_id: str
    status: MediaStatus
    uploaded_by: str
    created_at: datetime
    student_name: str = ""

    @classmethod
    def create_new(
        cls,
        title: str,
        url: str,
        uploaded_by: str,
        student_id: str = ALL_STUDENTS,
        media_type: MediaType = MediaType.PHOTO,
        description: str = "",
        student_name: str = "",
        created_at: datetime | None = None,
    ) -> "MediaItem":
        """
        Create a new MediaItem with a generated id.

        Admin uploads are approved immediately; anything a student uploads
        starts out pending.

        Args:
            title: Title shown under the media
            url: Public URL returned by the media host
            uploaded_by: ``ADMIN_UPLOADER`` or the uploading student's identifier
            student_id: Audience (a student identifier or ``ALL_STUDENTS``)
            media_type: Photo or video
            description: Optional description
            student_name: Audience label cached on the record
            created_at: Creation time (defaults to now)

        Returns:
            New MediaItem instance
        """
        status = MediaStatus.APPROVED if uploaded_by == ADMIN_UPLOADER else MediaStatus.PENDING

        return cls(
            id=str(uuid.uuid4()),
            title=title.strip(),
            type=MediaType(media_type),
            url=url,
            description=description.strip(),
            student_id=student_id or ALL_STUDENTS,
            status=status,
            uploaded_by=uploaded_by,
            created_at=created_at or datetime.now(UTC),
            student_name=student_name,
        )

    def is_visible_to(self, student_id: str) -> bool:
        """
        Whether a student may see this item on their dashboard.

        Approved items addressed to the student or to everyone are visible,
        and a student always sees their own uploads whatever their status.
        """
        if self.uploaded_by == student_id:
            return True
        return self.status == MediaStatus.APPROVED and self.student_id in (student_id, ALL_STUDENTS)

    @property
    def is_pending(self) -> bool:
        return self.status == MediaStatus.PENDING

    @property
    def uploaded_by_admin(self) -> bool:
        return self.uploaded_by == ADMIN_UPLOADER

    def audience_label(self) -> str:
        if self.student_id == ALL_STUDENTS:
            return "All students"
        return self.student_name or self.student_id

    def to_row(self) -> dict:
        """Convert to the column layout of the ``media`` table."""
        return {
            "title": self.title,
            "type": self.type.value,
            "url": self.url,
            "description": self.description,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "status": self.status.value,
            "uploaded_by": self.uploaded_by,
        }

    def to_dict(self) -> dict:
        """Convert to the JSON form kept in the local store."""
        return {
            "id": self.id,
            **self.to_row(),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: dict) -> "MediaItem":
        """
        Create a MediaItem from a backend row or a local-store dict.

        Rows written before moderation existed have no ``status`` or
        ``uploaded_by``; they were admin uploads and count as approved.
        """
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            type=MediaType(row.get("type") or MediaType.PHOTO.value),
            url=row.get("url") or "",
            description=row.get("description") or "",
            student_id=row.get("student_id") or ALL_STUDENTS,
            status=MediaStatus(row.get("status") or MediaStatus.APPROVED.value),
            uploaded_by=row.get("uploaded_by") or ADMIN_UPLOADER,
            created_at=_parse_timestamp(row.get("created_at")),
            student_name=row.get("student_name") or "",
        )

    from_dict = from_row
