"""Media records service: listing, visibility, moderation and deletion.

Files themselves live on the media host; this service only manages the
records pointing at them.
"""

from classgallery.ui.handlers.error import ValidationError
from ..logging_config import get_logger, log_user_action
from ..models.media import ALL_STUDENTS, MediaItem, MediaStatus, MediaType
from .backend import BackendClient, get_backend_client
from .local_store import MEDIA_KEY, LocalStore, get_local_store

logger = get_logger(__name__)

MEDIA_TABLE = "media"

TYPE_FILTERS = ("all", MediaType.PHOTO.value, MediaType.VIDEO.value)


def student_visibility_filter(student_id: str) -> str:
    """
    PostgREST OR expression matching what a student may see.

    Approved items for the student or for everyone, plus the student's own
    uploads in any status.
    """
    # Double quotes keep commas and parentheses in identifiers from splitting the expression.
    quoted = '"' + student_id.replace("\\", "\\\\").replace('"', '\\"') + '"'
    approved = MediaStatus.APPROVED.value
    return (
        f"(and(status.eq.{approved},student_id.eq.{quoted}),"
        f"and(status.eq.{approved},student_id.eq.{ALL_STUDENTS}),"
        f"uploaded_by.eq.{quoted})"
    )


def filter_by_type(items: list[MediaItem], kind: str) -> list[MediaItem]:
    """Dashboard filter: ``all``, ``photo`` or ``video``."""
    if kind == "all":
        return list(items)
    return [item for item in items if item.type.value == kind]


def media_stats(items: list[MediaItem]) -> dict[str, int]:
    """Counts shown in the dashboard header."""
    return {
        "total": len(items),
        "photos": sum(1 for item in items if item.type == MediaType.PHOTO),
        "videos": sum(1 for item in items if item.type == MediaType.VIDEO),
        "pending": sum(1 for item in items if item.status == MediaStatus.PENDING),
    }


class MediaService:
    """Media records in the remote ``media`` table or the local store."""

    def __init__(self, backend: BackendClient | None = None, store: LocalStore | None = None):
        self.backend = backend if backend is not None else get_backend_client()
        self._store = store

    @property
    def store(self) -> LocalStore:
        if self._store is None:
            self._store = get_local_store()
        return self._store

    @property
    def is_remote(self) -> bool:
        return self.backend is not None

    def _load_local(self) -> list[MediaItem]:
        return [MediaItem.from_dict(data) for data in self.store.get_json(MEDIA_KEY, [])]

    def _save_local(self, items: list[MediaItem]) -> None:
        self.store.set_json(MEDIA_KEY, [item.to_dict() for item in items])

    @staticmethod
    def _newest_first(items: list[MediaItem]) -> list[MediaItem]:
        return sorted(items, key=lambda item: item.created_at.isoformat(), reverse=True)

    def list_all(self) -> list[MediaItem]:
        """
        Every media record, newest first (admin view).

        Raises:
            DatabaseError: If the backend call fails
        """
        if self.backend is not None:
            rows = self.backend.select(MEDIA_TABLE, order="created_at")
            return [MediaItem.from_row(row) for row in rows]

        return self._newest_first(self._load_local())

    def list_for_student(self, student_id: str) -> list[MediaItem]:
        """
        Media a student may see, newest first.

        Raises:
            DatabaseError: If the backend call fails
        """
        if self.backend is not None:
            rows = self.backend.select(
                MEDIA_TABLE, or_filter=student_visibility_filter(student_id), order="created_at"
            )
            items = [MediaItem.from_row(row) for row in rows]
        else:
            items = self._newest_first(self._load_local())

        # Rows from older tables without status columns still pass through the model rule.
        return [item for item in items if item.is_visible_to(student_id)]

    def list_pending(self) -> list[MediaItem]:
        """Moderation queue, newest first."""
        if self.backend is not None:
            rows = self.backend.select(MEDIA_TABLE, filters={"status": MediaStatus.PENDING.value}, order="created_at")
            return [MediaItem.from_row(row) for row in rows]

        return [item for item in self._newest_first(self._load_local()) if item.is_pending]

    def add_media(self, item: MediaItem) -> MediaItem:
        """
        Store a media record.

        Raises:
            ValidationError: If the record has no title or URL
            DatabaseError: If the backend call fails
        """
        if not item.title or not item.url:
            raise ValidationError("Media record needs a title and a URL", details={"media_id": item.id})

        if self.backend is not None:
            row = self.backend.insert(MEDIA_TABLE, item.to_row())
            stored = MediaItem.from_row(row) if row else item
        else:
            items = self._load_local()
            items.append(item)
            self._save_local(items)
            stored = item

        log_user_action(
            item.uploaded_by,
            "media_added",
            media_id=stored.id,
            media_type=stored.type.value,
            audience=stored.student_id,
            status=stored.status.value,
        )
        return stored

    def set_status(self, media_id: str, status: MediaStatus) -> None:
        """
        Move a record through moderation.

        Raises:
            DatabaseError: If the backend call fails
        """
        status = MediaStatus(status)

        if self.backend is not None:
            self.backend.update(MEDIA_TABLE, {"status": status.value}, filters={"id": media_id})
        else:
            items = self._load_local()
            for item in items:
                if item.id == media_id:
                    item.status = status
            self._save_local(items)

        log_user_action("admin", "media_status_changed", media_id=media_id, status=status.value)

    def approve(self, media_id: str) -> None:
        self.set_status(media_id, MediaStatus.APPROVED)

    def reject(self, media_id: str) -> None:
        self.set_status(media_id, MediaStatus.REJECTED)

    def delete_media(self, media_id: str) -> None:
        """Delete a record. The file stays on the media host."""
        if self.backend is not None:
            self.backend.delete(MEDIA_TABLE, filters={"id": media_id})
        else:
            self._save_local([item for item in self._load_local() if item.id != media_id])

        log_user_action("admin", "media_deleted", media_id=media_id)

    def get_version(self) -> str | None:
        """Change marker for the live-refresh watcher."""
        if self.backend is not None:
            return self.backend.get_table_signature(MEDIA_TABLE, columns="id,status")
        return self.store.get_version(MEDIA_KEY)
