"""Data loading for the dashboards."""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import structlog

from classgallery.logging_config import log_performance
from classgallery.models.media import MediaItem, MediaStatus
from classgallery.models.student import Student
from classgallery.services.media import MediaService
from classgallery.services.students import StudentService

logger = structlog.get_logger(__name__)


@dataclass
class AdminDashboardData:
    students: list[Student] = field(default_factory=list)
    media: list[MediaItem] = field(default_factory=list)

    @property
    def pending(self) -> list[MediaItem]:
        return [item for item in self.media if item.is_pending]

    def student_name(self, student_id: str) -> str:
        """Roster name for a login identifier, or the identifier itself."""
        for student in self.students:
            if student.student_id == student_id:
                return student.name
        return student_id


def load_admin_dashboard(student_service: StudentService, media_service: MediaService) -> AdminDashboardData:
    """
    Load the roster and every media record.

    The two lists are independent round trips, so they run side by side.

    Raises:
        DatabaseError: If either load fails
    """
    start_time = time.perf_counter()

    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="dashboard-load") as executor:
        students_future = executor.submit(student_service.list_students)
        media_future = executor.submit(media_service.list_all)
        data = AdminDashboardData(students=students_future.result(), media=media_future.result())

    log_performance(
        "admin_dashboard_load",
        time.perf_counter() - start_time,
        students=len(data.students),
        media=len(data.media),
        remote=student_service.is_remote,
    )
    return data


def load_student_media(media_service: MediaService, student_id: str) -> list[MediaItem]:
    """Media visible to one student, newest first."""
    start_time = time.perf_counter()
    items = media_service.list_for_student(student_id)
    log_performance("student_dashboard_load", time.perf_counter() - start_time, student_id=student_id, media=len(items))
    return items


def own_uploads(items: list[MediaItem], student_id: str) -> list[MediaItem]:
    """Items the student uploaded themselves, in any status."""
    return [item for item in items if item.uploaded_by == student_id]


def gallery_items(items: list[MediaItem]) -> list[MediaItem]:
    """The approved subset a student's gallery and its stats are built from."""
    return [item for item in items if item.status == MediaStatus.APPROVED]


def student_from_form(fields: dict[str, str], existing: Student | None = None) -> Student:
    """
    Build the roster record for a submitted add/edit student form.

    Args:
        fields: Form values keyed by ``Student`` field name
        existing: Record being edited, or None for a new student

    Returns:
        Student ready for ``create_student`` or ``update_student``
    """
    if existing is None:
        return Student.create_new(**fields)

    # Text fields are trimmed; the password is stored as typed, like create_new does.
    values = {key: value if key == "password" else value.strip() for key, value in fields.items()}
    return Student(id=existing.id, created_at=existing.created_at, **values)
