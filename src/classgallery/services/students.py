"""Student roster service.

Every call goes to the remote ``students`` table when a backend is
configured, and to the local store otherwise.
"""

from classgallery.ui.handlers.error import ValidationError
from ..logging_config import get_logger, log_user_action
from ..models.media import ADMIN_UPLOADER, ALL_STUDENTS
from ..models.student import Student
from .backend import BackendClient, get_backend_client
from .local_store import STUDENTS_KEY, LocalStore, get_local_store

logger = get_logger(__name__)

STUDENTS_TABLE = "students"

# Media markers that must never double as a login ID.
RESERVED_STUDENT_IDS = frozenset({ADMIN_UPLOADER, ALL_STUDENTS})


def filter_students(students: list[Student], term: str) -> list[Student]:
    """Admin roster search on name, student ID and roll number."""
    return [student for student in students if student.matches(term)]


def _sort_key(student: Student) -> str:
    return student.created_at.isoformat() if student.created_at else ""


class StudentService:
    """CRUD and login lookup for the student roster."""

    def __init__(self, backend: BackendClient | None = None, store: LocalStore | None = None):
        """
        Initialize the roster service.

        Args:
            backend: Remote client; defaults to the shared client (None in local mode)
            store: Local fallback store; defaults to the shared store
        """
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

    def _load_local(self) -> list[Student]:
        return [Student.from_dict(data) for data in self.store.get_json(STUDENTS_KEY, [])]

    def _save_local(self, students: list[Student]) -> None:
        self.store.set_json(STUDENTS_KEY, [student.to_dict() for student in students])

    def list_students(self) -> list[Student]:
        """
        Get the whole roster, newest first.

        Raises:
            DatabaseError: If the backend call fails
        """
        if self.backend is not None:
            rows = self.backend.select(STUDENTS_TABLE, order="created_at")
            return [Student.from_row(row) for row in rows]

        return sorted(self._load_local(), key=_sort_key, reverse=True)

    def get_by_student_id(self, student_id: str) -> Student | None:
        if self.backend is not None:
            row = self.backend.select(STUDENTS_TABLE, filters={"student_id": student_id}, single=True)
            return Student.from_row(row) if row else None

        return next((s for s in self._load_local() if s.student_id == student_id), None)

    def authenticate(self, student_id: str, password: str) -> Student | None:
        """
        Look up the student whose identifier and password both match.

        Returns:
            The matching Student, or None when nothing matches

        Raises:
            DatabaseError: If the backend call fails
        """
        if not student_id or not password or student_id.strip().lower() in RESERVED_STUDENT_IDS:
            return None

        if self.backend is not None:
            row = self.backend.select(
                STUDENTS_TABLE, filters={"student_id": student_id, "password": password}, single=True
            )
            return Student.from_row(row) if row else None

        return next(
            (s for s in self._load_local() if s.student_id == student_id and s.password == password),
            None,
        )

    def _check(self, student: Student, exclude_id: str | None = None) -> None:
        errors = student.validate()
        if errors:
            raise ValidationError(
                "Invalid student record: " + "; ".join(errors.values()),
                user_message=next(iter(errors.values())),
                details={"fields": sorted(errors)},
            )

        if student.student_id.strip().lower() in RESERVED_STUDENT_IDS:
            raise ValidationError(
                f"Student ID {student.student_id} is reserved",
                user_message=f"Student ID '{student.student_id}' is reserved. Please choose another.",
                details={"student_id": student.student_id},
            )

        existing = self.get_by_student_id(student.student_id)
        if existing is not None and existing.id != exclude_id:
            raise ValidationError(
                f"Student ID {student.student_id} is already taken",
                user_message=f"Student ID {student.student_id} is already in use.",
                details={"student_id": student.student_id},
            )

    def create_student(self, student: Student) -> Student:
        """
        Add a student to the roster.

        Raises:
            ValidationError: If required fields are missing or the ID is taken
            DatabaseError: If the backend call fails
        """
        self._check(student)

        if self.backend is not None:
            row = self.backend.insert(STUDENTS_TABLE, student.to_row())
            created = Student.from_row(row) if row else student
        else:
            students = self._load_local()
            students.append(student)
            self._save_local(students)
            created = student

        log_user_action("admin", "student_created", student_id=created.student_id, remote=self.is_remote)
        return created

    def update_student(self, student: Student) -> Student:
        """
        Replace a roster entry, matched by record id.

        Raises:
            ValidationError: If required fields are missing or the ID is taken
            DatabaseError: If the backend call fails
        """
        self._check(student, exclude_id=student.id)

        if self.backend is not None:
            self.backend.update(STUDENTS_TABLE, student.to_row(), filters={"id": student.id})
        else:
            students = [student if s.id == student.id else s for s in self._load_local()]
            self._save_local(students)

        log_user_action("admin", "student_updated", student_id=student.student_id, remote=self.is_remote)
        return student

    def delete_student(self, record_id: str) -> None:
        """
        Remove a roster entry by record id.

        Media addressed to the student is left in place.
        """
        if self.backend is not None:
            self.backend.delete(STUDENTS_TABLE, filters={"id": record_id})
        else:
            self._save_local([s for s in self._load_local() if s.id != record_id])

        log_user_action("admin", "student_deleted", record_id=record_id, remote=self.is_remote)

    def get_version(self) -> str | None:
        """Change marker for the live-refresh watcher."""
        if self.backend is not None:
            return self.backend.get_table_signature(STUDENTS_TABLE)
        return self.store.get_version(STUDENTS_KEY)
