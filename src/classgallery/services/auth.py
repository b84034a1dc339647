"""Authentication service for classgallery.

There is one admin account, configured through ADMIN_USERNAME and
ADMIN_PASSWORD, and one login per student on the roster. The service only
checks credentials; the Streamlit session keeps who is logged in.
"""

import hmac
from dataclasses import dataclass
from enum import Enum

from classgallery.config import get_admin_credentials
from ..logging_config import get_logger, log_security_event, log_user_action
from ..models.media import ADMIN_UPLOADER
from ..models.student import Student
from .students import StudentService

logger = get_logger(__name__)


class Role(str, Enum):
    ADMIN = "admin"
    STUDENT = "student"


@dataclass
class SessionUser:
    """The person behind the current Streamlit session."""

    role: Role
    user_id: str
    name: str
    student: Student | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT

    @classmethod
    def admin(cls) -> "SessionUser":
        return cls(role=Role.ADMIN, user_id=ADMIN_UPLOADER, name="Admin")

    @classmethod
    def for_student(cls, student: Student) -> "SessionUser":
        return cls(role=Role.STUDENT, user_id=student.student_id, name=student.name, student=student)


class AuthService:
    """Checks admin and student credentials."""

    def __init__(self, student_service: StudentService | None = None) -> None:
        self._student_service = student_service

    @property
    def student_service(self) -> StudentService:
        if self._student_service is None:
            self._student_service = StudentService()
        return self._student_service

    def admin_login(self, username: str, password: str) -> SessionUser | None:
        """
        Check the admin credentials.

        Returns:
            SessionUser for the admin, or None on mismatch
        """
        expected_username, expected_password = get_admin_credentials()

        username_ok = hmac.compare_digest(username.encode("utf-8"), expected_username.encode("utf-8"))
        password_ok = hmac.compare_digest(password.encode("utf-8"), expected_password.encode("utf-8"))

        if username_ok and password_ok:
            log_user_action(ADMIN_UPLOADER, "admin_login")
            return SessionUser.admin()

        log_security_event("admin_login_failed", user_id=username or None)
        return None

    def student_login(self, student_id: str, password: str) -> SessionUser | None:
        """
        Check a student's identifier and password against the roster.

        Returns:
            SessionUser for the student, or None on mismatch

        Raises:
            DatabaseError: If the roster cannot be read
        """
        student = self.student_service.authenticate(student_id.strip(), password)

        if student is None:
            log_security_event("student_login_failed", user_id=student_id or None)
            return None

        log_user_action(student.student_id, "student_login")
        return SessionUser.for_student(student)


def get_auth_service() -> AuthService:
    """Build an auth service bound to the current backend configuration."""
    return AuthService()
