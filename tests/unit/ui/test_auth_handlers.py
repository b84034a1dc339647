"""Tests for session login handlers."""

from unittest.mock import MagicMock, patch

import pytest

from classgallery.models.student import Student
from classgallery.services.auth import SessionUser
from classgallery.services.students import StudentService
from classgallery.ui.handlers.auth import (
    INVALID_ADMIN_MESSAGE,
    INVALID_STUDENT_MESSAGE,
    LOGIN_FAILED_MESSAGE,
    get_current_user,
    initialize_auth_state,
    login_admin,
    login_student,
    logout,
    require_admin,
    require_student,
)
from classgallery.ui.handlers.error import DatabaseError
from tests.conftest import SessionStateStub


@pytest.fixture
def roster():
    StudentService().create_student(Student.create_new(student_id="STU001", password="pass123", name="Asha Rao"))


class TestInitializeAuthState:
    def test_sets_missing_keys(self):
        state = SessionStateStub()
        with patch("streamlit.session_state", new=state):
            initialize_auth_state()

        assert state == {"current_user": None, "auth_error": None}

    def test_keeps_existing_user(self, session_state):
        user = SessionUser.admin()
        session_state.current_user = user

        initialize_auth_state()

        assert get_current_user() is user


class TestAdminLogin:
    def test_success_routes_to_dashboard(self, session_state):
        assert login_admin("admin", "admin123") is True

        assert session_state.current_user.is_admin
        assert session_state.auth_error is None
        assert session_state.current_page == "admin_dashboard"

    def test_failure_sets_inline_error(self, session_state):
        assert login_admin("admin", "nope") is False

        assert session_state.current_user is None
        assert session_state.auth_error == INVALID_ADMIN_MESSAGE
        assert session_state.current_page == "home"


class TestStudentLogin:
    def test_success(self, session_state, roster):
        assert login_student("STU001", "pass123") is True

        assert session_state.current_user.user_id == "STU001"
        assert session_state.current_page == "student_dashboard"

    def test_wrong_password(self, session_state, roster):
        assert login_student("STU001", "wrong") is False

        assert session_state.auth_error == INVALID_STUDENT_MESSAGE

    def test_backend_error(self, session_state):
        auth_service = MagicMock()
        auth_service.student_login.side_effect = DatabaseError("backend down")

        with patch("classgallery.ui.handlers.auth.get_auth_service", return_value=auth_service):
            assert login_student("STU001", "pass123") is False

        assert session_state.auth_error == LOGIN_FAILED_MESSAGE
        assert session_state.current_user is None


def test_logout(session_state):
    login_admin("admin", "admin123")

    logout()

    assert session_state.current_user is None
    assert session_state.current_page == "home"


class TestRequireRole:
    @pytest.fixture(autouse=True)
    def quiet_ui(self):
        with patch("streamlit.button", return_value=False):
            with patch("classgallery.ui.handlers.auth.render_error_message") as render_error:
                yield render_error

    def test_admin_page_allows_admin(self, session_state, quiet_ui):
        session_state.current_user = SessionUser.admin()

        assert require_admin() is session_state.current_user
        quiet_ui.assert_not_called()

    def test_admin_page_rejects_student(self, session_state, sample_student, quiet_ui):
        session_state.current_user = SessionUser.for_student(sample_student)

        assert require_admin() is None
        quiet_ui.assert_called_once()

    def test_student_page_rejects_anonymous(self, session_state, quiet_ui):
        assert require_student() is None
        quiet_ui.assert_called_once()

    def test_student_page_allows_student(self, session_state, sample_student):
        session_state.current_user = SessionUser.for_student(sample_student)

        assert require_student().user_id == "STU001"
