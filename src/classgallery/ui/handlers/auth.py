"""Session handlers: who is logged in to this Streamlit session."""

import streamlit as st
import structlog

from classgallery.services.auth import SessionUser, get_auth_service
from classgallery.ui.components.common import render_error_message
from classgallery.ui.handlers.error import DatabaseError

logger = structlog.get_logger(__name__)

INVALID_ADMIN_MESSAGE = "Invalid admin credentials"
INVALID_STUDENT_MESSAGE = "Invalid Student ID or Password"
LOGIN_FAILED_MESSAGE = "Login failed. Please try again."


def initialize_auth_state() -> None:
    """Make sure the auth keys exist in session state."""
    if "current_user" not in st.session_state:
        st.session_state.current_user = None
    if "auth_error" not in st.session_state:
        st.session_state.auth_error = None


def get_current_user() -> SessionUser | None:
    return st.session_state.get("current_user")


def login_admin(username: str, password: str) -> bool:
    """
    Log the session in as admin.

    Returns:
        bool: True on success; on failure ``auth_error`` holds the inline message
    """
    user = get_auth_service().admin_login(username, password)

    if user is None:
        st.session_state.auth_error = INVALID_ADMIN_MESSAGE
        return False

    st.session_state.current_user = user
    st.session_state.auth_error = None
    st.session_state.current_page = "admin_dashboard"
    logger.info("session_login", role=user.role.value)
    return True


def login_student(student_id: str, password: str) -> bool:
    """
    Log the session in as a student.

    Returns:
        bool: True on success; on failure ``auth_error`` holds the inline message
    """
    try:
        user = get_auth_service().student_login(student_id, password)
    except DatabaseError as e:
        logger.error("student_login_error", student_id=student_id, error=str(e))
        st.session_state.auth_error = LOGIN_FAILED_MESSAGE
        return False

    if user is None:
        st.session_state.auth_error = INVALID_STUDENT_MESSAGE
        return False

    st.session_state.current_user = user
    st.session_state.auth_error = None
    st.session_state.current_page = "student_dashboard"
    logger.info("session_login", role=user.role.value, user_id=user.user_id)
    return True


def logout() -> None:
    """Forget the session user and go back to the home page."""
    user = get_current_user()

    st.session_state.current_user = None
    st.session_state.auth_error = None
    st.session_state.current_page = "home"

    logger.info("session_logout", user_id=user.user_id if user else None)


def _require(predicate_name: str, login_page: str) -> SessionUser | None:
    user = get_current_user()
    if user is not None and getattr(user, predicate_name):
        return user

    render_error_message(
        error_type="Login required",
        message="Please log in to view this page.",
    )
    if st.button("Go to login", use_container_width=True, type="primary"):
        st.session_state.current_page = login_page
        st.rerun()

    return None


def require_admin() -> SessionUser | None:
    """Return the admin session user, or show a login prompt and return None."""
    return _require("is_admin", "admin_login")


def require_student() -> SessionUser | None:
    """Return the student session user, or show a login prompt and return None."""
    return _require("is_student", "student_login")
