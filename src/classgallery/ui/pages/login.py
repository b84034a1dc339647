"""Login pages for classgallery."""

import streamlit as st
import structlog

from classgallery.ui.handlers.auth import login_admin, login_student

logger = structlog.get_logger(__name__)


def _render_back_button(key: str) -> None:
    if st.button("← Back", key=key):
        st.session_state.auth_error = None
        st.session_state.current_page = "home"
        st.rerun()


def render_admin_login_page() -> None:
    """Username/password form for the admin."""
    st.markdown("### 🛡️ Admin login")

    with st.form("admin_login_form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in", use_container_width=True, type="primary")

    if submitted:
        if login_admin(username.strip(), password):
            st.rerun()

    if st.session_state.get("auth_error"):
        st.error(st.session_state.auth_error)

    _render_back_button("admin_login_back")


def render_student_login_page() -> None:
    """Student ID/password form."""
    st.markdown("### 🎓 Student login")

    with st.form("student_login_form"):
        student_id = st.text_input("Student ID", placeholder="e.g. STU001")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in", use_container_width=True, type="primary")

    if submitted:
        if login_student(student_id.strip(), password):
            st.rerun()

    if st.session_state.get("auth_error"):
        st.error(st.session_state.auth_error)

    _render_back_button("student_login_back")
