"""Home page for classgallery."""

import streamlit as st

from classgallery.ui.components.common import render_info_card, render_mode_banner
from classgallery.ui.handlers.auth import get_current_user


def render_home_page() -> None:
    """Render the role chooser, or shortcuts back to the dashboard when logged in."""
    render_mode_banner()

    user = get_current_user()
    if user is not None:
        target = "admin_dashboard" if user.is_admin else "student_dashboard"
        st.markdown(f"### 👋 Welcome back, {user.name}")
        if st.button("Open my dashboard", use_container_width=True, type="primary"):
            st.session_state.current_page = target
            st.rerun()
        return

    st.markdown("### Who are you?")

    col1, col2 = st.columns(2)

    with col1:
        if st.button("🛡️ Admin login", use_container_width=True, type="primary"):
            st.session_state.current_page = "admin_login"
            st.rerun()

    with col2:
        if st.button("🎓 Student login", use_container_width=True):
            st.session_state.current_page = "student_login"
            st.rerun()

    render_info_card(
        "Getting started",
        "The admin adds students, uploads class photos and videos, and approves what students share. "
        "Students log in with the ID and password handed out by the admin.",
        "🚀",
    )
