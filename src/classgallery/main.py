"""
Main Streamlit application for classgallery.

This is the entry point for the class photo and video sharing portal.
"""

import streamlit as st

from classgallery.config import get_debug_mode
from classgallery.logging_config import configure_structured_logging, get_logger
from classgallery.ui.components.common import render_footer, render_header, render_sidebar
from classgallery.ui.components.error_display import error_context, get_error_display_manager
from classgallery.ui.handlers.auth import initialize_auth_state
from classgallery.ui.pages.admin_dashboard import render_admin_dashboard_page
from classgallery.ui.pages.home import render_home_page
from classgallery.ui.pages.login import render_admin_login_page, render_student_login_page
from classgallery.ui.pages.student_dashboard import render_student_dashboard_page

# Configure structured logging
configure_structured_logging()
logger = get_logger(__name__)
error_display = get_error_display_manager()

PAGES = {
    "home": render_home_page,
    "admin_login": render_admin_login_page,
    "student_login": render_student_login_page,
    "admin_dashboard": render_admin_dashboard_page,
    "student_dashboard": render_student_dashboard_page,
}


# Session keys left out of the debug dump; the current user carries the student's password.
DEBUG_HIDDEN_KEYS = frozenset({"current_user"})


def debug_session_snapshot() -> dict[str, str]:
    """Session state as shown in the debug expander."""
    return {key: str(value) for key, value in st.session_state.items() if key not in DEBUG_HIDDEN_KEYS}


def initialize_session_state() -> None:
    """Initialize session state variables."""
    if "current_page" not in st.session_state:
        st.session_state.current_page = "home"

    if "confirm_delete_student" not in st.session_state:
        st.session_state.confirm_delete_student = None

    initialize_auth_state()


def render_main_content() -> None:
    """Render the main content area based on current page with error handling."""
    current_page = st.session_state.current_page
    render_page = PAGES.get(current_page)

    with error_context(f"Error while loading page '{current_page}'"):
        if render_page is not None:
            render_page()
        else:
            error_display.display_warning_message(f"Page '{current_page}' was not found.")

            if st.button("🏠 Back to home", use_container_width=True, type="primary"):
                st.session_state.current_page = "home"
                st.rerun()


def main() -> None:
    """Main application entry point."""
    logger.info("application_starting", page="main")

    try:
        st.set_page_config(
            page_title="Class Gallery",
            page_icon="📸",
            layout="wide",
            initial_sidebar_state="expanded",
            menu_items={
                "Get Help": None,
                "Report a bug": None,
                "About": "Class Gallery - photo and video sharing for a class",
            },
        )

        initialize_session_state()

        user = st.session_state.current_user
        logger.info(
            "session_initialized",
            role=user.role.value if user else None,
            current_page=st.session_state.current_page,
        )

        render_header()
        render_sidebar()

        with st.container():
            render_main_content()

        render_footer()

        # Debug info (only in development)
        if get_debug_mode():
            with st.expander("Debug Info"):
                st.write("Session State:", debug_session_snapshot())

    except Exception as e:
        logger.error("critical_application_error", error=str(e))
        error_display.display_exception(e, context={"operation": "main_application"}, show_details=True)

        if st.button("🔄 Restart application", type="primary"):
            st.rerun()


if __name__ == "__main__":
    main()
