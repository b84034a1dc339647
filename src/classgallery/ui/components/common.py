"""Reusable UI components for classgallery."""

import streamlit as st
import structlog

from classgallery import __version__
from classgallery.services.backend import is_backend_configured

logger = structlog.get_logger(__name__)


def render_empty_state(
    title: str,
    description: str,
    icon: str = "📭",
    action_text: str | None = None,
    action_page: str | None = None,
) -> None:
    """
    Render an empty state message with optional action button.

    Args:
        title: Main title for the empty state
        description: Description text
        icon: Emoji icon to display
        action_text: Text for action button (optional)
        action_page: Page to navigate to when action button is clicked (optional)
    """
    _, col, _ = st.columns([1, 2, 1])

    with col:
        st.markdown(
            f"""
        <div style='text-align: center; padding: 2rem 0;'>
            <div style='font-size: 4rem; margin-bottom: 1rem;'>{icon}</div>
            <h3 style='color: #666; margin-bottom: 1rem;'>{title}</h3>
            <p style='color: #888; margin-bottom: 2rem;'>{description}</p>
        </div>
        """,
            unsafe_allow_html=True,
        )

        if action_text and action_page:
            if st.button(action_text, use_container_width=True, type="primary"):
                st.session_state.current_page = action_page
                st.rerun()


def render_error_message(error_type: str, message: str, details: str | None = None) -> None:
    """
    Render a standardized error message.

    Args:
        error_type: Short heading, e.g. "Upload Error"
        message: Main error message
        details: Additional error details (optional)
    """
    st.error(f"**{error_type}:** {message}")

    if details:
        with st.expander("🔍 Details"):
            st.code(details)


def render_info_card(title: str, content: str, icon: str = "ℹ️") -> None:
    """Render a bordered information card."""
    st.markdown(
        f"""
    <div style='
        border: 1px solid #e0e0e0;
        border-radius: 8px;
        padding: 1rem;
        margin: 1rem 0;
        background-color: #f8f9fa;
    '>
        <h4 style='margin: 0 0 0.5rem 0; color: #333;'>{icon} {title}</h4>
        <p style='margin: 0; color: #666;'>{content}</p>
    </div>
    """,
        unsafe_allow_html=True,
    )


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        str: Formatted file size (e.g., "1.5 MB")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def mode_banner_text() -> tuple[bool, str]:
    """(connected, text) for the storage-mode banner."""
    if is_backend_configured():
        return True, "🟢 Backend connected - changes sync across all devices"
    return False, "🟡 Local mode - data is stored on this server only. Configure a backend to sync across devices."


def render_mode_banner() -> None:
    connected, text = mode_banner_text()
    if connected:
        st.success(text)
    else:
        st.warning(text)


def render_header(title: str = "📸 Class Gallery", subtitle: str | None = None) -> None:
    """Render the page header."""
    st.markdown(f"# {title}")
    if subtitle:
        st.caption(subtitle)
    st.divider()


def render_sidebar() -> None:
    """Render the sidebar with role-aware navigation."""
    from classgallery.ui.handlers.auth import get_current_user, logout

    with st.sidebar:
        st.markdown("### 📸 Class Gallery")
        st.divider()

        user = get_current_user()
        current_page = st.session_state.current_page

        if user is None:
            pages = {"🏠 Home": "home", "🛡️ Admin login": "admin_login", "🎓 Student login": "student_login"}
        elif user.is_admin:
            pages = {"🛡️ Admin dashboard": "admin_dashboard"}
        else:
            pages = {"🎓 My gallery": "student_dashboard"}

        for page_name, page_key in pages.items():
            if st.button(
                page_name,
                key=f"nav_{page_key}",
                use_container_width=True,
                type="primary" if page_key == current_page else "secondary",
            ):
                logger.info("page_navigation", from_page=current_page, to_page=page_key)
                st.session_state.current_page = page_key
                st.rerun()

        if user is not None:
            st.divider()
            st.markdown(f"👤 **{user.name}**")
            st.caption("Administrator" if user.is_admin else f"Student ID: {user.user_id}")

            if st.button("🚪 Logout", key="nav_logout", use_container_width=True):
                logout()
                st.rerun()


def render_footer() -> None:
    """Render the application footer."""
    st.divider()

    st.markdown(
        f"""
    <div style='text-align: center; color: #666; font-size: 0.8em;'>
        <strong>Class Gallery v{__version__}</strong>
    </div>
    """,
        unsafe_allow_html=True,
    )
