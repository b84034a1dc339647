"""Student dashboard for classgallery."""

import streamlit as st
import structlog

from classgallery.models.media import MediaItem
from classgallery.services.auth import SessionUser
from classgallery.services.media import TYPE_FILTERS, MediaService, filter_by_type, media_stats
from classgallery.services.media_host import MAX_FILE_SIZE, NOT_CONFIGURED_MESSAGE
from classgallery.services.settings import SettingsService, get_settings_service
from classgallery.ui.components.common import format_file_size, render_empty_state, render_mode_banner
from classgallery.ui.components.error_display import error_context
from classgallery.ui.components.media import render_media_grid, render_media_stats
from classgallery.ui.components.upload import handle_upload_submission
from classgallery.ui.handlers.auth import require_student
from classgallery.ui.handlers.dashboard import gallery_items, load_student_media, own_uploads
from classgallery.ui.handlers.refresh import render_live_refresh
from classgallery.ui.handlers.upload import ACCEPTED_FILE_TYPES

logger = structlog.get_logger(__name__)

TYPE_FILTER_LABELS = {"all": "All", "photo": "📷 Photos", "video": "🎬 Videos"}


def render_student_dashboard_page() -> None:
    """Render the gallery a student sees, plus their own uploads."""
    user = require_student()
    if user is None:
        return

    _render_student_header(user)
    render_mode_banner()

    media_service = MediaService()
    settings_service = get_settings_service()

    items = load_student_media(media_service, user.user_id)
    gallery = gallery_items(items)

    render_media_stats(media_stats(gallery), show_pending=False)
    st.divider()

    gallery_tab, uploads_tab = st.tabs(["🖼️ Gallery", "📤 My uploads"])

    with gallery_tab:
        with error_context("Could not load the gallery"):
            _render_gallery(gallery)

    with uploads_tab:
        with error_context("Could not load your uploads"):
            _render_my_uploads(user, own_uploads(items, user.user_id), media_service, settings_service)

    render_live_refresh({"media": media_service.get_version}, state_key="student_live_refresh_versions")


def _render_student_header(user: SessionUser) -> None:
    st.markdown(f"### 👋 {user.name}")
    if user.student is not None:
        st.caption(f"Student ID: {user.user_id} • {user.student.class_summary()}")


def _render_gallery(items: list[MediaItem]) -> None:
    kind = st.radio(
        "Show",
        TYPE_FILTERS,
        format_func=lambda value: TYPE_FILTER_LABELS.get(value, value),
        horizontal=True,
        key="student_type_filter",
    )
    filtered = filter_by_type(items, kind)

    if not filtered:
        render_empty_state(
            title="Nothing here yet",
            description="Photos and videos shared with you will show up here.",
            icon="📭",
        )
        return

    render_media_grid(filtered, key_prefix="student_gallery")


def _render_my_uploads(
    user: SessionUser,
    uploads: list[MediaItem],
    media_service: MediaService,
    settings_service: SettingsService,
) -> None:
    configured = settings_service.check_configured()

    st.markdown("#### Share a photo or video")
    if configured:
        st.caption("Your uploads are visible to you right away and to others once the admin approves them.")
    else:
        st.warning(NOT_CONFIGURED_MESSAGE)

    with st.form("student_upload_form", clear_on_submit=True):
        title = st.text_input("Title *", disabled=not configured)
        description = st.text_area("Description", disabled=not configured)
        uploaded_files = st.file_uploader(
            f"Photos or videos (max {format_file_size(MAX_FILE_SIZE)} each)",
            type=ACCEPTED_FILE_TYPES,
            accept_multiple_files=True,
            disabled=not configured,
        )
        submitted = st.form_submit_button("Upload", use_container_width=True, type="primary", disabled=not configured)

    if submitted:
        result = handle_upload_submission(
            uploaded_files,
            title=title,
            description=description,
            uploaded_by=user.user_id,
            media_service=media_service,
            settings_service=settings_service,
            target_student_id=user.user_id,
            target_student_name=user.name,
        )
        if result is not None and result["failed_uploads"] == 0:
            st.rerun()

    st.divider()
    st.markdown("#### My uploads")

    if not uploads:
        st.info("You have not uploaded anything yet.")
        return

    render_media_grid(uploads, key_prefix="student_uploads", show_status=True)
