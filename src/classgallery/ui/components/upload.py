"""Upload UI components for classgallery."""

from typing import Any

import streamlit as st

from classgallery.models.media import ALL_STUDENTS
from classgallery.services.media import MediaService
from classgallery.services.media_host import NOT_CONFIGURED_MESSAGE
from classgallery.services.settings import SettingsService
from classgallery.ui.components.common import format_file_size
from classgallery.ui.components.error_display import get_error_display_manager
from classgallery.ui.handlers.upload import process_batch_upload, validate_uploaded_files


def render_file_validation_results(valid_files: list, validation_errors: list) -> None:
    """
    Render the results of file validation.

    Args:
        valid_files: List of valid files
        validation_errors: List of validation errors
    """
    if valid_files and validation_errors:
        with st.expander(f"📋 {len(valid_files)} file(s) ready", expanded=len(valid_files) <= 5):
            for file_info in valid_files:
                st.write(f"**{file_info['filename']}** ({format_file_size(file_info['size'])})")

    for error in validation_errors:
        st.error(f"**{error['filename']}**: {error['error']} - {error['details']}")


def render_upload_results(batch_result: dict[str, Any]) -> None:
    """Per-file failures followed by the batch toast."""
    for file_result in batch_result["results"]:
        if not file_result["success"]:
            st.error(f"**{file_result['filename']}**: {file_result['error']}")

    if batch_result["failed_uploads"]:
        get_error_display_manager().display_warning_message(batch_result["message"])
    else:
        get_error_display_manager().display_success_message(batch_result["message"])


def handle_upload_submission(
    uploaded_files: list,
    title: str,
    description: str,
    uploaded_by: str,
    media_service: MediaService,
    settings_service: SettingsService,
    target_student_id: str = ALL_STUDENTS,
    target_student_name: str = "",
) -> dict[str, Any] | None:
    """
    Validate, upload and report one submitted upload form.

    Returns:
        The batch summary, or None when nothing was sent to the media host
    """
    if not title.strip():
        st.error("Please enter a title.")
        return None
    if not uploaded_files:
        st.error("Please choose at least one file.")
        return None
    if not settings_service.check_configured():
        st.warning(NOT_CONFIGURED_MESSAGE)
        return None

    valid_files, validation_errors = validate_uploaded_files(uploaded_files)
    render_file_validation_results(valid_files, validation_errors)

    if not valid_files:
        return None

    progress_bar = st.progress(0.0, text="Starting upload...")

    def update_progress(current_file: str | None, completed: int, total: int) -> None:
        text = f"Uploading {current_file} ({completed + 1}/{total})" if current_file else "Upload finished"
        progress_bar.progress(completed / total, text=text)

    batch_result = process_batch_upload(
        valid_files,
        title=title.strip(),
        uploaded_by=uploaded_by,
        description=description,
        target_student_id=target_student_id,
        target_student_name=target_student_name,
        progress_callback=update_progress,
        media_service=media_service,
    )

    render_upload_results(batch_result)
    return batch_result
