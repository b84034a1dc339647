"""Admin dashboard for classgallery."""

from typing import Any

import streamlit as st
import structlog

from classgallery.models.media import ADMIN_UPLOADER, ALL_STUDENTS
from classgallery.models.student import Student
from classgallery.services.media import MediaService, media_stats
from classgallery.services.media_host import MAX_FILE_SIZE, NOT_CONFIGURED_MESSAGE
from classgallery.services.settings import SettingsService, get_settings_service
from classgallery.services.students import StudentService, filter_students
from classgallery.ui.components.common import format_file_size, render_empty_state, render_mode_banner
from classgallery.ui.components.error_display import error_context, get_error_display_manager
from classgallery.ui.components.media import render_media_grid, render_media_stats
from classgallery.ui.components.upload import handle_upload_submission
from classgallery.ui.handlers.auth import require_admin
from classgallery.ui.handlers.dashboard import AdminDashboardData, load_admin_dashboard, student_from_form
from classgallery.ui.handlers.error import ValidationError
from classgallery.ui.handlers.refresh import render_live_refresh
from classgallery.ui.handlers.upload import ACCEPTED_FILE_TYPES

logger = structlog.get_logger(__name__)
error_display = get_error_display_manager()

NEW_STUDENT = "__new__"


def render_admin_dashboard_page() -> None:
    """Render the admin dashboard with its four tabs."""
    if require_admin() is None:
        return

    render_mode_banner()

    student_service = StudentService()
    media_service = MediaService()
    settings_service = get_settings_service()

    data = load_admin_dashboard(student_service, media_service)

    render_media_stats(media_stats(data.media))
    st.divider()

    students_tab, media_tab, pending_tab, settings_tab = st.tabs(
        [
            f"👥 Students ({len(data.students)})",
            f"🖼️ Media ({len(data.media)})",
            f"⏳ Pending ({len(data.pending)})",
            "⚙️ Settings",
        ]
    )

    with students_tab:
        with error_context("Student roster operation failed"):
            _render_students_tab(data, student_service)

    with media_tab:
        with error_context("Media operation failed"):
            _render_media_tab(data, media_service, settings_service)

    with pending_tab:
        with error_context("Moderation failed"):
            _render_pending_tab(data, media_service)

    with settings_tab:
        with error_context("Settings operation failed"):
            _render_settings_tab(settings_service)

    render_live_refresh(
        {"students": student_service.get_version, "media": media_service.get_version},
        state_key="admin_live_refresh_versions",
    )


def _student_rows(students: list[Student]) -> list[dict[str, Any]]:
    return [
        {
            "Student ID": s.student_id,
            "Name": s.name,
            "Roll No": s.roll_no,
            "Class": s.class_name,
            "Section": s.section,
            "Email": s.email,
            "Phone": s.phone,
            "Password": s.password,
        }
        for s in students
    ]


def _render_students_tab(data: AdminDashboardData, student_service: StudentService) -> None:
    search = st.text_input("🔍 Search students", placeholder="Name, student ID or roll number")
    students = filter_students(data.students, search)

    if not data.students:
        render_empty_state(
            title="No students yet",
            description="Add the first student with the form below.",
            icon="👥",
        )
    elif not students:
        st.info(f"No students match '{search}'.")
    else:
        st.dataframe(_student_rows(students), use_container_width=True, hide_index=True)

    st.markdown("#### ✏️ Add or edit a student")
    _render_student_form(data.students, student_service)

    if data.students:
        st.markdown("#### 🗑️ Delete a student")
        _render_delete_student(data.students, student_service)


def _render_student_form(students: list[Student], student_service: StudentService) -> None:
    by_id = {s.id: s for s in students}
    choice = st.selectbox(
        "Student",
        [NEW_STUDENT, *by_id],
        format_func=lambda rid: "➕ New student" if rid == NEW_STUDENT else by_id[rid].display_label(),
        key="admin_edit_student",
    )
    existing = by_id.get(choice)

    with st.form(f"student_form_{choice}", clear_on_submit=existing is None):
        col1, col2 = st.columns(2)
        with col1:
            student_id = st.text_input("Student ID *", value=existing.student_id if existing else "")
            name = st.text_input("Name *", value=existing.name if existing else "")
            roll_no = st.text_input("Roll No", value=existing.roll_no if existing else "")
            email = st.text_input("Email", value=existing.email if existing else "")
        with col2:
            password = st.text_input("Password *", value=existing.password if existing else "")
            class_name = st.text_input("Class", value=existing.class_name if existing else "X")
            section = st.text_input("Section", value=existing.section if existing else "A")
            phone = st.text_input("Phone", value=existing.phone if existing else "")

        submitted = st.form_submit_button(
            "Save changes" if existing else "Add student", use_container_width=True, type="primary"
        )

    if not submitted:
        return

    fields = {
        "student_id": student_id,
        "password": password,
        "name": name,
        "roll_no": roll_no,
        "class_name": class_name,
        "section": section,
        "email": email,
        "phone": phone,
    }

    student = student_from_form(fields, existing)

    try:
        if existing is None:
            created = student_service.create_student(student)
            error_display.display_success_message(f"Added {created.name}")
        else:
            student_service.update_student(student)
            error_display.display_success_message(f"Updated {student.name}")
    except ValidationError as e:
        st.error(e.user_message)
        return

    st.rerun()


def _render_delete_student(students: list[Student], student_service: StudentService) -> None:
    by_id = {s.id: s for s in students}
    record_id = st.selectbox(
        "Student to delete",
        list(by_id),
        format_func=lambda rid: by_id[rid].display_label(),
        key="admin_delete_student",
    )

    pending_delete = st.session_state.get("confirm_delete_student")

    if pending_delete != record_id:
        if st.button("Delete student", key="admin_delete_student_button"):
            st.session_state.confirm_delete_student = record_id
            st.rerun()
        return

    st.warning(f"Delete {by_id[record_id].display_label()}? Their media stays in the gallery.")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Yes, delete", key="admin_delete_student_confirm", type="primary", use_container_width=True):
            student_service.delete_student(record_id)
            st.session_state.confirm_delete_student = None
            error_display.display_success_message(f"Deleted {by_id[record_id].name}")
            st.rerun()
    with col2:
        if st.button("Cancel", key="admin_delete_student_cancel", use_container_width=True):
            st.session_state.confirm_delete_student = None
            st.rerun()


def _render_media_tab(data: AdminDashboardData, media_service: MediaService, settings_service: SettingsService) -> None:
    st.markdown("#### 📤 Upload media")
    _render_admin_upload_form(data, media_service, settings_service)

    st.divider()
    st.markdown("#### 🖼️ All media")

    if not data.media:
        render_empty_state(title="No media yet", description="Uploads will show up here.", icon="🖼️")
        return

    render_media_grid(
        data.media,
        key_prefix="admin_media",
        show_status=True,
        show_audience=True,
        on_delete=lambda item: media_service.delete_media(item.id),
    )


def _render_admin_upload_form(
    data: AdminDashboardData, media_service: MediaService, settings_service: SettingsService
) -> None:
    no_students = not data.students
    if no_students:
        st.warning("Add at least one student before uploading media.")

    audiences = [ALL_STUDENTS, *(s.student_id for s in data.students)]

    with st.form("admin_upload_form", clear_on_submit=True):
        title = st.text_input("Title *", disabled=no_students)
        description = st.text_area("Description", disabled=no_students)
        target = st.selectbox(
            "Share with",
            audiences,
            format_func=lambda sid: "All students" if sid == ALL_STUDENTS else f"{data.student_name(sid)} ({sid})",
            disabled=no_students,
        )
        uploaded_files = st.file_uploader(
            f"Photos or videos (max {format_file_size(MAX_FILE_SIZE)} each)",
            type=ACCEPTED_FILE_TYPES,
            accept_multiple_files=True,
            disabled=no_students,
        )
        submitted = st.form_submit_button("Upload", use_container_width=True, type="primary", disabled=no_students)

    if not submitted:
        return

    result = handle_upload_submission(
        uploaded_files,
        title=title,
        description=description,
        uploaded_by=ADMIN_UPLOADER,
        media_service=media_service,
        settings_service=settings_service,
        target_student_id=target,
        target_student_name="" if target == ALL_STUDENTS else data.student_name(target),
    )
    if result is not None and result["failed_uploads"] == 0:
        st.rerun()


def _render_pending_tab(data: AdminDashboardData, media_service: MediaService) -> None:
    if not data.pending:
        render_empty_state(
            title="Nothing to review",
            description="Student uploads waiting for approval show up here.",
            icon="✅",
        )
        return

    st.caption("Student uploads stay hidden from everyone else until approved.")
    render_media_grid(
        data.pending,
        key_prefix="admin_pending",
        show_audience=True,
        on_approve=lambda item: media_service.approve(item.id),
        on_reject=lambda item: media_service.reject(item.id),
    )


def _render_settings_tab(settings_service: SettingsService) -> None:
    st.markdown("#### ☁️ Media host")

    if settings_service.check_configured():
        st.success(f"Uploads are configured (source: {settings_service.last_source}).")
    else:
        st.warning(NOT_CONFIGURED_MESSAGE)

    current = settings_service.get_credentials()

    with st.form("storage_settings_form"):
        cloud_name = st.text_input("Cloud name", value=current.cloud_name)
        upload_preset = st.text_input("Upload preset (unsigned)", value=current.upload_preset)
        submitted = st.form_submit_button("Save settings", use_container_width=True, type="primary")

    if not submitted:
        return

    if not cloud_name.strip() or not upload_preset.strip():
        st.error("Both the cloud name and the upload preset are required.")
        return

    result = settings_service.save_credentials(cloud_name, upload_preset)
    if result.success:
        error_display.display_success_message(result.message)
    else:
        error_display.display_warning_message(result.message)
