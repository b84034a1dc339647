"""Upload handlers for classgallery.

An upload is two steps: push the file to the media host, then store a media
record pointing at the returned URL. Batches tally successes and failures
instead of stopping at the first error.
"""

from typing import Any

import structlog

from classgallery.models.media import ALL_STUDENTS, MediaItem, media_type_for_mime
from classgallery.services.media import MediaService
from classgallery.services.media_host import get_media_host_service, guess_mime_type, validate_file_size
from classgallery.ui.handlers.error import PortalError, ValidationError

logger = structlog.get_logger(__name__)

ACCEPTED_FILE_TYPES = ["jpg", "jpeg", "png", "gif", "webp", "heic", "mp4", "mov", "webm", "mkv", "avi"]


def validate_uploaded_files(uploaded_files: list) -> tuple[list, list]:
    """
    Validate uploaded files for type and size. No network I/O happens here.

    Args:
        uploaded_files: List of uploaded file objects from Streamlit

    Returns:
        tuple: (valid_files, validation_errors)
    """
    if not uploaded_files:
        return [], []

    valid_files = []
    validation_errors = []

    for uploaded_file in uploaded_files:
        mime_type = guess_mime_type(uploaded_file.name, getattr(uploaded_file, "type", None))

        if not mime_type.startswith(("image/", "video/")):
            validation_errors.append(
                {
                    "filename": uploaded_file.name,
                    "error": "Unsupported file type",
                    "details": "Only photos and videos can be uploaded",
                }
            )
            continue

        try:
            file_size = getattr(uploaded_file, "size", None)
            if file_size is None:
                file_size = len(uploaded_file.getvalue())
            validate_file_size(file_size, uploaded_file.name)
        except ValidationError as e:
            validation_errors.append(
                {"filename": uploaded_file.name, "error": "Validation failed", "details": e.user_message}
            )
            logger.warning("file_validation_failed", filename=uploaded_file.name, error=str(e))
            continue

        valid_files.append(
            {
                "file_object": uploaded_file,
                "filename": uploaded_file.name,
                "size": file_size,
                "mime_type": mime_type,
            }
        )
        logger.info("file_validation_success", filename=uploaded_file.name, size=file_size)

    return valid_files, validation_errors


def _title_for(base_title: str, index: int, total: int) -> str:
    if total <= 1:
        return base_title
    return f"{base_title} ({index + 1})"


def process_single_upload(
    file_info: dict[str, Any],
    title: str,
    uploaded_by: str,
    description: str = "",
    target_student_id: str = ALL_STUDENTS,
    target_student_name: str = "",
    media_service: MediaService | None = None,
) -> dict[str, Any]:
    """
    Upload one validated file and store its media record.

    Args:
        file_info: Entry from ``validate_uploaded_files``
        title: Media title
        uploaded_by: ``admin`` or the uploading student's identifier
        description: Optional description
        target_student_id: Audience (a student identifier or ``all``)
        target_student_name: Audience label
        media_service: Media records service (defaults to a new one)

    Returns:
        dict: Result with ``success`` and either ``media`` or ``error``
    """
    filename = file_info["filename"]

    try:
        file_data = file_info.get("data")
        if file_data is None:
            file_data = file_info["file_object"].getvalue()

        url = get_media_host_service().upload(file_data, filename, file_info.get("mime_type"))

        item = MediaItem.create_new(
            title=title,
            url=url,
            uploaded_by=uploaded_by,
            student_id=target_student_id,
            media_type=media_type_for_mime(file_info.get("mime_type")),
            description=description,
            student_name=target_student_name,
        )
        stored = (media_service or MediaService()).add_media(item)

        logger.info("upload_processing_completed", filename=filename, media_id=stored.id, status=stored.status.value)
        return {"success": True, "filename": filename, "media": stored, "message": f"Uploaded {filename}"}

    except PortalError as e:
        logger.error("upload_processing_failed", filename=filename, error=str(e), code=e.code)
        return {"success": False, "filename": filename, "error": e.user_message, "code": e.code}
    except Exception as e:
        logger.error("upload_processing_failed", filename=filename, error=str(e), error_type=type(e).__name__)
        return {"success": False, "filename": filename, "error": str(e), "code": "unexpected_error"}


def summarize_batch(successful: int, failed: int) -> str:
    """Toast text for a finished batch."""
    parts = []
    if successful:
        parts.append(f"{successful} file(s) uploaded")
    if failed:
        parts.append(f"{failed} file(s) failed")
    return ", ".join(parts) or "No files to process"


def process_batch_upload(
    valid_files: list[dict[str, Any]],
    title: str,
    uploaded_by: str,
    description: str = "",
    target_student_id: str = ALL_STUDENTS,
    target_student_name: str = "",
    progress_callback: Any = None,
    media_service: MediaService | None = None,
) -> dict[str, Any]:
    """
    Upload several files with the same title, description and audience.

    With more than one file, titles get a ``(1)``, ``(2)``... suffix.

    Returns:
        dict: Batch summary with success/failure counts and per-file results
    """
    if not valid_files:
        return {
            "success": True,
            "total_files": 0,
            "successful_uploads": 0,
            "failed_uploads": 0,
            "results": [],
            "message": summarize_batch(0, 0),
        }

    media_service = media_service or MediaService()
    total_files = len(valid_files)
    results = []
    successful_uploads = 0
    failed_uploads = 0

    logger.info("batch_upload_started", total_files=total_files, uploaded_by=uploaded_by)

    for index, file_info in enumerate(valid_files):
        if progress_callback:
            progress_callback(current_file=file_info["filename"], completed=index, total=total_files)

        result = process_single_upload(
            file_info,
            title=_title_for(title, index, total_files),
            uploaded_by=uploaded_by,
            description=description,
            target_student_id=target_student_id,
            target_student_name=target_student_name,
            media_service=media_service,
        )
        results.append(result)

        if result["success"]:
            successful_uploads += 1
        else:
            failed_uploads += 1

    if progress_callback:
        progress_callback(current_file=None, completed=total_files, total=total_files)

    logger.info("batch_upload_completed", total_files=total_files, successful=successful_uploads, failed=failed_uploads)

    return {
        "success": failed_uploads == 0,
        "total_files": total_files,
        "successful_uploads": successful_uploads,
        "failed_uploads": failed_uploads,
        "results": results,
        "message": summarize_batch(successful_uploads, failed_uploads),
    }

