"""Media host service: unsigned uploads to the third-party file host."""

import mimetypes
from collections.abc import Callable
from pathlib import Path

import requests

from classgallery.config import get_upload_base_url, get_upload_timeout
from classgallery.ui.handlers.error import StorageError, ValidationError
from ..logging_config import get_logger
from .settings import SettingsService, get_settings_service

logger = get_logger(__name__)

MAX_FILE_SIZE = 100 * 1024 * 1024

NOT_CONFIGURED_MESSAGE = "Media storage is not configured. Please ask the admin to configure it in Settings."


def resource_type_for(mime_type: str | None) -> str:
    """Upload endpoint for a file: ``video`` for ``video/*``, otherwise ``image``."""
    if mime_type and mime_type.lower().startswith("video/"):
        return "video"
    return "image"


def guess_mime_type(filename: str, declared: str | None = None) -> str:
    """Prefer the browser-declared type, fall back to the file extension."""
    if declared:
        return declared
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


def validate_file_size(file_size: int, filename: str) -> None:
    """
    Reject empty and oversize files before any network call.

    Raises:
        ValidationError: If the file is empty or larger than MAX_FILE_SIZE
    """
    if file_size <= 0:
        raise ValidationError(
            f"File '{filename}' is empty",
            user_message=f"'{filename}' is empty.",
            details={"filename": filename, "size": file_size},
        )

    if file_size > MAX_FILE_SIZE:
        raise ValidationError(
            f"File '{filename}' is too large: {file_size} bytes (max {MAX_FILE_SIZE})",
            user_message=f"'{filename}' is larger than {MAX_FILE_SIZE // (1024 * 1024)} MB.",
            details={"filename": filename, "size": file_size, "max_size": MAX_FILE_SIZE},
        )


class MediaHostService:
    """Uploads files to the media host and returns their public URLs."""

    def __init__(
        self,
        settings_service: SettingsService | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the media host service.

        Args:
            settings_service: Source of the cloud name and upload preset
            base_url: Upload API base URL (defaults to UPLOAD_BASE_URL)
            timeout: Upload timeout in seconds (defaults to UPLOAD_TIMEOUT)
            session: Optional pre-built session (used by tests)
        """
        self.settings_service = settings_service or get_settings_service()
        self.base_url = (base_url or get_upload_base_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else get_upload_timeout()
        self.session = session or requests.Session()

    def get_upload_url(self, cloud_name: str, mime_type: str | None) -> str:
        return f"{self.base_url}/{cloud_name}/{resource_type_for(mime_type)}/upload"

    def upload(
        self,
        file_data: bytes,
        filename: str,
        mime_type: str | None = None,
        progress_callback: Callable[[int, int, str], None] | None = None,
    ) -> str:
        """
        Upload a photo or video and return its public HTTPS URL.

        Args:
            file_data: Raw file bytes
            filename: Original filename
            mime_type: Declared MIME type; picks the image or video endpoint
            progress_callback: Optional callback ``(sent, total, message)``

        Returns:
            str: Public URL of the uploaded file

        Raises:
            ValidationError: If the file fails the size gate
            StorageError: If no credentials are configured or the host rejects the upload
        """
        safe_filename = Path(filename).name
        validate_file_size(len(file_data), safe_filename)

        credentials = self.settings_service.load_credentials()
        if credentials is None or not credentials.is_complete():
            raise StorageError(
                "Media host credentials are not configured",
                code="storage_not_configured",
                user_message=NOT_CONFIGURED_MESSAGE,
                retry_suggested=False,
            )

        mime_type = guess_mime_type(safe_filename, mime_type)
        upload_url = self.get_upload_url(credentials.cloud_name, mime_type)

        if progress_callback:
            progress_callback(0, len(file_data), "Starting upload...")

        try:
            response = self.session.post(
                upload_url,
                data={"upload_preset": credentials.upload_preset},
                files={"file": (safe_filename, file_data, mime_type)},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            if progress_callback:
                progress_callback(0, len(file_data), f"Upload failed: {e}")
            raise StorageError(
                f"Upload of '{safe_filename}' failed: {e}",
                user_message="Upload failed. Check your connection and try again.",
                details={"filename": safe_filename},
                original_exception=e,
            ) from e

        if not response.ok:
            message = _host_error_message(response)
            if progress_callback:
                progress_callback(0, len(file_data), f"Upload failed: {message}")
            raise StorageError(
                f"Media host rejected '{safe_filename}': {message}",
                user_message=message,
                details={"filename": safe_filename, "status_code": response.status_code},
            )

        try:
            secure_url = response.json()["secure_url"]
        except (ValueError, KeyError) as e:
            raise StorageError(
                f"Media host response for '{safe_filename}' had no URL",
                user_message="Upload failed",
                details={"filename": safe_filename},
                original_exception=e,
            ) from e

        if progress_callback:
            progress_callback(len(file_data), len(file_data), "Upload completed")

        logger.info(
            "media_uploaded",
            filename=safe_filename,
            size=len(file_data),
            resource_type=resource_type_for(mime_type),
            cloud_name=credentials.cloud_name,
        )
        return secure_url


def _host_error_message(response: requests.Response) -> str:
    """The host reports failures as ``{"error": {"message": ...}}``."""
    try:
        message = response.json().get("error", {}).get("message")
    except (ValueError, AttributeError):
        message = None
    return message or "Upload failed"


_media_host_service: MediaHostService | None = None


def get_media_host_service() -> MediaHostService:
    """Get the shared media host service."""
    global _media_host_service
    if _media_host_service is None:
        _media_host_service = MediaHostService()
    return _media_host_service


def reset_media_host_service() -> None:
    global _media_host_service
    _media_host_service = None
