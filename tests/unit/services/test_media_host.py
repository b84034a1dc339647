"""
Unit tests for uploads to the media host.
"""

from unittest.mock import MagicMock

import pytest
import requests

from classgallery.services.media_host import (
    MAX_FILE_SIZE,
    MediaHostService,
    guess_mime_type,
    resource_type_for,
    validate_file_size,
)
from classgallery.ui.handlers.error import StorageError, ValidationError

UPLOAD_BASE = "https://upload.example.com/v1_1"


def make_response(body, status_code=200):
    response = MagicMock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.json.return_value = body
    return response


@pytest.fixture
def settings_service(sample_credentials):
    settings = MagicMock()
    settings.load_credentials.return_value = sample_credentials
    return settings


@pytest.fixture
def session():
    session = MagicMock(spec=requests.Session)
    session.post.return_value = make_response({"secure_url": "https://res.example.com/demo-cloud/a.jpg"})
    return session


@pytest.fixture
def service(settings_service, session):
    return MediaHostService(settings_service=settings_service, base_url=UPLOAD_BASE + "/", timeout=30, session=session)


class TestHelpers:
    def test_resource_type_for(self):
        assert resource_type_for("video/mp4") == "video"
        assert resource_type_for("image/heic") == "image"
        assert resource_type_for(None) == "image"

    def test_guess_mime_type(self):
        assert guess_mime_type("a.png", "image/png") == "image/png"
        assert guess_mime_type("clip.mp4") == "video/mp4"
        assert guess_mime_type("mystery") == "application/octet-stream"

    def test_size_gate(self):
        validate_file_size(MAX_FILE_SIZE, "max.jpg")

        with pytest.raises(ValidationError):
            validate_file_size(MAX_FILE_SIZE + 1, "big.mp4")
        with pytest.raises(ValidationError):
            validate_file_size(0, "empty.jpg")


class TestUpload:
    def test_image_upload(self, service, session, sample_image_data):
        url = service.upload(sample_image_data, "photo.png", "image/png")

        assert url == "https://res.example.com/demo-cloud/a.jpg"
        args, kwargs = session.post.call_args
        assert args[0] == f"{UPLOAD_BASE}/demo-cloud/image/upload"
        assert kwargs["data"] == {"upload_preset": "class_unsigned"}
        assert kwargs["files"]["file"] == ("photo.png", sample_image_data, "image/png")
        assert kwargs["timeout"] == 30

    def test_video_goes_to_video_endpoint(self, service, session):
        service.upload(b"video-bytes", "clip.mp4", "video/mp4")

        assert session.post.call_args.args[0] == f"{UPLOAD_BASE}/demo-cloud/video/upload"

    def test_oversize_file_never_reaches_the_network(self, service, session, settings_service):
        class Huge(bytes):
            def __len__(self):
                return MAX_FILE_SIZE + 1

        with pytest.raises(ValidationError):
            service.upload(Huge(b"x"), "huge.mp4", "video/mp4")

        session.post.assert_not_called()
        settings_service.load_credentials.assert_not_called()

    def test_not_configured(self, service, session, settings_service):
        settings_service.load_credentials.return_value = None

        with pytest.raises(StorageError) as exc_info:
            service.upload(b"data", "photo.jpg", "image/jpeg")

        assert exc_info.value.code == "storage_not_configured"
        session.post.assert_not_called()

    def test_host_error_message_is_surfaced(self, service, session):
        session.post.return_value = make_response({"error": {"message": "Upload preset not found"}}, status_code=400)

        with pytest.raises(StorageError) as exc_info:
            service.upload(b"data", "photo.jpg", "image/jpeg")

        assert exc_info.value.user_message == "Upload preset not found"

    def test_host_error_without_message(self, service, session):
        response = make_response(None, status_code=500)
        response.json.side_effect = ValueError("no json")
        session.post.return_value = response

        with pytest.raises(StorageError) as exc_info:
            service.upload(b"data", "photo.jpg", "image/jpeg")

        assert exc_info.value.user_message == "Upload failed"

    def test_connection_error(self, service, session):
        session.post.side_effect = requests.ConnectionError("offline")

        with pytest.raises(StorageError):
            service.upload(b"data", "photo.jpg", "image/jpeg")

    def test_progress_callback(self, service):
        progress = MagicMock()

        service.upload(b"data", "photo.jpg", "image/jpeg", progress_callback=progress)

        assert progress.call_args_list[0].args == (0, 4, "Starting upload...")
        assert progress.call_args_list[-1].args == (4, 4, "Upload completed")

    def test_path_components_are_stripped_from_filename(self, service, session):
        service.upload(b"data", "../../etc/photo.jpg", "image/jpeg")

        assert session.post.call_args.kwargs["files"]["file"][0] == "photo.jpg"
