"""
Pytest configuration and fixtures for classgallery tests.
"""

import os
from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from classgallery.config import get_config
from classgallery.models.media import ADMIN_UPLOADER, MediaItem, MediaStatus, MediaType
from classgallery.models.settings import StorageCredentials
from classgallery.models.student import Student
from classgallery.services.backend import BackendClient, reset_backend_client
from classgallery.services.local_store import LocalStore, reset_local_store
from classgallery.services.media_host import reset_media_host_service
from classgallery.services.settings import reset_settings_service

ISOLATED_ENV_KEYS = (
    "BACKEND_URL",
    "BACKEND_API_KEY",
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "CLOUDINARY_CLOUD_NAME",
    "CLOUDINARY_UPLOAD_PRESET",
    "ADMIN_USERNAME",
    "ADMIN_PASSWORD",
    "LIVE_REFRESH_SECONDS",
)


class SessionStateStub(dict):
    """Dict with attribute access, standing in for ``st.session_state``."""

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __setattr__(self, name, value):
        self[name] = value


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path) -> Generator[None, None, None]:
    """Run every test in local mode with its own store and fresh singletons."""
    env = {key: value for key, value in os.environ.items() if key not in ISOLATED_ENV_KEYS}
    env["LOCAL_STORE_PATH"] = str(tmp_path / "shared_store.duckdb")

    with patch.dict("os.environ", env, clear=True):
        get_config().clear_cache()
        reset_backend_client()
        reset_settings_service()
        reset_media_host_service()
        reset_local_store()
        yield
        reset_local_store()
        reset_media_host_service()
        reset_settings_service()
        reset_backend_client()

    get_config().clear_cache()


@pytest.fixture
def local_store(tmp_path: Path) -> Generator[LocalStore, None, None]:
    """A LocalStore backed by a temporary DuckDB file."""
    store = LocalStore(str(tmp_path / "store.duckdb"))
    yield store
    store.close()


@pytest.fixture
def mock_backend() -> MagicMock:
    """A BackendClient double; configure ``select`` / ``insert`` per test."""
    backend = MagicMock(spec=BackendClient)
    backend.select.return_value = []
    backend.insert.return_value = None
    backend.update.return_value = []
    return backend


@pytest.fixture
def session_state() -> Generator[SessionStateStub, None, None]:
    state = SessionStateStub(current_page="home", current_user=None, auth_error=None)
    with patch("streamlit.session_state", new=state):
        yield state


@pytest.fixture
def sample_student() -> Student:
    return Student(
        id="rec-1",
        student_id="STU001",
        password="pass123",
        name="Asha Rao",
        roll_no="12",
        class_name="X",
        section="A",
        email="asha@example.com",
        phone="555-0101",
        created_at=datetime(2024, 5, 1, 9, 0, tzinfo=UTC),
    )


@pytest.fixture
def sample_credentials() -> StorageCredentials:
    return StorageCredentials(cloud_name="demo-cloud", upload_preset="class_unsigned")


def make_media(
    media_id: str,
    student_id: str = "all",
    status: MediaStatus = MediaStatus.APPROVED,
    uploaded_by: str = ADMIN_UPLOADER,
    media_type: MediaType = MediaType.PHOTO,
    day: int = 1,
) -> MediaItem:
    """Build a MediaItem with just the fields a test cares about."""
    return MediaItem(
        id=media_id,
        title=f"Item {media_id}",
        type=media_type,
        url=f"https://res.example.com/{media_id}.jpg",
        description="",
        student_id=student_id,
        status=status,
        uploaded_by=uploaded_by,
        created_at=datetime(2024, 5, day, 12, 0, tzinfo=UTC),
    )


@pytest.fixture
def sample_media() -> list[MediaItem]:
    """A mixed gallery: shared, targeted, and student uploads in each status."""
    return [
        make_media("m1", student_id="all", day=1),
        make_media("m2", student_id="STU001", day=2, media_type=MediaType.VIDEO),
        make_media("m3", student_id="STU002", day=3),
        make_media("m4", student_id="STU001", status=MediaStatus.PENDING, uploaded_by="STU001", day=4),
        make_media("m5", student_id="STU002", status=MediaStatus.PENDING, uploaded_by="STU002", day=5),
        make_media("m6", student_id="STU001", status=MediaStatus.REJECTED, uploaded_by="STU001", day=6),
        make_media("m7", student_id="all", status=MediaStatus.PENDING, uploaded_by="STU002", day=7),
    ]


class FakeUploadedFile:
    """Minimal stand-in for Streamlit's UploadedFile."""

    def __init__(self, name: str, data: bytes, mime_type: str | None = None, size: int | None = None):
        self.name = name
        self.type = mime_type
        self.size = len(data) if size is None else size
        self._data = data

    def getvalue(self) -> bytes:
        return self._data


@pytest.fixture
def sample_image_data() -> bytes:
    """Provide sample image data for testing (a PNG signature plus padding)."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
