"""Media host credential settings.

The cloud name and upload preset are shared by every admin and student
session. They are resolved in this order:

1. the in-memory cache of this process
2. the ``settings`` row with key ``cloudinary`` on the remote backend
3. the two keys in the local store
4. the ``CLOUDINARY_CLOUD_NAME`` / ``CLOUDINARY_UPLOAD_PRESET`` configuration
5. otherwise the host is not configured
"""

from dataclasses import dataclass

from classgallery.config import get_default_storage_credentials
from classgallery.ui.handlers.error import DatabaseError
from ..logging_config import get_logger, log_user_action
from ..models.settings import SETTINGS_KEY, StorageCredentials
from .backend import BackendClient, get_backend_client
from .local_store import CLOUD_NAME_KEY, UPLOAD_PRESET_KEY, LocalStore, get_local_store

logger = get_logger(__name__)

SETTINGS_TABLE = "settings"


@dataclass
class SaveResult:
    """Outcome of saving credentials, shown to the admin as-is."""

    success: bool
    message: str


class SettingsService:
    """Resolve and persist the media host credentials."""

    def __init__(self, backend: BackendClient | None = None, store: LocalStore | None = None):
        self.backend = backend if backend is not None else get_backend_client()
        self._store = store
        self._cached: StorageCredentials | None = None
        self.last_source: str | None = None

    @property
    def store(self) -> LocalStore:
        if self._store is None:
            self._store = get_local_store()
        return self._store

    def _get_local(self) -> StorageCredentials | None:
        credentials = StorageCredentials(
            cloud_name=self.store.get_item(CLOUD_NAME_KEY) or "",
            upload_preset=self.store.get_item(UPLOAD_PRESET_KEY) or "",
        )
        return credentials if credentials.is_complete() else None

    def _set_local(self, credentials: StorageCredentials) -> None:
        self.store.set_item(CLOUD_NAME_KEY, credentials.cloud_name)
        self.store.set_item(UPLOAD_PRESET_KEY, credentials.upload_preset)

    def _get_remote(self) -> StorageCredentials | None:
        if self.backend is None:
            return None

        try:
            row = self.backend.select(SETTINGS_TABLE, filters={"key": SETTINGS_KEY}, single=True)
        except DatabaseError as e:
            logger.warning("settings_remote_load_failed", error=str(e))
            return None

        return StorageCredentials.from_row(row)

    def _remember(self, credentials: StorageCredentials, source: str) -> StorageCredentials:
        self._cached = credentials
        self.last_source = source
        logger.info("storage_credentials_resolved", source=source, cloud_name=credentials.cloud_name)
        return credentials

    def load_credentials(self) -> StorageCredentials | None:
        """
        Resolve credentials through the full fallback chain.

        A cached value is returned without touching the backend. Credentials
        found remotely are mirrored into the local store.

        Returns:
            StorageCredentials, or None when nothing is configured anywhere
        """
        if self._cached is not None:
            return self._cached

        remote = self._get_remote()
        if remote is not None:
            self._set_local(remote)
            return self._remember(remote, "backend")

        local = self._get_local()
        if local is not None:
            return self._remember(local, "local")

        default = StorageCredentials(*get_default_storage_credentials())
        if default.is_complete():
            return self._remember(default, "environment")

        logger.info("storage_credentials_missing")
        return None

    def save_credentials(self, cloud_name: str, upload_preset: str) -> SaveResult:
        """
        Save credentials to the cache, the local store and the backend.

        The remote row is replaced (delete, then insert). Local copies are
        written first so the current session keeps working if the backend
        write fails.

        Returns:
            SaveResult with ``success`` true only when the backend write succeeded
        """
        credentials = StorageCredentials(cloud_name=cloud_name.strip(), upload_preset=upload_preset.strip())

        self._cached = credentials
        self.last_source = "local"
        self._set_local(credentials)

        log_user_action("admin", "storage_credentials_saved", cloud_name=credentials.cloud_name)

        if self.backend is None:
            return SaveResult(
                success=False,
                message="Backend not connected. Settings saved locally only (other devices will not see them).",
            )

        try:
            self.backend.delete(SETTINGS_TABLE, filters={"key": SETTINGS_KEY})
            self.backend.insert(SETTINGS_TABLE, credentials.to_row())
        except DatabaseError as e:
            logger.error("settings_remote_save_failed", error=str(e))
            return SaveResult(success=False, message=f"Database error: {e}. Settings saved locally only.")

        self.last_source = "backend"
        return SaveResult(success=True, message="Settings saved to the database for all devices.")

    def is_configured(self) -> bool:
        """Quick check against the cache and the local store only."""
        if self._cached is not None and self._cached.is_complete():
            return True
        return self._get_local() is not None

    def check_configured(self) -> bool:
        """Full check through the whole fallback chain."""
        credentials = self.load_credentials()
        return credentials is not None and credentials.is_complete()

    def get_credentials(self) -> StorageCredentials:
        """
        Best credentials available without a backend call.

        Falls back to the configured defaults, which may be empty strings.
        """
        if self._cached is not None:
            return self._cached
        return self._get_local() or StorageCredentials(*get_default_storage_credentials())

    def clear_cache(self) -> None:
        """Forget the cached value so the next load goes back to the backend."""
        self._cached = None
        self.last_source = None


_settings_service: SettingsService | None = None


def get_settings_service() -> SettingsService:
    """Get the shared settings service (and with it the shared cache)."""
    global _settings_service
    if _settings_service is None:
        _settings_service = SettingsService()
    return _settings_service


def reset_settings_service() -> None:
    global _settings_service
    _settings_service = None
