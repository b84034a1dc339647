"""Local fallback store.

When no remote backend is configured the portal keeps everything as plain
strings under a few fixed keys, the same way a browser keeps ``localStorage``.
Values live in a single DuckDB table so they survive restarts.
"""

import json
import threading
from typing import Any

import duckdb

from classgallery.config import get_local_store_path
from classgallery.ui.handlers.error import DatabaseError
from ..logging_config import get_logger
from ..models.database import DatabaseManager, get_database_manager
from ..models.schema import LOCAL_STORE_TABLE

logger = get_logger(__name__)

STUDENTS_KEY = "classX_students"
MEDIA_KEY = "classX_media"
CLOUD_NAME_KEY = "cloudinary_cloud_name"
UPLOAD_PRESET_KEY = "cloudinary_upload_preset"


class LocalStore:
    """Key to string storage backed by DuckDB."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._db_manager: DatabaseManager | None = None
        # One DuckDB connection is shared by every Streamlit session thread.
        self._lock = threading.Lock()

    @property
    def db_manager(self) -> DatabaseManager:
        if self._db_manager is None:
            try:
                self._db_manager = get_database_manager(self.db_path)
            except (duckdb.Error, RuntimeError, OSError) as e:
                raise DatabaseError(f"Failed to open local store at {self.db_path}: {e}", original_exception=e) from e
        return self._db_manager

    def _execute(self, query: str, parameters: list | None = None) -> list[tuple]:
        with self._lock:
            try:
                return self.db_manager.execute_query(query, parameters)
            except duckdb.Error as e:
                raise DatabaseError(f"Local store query failed: {e}", original_exception=e) from e

    def get_item(self, key: str) -> str | None:
        """Return the stored string, or None when the key is absent."""
        rows = self._execute(f"SELECT value FROM {LOCAL_STORE_TABLE} WHERE key = ?", [key])
        return rows[0][0] if rows else None

    def set_item(self, key: str, value: str) -> None:
        self._execute(
            f"INSERT INTO {LOCAL_STORE_TABLE} (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
            "ON CONFLICT (key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
            [key, str(value)],
        )
        logger.debug("local_store_item_set", key=key, size=len(str(value)))

    def remove_item(self, key: str) -> None:
        self._execute(f"DELETE FROM {LOCAL_STORE_TABLE} WHERE key = ?", [key])

    def keys(self) -> list[str]:
        return [row[0] for row in self._execute(f"SELECT key FROM {LOCAL_STORE_TABLE} ORDER BY key")]

    def get_json(self, key: str, default: Any = None) -> Any:
        """
        Decode a JSON value.

        A value that is not valid JSON is logged and treated as missing.
        """
        raw = self.get_item(key)
        if raw is None:
            return default

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("local_store_corrupt_value", key=key, error=str(e))
            return default

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value))

    def get_version(self, key: str) -> str | None:
        """Last write time of a key, used to detect changes from other sessions."""
        rows = self._execute(f"SELECT CAST(updated_at AS VARCHAR) FROM {LOCAL_STORE_TABLE} WHERE key = ?", [key])
        return rows[0][0] if rows else None

    def close(self) -> None:
        if self._db_manager is not None:
            self._db_manager.close()
            self._db_manager = None


_local_store: LocalStore | None = None


def get_local_store() -> LocalStore:
    """Get the shared local store."""
    global _local_store
    if _local_store is None:
        _local_store = LocalStore(get_local_store_path())
        logger.info("local_store_initialized", db_path=_local_store.db_path)
    return _local_store


def reset_local_store() -> None:
    """Close and drop the shared local store."""
    global _local_store
    if _local_store is not None:
        _local_store.close()
    _local_store = None
