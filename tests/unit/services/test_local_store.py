"""
Unit tests for the DuckDB-backed local store.
"""

import time

import pytest

from classgallery.services.local_store import STUDENTS_KEY, LocalStore, get_local_store
from classgallery.ui.handlers.error import DatabaseError


class TestLocalStore:
    def test_missing_key(self, local_store):
        assert local_store.get_item("nope") is None
        assert local_store.get_json("nope", []) == []
        assert local_store.get_version("nope") is None

    def test_set_get_and_overwrite(self, local_store):
        local_store.set_item("cloudinary_cloud_name", "demo")
        local_store.set_item("cloudinary_cloud_name", "demo-2")

        assert local_store.get_item("cloudinary_cloud_name") == "demo-2"
        assert local_store.keys() == ["cloudinary_cloud_name"]

    def test_json_values(self, local_store):
        local_store.set_json(STUDENTS_KEY, [{"id": "1", "name": "Asha"}])

        assert local_store.get_json(STUDENTS_KEY) == [{"id": "1", "name": "Asha"}]

    def test_corrupt_json_falls_back_to_default(self, local_store):
        local_store.set_item(STUDENTS_KEY, "{not json")

        assert local_store.get_json(STUDENTS_KEY, []) == []

    def test_remove_item(self, local_store):
        local_store.set_item("a", "1")
        local_store.remove_item("a")

        assert local_store.get_item("a") is None

    def test_version_moves_on_write(self, local_store):
        local_store.set_item("a", "1")
        first = local_store.get_version("a")
        time.sleep(0.01)
        local_store.set_item("a", "2")

        assert first is not None
        assert local_store.get_version("a") != first

    def test_data_survives_reopen(self, tmp_path):
        path = str(tmp_path / "persist.duckdb")
        store = LocalStore(path)
        store.set_item("a", "1")
        store.close()

        reopened = LocalStore(path)
        try:
            assert reopened.get_item("a") == "1"
        finally:
            reopened.close()

    def test_unopenable_path_raises_database_error(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        store = LocalStore(str(blocker / "store.duckdb"))

        with pytest.raises(DatabaseError):
            store.get_item("a")


def test_shared_store_uses_configured_path(tmp_path):
    store = get_local_store()

    assert store is get_local_store()
    assert store.db_path == str(tmp_path / "shared_store.duckdb")
