"""
Unit tests for the storage credential settings service.
"""

from unittest.mock import patch

import pytest

from classgallery.config import get_config
from classgallery.models.settings import SETTINGS_KEY, StorageCredentials
from classgallery.services.local_store import CLOUD_NAME_KEY, UPLOAD_PRESET_KEY
from classgallery.services.settings import SETTINGS_TABLE, SettingsService
from classgallery.ui.handlers.error import DatabaseError


@pytest.fixture
def remote_row(sample_credentials):
    return sample_credentials.to_row()


class TestFallbackChain:
    def test_remote_row_wins_and_is_mirrored_locally(self, mock_backend, local_store, remote_row, sample_credentials):
        local_store.set_item(CLOUD_NAME_KEY, "local-cloud")
        local_store.set_item(UPLOAD_PRESET_KEY, "local-preset")
        mock_backend.select.return_value = remote_row
        service = SettingsService(backend=mock_backend, store=local_store)

        credentials = service.load_credentials()

        assert credentials == sample_credentials
        assert service.last_source == "backend"
        assert local_store.get_item(CLOUD_NAME_KEY) == "demo-cloud"
        mock_backend.select.assert_called_once_with(SETTINGS_TABLE, filters={"key": SETTINGS_KEY}, single=True)

    def test_cached_value_skips_the_backend(self, mock_backend, local_store, remote_row):
        mock_backend.select.return_value = remote_row
        service = SettingsService(backend=mock_backend, store=local_store)

        first = service.load_credentials()
        second = service.load_credentials()

        assert first is second
        assert mock_backend.select.call_count == 1

    def test_local_store_when_remote_has_no_row(self, mock_backend, local_store):
        mock_backend.select.return_value = None
        local_store.set_item(CLOUD_NAME_KEY, "local-cloud")
        local_store.set_item(UPLOAD_PRESET_KEY, "local-preset")
        service = SettingsService(backend=mock_backend, store=local_store)

        assert service.load_credentials() == StorageCredentials("local-cloud", "local-preset")
        assert service.last_source == "local"

    def test_remote_failure_falls_through(self, mock_backend, local_store):
        mock_backend.select.side_effect = DatabaseError("boom")
        local_store.set_item(CLOUD_NAME_KEY, "local-cloud")
        local_store.set_item(UPLOAD_PRESET_KEY, "local-preset")
        service = SettingsService(backend=mock_backend, store=local_store)

        assert service.load_credentials().cloud_name == "local-cloud"

    def test_incomplete_local_values_are_ignored(self, local_store):
        local_store.set_item(CLOUD_NAME_KEY, "only-cloud")
        service = SettingsService(store=local_store)

        assert service.load_credentials() is None
        assert service.check_configured() is False

    def test_environment_defaults(self, local_store):
        with patch.dict("os.environ", {"CLOUDINARY_CLOUD_NAME": "env-cloud", "CLOUDINARY_UPLOAD_PRESET": "env-preset"}):
            get_config().clear_cache()
            service = SettingsService(store=local_store)

            assert service.load_credentials() == StorageCredentials("env-cloud", "env-preset")
            assert service.last_source == "environment"

    def test_nothing_configured(self, local_store):
        service = SettingsService(store=local_store)

        assert service.load_credentials() is None
        assert service.is_configured() is False
        assert service.get_credentials() == StorageCredentials("", "")


class TestSaveCredentials:
    def test_save_without_backend_is_local_only(self, local_store):
        service = SettingsService(store=local_store)

        result = service.save_credentials(" demo-cloud ", "class_unsigned")

        assert result.success is False
        assert "saved locally only" in result.message
        assert local_store.get_item(CLOUD_NAME_KEY) == "demo-cloud"
        assert service.is_configured() is True

    def test_save_replaces_remote_row(self, mock_backend, local_store):
        service = SettingsService(backend=mock_backend, store=local_store)

        result = service.save_credentials("demo-cloud", "class_unsigned")

        assert result.success is True
        mock_backend.delete.assert_called_once_with(SETTINGS_TABLE, filters={"key": SETTINGS_KEY})
        inserted = mock_backend.insert.call_args.args[1]
        assert inserted["cloud_name"] == "demo-cloud"
        assert inserted["upload_preset"] == "class_unsigned"
        assert service.last_source == "backend"

    def test_saved_credentials_are_served_from_cache(self, mock_backend, local_store, sample_credentials):
        service = SettingsService(backend=mock_backend, store=local_store)
        service.save_credentials(sample_credentials.cloud_name, sample_credentials.upload_preset)

        assert service.load_credentials() == sample_credentials
        mock_backend.select.assert_not_called()

    def test_backend_error_keeps_local_copy(self, mock_backend, local_store):
        mock_backend.insert.side_effect = DatabaseError("permission denied for table settings")
        service = SettingsService(backend=mock_backend, store=local_store)

        result = service.save_credentials("demo-cloud", "class_unsigned")

        assert result.success is False
        assert result.message.startswith("Database error:")
        assert "permission denied" in result.message
        assert service.check_configured() is True

    def test_clear_cache_goes_back_to_backend(self, mock_backend, local_store, remote_row):
        mock_backend.select.return_value = remote_row
        service = SettingsService(backend=mock_backend, store=local_store)
        service.load_credentials()

        service.clear_cache()
        service.load_credentials()

        assert mock_backend.select.call_count == 2
