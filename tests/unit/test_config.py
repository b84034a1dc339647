"""
Unit tests for configuration lookup.
"""

from unittest.mock import patch

import pytest

from classgallery.config import get_config, get_debug_mode, get_env, get_live_refresh_seconds


class TestConfig:
    def test_environment_value_is_cast(self):
        with patch.dict("os.environ", {"LIVE_REFRESH_SECONDS": "30"}):
            assert get_live_refresh_seconds() == 30

    def test_default_when_unset(self):
        assert get_live_refresh_seconds() == 15

    def test_bad_cast_falls_back_to_default(self):
        with patch.dict("os.environ", {"BACKEND_TIMEOUT": "soon"}):
            assert get_env("BACKEND_TIMEOUT", 10.0, float) == 10.0

    def test_values_are_cached_until_cleared(self):
        with patch.dict("os.environ", {"LOG_LEVEL": "DEBUG"}):
            assert get_env("LOG_LEVEL") == "DEBUG"

        assert get_env("LOG_LEVEL") == "DEBUG"
        get_config().clear_cache()
        assert get_env("LOG_LEVEL") is None


class TestDebugMode:
    def test_off_by_default_even_in_development(self):
        with patch.dict("os.environ", {"ENVIRONMENT": "development"}):
            assert get_debug_mode() is False

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("false", False), ("no", False)])
    def test_follows_debug_flag(self, value, expected):
        with patch.dict("os.environ", {"DEBUG": value}):
            assert get_debug_mode() is expected
