"""Unit tests for configuration module."""

import pytest

from sms_extractor.config import Settings, get_settings


class TestSettings:
    """Test suite for Settings class."""

    def test_default_settings(self) -> None:
        """Test that default settings are properly initialized."""
        settings = Settings()

        assert settings.min_confidence == 0.6
        assert settings.batch_chunk_size == 50
        assert settings.processing_timeout_ms == 5000
        assert settings.cache_enabled is True
        assert settings.cache_size_limit == 1000
        assert settings.custom_patterns_path is None
        assert settings.log_level == "INFO"
        assert settings.debug is False

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test loading settings from environment variables."""
        monkeypatch.setenv("SMS_EXTRACTOR_MIN_CONFIDENCE", "0.75")
        monkeypatch.setenv("SMS_EXTRACTOR_CACHE_ENABLED", "false")
        monkeypatch.setenv("SMS_EXTRACTOR_LOG_LEVEL", "DEBUG")

        # Clear the cache to ensure fresh settings
        get_settings.cache_clear()

        settings = get_settings()

        assert settings.min_confidence == 0.75
        assert settings.cache_enabled is False
        assert settings.log_level == "DEBUG"

        # Clean up
        get_settings.cache_clear()

    def test_threshold_out_of_range_rejected(self) -> None:
        """Test that the confidence threshold must lie in [0, 1]."""
        with pytest.raises(Exception):  # Pydantic ValidationError
            Settings(min_confidence=1.5)

    def test_get_settings_returns_cached_instance(self) -> None:
        """Test that get_settings returns the same cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

        # Clean up
        get_settings.cache_clear()
