"""Tests for extraction settings."""

from text_extraction.config import ExtractionSettings, get_settings


def test_extraction_settings_defaults():
    """ExtractionSettings has expected default values."""
    settings = ExtractionSettings(_env_file=None)
    assert settings.TESSERACT_PATH is None
    assert settings.OCR_ENABLED is False
    assert settings.OCR_LANGUAGE == "eng"
    assert settings.URI_TIMEOUT == 30.0
    assert settings.URI_FOLLOW_REDIRECTS is True
    assert settings.SPOOL_MAX_MEMORY == 10 * 1024 * 1024
    assert settings.ARCHIVE_MAX_ENTRIES == 1000
    assert settings.ARCHIVE_MAX_DEPTH == 3
    assert settings.EXTRACTION_LOG_LEVEL == "DEBUG"


def test_settings_read_from_environment(monkeypatch):
    """Upper-case environment variables override defaults."""
    monkeypatch.setenv("OCR_LANGUAGE", "deu")
    monkeypatch.setenv("ARCHIVE_MAX_DEPTH", "5")
    settings = ExtractionSettings(_env_file=None)
    assert settings.OCR_LANGUAGE == "deu"
    assert settings.ARCHIVE_MAX_DEPTH == 5


def test_get_settings_returns_extraction_settings():
    """get_settings returns a cached ExtractionSettings instance."""
    get_settings.cache_clear()
    settings = get_settings()
    assert isinstance(settings, ExtractionSettings)
    assert get_settings() is settings
    get_settings.cache_clear()
