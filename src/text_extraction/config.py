"""Shared configuration for text extraction."""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExtractionSettings(BaseSettings):
    """Extraction settings, read from the environment or a .env file."""

    # OCR: path to the tesseract executable; setting it enables OCR by default
    TESSERACT_PATH: Optional[str] = None
    OCR_ENABLED: bool = False
    OCR_LANGUAGE: str = "eng"
    # PSM 3 = full auto, OEM 3 = LSTM+legacy
    OCR_TESSERACT_CONFIG: str = "--psm 3 --oem 3"
    OCR_TIMEOUT: float = 0  # seconds, 0 = no timeout

    # URI sources
    URI_TIMEOUT: float = 30.0
    URI_FOLLOW_REDIRECTS: bool = True

    # Non-seekable streams are spooled to memory, then to a temp file past this size
    SPOOL_MAX_MEMORY: int = 10485760
    # Bytes read from the head of a stream for magic-byte detection
    DETECTION_PEEK_SIZE: int = 8192

    # Embedded documents (zip members)
    ARCHIVE_MAX_ENTRIES: int = 1000
    ARCHIVE_MAX_ENTRY_SIZE: int = 52428800  # 50MB
    ARCHIVE_MAX_DEPTH: int = 3

    # Level for the per-extraction summary log line: DEBUG | INFO | WARNING
    EXTRACTION_LOG_LEVEL: str = "DEBUG"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


@lru_cache
def get_settings() -> ExtractionSettings:
    return ExtractionSettings()
