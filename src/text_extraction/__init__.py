"""Text extraction: plain text and metadata from files, byte buffers and URIs."""

from .config import ExtractionSettings, get_settings
from .exceptions import (
    ArchiveLimitError,
    ConfigurationError,
    DetectionError,
    MetadataInvariantError,
    SourceError,
    TextExtractionBaseError,
    TextExtractionError,
    UnsupportedFormatError,
)
from .extractor import TextExtractor
from .metadata import OCTET_STREAM, Metadata
from .ocr import OcrConfig
from .result import TextExtractionResult
from .streams import (
    BytesStreamSource,
    CallableStreamSource,
    FileStreamSource,
    StreamSource,
    UriStreamSource,
)

__version__ = "0.1.0"

__all__ = [
    "ArchiveLimitError",
    "BytesStreamSource",
    "CallableStreamSource",
    "ConfigurationError",
    "DetectionError",
    "ExtractionSettings",
    "FileStreamSource",
    "Metadata",
    "MetadataInvariantError",
    "OCTET_STREAM",
    "OcrConfig",
    "SourceError",
    "StreamSource",
    "TextExtractionBaseError",
    "TextExtractionError",
    "TextExtractionResult",
    "TextExtractor",
    "UriStreamSource",
    "get_settings",
]
