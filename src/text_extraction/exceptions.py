"""Text extraction exception hierarchy.

Every failure inside an extraction call reaches the caller as a single
TextExtractionError carrying the original cause. The other classes describe
what went wrong underneath and show up as that cause.
"""

from typing import Optional


class TextExtractionBaseError(Exception):
    """Base exception for all text extraction errors."""
    pass


class TextExtractionError(TextExtractionBaseError):
    """Raised when extracting text from a document fails.

    Attributes:
        cause: The exception that made the extraction fail
        source: Description of the input (file path, URI, ...) when known
    """
    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        source: Optional[str] = None,
    ):
        self.cause = cause
        self.source = source
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.cause is not None:
            return f"{message} ({type(self.cause).__name__}: {self.cause})"
        return message


class ConfigurationError(TextExtractionBaseError):
    """Raised when extractor configuration is invalid.

    Attributes:
        setting: Name of the setting that is invalid
    """
    def __init__(self, setting: str, message: str | None = None):
        self.setting = setting
        self.message = message or f"Invalid configuration for '{setting}'"
        super().__init__(self.message)


class SourceError(TextExtractionBaseError):
    """Raised when an input source cannot be located or opened."""
    def __init__(self, source: str, message: str | None = None):
        self.source = source
        super().__init__(message or f"Cannot open source '{source}'")


class DetectionError(TextExtractionBaseError):
    """Raised when content-type detection cannot run on the given bytes."""
    pass


class UnsupportedFormatError(TextExtractionBaseError):
    """Raised when no decoder is registered for a content type.

    Attributes:
        content_type: The resolved content type
        available: Content types that do have a decoder
    """
    def __init__(self, content_type: str, available: list[str] | None = None):
        self.content_type = content_type
        self.available = available or []
        message = f"No decoder registered for content type '{content_type}'"
        if self.available:
            message += f". Supported: {', '.join(self.available)}"
        super().__init__(message)


class ArchiveLimitError(TextExtractionBaseError):
    """Raised when an archive exceeds entry count, size or nesting limits."""
    pass


class MetadataInvariantError(RuntimeError):
    """Raised when assembled metadata lacks a field the backend must always set.

    This signals a defect in a parsing backend, not a bad input, so it is not
    wrapped into TextExtractionError.

    Attributes:
        field: Name of the missing metadata field
    """
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Metadata field '{field}' missing after parse")
