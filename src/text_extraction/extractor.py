"""Text extractor: the public entry points and the orchestration they share."""

import logging
import os
import threading
import time
from contextlib import closing
from typing import Any, BinaryIO, Callable, Optional, Union
from urllib.parse import ParseResult, urlparse

import httpx

from .backend import AutoDetectBackend, ParseContext, ParsingBackend, TextHandler
from .config import ExtractionSettings, get_settings
from .exceptions import ConfigurationError, TextExtractionError
from .metadata import OCTET_STREAM, Metadata
from .ocr import OcrConfig
from .result import TextExtractionResult, assemble_result
from .streams import (
    BytesStreamSource,
    CallableStreamSource,
    FileStreamSource,
    StreamSource,
    UriLike,
    UriStreamSource,
)

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Extraction failed."
FILE_FAILURE_MESSAGE = "Extraction of text from the file '{0}' failed."
# str targets with these schemes are URIs, everything else is a path
URI_SCHEMES = ("http", "https", "file")

StreamFactory = Callable[[Metadata], BinaryIO]


class TextExtractor:
    """
    Extract plain text and metadata from files, byte buffers and URIs.

    All public methods funnel into one orchestration step: fresh metadata and
    text sink per call, prepare the source, open it, parse inside a closing
    block, assemble the result. Any failure reaches the caller as
    TextExtractionError with the original exception as cause.

    OCR configuration belongs to the instance. Each call captures it once at
    start, so toggling OCR from another thread never changes an extraction
    already in flight.

    Example:
        ```python
        extractor = TextExtractor()
        result = extractor.extract_bytes(data, "report.pdf")
        print(result.content_type, result.text)

        extractor.tesseract_path = "/usr/bin/tesseract"  # enables OCR
        extractor.ocr_enabled = False
        ```
    """

    def __init__(
        self,
        backend: Optional[ParsingBackend] = None,
        settings: Optional[ExtractionSettings] = None,
    ):
        self._settings = settings or get_settings()
        self._log_level = _resolve_log_level(self._settings.EXTRACTION_LOG_LEVEL)
        self._backend = backend or AutoDetectBackend(settings=self._settings)
        self._lock = threading.Lock()
        self._tesseract_path = self._settings.TESSERACT_PATH or ""
        self._ocr_config: Optional[OcrConfig] = None
        if self._settings.TESSERACT_PATH or self._settings.OCR_ENABLED:
            self._ocr_config = OcrConfig.from_settings(self._settings, self._tesseract_path)

    @property
    def backend(self) -> ParsingBackend:
        return self._backend

    @property
    def tesseract_path(self) -> str:
        with self._lock:
            return self._tesseract_path

    @tesseract_path.setter
    def tesseract_path(self, path: str) -> None:
        """Point OCR at a Tesseract binary. Always (re)creates the config, which enables OCR."""
        if not isinstance(path, str):
            raise ConfigurationError("tesseract_path", f"Expected a path string, got {type(path).__name__}")
        with self._lock:
            self._tesseract_path = path
            self._ocr_config = OcrConfig.from_settings(self._settings, path)

    @property
    def ocr_enabled(self) -> bool:
        with self._lock:
            return self._ocr_config is not None

    @ocr_enabled.setter
    def ocr_enabled(self, enabled: bool) -> None:
        """True builds a fresh config from the last-set path; False drops it."""
        with self._lock:
            if enabled:
                self._ocr_config = OcrConfig.from_settings(self._settings, self._tesseract_path)
            else:
                self._ocr_config = None

    @property
    def ocr_config(self) -> Optional[OcrConfig]:
        """The OCR config a call starting now would use, or None when OCR is off."""
        with self._lock:
            return self._ocr_config

    def extract_file(self, path: Union[str, os.PathLike]) -> TextExtractionResult:
        """Extract from a local file. FilePath is recorded in metadata."""
        source = FileStreamSource(path)
        try:
            return self._extract(source)
        except TextExtractionError as e:
            cause = e.cause if e.cause is not None else e
            raise TextExtractionError(
                FILE_FAILURE_MESSAGE.format(source.path),
                cause=cause,
                source=source.path,
            ) from cause

    def extract_bytes(
        self,
        data: bytes,
        file_name: str = "",
        content_type: Optional[str] = OCTET_STREAM,
    ) -> TextExtractionResult:
        """
        Extract from an in-memory buffer.

        Args:
            data: Document bytes.
            file_name: Optional name hint; its extension helps detection.
            content_type: Optional type hint. Anything but application/octet-stream
                (or blank) is trusted as-is and skips sniffing.
        """
        return self._extract(BytesStreamSource(data, file_name, content_type))

    def extract_uri(self, uri: UriLike, client: Optional[httpx.Client] = None) -> TextExtractionResult:
        """Extract from a file: or http(s): URI. Uri is recorded in metadata."""
        return self._extract(
            UriStreamSource(
                uri,
                timeout=self._settings.URI_TIMEOUT,
                follow_redirects=self._settings.URI_FOLLOW_REDIRECTS,
                client=client,
            )
        )

    def extract_stream(self, source: Union[StreamSource, StreamFactory]) -> TextExtractionResult:
        """Extract from a StreamSource or a (metadata) -> stream callable. The stream is closed on return."""
        if not isinstance(source, StreamSource):
            source = CallableStreamSource(source)
        return self._extract(source)

    def extract(
        self,
        target: Any,
        file_name: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> TextExtractionResult:
        """
        Dispatch on the target's type.

        bytes-like -> extract_bytes (the only form that takes hints),
        httpx.URL, urllib ParseResult or a str with an http, https or file
        scheme -> extract_uri,
        any other str or os.PathLike -> extract_file,
        StreamSource or callable -> extract_stream.

        Raises:
            TypeError: Unsupported target, or hints given for a non-bytes target.
        """
        if isinstance(target, (bytes, bytearray, memoryview)):
            return self.extract_bytes(bytes(target), file_name or "", content_type or OCTET_STREAM)
        if file_name is not None or content_type is not None:
            raise TypeError("file_name and content_type hints apply to byte buffers only")
        if isinstance(target, (httpx.URL, ParseResult)):
            return self.extract_uri(target)
        if isinstance(target, str) and urlparse(target).scheme.lower() in URI_SCHEMES:
            return self.extract_uri(target)
        if isinstance(target, (str, os.PathLike)):
            return self.extract_file(target)
        if isinstance(target, StreamSource) or callable(target):
            return self.extract_stream(target)
        raise TypeError(f"Cannot extract text from {type(target).__name__}")

    def _extract(self, source: StreamSource) -> TextExtractionResult:
        start = time.perf_counter()
        metadata = Metadata()
        handler = TextHandler()
        context = ParseContext()
        context.set(OcrConfig, self.ocr_config)
        context.set(ParsingBackend, self._backend)
        try:
            source.prepare(metadata, self._backend)
            with closing(source.open(metadata)) as stream:
                self._backend.parse(stream, handler, metadata, context)
        except Exception as e:
            logger.warning("Extraction from %s failed: %s: %s", source.describe(), type(e).__name__, e)
            raise TextExtractionError(GENERIC_FAILURE_MESSAGE, cause=e, source=source.describe()) from e

        # Outside the try: a missing Content-Type is a backend defect, not an extraction failure
        result = assemble_result(handler.to_text(), metadata)
        logger.log(
            self._log_level,
            "Extraction | source=%s content_type=%s latency=%.3fs text_len=%s ocr=%s",
            source.describe(),
            result.content_type,
            time.perf_counter() - start,
            len(result.text),
            OcrConfig in context,
        )
        return result


def _resolve_log_level(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise ConfigurationError("EXTRACTION_LOG_LEVEL", f"Unknown log level '{name}'")
    return level
