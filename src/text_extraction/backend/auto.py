"""Default parsing backend: detect the content type, then dispatch to a registered decoder."""

import logging
import shutil
import tempfile
from typing import BinaryIO, Optional

from ..config import ExtractionSettings, get_settings
from ..exceptions import ArchiveLimitError, UnsupportedFormatError
from ..metadata import CONTENT_TYPE, OCTET_STREAM, Metadata, is_generic_type
from .base import NestingDepth, ParseContext, ParsingBackend, TextHandler
from .detector import DefaultDetector
from .registry import DecoderRegistry, default_registry, normalize_content_type

logger = logging.getLogger(__name__)


def _is_seekable(stream: BinaryIO) -> bool:
    seekable = getattr(stream, "seekable", None)
    if not callable(seekable):
        return False
    return bool(seekable())


class AutoDetectBackend(ParsingBackend):
    """
    Auto-detecting backend over a DecoderRegistry.

    Content-Type already present in metadata wins; otherwise the detector runs.
    A generic result is written as application/octet-stream, so Content-Type is
    always set once parse() returns. Content without a decoder keeps its
    Content-Type and yields no text; with strict=True a specific type without
    a decoder raises UnsupportedFormatError instead.
    """

    def __init__(
        self,
        registry: Optional[DecoderRegistry] = None,
        detector: Optional[DefaultDetector] = None,
        settings: Optional[ExtractionSettings] = None,
        strict: bool = False,
    ) -> None:
        if registry is None:
            # Importing the package registers the built-in decoders
            from . import decoders  # noqa: F401
            registry = default_registry
        self._settings = settings or get_settings()
        self._registry = registry
        self._strict = strict
        self._detector = detector or DefaultDetector(self._settings.DETECTION_PEEK_SIZE)

    @property
    def registry(self) -> DecoderRegistry:
        return self._registry

    def detect(self, stream: BinaryIO, metadata: Metadata) -> str:
        return self._detector.detect(stream, metadata)

    def parse(
        self,
        stream: BinaryIO,
        handler: TextHandler,
        metadata: Metadata,
        context: ParseContext,
    ) -> None:
        if ExtractionSettings not in context:
            context.set(ExtractionSettings, self._settings)
        if _is_seekable(stream):
            self._parse_seekable(stream, handler, metadata, context)
            return
        # Decoders need random access; the caller's stream stays open
        with tempfile.SpooledTemporaryFile(max_size=self._settings.SPOOL_MAX_MEMORY) as spool:
            shutil.copyfileobj(stream, spool)
            logger.debug("Spooled non-seekable stream (%s bytes)", spool.tell())
            spool.seek(0)
            self._parse_seekable(spool, handler, metadata, context)

    def _parse_seekable(
        self,
        stream: BinaryIO,
        handler: TextHandler,
        metadata: Metadata,
        context: ParseContext,
    ) -> None:
        depth = context.get(NestingDepth, NestingDepth()).level
        if depth > self._settings.ARCHIVE_MAX_DEPTH:
            raise ArchiveLimitError(
                f"Embedded documents nested deeper than {self._settings.ARCHIVE_MAX_DEPTH} levels"
            )

        content_type = metadata.get(CONTENT_TYPE)
        if is_generic_type(content_type):
            content_type = self.detect(stream, metadata)
            if is_generic_type(content_type):
                content_type = OCTET_STREAM
            metadata.set(CONTENT_TYPE, content_type)

        decoder = self._registry.get(content_type)
        if decoder is None:
            if self._strict and not is_generic_type(content_type):
                raise UnsupportedFormatError(
                    normalize_content_type(content_type),
                    self._registry.list_content_types(),
                )
            logger.debug("No decoder for %s; emitting no text", content_type)
            return

        logger.debug("Decoding %s with %s (depth=%s)", content_type, type(decoder).__name__, depth + 1)
        context.set(NestingDepth, NestingDepth(depth + 1))
        try:
            decoder.decode(stream, handler, metadata, context)
        finally:
            context.set(NestingDepth, NestingDepth(depth))
