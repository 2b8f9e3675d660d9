"""Parsing backend interfaces: backend, decoders, parse context and text sink."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, List, Optional, Tuple, Type, TypeVar

from ..metadata import Metadata

T = TypeVar("T")


@dataclass(frozen=True)
class NestingDepth:
    """How many documents deep the current parse is (1 = top-level document)."""

    level: int = 0


class ParseContext:
    """
    Per-call objects handed down to decoders, keyed by type.

    Holds the OcrConfig when OCR is enabled, the ExtractionSettings in force and
    the ParsingBackend itself, so decoders of container formats can parse
    embedded documents with it.
    """

    def __init__(self) -> None:
        self._values: Dict[type, Any] = {}

    def set(self, key: Type[T], value: Optional[T]) -> None:
        if value is None:
            self._values.pop(key, None)
        else:
            self._values[key] = value

    def get(self, key: Type[T], default: Optional[T] = None) -> Optional[T]:
        return self._values.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self._values


class TextHandler:
    """
    Collects the flat text event stream emitted by decoders.

    Decoders call characters() for text runs and end_block() after paragraphs,
    rows, pages and similar blocks.
    """

    def __init__(self) -> None:
        self._parts: List[str] = []

    def characters(self, text: Optional[str]) -> None:
        if text:
            self._parts.append(text)

    def end_block(self) -> None:
        if self._parts and not self._parts[-1].endswith("\n"):
            self._parts.append("\n")

    def to_text(self) -> str:
        return "".join(self._parts)


class Decoder(ABC):
    """Format-specific decoder: turns a seekable stream into text events and metadata."""

    #: Content types (no parameters, lower case) this decoder handles.
    content_types: Tuple[str, ...] = ()

    @abstractmethod
    def decode(
        self,
        stream: BinaryIO,
        handler: TextHandler,
        metadata: Metadata,
        context: ParseContext,
    ) -> None:
        """
        Decode stream into handler, adding format-specific metadata.

        Args:
            stream: Seekable binary stream positioned at the document start.
            handler: Text sink.
            metadata: Metadata carrier of the current call.
            context: Parse context (OcrConfig, ParsingBackend, nesting depth).
        """
        ...


class ParsingBackend(ABC):
    """
    Document parsing backend: type detection plus dispatch to decoders.

    The extractor only talks to this interface; swap it to plug in another
    parsing stack.
    """

    @abstractmethod
    def detect(self, stream: BinaryIO, metadata: Metadata) -> str:
        """Return the detected content type, or application/octet-stream when undetermined."""
        ...

    @abstractmethod
    def parse(
        self,
        stream: BinaryIO,
        handler: TextHandler,
        metadata: Metadata,
        context: ParseContext,
    ) -> None:
        """
        Decode stream into handler and enrich metadata.

        Must leave Content-Type set in metadata (a default when undetermined).
        Must not close stream; the caller owns it.
        """
        ...
