"""Plain-text decoder."""

from typing import BinaryIO

from ...metadata import CONTENT_ENCODING, Metadata
from ..base import Decoder, ParseContext, TextHandler
from ..registry import default_registry


def decode_text(data: bytes) -> tuple[str, str]:
    """Decode bytes with the first encoding that fits. Returns (text, encoding)."""
    try:
        # utf-8-sig also accepts plain utf-8 and drops a BOM
        return data.decode("utf-8-sig"), "UTF-8"
    except UnicodeDecodeError:
        return data.decode("latin-1"), "ISO-8859-1"


@default_registry.register()
class TextDecoder(Decoder):
    content_types = (
        "text/plain",
        "text/csv",
        "text/markdown",
        "text/x-markdown",
        "text/tab-separated-values",
        "application/json",
    )

    def decode(self, stream: BinaryIO, handler: TextHandler, metadata: Metadata, context: ParseContext) -> None:
        text, encoding = decode_text(stream.read())
        metadata.set(CONTENT_ENCODING, encoding)
        handler.characters(text)
        handler.end_block()
