"""HTML and XML decoders (BeautifulSoup)."""

import re
from typing import BinaryIO

from bs4 import BeautifulSoup
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction

from ...metadata import CONTENT_ENCODING, Metadata
from ..base import Decoder, ParseContext, TextHandler
from ..registry import default_registry


def _normalize_whitespace(text: str) -> str:
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n\s*\n+", "\n\n", text)
    return text.strip()


@default_registry.register()
class HtmlDecoder(Decoder):
    """Visible text of an HTML page; records its title."""

    content_types = ("text/html", "application/xhtml+xml")

    def decode(self, stream: BinaryIO, handler: TextHandler, metadata: Metadata, context: ParseContext) -> None:
        soup = BeautifulSoup(stream.read(), "html.parser")
        for tag in soup(["script", "style", "noscript"]):
            tag.decompose()
        if soup.title and soup.title.string:
            metadata.set("title", soup.title.string.strip())
            soup.title.decompose()
        if soup.original_encoding:
            metadata.set(CONTENT_ENCODING, soup.original_encoding)
        handler.characters(_normalize_whitespace(soup.get_text(separator="\n")))
        handler.end_block()


@default_registry.register()
class XmlDecoder(Decoder):
    """Character data of an XML document, one element's text per line."""

    content_types = ("application/xml", "text/xml")

    def decode(self, stream: BinaryIO, handler: TextHandler, metadata: Metadata, context: ParseContext) -> None:
        soup = BeautifulSoup(stream.read(), "html.parser")
        parts = [s.strip() for s in soup.find_all(string=True) if s.strip() and not _is_declaration(s)]
        handler.characters("\n".join(parts))
        handler.end_block()


def _is_declaration(node) -> bool:
    return isinstance(node, (Comment, Declaration, Doctype, ProcessingInstruction))
