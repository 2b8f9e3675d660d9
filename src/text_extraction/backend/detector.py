"""Content-type detection from magic bytes, resource name and transport hints."""

import logging
import mimetypes
import zipfile
from typing import BinaryIO, Optional

from ..exceptions import DetectionError
from ..metadata import CONTENT_TYPE_HINT, OCTET_STREAM, RESOURCE_NAME, Metadata, is_generic_type

logger = logging.getLogger(__name__)

DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PPTX = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

# (prefix, content type); checked in order
_MAGIC_PREFIXES = (
    (b"%PDF-", "application/pdf"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
    (b"\x1f\x8b", "application/gzip"),
    (b"{\\rtf", "application/rtf"),
)
# ZIP magic bytes: PK\x03\x04 or PK\x05\x06 (empty) or PK\x07\x08 (spanned)
_ZIP_PREFIXES = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")
# Main part of each OOXML package
_OOXML_PARTS = (
    ("word/document.xml", DOCX),
    ("xl/workbook.xml", XLSX),
    ("ppt/presentation.xml", PPTX),
)
_BOMS = (b"\xef\xbb\xbf", b"\xff\xfe", b"\xfe\xff")
# Share of printable bytes for a non-UTF-8 head to count as text
_PRINTABLE_RATIO = 0.95


def read_head(stream: BinaryIO, size: int) -> bytes:
    """Read up to size bytes without consuming them (seek back or peek)."""
    if stream.seekable():
        position = stream.tell()
        try:
            return stream.read(size)
        finally:
            stream.seek(position)
    peek = getattr(stream, "peek", None)
    if peek is None:
        raise DetectionError("Stream supports neither seek nor peek; cannot detect its type")
    return peek(size)[:size]


class DefaultDetector:
    """
    Detect a content type the way a parsing backend needs it.

    Order: magic bytes (with ZIP container inspection), resource-name extension,
    transport hint, plain-text heuristic. Falls back to application/octet-stream.
    The stream position is unchanged on return.
    """

    def __init__(self, peek_size: int = 8192) -> None:
        self._peek_size = peek_size

    def detect(self, stream: BinaryIO, metadata: Metadata) -> str:
        head = read_head(stream, self._peek_size)
        detected = (
            self._detect_magic(head, stream)
            or self._detect_markup(head)
            or self._detect_from_name(metadata.get(RESOURCE_NAME))
            or self._detect_from_hint(metadata.get(CONTENT_TYPE_HINT))
            or self._detect_text(head)
            or OCTET_STREAM
        )
        logger.debug("Detected %s (resource=%s)", detected, metadata.get(RESOURCE_NAME))
        return detected

    def _detect_magic(self, head: bytes, stream: BinaryIO) -> Optional[str]:
        for prefix, content_type in _MAGIC_PREFIXES:
            if head.startswith(prefix):
                return content_type
        if head.startswith(b"RIFF") and head[8:12] == b"WEBP":
            return "image/webp"
        # BMP: "BM" plus zeroed reserved fields at offset 6
        if head.startswith(b"BM") and len(head) >= 14 and head[6:10] == b"\x00\x00\x00\x00":
            return "image/bmp"
        if head[:4] in _ZIP_PREFIXES:
            return self._detect_zip_container(stream)
        return None

    def _detect_zip_container(self, stream: BinaryIO) -> str:
        """Tell OOXML packages apart from plain ZIP archives."""
        if not stream.seekable():
            return "application/zip"
        position = stream.tell()
        try:
            with zipfile.ZipFile(stream) as zf:
                names = set(zf.namelist())
        except zipfile.BadZipFile:
            return "application/zip"
        finally:
            stream.seek(position)
        if "[Content_Types].xml" in names:
            for part, content_type in _OOXML_PARTS:
                if part in names:
                    return content_type
        return "application/zip"

    def _detect_markup(self, head: bytes) -> Optional[str]:
        text = _strip_bom(head)[:1024].decode("utf-8", errors="ignore").lstrip().lower()
        if text.startswith("<!doctype html") or text.startswith("<html"):
            return "text/html"
        if text.startswith("<?xml"):
            if "<html" in text:
                return "application/xhtml+xml"
            return "application/xml"
        return None

    def _detect_from_name(self, resource_name: Optional[str]) -> Optional[str]:
        if not resource_name:
            return None
        guessed, _ = mimetypes.guess_type(resource_name, strict=False)
        if is_generic_type(guessed):
            return None
        return guessed

    def _detect_from_hint(self, hint: Optional[str]) -> Optional[str]:
        if is_generic_type(hint):
            return None
        return hint.split(";", 1)[0].strip().lower()

    def _detect_text(self, head: bytes) -> Optional[str]:
        if not head or b"\x00" in head:
            return None
        try:
            _strip_bom(head).decode("utf-8")
        except UnicodeDecodeError as e:
            # A multi-byte character cut by the peek window is still text
            if e.start < len(head) - 3 and not _mostly_printable(head):
                return None
        return "text/plain"


def _mostly_printable(data: bytes) -> bool:
    """Single-byte text (latin-1 and similar): printable ASCII, whitespace or high bytes."""
    printable = sum(1 for b in data if 32 <= b < 127 or b in b"\t\n\r\f" or b >= 0xA0)
    return printable >= len(data) * _PRINTABLE_RATIO


def _strip_bom(data: bytes) -> bytes:
    for bom in _BOMS:
        if data.startswith(bom):
            return data[len(bom):]
    return data
