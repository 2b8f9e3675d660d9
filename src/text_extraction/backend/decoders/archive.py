"""ZIP decoder: parses each member as an embedded document through the context backend.

Security limits:
- Maximum entry count per archive (ARCHIVE_MAX_ENTRIES)
- Maximum uncompressed size per entry (ARCHIVE_MAX_ENTRY_SIZE)
- Maximum nesting depth, enforced by the backend (ARCHIVE_MAX_DEPTH)
- Path traversal prevention
"""

import io
import logging
import zipfile
from pathlib import PurePosixPath
from typing import BinaryIO

from ...config import ExtractionSettings, get_settings
from ...exceptions import ArchiveLimitError, UnsupportedFormatError
from ...metadata import RESOURCE_NAME, Metadata
from ..base import Decoder, ParseContext, ParsingBackend, TextHandler
from ..registry import default_registry

logger = logging.getLogger(__name__)

_RESERVED_NAMES = {"CON", "PRN", "AUX", "NUL"} | {f"COM{i}" for i in range(10)} | {f"LPT{i}" for i in range(10)}


def is_safe_member_path(path: str) -> bool:
    """False for absolute paths, parent references, null bytes and Windows reserved names."""
    if not path or "\x00" in path:
        return False
    if path.startswith("/") or path.startswith("\\"):
        return False
    pure_path = PurePosixPath(path.replace("\\", "/"))
    if pure_path.is_absolute() or ".." in pure_path.parts:
        return False
    for part in pure_path.parts:
        if part.upper().split(".")[0] in _RESERVED_NAMES:
            return False
    return True


@default_registry.register()
class ZipDecoder(Decoder):
    """
    Emits each member's path followed by its text.

    Members are parsed with the ParsingBackend found in the context, each with
    its own metadata; only the container's metadata reaches the caller.
    Members of a type nothing can decode are skipped.
    """

    content_types = ("application/zip", "application/x-zip-compressed")

    def decode(self, stream: BinaryIO, handler: TextHandler, metadata: Metadata, context: ParseContext) -> None:
        backend = context.get(ParsingBackend)
        settings = context.get(ExtractionSettings) or get_settings()
        max_entries = settings.ARCHIVE_MAX_ENTRIES
        max_entry_size = settings.ARCHIVE_MAX_ENTRY_SIZE

        with zipfile.ZipFile(stream) as zf:
            members = [info for info in zf.infolist() if not info.is_dir()]
            if len(members) > max_entries:
                raise ArchiveLimitError(
                    f"Archive contains {len(members)} files, exceeds limit of {max_entries}"
                )
            for info in members:
                if not is_safe_member_path(info.filename):
                    logger.warning("Skipping unsafe path in archive: %r", info.filename)
                    continue
                if info.file_size > max_entry_size:
                    logger.warning("Skipping large archive member %s (%s bytes)", info.filename, info.file_size)
                    continue

                handler.characters(info.filename)
                handler.end_block()
                if backend is None:
                    continue
                member_metadata = Metadata()
                member_metadata.set(RESOURCE_NAME, PurePosixPath(info.filename).name)
                with io.BytesIO(zf.read(info)) as member_stream:
                    try:
                        backend.parse(member_stream, handler, member_metadata, context)
                    except UnsupportedFormatError as e:
                        logger.debug("Skipping archive member %s: %s", info.filename, e)
                handler.end_block()
