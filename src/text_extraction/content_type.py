"""Content-type resolution for in-memory buffers."""

import io
import logging
import os
from typing import Optional, Protocol, BinaryIO

from .exceptions import DetectionError
from .metadata import CONTENT_TYPE, MIME_FILE_HINT, RESOURCE_NAME, Metadata, is_generic_type

logger = logging.getLogger(__name__)


class Detector(Protocol):
    def detect(self, stream: BinaryIO, metadata: Metadata) -> str: ...


def resolve_content_type(
    data: bytes,
    file_name: Optional[str],
    hint: Optional[str],
    metadata: Metadata,
    detector: Detector,
) -> Optional[str]:
    """
    Decide the Content-Type of a buffer before parsing.

    Records the resource name hints, then trusts a specific caller hint as-is.
    Otherwise sniffs the bytes (plus the name hints already in metadata) and
    sets Content-Type only when detection finds something specific; a generic
    result leaves it unset for the backend's own fallback.

    Args:
        data: The full document bytes.
        file_name: Caller-supplied name; may carry a directory part. Empty or None skips the name hints.
        hint: Caller-supplied content type; None, blank and application/octet-stream mean "unknown".
        metadata: Carrier of the current call.
        detector: Anything with detect(stream, metadata).

    Returns:
        The Content-Type now in metadata, or None when it was left unset.

    Raises:
        DetectionError: The buffer is empty and cannot be sniffed.
    """
    if file_name:
        metadata.set(RESOURCE_NAME, os.path.basename(file_name))
        metadata.set(MIME_FILE_HINT, file_name)

    if not is_generic_type(hint):
        metadata.set(CONTENT_TYPE, hint)
        return hint

    if not data:
        raise DetectionError("Cannot detect the content type of an empty buffer")
    with io.BytesIO(data) as detection_stream:
        detected = detector.detect(detection_stream, metadata)
    logger.debug("Sniffed %s for %r", detected, file_name or "<bytes>")
    if is_generic_type(detected):
        return None
    metadata.set(CONTENT_TYPE, detected)
    return detected
