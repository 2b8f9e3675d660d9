"""Extraction result model and its assembly from parser output."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from .exceptions import MetadataInvariantError
from .metadata import CONTENT_TYPE, Metadata


@dataclass(frozen=True)
class TextExtractionResult:
    """Text and flattened metadata extracted from one document."""

    text: str
    content_type: str
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze the mapping so the result cannot change after assembly
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "content_type": self.content_type,
            "metadata": dict(self.metadata),
        }


def assemble_result(text: str, metadata: Metadata) -> TextExtractionResult:
    """
    Build the immutable result from the handler text and final metadata.

    Multi-valued fields are joined with ", " in emission order. Content-Type must
    be present: the backend always sets it, so its absence is a defect.
    """
    flattened = metadata.to_dict()
    if CONTENT_TYPE not in flattened:
        raise MetadataInvariantError(CONTENT_TYPE)
    return TextExtractionResult(
        text=text,
        content_type=flattened[CONTENT_TYPE],
        metadata=flattened,
    )
