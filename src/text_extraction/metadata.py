"""Per-call metadata carrier: an ordered multimap of named string values."""

from typing import Dict, Iterator, List, Optional

# Well-known field names
CONTENT_TYPE = "Content-Type"
CONTENT_LENGTH = "Content-Length"
CONTENT_ENCODING = "Content-Encoding"
# Type reported by the transport (e.g. an HTTP header); a hint for detection only
CONTENT_TYPE_HINT = "Content-Type-Hint"
FILE_PATH = "FilePath"
URI = "Uri"
# Basename of the document, used by detection for extension lookups
RESOURCE_NAME = "resourceName"
# Raw file-name argument as supplied by the caller
MIME_FILE_HINT = "mimeFileHint"

# Generic placeholder: "no specific type determined"
OCTET_STREAM = "application/octet-stream"


def is_generic_type(content_type: Optional[str]) -> bool:
    """True when content_type carries no information (missing, blank or octet-stream)."""
    if content_type is None:
        return True
    value = str(content_type).strip()
    return not value or value.lower() == OCTET_STREAM


class Metadata:
    """
    Multimap from field name to an ordered list of string values.

    One instance belongs to one extraction call. Names keep insertion order;
    values keep the order they were added in.
    """

    def __init__(self) -> None:
        self._fields: Dict[str, List[str]] = {}

    def add(self, name: str, value: Optional[str]) -> None:
        """Append a value to a field. None is ignored."""
        if value is None:
            return
        self._fields.setdefault(name, []).append(str(value))

    def set(self, name: str, value: Optional[str]) -> None:
        """Replace all values of a field. None removes the field."""
        if value is None:
            self._fields.pop(name, None)
            return
        self._fields[name] = [str(value)]

    def get(self, name: str) -> Optional[str]:
        values = self._fields.get(name)
        return values[0] if values else None

    def get_values(self, name: str) -> List[str]:
        return list(self._fields.get(name, []))

    def remove(self, name: str) -> None:
        self._fields.pop(name, None)

    def names(self) -> List[str]:
        return list(self._fields)

    def to_dict(self) -> Dict[str, str]:
        """Flatten to name -> comma-joined values."""
        return {name: ", ".join(values) for name, values in self._fields.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Metadata({self.to_dict()!r})"
