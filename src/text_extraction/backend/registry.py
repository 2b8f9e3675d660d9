"""Decoder registry keyed by content type.

Decoders self-register, so the backend picks one by lookup instead of an
if/else chain over formats.

Example:
    ```python
    from text_extraction.backend.registry import default_registry

    @default_registry.register("application/x-custom")
    class CustomDecoder(Decoder):
        def decode(self, stream, handler, metadata, context):
            handler.characters(stream.read().decode("utf-8"))
    ```
"""

from typing import Callable, Dict, Optional, Type

from .base import Decoder


def normalize_content_type(content_type: str) -> str:
    """Lower-case and strip parameters: 'Text/HTML; charset=utf-8' -> 'text/html'."""
    return (content_type or "").split(";", 1)[0].strip().lower()


class DecoderRegistry:
    """Maps content types to decoder instances."""

    def __init__(self) -> None:
        self._decoders: Dict[str, Decoder] = {}

    def register(self, *content_types: str) -> Callable[[Type[Decoder]], Type[Decoder]]:
        """Class decorator: instantiate the decoder and register it.

        With no arguments the class attribute content_types is used.
        """
        def decorator(decoder_cls: Type[Decoder]) -> Type[Decoder]:
            self.add(decoder_cls(), *content_types)
            return decoder_cls
        return decorator

    def add(self, decoder: Decoder, *content_types: str) -> None:
        """Register a decoder instance for the given (or its declared) content types."""
        types = content_types or decoder.content_types
        if not types:
            raise ValueError(f"{type(decoder).__name__} declares no content types")
        for content_type in types:
            self._decoders[normalize_content_type(content_type)] = decoder

    def get(self, content_type: str) -> Optional[Decoder]:
        """Exact match first; any other text/* type falls back to the text/plain decoder."""
        normalized = normalize_content_type(content_type)
        decoder = self._decoders.get(normalized)
        if decoder is None and normalized.startswith("text/"):
            decoder = self._decoders.get("text/plain")
        return decoder

    def is_registered(self, content_type: str) -> bool:
        return normalize_content_type(content_type) in self._decoders

    def list_content_types(self) -> list[str]:
        return sorted(self._decoders)


default_registry = DecoderRegistry()
