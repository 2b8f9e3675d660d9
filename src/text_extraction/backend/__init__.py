"""Parsing backend: interfaces, detection, decoder registry and the default auto-detecting backend."""

from .auto import AutoDetectBackend
from .base import Decoder, NestingDepth, ParseContext, ParsingBackend, TextHandler
from .detector import DefaultDetector
from .registry import DecoderRegistry, default_registry

__all__ = [
    "AutoDetectBackend",
    "Decoder",
    "DecoderRegistry",
    "DefaultDetector",
    "NestingDepth",
    "ParseContext",
    "ParsingBackend",
    "TextHandler",
    "default_registry",
]
