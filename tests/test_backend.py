"""Tests for the auto-detecting parsing backend."""

import io

import pytest

from conftest import make_zip
from text_extraction.backend import (
    AutoDetectBackend,
    Decoder,
    DecoderRegistry,
    NestingDepth,
    ParseContext,
    ParsingBackend,
    TextHandler,
)
from text_extraction.exceptions import ArchiveLimitError, UnsupportedFormatError
from text_extraction.metadata import CONTENT_TYPE, OCTET_STREAM, Metadata


class _NonSeekable(io.RawIOBase):
    """Readable-only stream that records whether it was closed."""

    def __init__(self, data: bytes):
        self._inner = io.BytesIO(data)

    def readable(self):
        return True

    def readinto(self, b):
        return self._inner.readinto(b)


class _RecordingDecoder(Decoder):
    content_types = ("text/plain",)

    def __init__(self):
        self.seen = []

    def decode(self, stream, handler, metadata, context):
        self.seen.append((stream.seekable(), context.get(NestingDepth).level))
        handler.characters(stream.read().decode("utf-8"))


def _parse(backend, data_or_stream, metadata=None, context=None):
    stream = data_or_stream if not isinstance(data_or_stream, bytes) else io.BytesIO(data_or_stream)
    handler = TextHandler()
    metadata = metadata or Metadata()
    context = context or ParseContext()
    context.set(ParsingBackend, backend)
    backend.parse(stream, handler, metadata, context)
    return handler.to_text(), metadata


def test_detects_and_dispatches(settings):
    """Content-Type is detected, written and used to pick the decoder."""
    text, metadata = _parse(AutoDetectBackend(settings=settings), b"hello world")
    assert text == "hello world\n"
    assert metadata.get(CONTENT_TYPE) == "text/plain"


def test_existing_content_type_wins(settings):
    """A Content-Type set before parsing is not re-detected."""
    registry = DecoderRegistry()
    decoder = _RecordingDecoder()
    registry.add(decoder, "application/x-forced")
    metadata = Metadata()
    metadata.set(CONTENT_TYPE, "application/x-forced")
    text, metadata = _parse(AutoDetectBackend(registry=registry, settings=settings), b"%PDF-1.4", metadata)
    assert text == "%PDF-1.4"
    assert metadata.get(CONTENT_TYPE) == "application/x-forced"


def test_generic_content_sets_placeholder_and_yields_no_text(settings):
    """Undetectable bytes still leave Content-Type set, to the generic type."""
    text, metadata = _parse(AutoDetectBackend(settings=settings), b"\x00\x01\x02\xff")
    assert text == ""
    assert metadata.get(CONTENT_TYPE) == OCTET_STREAM


def test_specific_type_without_decoder_keeps_type_and_yields_no_text(settings):
    """A detected type with no decoder stays in Content-Type; no text is emitted."""
    text, metadata = _parse(AutoDetectBackend(settings=settings), b"\x1f\x8b\x08\x00rest")
    assert text == ""
    assert metadata.get(CONTENT_TYPE) == "application/gzip"


def test_strict_backend_raises_for_type_without_decoder(settings):
    """With strict=True a specific type with no decoder is unsupported."""
    with pytest.raises(UnsupportedFormatError) as exc_info:
        _parse(AutoDetectBackend(settings=settings, strict=True), b"\x1f\x8b\x08\x00rest")
    assert exc_info.value.content_type == "application/gzip"
    assert "text/plain" in exc_info.value.available


def test_non_seekable_stream_is_spooled_and_left_open(settings):
    """Decoders get a seekable copy; the caller's stream is not closed."""
    registry = DecoderRegistry()
    decoder = _RecordingDecoder()
    registry.add(decoder)
    stream = _NonSeekable(b"spooled text")
    text, _ = _parse(AutoDetectBackend(registry=registry, settings=settings), stream)
    assert text == "spooled text"
    assert decoder.seen == [(True, 1)]
    assert not stream.closed


def test_seekable_stream_left_open(settings):
    """The backend never closes a stream it was handed."""
    stream = io.BytesIO(b"abc")
    _parse(AutoDetectBackend(settings=settings), stream)
    assert not stream.closed


def test_nesting_depth_restored_after_parse(settings):
    """Depth is raised only while a decoder runs."""
    context = ParseContext()
    _parse(AutoDetectBackend(settings=settings), b"abc", context=context)
    assert context.get(NestingDepth).level == 0


def test_nesting_deeper_than_limit_raises(settings):
    """Archives nested past ARCHIVE_MAX_DEPTH fail."""
    settings = settings.model_copy(update={"ARCHIVE_MAX_DEPTH": 1})
    inner = make_zip({"deep.txt": b"deep"})
    outer = make_zip({"inner.zip": inner})
    with pytest.raises(ArchiveLimitError):
        _parse(AutoDetectBackend(settings=settings), outer)


def test_nesting_within_limit_parses_members(settings):
    """One level of nesting is within the default limit."""
    inner = make_zip({"deep.txt": b"deep text"})
    outer = make_zip({"inner.zip": inner})
    text, metadata = _parse(AutoDetectBackend(settings=settings), outer)
    assert "inner.zip" in text
    assert "deep.txt" in text
    assert "deep text" in text
    assert metadata.get(CONTENT_TYPE) == "application/zip"


def test_text_subtype_decoded_as_text(settings):
    """A text/* type with no decoder of its own is decoded as plain text."""
    metadata = Metadata()
    metadata.set(CONTENT_TYPE, "text/x-python")
    text, metadata = _parse(AutoDetectBackend(settings=settings), b"print('hi')", metadata)
    assert text == "print('hi')\n"
    assert metadata.get(CONTENT_TYPE) == "text/x-python"
