"""Tests for result assembly."""

import dataclasses

import pytest

from text_extraction.exceptions import MetadataInvariantError
from text_extraction.metadata import CONTENT_TYPE, Metadata
from text_extraction.result import TextExtractionResult, assemble_result


def test_assemble_result_uses_content_type_field():
    """content_type is taken from the Content-Type metadata field."""
    m = Metadata()
    m.set(CONTENT_TYPE, "text/plain")
    m.add("author", "a")
    m.add("author", "b")
    result = assemble_result("hello", m)
    assert result.text == "hello"
    assert result.content_type == "text/plain"
    assert result.metadata[CONTENT_TYPE] == result.content_type
    assert result.metadata["author"] == "a, b"


def test_assemble_result_without_content_type_raises_invariant_error():
    """A missing Content-Type is a defect signalled with MetadataInvariantError."""
    m = Metadata()
    m.set("FilePath", "/tmp/x")
    with pytest.raises(MetadataInvariantError) as exc_info:
        assemble_result("", m)
    assert exc_info.value.field == CONTENT_TYPE


def test_result_is_immutable():
    """Result fields and its metadata mapping cannot be changed."""
    m = Metadata()
    m.set(CONTENT_TYPE, "text/plain")
    result = assemble_result("x", m)
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.text = "y"
    with pytest.raises(TypeError):
        result.metadata["new"] = "v"
    # Later carrier changes do not leak into the result
    m.set("late", "v")
    assert "late" not in result.metadata


def test_result_to_dict():
    """to_dict returns text, content_type and a plain metadata dict."""
    result = TextExtractionResult("t", "text/plain", {CONTENT_TYPE: "text/plain"})
    d = result.to_dict()
    assert d == {"text": "t", "content_type": "text/plain", "metadata": {CONTENT_TYPE: "text/plain"}}
    assert isinstance(d["metadata"], dict)
