"""Tests for shared types."""

import dataclasses

import pytest

from llm_stream_processor.types import (
    NO_CALLBACKS,
    JsonParseResult,
    NormalizedChunk,
    ParseSource,
    SpanKind,
    StreamCallbacks,
    StreamSpan,
)


class TestSpanKind:
    """Tests for SpanKind enum."""

    def test_enum_values(self):
        """Test that enum has expected values."""
        assert SpanKind.OUTPUT.value == "output"
        assert SpanKind.REASONING.value == "reasoning"
        assert SpanKind.REASONING_OPEN.value == "reasoning_open"
        assert SpanKind.REASONING_CLOSE.value == "reasoning_close"


class TestStreamSpan:
    """Tests for StreamSpan dataclass."""

    def test_marker_has_no_text(self):
        assert StreamSpan(SpanKind.REASONING_OPEN).text == ""

    def test_frozen(self):
        span = StreamSpan(SpanKind.OUTPUT, "x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            span.text = "y"


class TestStreamCallbacks:
    """Tests for StreamCallbacks dataclass."""

    def test_all_optional(self):
        callbacks = StreamCallbacks()
        assert all(getattr(callbacks, f.name) is None for f in dataclasses.fields(callbacks))
        assert len(dataclasses.fields(callbacks)) == 9

    def test_with_overrides_copies(self):
        """Test that overriding returns a new bag and leaves the original alone."""
        handler = print
        updated = NO_CALLBACKS.with_overrides(on_output_chunk=handler)
        assert updated.on_output_chunk is handler
        assert NO_CALLBACKS.on_output_chunk is None

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            NO_CALLBACKS.on_start = print


class TestJsonParseResult:
    """Tests for JsonParseResult dataclass."""

    def test_absent(self):
        result = JsonParseResult.absent()
        assert result.found is False
        assert result.source is ParseSource.NONE
        assert result.unwrap() is None

    def test_unwrap_found(self):
        result = JsonParseResult(found=True, value={"a": 1}, source=ParseSource.WHOLE)
        assert result.unwrap() == {"a": 1}


class TestNormalizedChunk:
    """Tests for NormalizedChunk dataclass."""

    def test_defaults(self):
        chunk = NormalizedChunk(text="abc")
        assert chunk.end_of_stream is False
