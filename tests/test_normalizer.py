"""Tests for chunk normalization."""

from llm_stream_processor.types import NormalizedChunk
from llm_stream_processor.utils.normalizer import ChunkNormalizer


class TestChunkNormalizer:
    """Tests for ChunkNormalizer."""

    def test_no_configuration(self):
        normalizer = ChunkNormalizer()
        assert normalizer.normalize("data: [DONE]") == NormalizedChunk(text="data: [DONE]")

    def test_empty_chunk(self):
        assert ChunkNormalizer("data: ", "[DONE]").normalize("") == NormalizedChunk(text="")

    def test_strips_leading_prefix_only(self):
        normalizer = ChunkNormalizer(chunk_prefix="data: ")
        assert normalizer.normalize("data: hi data: ").text == "hi data: "
        assert normalizer.normalize(" data: hi").text == " data: hi"

    def test_end_marker_alone(self):
        normalizer = ChunkNormalizer(end_delimiter="[DONE]")
        result = normalizer.normalize("[DONE]")
        assert result.end_of_stream is True
        assert result.text == ""

    def test_prefixed_end_marker(self):
        """Test an SSE terminator line with both prefix and marker configured."""
        normalizer = ChunkNormalizer(chunk_prefix="data: ", end_delimiter="[DONE]")
        result = normalizer.normalize("data: [DONE]")
        # "data: " is not whitespace, so the stream continues with the prefix stripped
        assert result.end_of_stream is False
        assert result.text == ""

    def test_end_marker_removed_once(self):
        normalizer = ChunkNormalizer(end_delimiter="END")
        result = normalizer.normalize("fooENDbarEND")
        assert result == NormalizedChunk(text="foobarEND")

    def test_multiline_chunk(self):
        normalizer = ChunkNormalizer(chunk_prefix="> ")
        assert normalizer.normalize("> line one\n> line two").text == "line one\n> line two"
