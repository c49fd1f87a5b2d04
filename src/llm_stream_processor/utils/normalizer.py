"""Chunk normalization applied before tag scanning."""

from ..types import NormalizedChunk


class ChunkNormalizer:
    """Strips a configured prefix and end-of-stream marker from raw chunks.

    Usage:
        normalizer = ChunkNormalizer(chunk_prefix="data: ", end_delimiter="[DONE]")
        result = normalizer.normalize("data: hello")
        # result.text == "hello", result.end_of_stream is False
    """

    def __init__(self, chunk_prefix: str = "", end_delimiter: str = ""):
        self.chunk_prefix = chunk_prefix or ""
        self.end_delimiter = end_delimiter or ""

    def normalize(self, chunk: str) -> NormalizedChunk:
        """Normalize a raw chunk.

        The end marker is checked first: its first occurrence is removed and,
        when nothing but whitespace remains, the chunk signals end of stream.
        A chunk that still carries text after the marker is removed keeps
        going and does not end the stream.

        Args:
            chunk: Raw chunk text

        Returns:
            NormalizedChunk with the text to scan, or end_of_stream set
        """
        if not chunk:
            return NormalizedChunk(text="")

        if self.end_delimiter and self.end_delimiter in chunk:
            chunk = chunk.replace(self.end_delimiter, "", 1)
            if not chunk.strip():
                return NormalizedChunk(text="", end_of_stream=True)

        if self.chunk_prefix and chunk.startswith(self.chunk_prefix):
            chunk = chunk[len(self.chunk_prefix):]

        return NormalizedChunk(text=chunk)
