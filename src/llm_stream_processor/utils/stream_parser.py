"""Stream parser for separating reasoning blocks from regular output.

Some models (like DeepSeek or Qwen) embed reasoning content within <think>
tags in their streaming output. This parser classifies each chunk into
output and reasoning spans and marks where reasoning blocks open and close.

Delimiters are only recognized when their full literal text lies inside a
single chunk. A tag split across two chunks (``"<th"`` + ``"ink>"``) is not
recognized and its characters are emitted as ordinary text.
"""

from typing import Iterator

from ..types import SpanKind, StreamSpan

DEFAULT_THINK_OPEN = "<think>"
DEFAULT_THINK_CLOSE = "</think>"


class StreamReasoningParser:
    """Incremental scanner for <think>...</think> blocks.

    The only state carried between chunks is whether a reasoning block is
    currently open.

    Usage:
        parser = StreamReasoningParser()
        for chunk in stream:
            for span in parser.process_chunk(chunk):
                if span.kind is SpanKind.REASONING:
                    # handle reasoning text
                elif span.kind is SpanKind.OUTPUT:
                    # handle regular content
    """

    def __init__(
        self,
        think_open: str = DEFAULT_THINK_OPEN,
        think_close: str = DEFAULT_THINK_CLOSE,
    ):
        """Initialize the parser.

        Args:
            think_open: Literal that opens a reasoning block
            think_close: Literal that closes a reasoning block
        """
        self.think_open = think_open
        self.think_close = think_close
        self._inside_think = False

    @property
    def is_inside_think_tag(self) -> bool:
        """Check if currently inside a reasoning block."""
        return self._inside_think

    def process_chunk(self, chunk: str) -> Iterator[StreamSpan]:
        """Scan a chunk left to right, yielding spans in order.

        Text spans are never empty. The open/close state is updated before
        the corresponding marker span is yielded.

        Args:
            chunk: The text chunk to process

        Yields:
            StreamSpan objects in the order they occur in the chunk
        """
        position = 0
        length = len(chunk)

        while position < length:
            if not self._inside_think:
                open_idx = chunk.find(self.think_open, position)
                if open_idx == -1:
                    yield StreamSpan(SpanKind.OUTPUT, chunk[position:])
                    break
                if open_idx > position:
                    yield StreamSpan(SpanKind.OUTPUT, chunk[position:open_idx])
                position = open_idx + len(self.think_open)
                self._inside_think = True
                yield StreamSpan(SpanKind.REASONING_OPEN)
            else:
                close_idx = chunk.find(self.think_close, position)
                if close_idx == -1:
                    yield StreamSpan(SpanKind.REASONING, chunk[position:])
                    break
                if close_idx > position:
                    yield StreamSpan(SpanKind.REASONING, chunk[position:close_idx])
                position = close_idx + len(self.think_close)
                self._inside_think = False
                yield StreamSpan(SpanKind.REASONING_CLOSE)

    def close(self) -> bool:
        """Close an open reasoning block at end of stream.

        Returns:
            True if a block was open and has been closed
        """
        was_open = self._inside_think
        self._inside_think = False
        return was_open

    def reset(self) -> None:
        """Reset the parser state."""
        self._inside_think = False
