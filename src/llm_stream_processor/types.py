"""Shared types for the stream processor.

These types describe the callback surface, the units the tag scanner emits,
and the result of probing accumulated output for JSON.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable


class SpanKind(Enum):
    """Kind of a unit emitted by the tag scanner."""
    OUTPUT = "output"
    REASONING = "reasoning"
    REASONING_OPEN = "reasoning_open"
    REASONING_CLOSE = "reasoning_close"


@dataclass(frozen=True)
class StreamSpan:
    """A single unit produced while scanning a chunk.

    Attributes:
        kind: What the span represents
        text: Span text (empty for open/close markers)
    """
    kind: SpanKind
    text: str = ""


@dataclass(frozen=True)
class NormalizedChunk:
    """Result of normalizing a raw chunk.

    Attributes:
        text: Text to hand to the state machine
        end_of_stream: True when the chunk only carried the end marker
    """
    text: str
    end_of_stream: bool = False


class ParseSource(Enum):
    """Where a parsed JSON value came from."""
    FENCED = "fenced"
    WHOLE = "whole"
    NONE = "none"


@dataclass(frozen=True)
class JsonParseResult:
    """Outcome of probing text for JSON.

    A result is either found (``value`` holds the decoded data, which may
    itself be ``None`` for a literal ``null``) or absent.
    """
    found: bool
    value: Any = None
    source: ParseSource = ParseSource.NONE

    @classmethod
    def absent(cls) -> "JsonParseResult":
        """Create an absent result."""
        return cls(found=False)

    def unwrap(self) -> Any:
        """Return the decoded value, or None when absent."""
        return self.value if self.found else None


@dataclass(frozen=True)
class StreamCallbacks:
    """The nine optional callbacks a processor fires.

    Attributes:
        on_start: Called once when the first non-empty chunk is processed
        on_reasoning_start: Called when a reasoning block opens
        on_reasoning_chunk: Called with each new piece of reasoning text
        on_reasoning_finish: Called with the cumulative reasoning text when a block closes
        on_output_start: Called once, before the first output text
        on_output_chunk: Called with each new piece of output text
        on_output_finish: Called at finalize with the full output and parsed JSON
        on_finish: Called at finalize with reasoning, output and parsed JSON
        on_failure: Called with a StreamProcessingError when processing faults
    """
    on_start: Callable[[], Any] | None = None
    on_reasoning_start: Callable[[], Any] | None = None
    on_reasoning_chunk: Callable[[str], Any] | None = None
    on_reasoning_finish: Callable[[str], Any] | None = None
    on_output_start: Callable[[], Any] | None = None
    on_output_chunk: Callable[[str], Any] | None = None
    on_output_finish: Callable[[str, Any], Any] | None = None
    on_finish: Callable[[str, str, Any], Any] | None = None
    on_failure: Callable[[Exception], Any] | None = None

    def with_overrides(self, **kwargs: Callable[..., Any] | None) -> "StreamCallbacks":
        """Return a copy with some callbacks replaced."""
        return replace(self, **kwargs)


# shared empty bag used when a caller passes no callbacks
NO_CALLBACKS = StreamCallbacks()


@dataclass(frozen=True)
class ProcessorSnapshot:
    """Immutable view of a processor session.

    Attributes:
        raw: Every normalized chunk fed so far
        reasoning: Accumulated reasoning text
        output: Accumulated output text
        started: Whether a non-empty chunk has been processed
        inside_reasoning: Whether a reasoning block is currently open
        output_started: Whether the output-start callback has fired
        completed: Whether finalize has run
    """
    raw: str
    reasoning: str
    output: str
    started: bool
    inside_reasoning: bool
    output_started: bool
    completed: bool
