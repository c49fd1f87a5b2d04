"""LLM Stream Processor - callback-driven parsing of streamed LLM output.

This package separates <think> reasoning blocks from regular output as
chunks arrive, and probes the finished output for JSON.
"""

from .adapters.event_lines import EventLineExtractor, extract_chunk
from .exceptions import (
    ConfigurationError,
    EventLineError,
    StreamProcessingError,
    StreamProcessorError,
)
from .processor import LlmStreamProcessor
from .types import (
    JsonParseResult,
    NormalizedChunk,
    ParseSource,
    ProcessorSnapshot,
    SpanKind,
    StreamCallbacks,
    StreamSpan,
)
from .utils.json_extract import extract_json

__all__ = [
    # main processor
    "LlmStreamProcessor",
    "EventLineExtractor",
    "extract_chunk",
    "extract_json",
    # types
    "JsonParseResult",
    "NormalizedChunk",
    "ParseSource",
    "ProcessorSnapshot",
    "SpanKind",
    "StreamCallbacks",
    "StreamSpan",
    # exceptions
    "ConfigurationError",
    "EventLineError",
    "StreamProcessingError",
    "StreamProcessorError",
]
