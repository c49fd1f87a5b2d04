"""Front-end adapters that turn transport payloads into processor input."""

from .event_lines import (
    RECORD_SHAPES,
    EventLineExtractor,
    OllamaChatRecord,
    OllamaGenerateRecord,
    OpenAIDeltaRecord,
    extract_chunk,
)

__all__ = [
    "RECORD_SHAPES",
    "EventLineExtractor",
    "OllamaChatRecord",
    "OllamaGenerateRecord",
    "OpenAIDeltaRecord",
    "extract_chunk",
]
