"""Extraction of text from newline-separated provider event records.

Some transports hand over payloads holding several JSON records at once,
for example an Ollama stream delivering two messages in one read:

    {"message":{"role":"assistant","content":"<think>"},"done":false}
    {"message":{"role":"assistant","content":"\\n"},"done":false}

or OpenAI-compatible SSE:

    data: {"choices":[{"delta":{"content":"Hi"}}]}
    data: [DONE]

The extractor turns such a payload into the plain text the processor scans.
"""

import json
from typing import Any

from pydantic import BaseModel, ValidationError

from ..exceptions import EventLineError
from ..logging import get_logger

logger = get_logger(__name__)


# ==================== provider record shapes ====================


class _Content(BaseModel):
    content: str


class OllamaChatRecord(BaseModel):
    """Ollama /api/chat record: ``{"message": {"content": ...}}``."""

    message: _Content

    def text(self) -> str:
        return self.message.content


class _DeltaChoice(BaseModel):
    delta: _Content


class OpenAIDeltaRecord(BaseModel):
    """OpenAI-compatible stream record: ``{"choices": [{"delta": {"content": ...}}]}``."""

    choices: list[_DeltaChoice]

    def text(self) -> str:
        # only the first choice is streamed
        return self.choices[0].delta.content if self.choices else ""


class OllamaGenerateRecord(BaseModel):
    """Ollama /api/generate record: ``{"response": ...}``."""

    response: str

    def text(self) -> str:
        return self.response


# checked in this order; the first shape yielding non-empty text wins
RECORD_SHAPES: tuple[type[BaseModel], ...] = (
    OllamaChatRecord,
    OpenAIDeltaRecord,
    OllamaGenerateRecord,
)


class EventLineExtractor:
    """Turns raw multi-record payloads into plain text.

    Usage:
        extractor = EventLineExtractor()
        text = extractor.extract(raw_payload)
    """

    def __init__(
        self,
        line_prefix: str = "data: ",
        done_marker: str = "[DONE]",
        shapes: tuple[type[BaseModel], ...] = RECORD_SHAPES,
    ):
        """Initialize the extractor.

        Args:
            line_prefix: Prefix stripped from the start of each line
            done_marker: Terminator line to drop (with or without the prefix)
            shapes: Record models tried in order for each line
        """
        self.line_prefix = line_prefix or ""
        self.done_marker = done_marker or ""
        self.shapes = shapes

    def clean_line(self, line: str) -> str:
        """Strip the line prefix and drop the terminator.

        Args:
            line: A single raw line

        Returns:
            The cleaned line, empty when nothing is left
        """
        line = line.rstrip("\r")
        if self.line_prefix and line.startswith(self.line_prefix):
            line = line[len(self.line_prefix):]
        if self.done_marker and line.strip() == self.done_marker:
            return ""
        return line

    def parse_line(self, line: str, strict: bool = False) -> dict[str, Any] | None:
        """Parse a cleaned line as a JSON record.

        Args:
            line: Cleaned line text
            strict: Raise EventLineError instead of returning None on failure

        Returns:
            The decoded record, or None if it is not a JSON object
        """
        try:
            record = json.loads(line)
        except ValueError as e:
            if strict:
                raise EventLineError(line, str(e)) from e
            logger.debug("Skipping unparseable event line: %r", line)
            return None

        if not isinstance(record, dict):
            if strict:
                raise EventLineError(line, "record is not a JSON object")
            logger.debug("Skipping non-object event line: %r", line)
            return None
        return record

    def text_from_record(self, record: dict[str, Any]) -> str:
        """Extract the content fragment from a decoded record.

        Args:
            record: Decoded JSON object

        Returns:
            The first non-empty text found by the known shapes, or ""
        """
        for shape in self.shapes:
            try:
                text = shape.model_validate(record).text()
            except ValidationError:
                continue
            if text:
                return text
        return ""

    def extract(self, payload: str) -> str:
        """Extract and concatenate the text of every record in a payload.

        Args:
            payload: Raw transport payload, possibly holding several lines

        Returns:
            Concatenated content fragments in line order
        """
        if not payload:
            return ""

        fragments = []
        for raw_line in payload.split("\n"):
            line = self.clean_line(raw_line)
            if not line.strip():
                continue
            record = self.parse_line(line)
            if record is None:
                continue
            text = self.text_from_record(record)
            if text:
                fragments.append(text)
        return "".join(fragments)


_default_extractor = EventLineExtractor()


def extract_chunk(payload: str) -> str:
    """Extract text from a payload using the default prefix and terminator.

    Args:
        payload: Raw transport payload

    Returns:
        Concatenated content fragments
    """
    return _default_extractor.extract(payload)
