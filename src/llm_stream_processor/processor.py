"""Callback-driven processing of streamed LLM responses.

This module provides the LlmStreamProcessor class which consumes text
chunks as they arrive, separates <think> reasoning blocks from regular
output, fires lifecycle callbacks, and probes the final output for JSON.

A processor instance is one session. Calls on it must be serialized by the
caller; nothing here is thread-safe.
"""

from typing import Any, Iterable

from .adapters.event_lines import EventLineExtractor
from .config import Settings
from .exceptions import ConfigurationError, StreamProcessingError
from .logging import get_logger
from .types import (
    NO_CALLBACKS,
    JsonParseResult,
    ProcessorSnapshot,
    SpanKind,
    StreamCallbacks,
)
from .utils.json_extract import extract_json
from .utils.normalizer import ChunkNormalizer
from .utils.stream_parser import (
    DEFAULT_THINK_CLOSE,
    DEFAULT_THINK_OPEN,
    StreamReasoningParser,
)

logger = get_logger(__name__)


class LlmStreamProcessor:
    """Processes streaming LLM text into reasoning and output callbacks.

    Handles:
    - Prefix and end-marker normalization of each chunk
    - <think>...</think> classification within each chunk
    - Accumulation of raw, reasoning and output text
    - JSON extraction from the final output

    Usage:
        processor = LlmStreamProcessor.create_instance(end_delimiter="[DONE]")
        callbacks = StreamCallbacks(on_output_chunk=print)
        for chunk in stream:
            processor.process(chunk, callbacks)
        processor.finalize()
    """

    def __init__(
        self,
        chunk_prefix: str = "",
        end_delimiter: str = "",
        think_open: str = DEFAULT_THINK_OPEN,
        think_close: str = DEFAULT_THINK_CLOSE,
        extractor: EventLineExtractor | None = None,
    ):
        """Initialize the processor.

        Args:
            chunk_prefix: Prefix to strip from each chunk (e.g. "data: ")
            end_delimiter: Marker that signals the end of the stream (e.g. "[DONE]")
            think_open: Literal that opens a reasoning block
            think_close: Literal that closes a reasoning block
            extractor: Event-line extractor used by process_chunk()

        Raises:
            ConfigurationError: If the reasoning delimiters are empty or equal
        """
        if not think_open:
            raise ConfigurationError("think_open", "must not be empty")
        if not think_close:
            raise ConfigurationError("think_close", "must not be empty")
        if think_open == think_close:
            raise ConfigurationError("think_close", "must differ from think_open")

        self._normalizer = ChunkNormalizer(chunk_prefix, end_delimiter)
        self._parser = StreamReasoningParser(think_open, think_close)
        self._extractor = extractor or EventLineExtractor()
        self.callbacks: StreamCallbacks = NO_CALLBACKS
        self._reset_state()

    @classmethod
    def create_instance(cls, **options: Any) -> "LlmStreamProcessor":
        """Create a new processor.

        Args:
            **options: Keyword arguments accepted by the constructor

        Returns:
            A new LlmStreamProcessor
        """
        return cls(**options)

    @classmethod
    def from_settings(cls, settings: Settings) -> "LlmStreamProcessor":
        """Create a processor configured from settings.

        Args:
            settings: Loaded Settings instance

        Returns:
            A new LlmStreamProcessor
        """
        extractor = EventLineExtractor(
            line_prefix=settings.event_line_prefix,
            done_marker=settings.event_done_marker,
        )
        return cls(extractor=extractor, **settings.processor_options())

    def _reset_state(self) -> None:
        self._raw_buffer = ""
        self._reasoning_buffer = ""
        self._output_buffer = ""
        self._started = False
        self._output_started = False
        self._completed = False
        self._parsed = JsonParseResult.absent()

    # ==================== session state ====================

    @property
    def chunk_prefix(self) -> str:
        return self._normalizer.chunk_prefix

    @property
    def end_delimiter(self) -> str:
        return self._normalizer.end_delimiter

    @property
    def raw_buffer(self) -> str:
        """Every normalized chunk processed so far."""
        return self._raw_buffer

    @property
    def reasoning_buffer(self) -> str:
        """Cumulative reasoning text."""
        return self._reasoning_buffer

    @property
    def output_buffer(self) -> str:
        """Cumulative output text."""
        return self._output_buffer

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def is_inside_reasoning(self) -> bool:
        return self._parser.is_inside_think_tag

    @property
    def is_output_started(self) -> bool:
        return self._output_started

    @property
    def is_completed(self) -> bool:
        return self._completed

    @property
    def parsed_result(self) -> JsonParseResult:
        """JSON extracted at finalize (absent before finalize)."""
        return self._parsed

    def snapshot(self) -> ProcessorSnapshot:
        """Return an immutable view of the session."""
        return ProcessorSnapshot(
            raw=self._raw_buffer,
            reasoning=self._reasoning_buffer,
            output=self._output_buffer,
            started=self._started,
            inside_reasoning=self.is_inside_reasoning,
            output_started=self._output_started,
            completed=self._completed,
        )

    def reset(self) -> None:
        """Discard all session state so the processor can take a new stream."""
        self._parser.reset()
        self.callbacks = NO_CALLBACKS
        self._reset_state()

    # ==================== processing ====================

    def process_chunk(self, raw_chunk: str, callbacks: StreamCallbacks | None = None) -> None:
        """Process a raw transport payload holding JSON event records.

        Use this when the transport delivers provider records (Ollama, OpenAI
        SSE) instead of plain text. The extracted text is processed as one
        chunk.

        Args:
            raw_chunk: Raw payload, possibly holding several records
            callbacks: Callbacks to register for this and later calls
        """
        self.callbacks = callbacks or NO_CALLBACKS
        try:
            chunk = self._extractor.extract(raw_chunk)
        except Exception as e:
            self._report_failure("process", e)
            return
        self.process(chunk, self.callbacks)

    def process(self, chunk: str, callbacks: StreamCallbacks | None = None) -> None:
        """Process a chunk of plain text.

        Faults, including exceptions raised by callbacks, are reported through
        on_failure and never raised. State changed before a fault is kept.

        Args:
            chunk: The chunk of text to process
            callbacks: Callbacks to register; replaces the previous set
        """
        self.callbacks = callbacks or NO_CALLBACKS

        try:
            normalized = self._normalizer.normalize(chunk)
            if normalized.end_of_stream:
                logger.debug("End marker received, finalizing stream")
                self.finalize()
                return

            text = normalized.text
            self._raw_buffer += text
            if not text:
                return

            if not self._started:
                self._started = True
                self._fire("on_start")

            for span in self._parser.process_chunk(text):
                if span.kind is SpanKind.OUTPUT:
                    self._deliver_output(span.text)
                elif span.kind is SpanKind.REASONING:
                    self._deliver_reasoning(span.text)
                elif span.kind is SpanKind.REASONING_OPEN:
                    logger.debug("Reasoning block opened")
                    self._fire("on_reasoning_start")
                elif span.kind is SpanKind.REASONING_CLOSE:
                    logger.debug("Reasoning block closed (%d chars)", len(self._reasoning_buffer))
                    self._fire("on_reasoning_finish", self._reasoning_buffer)
                    self._ensure_output_started()
        except Exception as e:
            self._report_failure("process", e)

    # keep the name used by plain-text callers
    read = process

    def process_stream(
        self,
        chunks: Iterable[str],
        callbacks: StreamCallbacks | None = None,
        raw: bool = False,
    ) -> ProcessorSnapshot:
        """Process every chunk of an iterable, then finalize.

        Args:
            chunks: Iterable of chunks, e.g. lines from an HTTP response
            callbacks: Callbacks to register
            raw: Treat chunks as raw event-line payloads

        Returns:
            Snapshot of the session after finalize
        """
        handle = self.process_chunk if raw else self.process
        for chunk in chunks:
            handle(chunk, callbacks)
            if self._completed:
                break
        if not self._completed:
            self.callbacks = callbacks or NO_CALLBACKS
            self.finalize()
        return self.snapshot()

    def finalize(self) -> None:
        """Finish the stream and fire the completion callbacks.

        Call this once all chunks have been processed. Later calls do nothing.
        Uses the callbacks registered by the most recent processing call.
        """
        if self._completed:
            return

        try:
            if self._parser.close():
                logger.debug("Closing unterminated reasoning block at finalize")
                self._fire("on_reasoning_finish", self._reasoning_buffer)

            self._ensure_output_started()

            self._parsed = extract_json(self._output_buffer)
            parsed = self._parsed.unwrap()
            logger.debug(
                "Finalizing stream: %d reasoning chars, %d output chars, json=%s",
                len(self._reasoning_buffer),
                len(self._output_buffer),
                self._parsed.source.value,
            )

            self._fire("on_output_finish", self._output_buffer, parsed)

            self._completed = True
            self._fire("on_finish", self._reasoning_buffer, self._output_buffer, parsed)
        except Exception as e:
            self._report_failure("finalize", e)

    # ==================== helpers ====================

    def _deliver_output(self, text: str) -> None:
        if not text:
            return
        self._ensure_output_started()
        self._output_buffer += text
        self._fire("on_output_chunk", text)

    def _deliver_reasoning(self, text: str) -> None:
        if not text:
            return
        self._reasoning_buffer += text
        self._fire("on_reasoning_chunk", text)

    def _ensure_output_started(self) -> None:
        if not self._output_started:
            self._output_started = True
            self._fire("on_output_start")

    def _fire(self, name: str, *args: Any) -> None:
        """Call the named callback if it is registered."""
        callback = getattr(self.callbacks, name)
        if callback is not None:
            callback(*args)

    def _report_failure(self, stage: str, cause: Exception) -> None:
        error = StreamProcessingError(stage, cause)
        error.__cause__ = cause
        on_failure = self.callbacks.on_failure
        if on_failure is None:
            logger.exception("Unhandled stream %s failure", stage, exc_info=cause)
            return

        logger.debug("Reporting stream %s failure: %s", stage, error)
        try:
            on_failure(error)
        except Exception:
            logger.exception("on_failure callback raised while handling: %s", error)
