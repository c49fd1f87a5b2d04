"""Shared test fixtures and configuration."""

import pytest

from llm_stream_processor.config import get_settings
from llm_stream_processor.processor import LlmStreamProcessor
from llm_stream_processor.types import StreamCallbacks


class CallbackRecorder:
    """Records every callback fired by a processor, in order."""

    def __init__(self):
        self.events: list[tuple] = []

    def callbacks(self) -> StreamCallbacks:
        return StreamCallbacks(
            on_start=lambda: self.events.append(("start",)),
            on_reasoning_start=lambda: self.events.append(("reasoning_start",)),
            on_reasoning_chunk=lambda text: self.events.append(("reasoning_chunk", text)),
            on_reasoning_finish=lambda full: self.events.append(("reasoning_finish", full)),
            on_output_start=lambda: self.events.append(("output_start",)),
            on_output_chunk=lambda text: self.events.append(("output_chunk", text)),
            on_output_finish=lambda full, parsed: self.events.append(("output_finish", full, parsed)),
            on_finish=lambda reasoning, output, parsed: self.events.append(
                ("finish", reasoning, output, parsed)
            ),
            on_failure=lambda error: self.events.append(("failure", error)),
        )

    def names(self) -> list[str]:
        return [event[0] for event in self.events]

    def payloads(self, name: str) -> list:
        return [event[1] for event in self.events if event[0] == name]

    def failures(self) -> list[Exception]:
        return self.payloads("failure")


@pytest.fixture
def recorder():
    """Create a callback recorder."""
    return CallbackRecorder()


@pytest.fixture
def processor():
    """Create a processor with default configuration."""
    return LlmStreamProcessor()


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Isolate settings from the developer's environment and .env file."""
    monkeypatch.chdir(tmp_path)
    for key in (
        "LLM_STREAM_CHUNK_PREFIX",
        "LLM_STREAM_END_DELIMITER",
        "LLM_STREAM_THINK_OPEN",
        "LLM_STREAM_THINK_CLOSE",
        "LLM_STREAM_EVENT_LINE_PREFIX",
        "LLM_STREAM_EVENT_DONE_MARKER",
        "LLM_STREAM_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
