"""Tests for the event-line extractor."""

import pytest

from llm_stream_processor.adapters.event_lines import (
    EventLineExtractor,
    OllamaChatRecord,
    OpenAIDeltaRecord,
    extract_chunk,
)
from llm_stream_processor.exceptions import EventLineError


class TestEventLineExtractor:
    """Tests for EventLineExtractor."""

    def test_ollama_chat_lines(self):
        payload = (
            '{"message":{"role":"assistant","content":"<think>"},"done":false,"index":0}\n'
            '{"message":{"role":"assistant","content":"\\n"},"done":false,"index":1}'
        )
        assert extract_chunk(payload) == "<think>\n"

    def test_openai_sse_lines(self):
        payload = (
            'data: {"choices":[{"delta":{"role":"assistant","content":"Hi"}}]}\n'
            "\n"
            'data: {"choices":[{"delta":{"content":" there"}}]}\r\n'
            "data: [DONE]\n"
        )
        assert extract_chunk(payload) == "Hi there"

    def test_ollama_generate_lines(self):
        payload = '{"model":"m","response":"one"}\n{"model":"m","response":" two","done":true}'
        assert extract_chunk(payload) == "one two"

    def test_shape_priority(self):
        """Test that the message shape is preferred over the response shape."""
        payload = '{"message":{"content":"chat"},"response":"generate"}'
        assert extract_chunk(payload) == "chat"

    def test_empty_content_falls_through(self):
        """Test that an empty fragment lets the next shape answer."""
        payload = '{"message":{"content":""},"response":"fallback"}'
        assert extract_chunk(payload) == "fallback"

    def test_skips_unusable_lines(self):
        payload = "\n".join([
            "not json",
            "[1, 2, 3]",
            '{"choices":[]}',
            '{"choices":[{"delta":{"role":"assistant"}}]}',
            '{"message":{"content":null}}',
            '{"message":{"content":5}}',
            '{"response":"kept"}',
        ])
        assert extract_chunk(payload) == "kept"

    def test_empty_payload(self):
        assert extract_chunk("") == ""

    def test_custom_prefix_and_marker(self):
        extractor = EventLineExtractor(line_prefix="event: ", done_marker="END")
        payload = 'event: {"response":"a"}\nevent: END\nEND\n{"response":"b"}'
        assert extractor.extract(payload) == "ab"

    def test_clean_line(self):
        extractor = EventLineExtractor()
        assert extractor.clean_line("data: [DONE]") == ""
        assert extractor.clean_line("data: {}\r") == "{}"
        assert extractor.clean_line("{}") == "{}"

    def test_parse_line_strict(self):
        extractor = EventLineExtractor()
        with pytest.raises(EventLineError):
            extractor.parse_line("{broken", strict=True)
        with pytest.raises(EventLineError):
            extractor.parse_line('"a string"', strict=True)
        assert extractor.parse_line("{broken") is None

    def test_custom_shapes(self):
        extractor = EventLineExtractor(shapes=(OllamaChatRecord,))
        assert extractor.extract('{"response":"ignored"}\n{"message":{"content":"x"}}') == "x"


class TestRecordShapes:
    """Tests for the provider record models."""

    def test_chat_and_delta_share_content_model(self):
        chat = OllamaChatRecord.model_validate({"message": {"role": "assistant", "content": "a"}})
        delta = OpenAIDeltaRecord.model_validate({"choices": [{"delta": {"content": "b"}}]})
        assert type(chat.message) is type(delta.choices[0].delta)
        assert chat.text() + delta.text() == "ab"

    def test_delta_without_choices(self):
        assert OpenAIDeltaRecord.model_validate({"choices": []}).text() == ""
