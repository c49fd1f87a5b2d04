"""centralized configuration management using pydantic settings.

this module provides type-safe, validated configuration for the stream
processor. configuration is loaded from environment variables (prefixed
with LLM_STREAM_) and an optional .env file.
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """main settings class for the stream processor.

    attributes:
        chunk_prefix: prefix stripped from the start of each chunk (e.g. "data: ")
        end_delimiter: marker that signals the end of the stream (e.g. "[DONE]")
        think_open: literal that opens a reasoning block
        think_close: literal that closes a reasoning block
        event_line_prefix: prefix stripped from each raw event line
        event_done_marker: terminator line dropped by the event-line extractor
        log_level: logging level (DEBUG, INFO, WARNING, ERROR)
    """

    model_config = SettingsConfigDict(
        env_prefix="LLM_STREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # normalizer
    chunk_prefix: str = ""
    end_delimiter: str = ""

    # reasoning delimiters
    think_open: str = "<think>"
    think_close: str = "</think>"

    # event-line adapter
    event_line_prefix: str = "data: "
    event_done_marker: str = "[DONE]"

    log_level: str = Field(default="WARNING")

    @field_validator("think_open", "think_close")
    @classmethod
    def _delimiter_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("reasoning delimiters must not be empty")
        return value

    @model_validator(mode="after")
    def _delimiters_distinct(self) -> "Settings":
        if self.think_open == self.think_close:
            raise ValueError("think_open and think_close must differ")
        return self

    def processor_options(self) -> dict[str, str]:
        """get the keyword arguments for constructing a processor.

        returns:
            dict with chunk_prefix, end_delimiter, think_open and think_close
        """
        return {
            "chunk_prefix": self.chunk_prefix,
            "end_delimiter": self.end_delimiter,
            "think_open": self.think_open,
            "think_close": self.think_close,
        }


@lru_cache
def get_settings() -> Settings:
    """get the singleton settings instance.

    uses lru_cache to ensure only one instance is created.
    call get_settings.cache_clear() to reload settings if needed.

    returns:
        the settings instance
    """
    return Settings()
