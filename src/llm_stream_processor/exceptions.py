"""Custom exception hierarchy for the stream processor.

Errors are organized into processing errors (faults while scanning or
finalizing a stream), configuration errors, and event-line errors raised by
the transport adapter.
"""


class StreamProcessorError(Exception):
    """Base exception for all stream processor errors."""


# =============================================================================
# Processing Errors - Faults while consuming a stream
# =============================================================================

class StreamProcessingError(StreamProcessorError):
    """A fault occurred while processing or finalizing a stream.

    Instances are handed to the ``on_failure`` callback rather than raised
    to the caller.

    Attributes:
        stage: Where the fault happened ("process" or "finalize")
        cause: The original exception
    """

    def __init__(self, stage: str, cause: Exception):
        self.stage = stage
        self.cause = cause
        super().__init__(f"Stream {stage} failed: {type(cause).__name__}: {cause}")


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(StreamProcessorError):
    """Processor configuration is invalid."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid configuration for '{field}': {reason}")


# =============================================================================
# Event Line Errors - Issues with raw transport payloads
# =============================================================================

class EventLineError(StreamProcessorError):
    """An event line could not be parsed into a record."""

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        preview = line if len(line) <= 80 else line[:77] + "..."
        super().__init__(f"Could not parse event line '{preview}': {reason}")
