"""Main entry point for the stream processor CLI.

Reads a captured or piped LLM stream, prints the output text as it
arrives, and reports any JSON found in the final output.
"""

import argparse
import json
import sys
from typing import TextIO

import yaml

from .adapters.event_lines import EventLineExtractor
from .config import get_settings
from .exceptions import ConfigurationError, StreamProcessorError
from .logging import setup_logging
from .processor import LlmStreamProcessor
from .types import StreamCallbacks

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NO_JSON = 2


def load_yaml_config(path: str = "config.yaml") -> dict:
    """Load the processor section from a YAML config file if it exists.

    Raises:
        ConfigurationError: If the file or its processor section is not a mapping
    """
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(path, "top level must be a mapping")
    section = data.get("processor") or {}
    if not isinstance(section, dict):
        raise ConfigurationError("processor", "section must be a mapping")
    return section


def resolve_options(args: argparse.Namespace, yaml_config: dict) -> dict:
    """Determine the processor options to use.

    Priority order:
    1. CLI arguments
    2. Config file (config.yaml, processor section)
    3. Environment variables (via pydantic settings)
    """
    settings = get_settings()
    options = settings.processor_options()

    # priority: cli > yaml > env
    for key in options:
        if yaml_config.get(key) is not None:
            options[key] = str(yaml_config[key])
    if args.chunk_prefix is not None:
        options["chunk_prefix"] = args.chunk_prefix
    if args.end_delimiter is not None:
        options["end_delimiter"] = args.end_delimiter
    return options


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(description="Split a streamed LLM response into reasoning and output")
    parser.add_argument(
        "input",
        nargs="?",
        help="File holding the captured stream (default: stdin)"
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Treat each line as a provider event record (Ollama / OpenAI SSE)"
    )
    parser.add_argument(
        "--chunk-prefix",
        help="Prefix to strip from each chunk (overrides config)"
    )
    parser.add_argument(
        "--end-delimiter",
        help="Marker that ends the stream, e.g. [DONE] (overrides config)"
    )
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="YAML config file (default: config.yaml)"
    )
    parser.add_argument(
        "--show-reasoning",
        action="store_true",
        help="Echo reasoning text to stderr"
    )
    parser.add_argument(
        "--json-only",
        action="store_true",
        help="Only print the parsed JSON; exit with status 2 if none is found"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (also settable via LLM_STREAM_LOG_LEVEL env var)"
    )
    return parser


def run(
    stream: TextIO,
    processor: LlmStreamProcessor,
    raw: bool = False,
    show_reasoning: bool = False,
    json_only: bool = False,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Feed a text stream through a processor and print the results.

    Args:
        stream: Readable text stream; each line is one chunk
        processor: Processor to drive
        raw: Feed lines through the event-line extractor
        show_reasoning: Echo reasoning text to err
        json_only: Only print the parsed JSON
        out: Destination for output text and JSON
        err: Destination for reasoning and errors

    Returns:
        Process exit code
    """
    out = out or sys.stdout
    err = err or sys.stderr
    failures: list[Exception] = []

    def on_reasoning_start() -> None:
        if show_reasoning:
            print("[Reasoning]: ", end="", file=err, flush=True)

    def on_reasoning_chunk(text: str) -> None:
        if show_reasoning:
            print(text, end="", file=err, flush=True)

    def on_reasoning_finish(_full: str) -> None:
        if show_reasoning:
            print(file=err, flush=True)

    def on_output_chunk(text: str) -> None:
        if not json_only:
            print(text, end="", file=out, flush=True)

    def on_failure(error: Exception) -> None:
        failures.append(error)
        print(f"\nError: {error}", file=err)

    callbacks = StreamCallbacks(
        on_reasoning_start=on_reasoning_start,
        on_reasoning_chunk=on_reasoning_chunk,
        on_reasoning_finish=on_reasoning_finish,
        on_output_chunk=on_output_chunk,
        on_failure=on_failure,
    )

    processor.process_stream(stream, callbacks, raw=raw)
    result = processor.parsed_result

    if not json_only:
        print(file=out)
    if result.found:
        if not json_only:
            print("\n[JSON]:", file=out)
        print(json.dumps(result.value, indent=2, ensure_ascii=False), file=out)

    if failures:
        return EXIT_FAILURE
    if json_only and not result.found:
        return EXIT_NO_JSON
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the stream processor CLI."""
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return EXIT_FAILURE

    # setup logging early
    setup_logging(args.log_level, settings)

    try:
        options = resolve_options(args, load_yaml_config(args.config))
        extractor = EventLineExtractor(settings.event_line_prefix, settings.event_done_marker)
        processor = LlmStreamProcessor.create_instance(extractor=extractor, **options)
    except (StreamProcessorError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.input:
        try:
            with open(args.input, "r", encoding="utf-8") as f:
                return run(f, processor, args.raw, args.show_reasoning, args.json_only)
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_FAILURE

    return run(sys.stdin, processor, args.raw, args.show_reasoning, args.json_only)


if __name__ == "__main__":
    sys.exit(main())
