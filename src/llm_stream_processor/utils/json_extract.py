"""Best-effort JSON extraction from model output."""

import json
import re
from typing import Any

from ..types import JsonParseResult, ParseSource

# first ```json fenced block, body trimmed, non-greedy
FENCED_JSON_PATTERN = re.compile(r"```json\s*([\s\S]*?)\s*```")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _loads(text: str) -> Any:
    return json.loads(text, parse_constant=_reject_constant)


def extract_json(text: str) -> JsonParseResult:
    """Try to decode JSON from accumulated output text.

    A fenced ```json block with a non-empty body takes precedence; otherwise
    the whole trimmed text is decoded. Failures never raise.

    Args:
        text: Accumulated output text

    Returns:
        JsonParseResult, absent when nothing could be decoded
    """
    trimmed = (text or "").strip()

    match = FENCED_JSON_PATTERN.search(trimmed)
    if match and match.group(1):
        try:
            return JsonParseResult(
                found=True,
                value=_loads(match.group(1).strip()),
                source=ParseSource.FENCED,
            )
        except (ValueError, RecursionError):
            return JsonParseResult.absent()

    try:
        return JsonParseResult(found=True, value=_loads(trimmed), source=ParseSource.WHOLE)
    except (ValueError, RecursionError):
        return JsonParseResult.absent()
