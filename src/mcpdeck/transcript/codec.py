# Transcript codec: split a chat message into its embedded tool segment.
# Created: 2026-10-13

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

CALLS_MARKER = "##Tool Calls:"
RESULTS_MARKER = "##Tool Result:"


@dataclass(frozen=True)
class ToolSegment:
    """Undecoded calls payload plus result fragments, in message order."""

    calls_payload: str = ""
    result_fragments: list[str] = field(default_factory=list)


def is_tool_message(content: str | None) -> bool:
    return isinstance(content, str) and content.startswith(CALLS_MARKER)


def decode_segment(content: str | None) -> ToolSegment | None:
    """Extract the tool segment from message content.

    Returns None when the content is not a tool message. Never raises:
    a malformed segment degrades to empty calls and/or no results.
    """
    if not is_tool_message(content):
        return None

    try:
        calls, results = _split(content)
    except Exception as e:
        logger.debug("Malformed tool segment: %s", e)
        return ToolSegment()
    return ToolSegment(calls_payload=calls, result_fragments=results)


def _split(content: str) -> tuple[str, list[str]]:
    body = content[len(CALLS_MARKER) :]
    head, sep, tail = body.partition(RESULTS_MARKER)
    if not sep:
        return body, []
    return head, [frag for frag in tail.split(RESULTS_MARKER) if frag.strip()]


def encode_segment(calls: str, results: list[str] | None = None) -> str:
    """Build message content carrying ``calls`` and ``results``."""
    parts = [CALLS_MARKER, calls]
    for result in results or []:
        parts.append(RESULTS_MARKER)
        parts.append(result)
    return "".join(parts)


def safe_b64decode(payload: str) -> str:
    """Decode base64 text, returning the input unchanged if it isn't base64."""
    try:
        return base64.b64decode(payload.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return payload


def pretty_json(text: str) -> str:
    """Re-indent ``text`` if it's JSON, else hand it back untouched."""
    try:
        return json.dumps(json.loads(text.strip()), indent=2, ensure_ascii=False)
    except (json.JSONDecodeError, ValueError):
        return text


def format_calls(segment: ToolSegment) -> str:
    """Human-readable form of the calls payload."""
    return pretty_json(safe_b64decode(segment.calls_payload))
