"""Result decoder: turn one tool result fragment into renderable items.

Created: 2026-10-13

A fragment is normally base64 JSON in one of three shapes:

    {"type": "text", "text": "..."}                 a single item
    {"content": [{"type": "image", ...}, ...]}      an MCP CallToolResult
    {...anything else...}                           shown as formatted JSON

Anything that fails to decode still renders as text. Decoding never raises.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from mcpdeck.errors import ProtocolDecodeError
from mcpdeck.transcript.codec import ToolSegment, pretty_json, safe_b64decode

logger = logging.getLogger(__name__)


class ResultShape(str, Enum):
    """How a decoded JSON result is laid out."""

    ITEM = "item"
    CONTENT = "content"
    OTHER = "other"


@dataclass(frozen=True)
class ImageItem:
    data: str  # always a data: URI
    mime_type: str


@dataclass(frozen=True)
class TextItem:
    text: str
    language: str | None = None  # "json" when text is a formatted JSON document


ToolResultItem = ImageItem | TextItem


@dataclass(frozen=True)
class ResultBlock:
    """Items decoded from one fragment, with the label shown above them."""

    label: str
    items: list[ToolResultItem] = field(default_factory=list)


_ITEM_TYPES = frozenset({"image", "text"})


def classify(value: Any) -> ResultShape:
    """Classify a parsed JSON result."""
    if isinstance(value, dict):
        if value.get("type") in _ITEM_TYPES:
            return ResultShape.ITEM
        if isinstance(value.get("content"), list):
            return ResultShape.CONTENT
    return ResultShape.OTHER


def _image_item(raw: dict[str, Any]) -> ImageItem | None:
    data = raw.get("data")
    mime_type = raw.get("mimeType")
    if not data or not mime_type:
        return None
    if not str(data).startswith("data:"):
        data = f"data:{mime_type};base64,{data}"
    return ImageItem(data=data, mime_type=mime_type)


def _text_item(raw: dict[str, Any]) -> TextItem | None:
    text = raw.get("text")
    if not text or not isinstance(text, str):
        return None
    try:
        return TextItem(text=_format_json_text(text), language="json")
    except ProtocolDecodeError:
        return TextItem(text=text)


def item_from_dict(raw: Any) -> ToolResultItem | None:
    """Build one item from a raw content element.

    Unknown types and elements missing required fields yield None.
    """
    if not isinstance(raw, dict):
        return None
    kind = raw.get("type")
    if kind == "image":
        return _image_item(raw)
    if kind == "text":
        return _text_item(raw)
    return None


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text.strip())
    except (json.JSONDecodeError, ValueError) as e:
        raise ProtocolDecodeError(f"result is not JSON: {e}") from e


def _format_json_text(text: str) -> str:
    return json.dumps(_parse_json(text), indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Per-shape decoders
# ---------------------------------------------------------------------------
def _decode_item(value: dict[str, Any]) -> list[ToolResultItem]:
    item = item_from_dict(value)
    return [item] if item else []


def _decode_content(value: dict[str, Any]) -> list[ToolResultItem]:
    items: list[ToolResultItem] = []
    for raw in value["content"]:
        item = item_from_dict(raw)
        if item is not None:
            items.append(item)
    return items


def _decode_other(value: Any) -> list[ToolResultItem]:
    return [TextItem(text=json.dumps(value, indent=2, ensure_ascii=False), language="json")]


_DECODERS: dict[ResultShape, Callable[[Any], list[ToolResultItem]]] = {
    ResultShape.ITEM: _decode_item,
    ResultShape.CONTENT: _decode_content,
    ResultShape.OTHER: _decode_other,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def decode_result(fragment: str) -> list[ToolResultItem]:
    """Decode one result fragment into render items.

    Args:
        fragment: Base64 JSON, or already-decoded text.

    Returns:
        Zero or more items. An item with an unrecognized type contributes
        nothing; undecodable input comes back as a single text item.
    """
    decoded = safe_b64decode(fragment)
    try:
        value = _parse_json(decoded)
    except ProtocolDecodeError as e:
        logger.debug("Falling back to raw text for tool result: %s", e)
        formatted = pretty_json(decoded)
        return [TextItem(text=formatted, language="json" if formatted != decoded else None)]

    return _DECODERS[classify(value)](value)


def decode_results(segment: ToolSegment) -> list[ResultBlock]:
    """Decode every result fragment of a segment, labelled in order."""
    total = len(segment.result_fragments)
    return [
        ResultBlock(
            label=f"Results {index + 1}" if total > 1 else "Results",
            items=decode_result(fragment),
        )
        for index, fragment in enumerate(segment.result_fragments)
    ]
