"""Tool-call transcript protocol.

Assistant messages can carry their tool calls and results inline, as text:

    ##Tool Calls:<base64 calls>##Tool Result:<base64 result>##Tool Result:...

``codec`` splits a message into its segment; ``results`` turns each result
fragment into renderable items.

Created: 2026-10-13
"""

from mcpdeck.transcript.codec import (
    CALLS_MARKER,
    RESULTS_MARKER,
    ToolSegment,
    decode_segment,
    encode_segment,
    format_calls,
    is_tool_message,
)
from mcpdeck.transcript.results import (
    ImageItem,
    ResultBlock,
    ResultShape,
    TextItem,
    ToolResultItem,
    decode_result,
    decode_results,
)

__all__ = [
    "CALLS_MARKER",
    "RESULTS_MARKER",
    "ImageItem",
    "ResultBlock",
    "ResultShape",
    "TextItem",
    "ToolResultItem",
    "ToolSegment",
    "decode_result",
    "decode_results",
    "decode_segment",
    "encode_segment",
    "format_calls",
    "is_tool_message",
]
