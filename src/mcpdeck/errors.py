# Error types shared across the transcript and MCP config layers.
# Created: 2026-10-12

from __future__ import annotations


class McpDeckError(Exception):
    """Base class for all mcpdeck errors."""


class ProtocolDecodeError(McpDeckError):
    """A transcript tool segment or result fragment could not be decoded.

    Always recovered where it is raised; callers only ever see a degraded render.
    """


class ConfigSyntaxError(McpDeckError):
    """Edited configuration text is not a JSON object."""


class ConfigValidationError(McpDeckError):
    """A server entry has neither ``command`` + ``args`` nor ``url``."""

    def __init__(self, server_name: str, reason: str = "missing command/args or url"):
        super().__init__(f"Invalid MCP server '{server_name}': {reason}")
        self.server_name = server_name
        self.reason = reason


class SubmissionError(McpDeckError):
    """The config endpoint rejected a specific server."""

    def __init__(self, server_name: str, error: str):
        super().__init__(f"MCP server '{server_name}' failed: {error}")
        self.server_name = server_name
        self.error = error


class TransportError(McpDeckError):
    """The endpoint could not be reached or answered with something unusable."""
