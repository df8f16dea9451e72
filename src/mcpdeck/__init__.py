"""mcpdeck: MCP server config lifecycle and tool-call transcript decoding.

Created: 2026-10-12
"""

from mcpdeck.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
