"""MCP server configuration lifecycle.

Keeps an ordered registry of configured MCP servers, merges config edits
into it, submits it to the host application and reconciles the result,
and caches tool metadata for servers that aren't currently running.

Created: 2026-10-14
"""

from mcpdeck.mcp.catalog import (
    CatalogEntry,
    DisplayEntry,
    FileCatalogStore,
    MemoryCatalogStore,
    ToolCatalogCache,
    get_tool_catalog,
)
from mcpdeck.mcp.client import McpConfigClient
from mcpdeck.mcp.lifecycle import LifecycleController, ServerError, SubmitResult
from mcpdeck.mcp.merge import MergeResult, merge_fragment, parse_fragment_text
from mcpdeck.mcp.notices import Notice, NoticeLevel, NoticeLog
from mcpdeck.mcp.registry import LocalLaunch, RemoteLaunch, ServerEntry, ServerRegistry

__all__ = [
    "CatalogEntry",
    "DisplayEntry",
    "FileCatalogStore",
    "LifecycleController",
    "LocalLaunch",
    "McpConfigClient",
    "MemoryCatalogStore",
    "MergeResult",
    "Notice",
    "NoticeLevel",
    "NoticeLog",
    "RemoteLaunch",
    "ServerEntry",
    "ServerError",
    "ServerRegistry",
    "SubmitResult",
    "ToolCatalogCache",
    "get_tool_catalog",
    "merge_fragment",
    "parse_fragment_text",
]
