"""Lifecycle controller: push the server registry to the host and reconcile.

Created: 2026-10-16

The host application owns the running MCP servers. We send it the whole
server map; it answers with overall success plus the servers it could not
start. Those servers are marked ``disabled`` (administrative failure),
never removed.

Every operation is one awaited round trip (two for a toggle that needs a
compensating submit). Concurrent operations on one controller are not
coordinated.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from mcpdeck.config import Settings, get_settings
from mcpdeck.errors import ConfigSyntaxError, SubmissionError, TransportError
from mcpdeck.mcp.catalog import DisplayEntry, ToolCatalogCache
from mcpdeck.mcp.client import McpConfigClient
from mcpdeck.mcp.merge import merge_fragment, parse_fragment_text
from mcpdeck.mcp.notices import Notice, NoticeLevel, NoticeLog, Notifier
from mcpdeck.mcp.paths import PassthroughResolver, PathResolver
from mcpdeck.mcp.registry import ServerRegistry
from mcpdeck.mcp.schemas import LiveTool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerError:
    server_name: str
    error: str

    def to_exception(self) -> SubmissionError:
        return SubmissionError(self.server_name, self.error)


@dataclass
class SubmitResult:
    success: bool
    errors: list[ServerError] = field(default_factory=list)
    message: str | None = None
    # Fragment entries dropped by validation (``add`` only)
    rejected: list[str] = field(default_factory=list)

    def failed_names(self) -> list[str]:
        return [e.server_name for e in self.errors]


class LifecycleController:
    """Owns a ServerRegistry and keeps it in step with the host's view of it."""

    def __init__(
        self,
        client: McpConfigClient,
        registry: ServerRegistry | None = None,
        *,
        catalog: ToolCatalogCache | None = None,
        notifier: Notifier | None = None,
        path_resolver: PathResolver | None = None,
        settings: Settings | None = None,
    ):
        self.client = client
        self.registry = registry if registry is not None else ServerRegistry()
        self.catalog = catalog
        self.notify: Notifier = notifier if notifier is not None else NoticeLog()
        self.path_resolver: PathResolver = path_resolver or PassthroughResolver()
        self.settings = settings or get_settings()
        self.live_tools: list[LiveTool] = []

    # =========================================================================
    # Helpers
    # =========================================================================

    def _payload(self, registry: ServerRegistry) -> dict[str, Any]:
        servers = registry.to_servers()
        for config in servers.values():
            if config.get("url") and not config.get("transport"):
                config["transport"] = self.settings.default_transport
        raw = json.dumps({"servers": servers})
        return json.loads(self.path_resolver.resolve(raw))

    async def _send(self, registry: ServerRegistry, force: bool = False) -> SubmitResult:
        """Submit ``registry``. Raises TransportError."""
        resp = await self.client.write_config(self._payload(registry), force=force)
        return SubmitResult(
            success=resp.success,
            errors=[ServerError(e.server_name, e.error) for e in resp.errors or []],
            message=resp.message,
        )

    @staticmethod
    def _apply_result(registry: ServerRegistry, result: SubmitResult) -> None:
        """Mark failed servers disabled; a successful response clears the flag for the rest."""
        failed = set(result.failed_names())
        for name in failed:
            if name not in registry:
                logger.warning("Host reported an error for unknown MCP server '%s'", name)
        for entry in registry:
            if entry.name in failed:
                entry.disabled = True
            elif result.success:
                entry.disabled = False

    @staticmethod
    def _reject(registry: ServerRegistry, names: list[str]) -> None:
        for name in names:
            entry = registry.get(name)
            if entry is not None:
                entry.enabled = False
                entry.disabled = True

    def _report(self, result: SubmitResult) -> None:
        for err in result.errors:
            self.notify(
                Notice(
                    level=NoticeLevel.ERROR,
                    message=str(err.to_exception()),
                    server_name=err.server_name,
                    closable=True,
                )
            )
        if result.errors:
            return
        if result.success:
            self.notify(Notice(level=NoticeLevel.SUCCESS, message="MCP config saved"))
        else:
            self.notify(
                Notice(
                    level=NoticeLevel.ERROR,
                    message=result.message or "Failed to update MCP config",
                )
            )

    def _transport_failed(self, action: str, error: Exception) -> None:
        logger.error("%s: %s", action, error)
        self.notify(Notice(level=NoticeLevel.ERROR, message=f"{action}: {error}"))

    # =========================================================================
    # Operations
    # =========================================================================

    async def load(self) -> bool:
        """Replace the registry with the host's stored config. Returns True on success."""
        try:
            resp = await self.client.read_config()
        except TransportError as e:
            self._transport_failed("Failed to load MCP config", e)
            return False
        if not resp.success:
            self.notify(
                Notice(
                    level=NoticeLevel.ERROR,
                    message=resp.message or "Failed to load MCP config",
                )
            )
            return False
        self.registry.replace_with(ServerRegistry.from_servers(resp.servers()))
        logger.info("Loaded %d MCP servers", len(self.registry))
        return True

    async def submit(self, force: bool = False) -> SubmitResult:
        """Send the whole registry to the host and reconcile per-server failures.

        Args:
            force: Ask the host to restart servers that are already running.
        """
        try:
            result = await self._send(self.registry, force=force)
        except TransportError as e:
            self._transport_failed("Failed to update MCP config", e)
            return SubmitResult(success=False, message=str(e))

        self._apply_result(self.registry, result)
        self._report(result)
        return result

    async def reload(self) -> SubmitResult:
        """Resubmit the registry, restarting servers that are already running."""
        return await self.submit(force=True)

    async def toggle(self, name: str) -> SubmitResult | None:
        """Flip ``enabled`` for one server and submit. Returns None if unknown.

        If the host rejects this server, a single compensating submit
        switches every rejected server off. Its answer is not checked.
        Otherwise rejected servers are only marked ``disabled``; their
        ``enabled`` stays what the host last stored.
        """
        if name not in self.registry:
            logger.warning("Cannot toggle unknown MCP server '%s'", name)
            return None

        working = self.registry.copy()
        target = working[name]
        target.enabled = not target.enabled

        try:
            result = await self._send(working)
        except TransportError as e:
            self._transport_failed(f"Failed to toggle '{name}'", e)
            return SubmitResult(success=False, message=str(e))

        failed = result.failed_names()
        compensated = name in failed
        if compensated:
            self._reject(working, failed)
            try:
                await self._send(working)
            except TransportError as e:
                logger.warning("Compensating submit after toggling '%s' failed: %s", name, e)

        if result.success:
            self._apply_result(working, result)
            self.registry.replace_with(working)
            await self.refresh_catalog()
        elif compensated:
            self._reject(self.registry, failed)
        else:
            # Keep the old intent, but nothing the host rejected stays active
            self._apply_result(self.registry, result)

        self._report(result)
        return result

    async def add(self, fragment: Mapping[str, Any] | str) -> SubmitResult:
        """Merge a config fragment (object or edited text) and submit it.

        The registry only changes if the host accepts the submission.
        """
        if isinstance(fragment, str):
            try:
                fragment = parse_fragment_text(fragment)
            except ConfigSyntaxError as e:
                self.notify(Notice(level=NoticeLevel.ERROR, message=str(e)))
                return SubmitResult(success=False, message=str(e))

        merged = merge_fragment(
            self.registry, fragment, default_transport=self.settings.default_transport
        )
        try:
            result = await self._send(merged.registry)
        except TransportError as e:
            self._transport_failed("Failed to save MCP config", e)
            return SubmitResult(success=False, message=str(e), rejected=merged.rejected)

        result.rejected = merged.rejected
        if result.success:
            self._apply_result(merged.registry, result)
            self.registry.replace_with(merged.registry)
            await self.refresh_catalog()
        else:
            self._apply_result(self.registry, result)
        self._report(result)
        return result

    async def restore_defaults(self) -> bool:
        """Ask the host to restore its built-in tool set."""
        try:
            resp = await self.client.restore_default_tools()
        except TransportError as e:
            self._transport_failed("Failed to restore default tools", e)
            return False
        if not resp.success:
            self.notify(
                Notice(
                    level=NoticeLevel.ERROR,
                    message=resp.message or "Failed to restore default tools",
                )
            )
            return False
        self.notify(Notice(level=NoticeLevel.SUCCESS, message="Default tools restored"))
        await self.refresh_catalog()
        return True

    async def refresh_catalog(self) -> list[LiveTool]:
        """Fetch live tools and fold them into the catalog cache."""
        if self.catalog is None:
            return []
        try:
            resp = await self.client.list_tools()
        except TransportError as e:
            self._transport_failed("Failed to fetch tools", e)
            return []
        if not resp.success:
            self.notify(
                Notice(level=NoticeLevel.ERROR, message=resp.message or "Failed to fetch tools")
            )
            return []

        self.live_tools = list(resp.tools)
        self.catalog.refresh(self.live_tools)
        return self.live_tools

    def display_entries(self) -> list[DisplayEntry]:
        """Rows for the server list, in registry order."""
        if self.catalog is None:
            return []
        return self.catalog.display_entries(self.registry, self.live_tools)
