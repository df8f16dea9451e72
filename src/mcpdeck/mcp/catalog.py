"""Tool catalog cache: what we last knew about each server's tools.

Created: 2026-10-16

When a server isn't running (disabled, failed to start, host restarted)
the tool-listing endpoint says nothing about it. The catalog keeps the
last description/icon/sub-tools seen for every server so it can still be
shown. Entries are overwritten per server on refresh and never evicted.

Storage layout:
~/.mcpdeck/catalog.json   {"toolsCache": {name: {description, icon, subTools}}}

Writes are whole-file and last-writer-wins.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from mcpdeck.config import get_config_dir
from mcpdeck.mcp.registry import ServerRegistry
from mcpdeck.mcp.schemas import LiveTool

logger = logging.getLogger(__name__)

CACHE_KEY = "toolsCache"


@dataclass(frozen=True)
class SubTool:
    name: str
    description: str = ""


@dataclass
class CatalogEntry:
    name: str
    description: str = ""
    icon: str | None = None
    sub_tools: list[SubTool] = field(default_factory=list)

    @classmethod
    def from_live(cls, tool: LiveTool) -> CatalogEntry:
        return cls(
            name=tool.name,
            description=tool.description or "",
            icon=tool.icon,
            sub_tools=[
                SubTool(name=sub.name, description=sub.description or "")
                for sub in tool.tools or []
            ],
        )

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> CatalogEntry:
        return cls(
            name=name,
            description=data.get("description") or "",
            icon=data.get("icon"),
            sub_tools=[
                SubTool(name=sub["name"], description=sub.get("description") or "")
                for sub in data.get("subTools") or []
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "icon": self.icon,
            "subTools": [{"name": s.name, "description": s.description} for s in self.sub_tools],
        }


@dataclass
class DisplayEntry:
    """One row of the server list, whatever source it was built from."""

    name: str
    description: str = ""
    icon: str | None = None
    enabled: bool = False
    disabled: bool = False
    sub_tools: list[SubTool] = field(default_factory=list)
    source: str = "bare"  # live | cache | bare


# ---------------------------------------------------------------------------
# Storage backends
# ---------------------------------------------------------------------------
class CatalogStore(Protocol):
    """Keyed blob storage for the catalog."""

    def load(self) -> dict[str, Any]:
        """Return the stored catalog map, or {} if nothing is stored."""
        ...

    def save(self, data: dict[str, Any]) -> None:
        """Replace the stored catalog map."""
        ...


class MemoryCatalogStore:
    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = dict(data or {})

    def load(self) -> dict[str, Any]:
        return json.loads(json.dumps(self.data))

    def save(self, data: dict[str, Any]) -> None:
        self.data = json.loads(json.dumps(data))


class FileCatalogStore:
    """One JSON file holding the catalog under ``toolsCache``."""

    def __init__(self, path: Path | None = None):
        self.path = path or (get_config_dir() / "catalog.json")

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                blob = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Error loading tool catalog %s: %s", self.path, e)
            return {}
        data = blob.get(CACHE_KEY) if isinstance(blob, dict) else None
        return data if isinstance(data, dict) else {}

    def save(self, data: dict[str, Any]) -> None:
        """Write atomically (temp file + rename)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(".tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump({CACHE_KEY: data}, f, indent=2, ensure_ascii=False)
            temp_path.replace(self.path)
        except OSError as e:
            logger.error("Error saving tool catalog %s: %s", self.path, e)
            if temp_path.exists():
                temp_path.unlink()


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------
class ToolCatalogCache:
    """Per-server tool metadata, loaded once from its store and flushed on every refresh."""

    def __init__(self, store: CatalogStore | None = None):
        self._store: CatalogStore = store if store is not None else FileCatalogStore()
        self._entries: dict[str, CatalogEntry] = {}
        self._load()

    def _load(self) -> None:
        for name, data in self._store.load().items():
            try:
                self._entries[name] = CatalogEntry.from_dict(name, data)
            except (AttributeError, KeyError, TypeError) as e:
                logger.warning("Skipping corrupt catalog entry '%s': %s", name, e)
        logger.debug("Tool catalog loaded: %d servers", len(self._entries))

    def get(self, name: str) -> CatalogEntry | None:
        return self._entries.get(name)

    def names(self) -> list[str]:
        return list(self._entries)

    def refresh(self, live_tools: Iterable[LiveTool]) -> None:
        """Overwrite each live server's entry, then persist the whole catalog."""
        for tool in live_tools:
            self._entries[tool.name] = CatalogEntry.from_live(tool)
        self._store.save({name: entry.to_dict() for name, entry in self._entries.items()})

    def lookup_display_entry(
        self,
        registry: ServerRegistry,
        name: str,
        live_tools: Iterable[LiveTool] = (),
    ) -> DisplayEntry:
        """Best available description of server ``name``: live, then cached, then bare."""
        server = registry.get(name)
        disabled = server.disabled if server is not None else False

        live = next((t for t in live_tools if t.name == name), None)
        if live is not None:
            entry = CatalogEntry.from_live(live)
            return DisplayEntry(
                name=name,
                description=entry.description,
                icon=entry.icon,
                enabled=live.enabled and not disabled,
                disabled=disabled,
                sub_tools=entry.sub_tools,
                source="live",
            )

        cached = self._entries.get(name)
        if cached is not None:
            return DisplayEntry(
                name=name,
                description=cached.description,
                icon=cached.icon,
                disabled=disabled,
                sub_tools=list(cached.sub_tools),
                source="cache",
            )

        return DisplayEntry(name=name, disabled=disabled)

    def display_entries(
        self, registry: ServerRegistry, live_tools: Iterable[LiveTool] = ()
    ) -> list[DisplayEntry]:
        """One entry per configured server, in registry order."""
        live = list(live_tools)
        return [self.lookup_display_entry(registry, name, live) for name in registry.names()]


# Singleton
_catalog: ToolCatalogCache | None = None


def get_tool_catalog() -> ToolCatalogCache:
    """Get the process-wide catalog, loading it from disk on first use."""
    global _catalog
    if _catalog is None:
        _catalog = ToolCatalogCache()
    return _catalog


def reset_tool_catalog() -> None:
    global _catalog
    _catalog = None
