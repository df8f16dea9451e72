# Server registry: in-memory map of configured MCP servers.
# Created: 2026-10-14

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

# Keys with a dedicated ServerEntry attribute; everything else goes to ``extra``
_ENTRY_FIELDS = (
    "command",
    "args",
    "url",
    "transport",
    "env",
    "headers",
    "cwd",
    "enabled",
    "disabled",
)


@dataclass(frozen=True)
class LocalLaunch:
    command: str
    args: list[str]


@dataclass(frozen=True)
class RemoteLaunch:
    url: str
    transport: str | None


@dataclass
class ServerEntry:
    """One configured MCP server.

    ``enabled`` is what the user asked for. ``disabled`` is set when the
    config endpoint failed to start the server and is never set by the user.
    """

    name: str
    command: str | None = None
    args: list[str] | None = None
    url: str | None = None
    transport: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    cwd: str | None = None
    enabled: bool = True
    disabled: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> ServerEntry:
        entry = cls(name=name)
        entry.update(data)
        return entry

    def update(self, data: Mapping[str, Any]) -> None:
        """Overwrite the fields present in ``data``; keep the rest."""
        for key, value in data.items():
            if key in _ENTRY_FIELDS:
                if key in ("env", "headers") and value is None:
                    value = {}
                setattr(self, key, value)
            else:
                self.extra[key] = value

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the endpoint's wire format (no ``name``, no empty fields)."""
        data: dict[str, Any] = dict(self.extra)
        for key in _ENTRY_FIELDS:
            value = getattr(self, key)
            if value is None or (key in ("env", "headers") and not value):
                continue
            data[key] = copy.deepcopy(value)
        return data

    @property
    def launch(self) -> LocalLaunch | RemoteLaunch | None:
        if self.command and self.args is not None:
            return LocalLaunch(command=self.command, args=list(self.args))
        if self.url:
            return RemoteLaunch(url=self.url, transport=self.transport)
        return None

    @property
    def is_active(self) -> bool:
        """Enabled by the user and not administratively disabled."""
        return self.enabled and not self.disabled


class ServerRegistry:
    """Name-keyed MCP servers, kept in insertion order.

    Iteration order is display order. Entries are never removed.
    """

    def __init__(self, entries: Mapping[str, ServerEntry] | None = None) -> None:
        self._entries: dict[str, ServerEntry] = dict(entries or {})

    @classmethod
    def from_servers(cls, servers: Mapping[str, Mapping[str, Any]] | None) -> ServerRegistry:
        """Build a registry from a ``{name: {...}}`` wire map."""
        registry = cls()
        for name, data in (servers or {}).items():
            if not isinstance(data, Mapping):
                logger.warning("Ignoring MCP server '%s': config is not an object", name)
                continue
            registry.upsert(name, data)
        return registry

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __getitem__(self, name: str) -> ServerEntry:
        return self._entries[name]

    def __iter__(self) -> Iterator[ServerEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: str) -> ServerEntry | None:
        return self._entries.get(name)

    def names(self) -> list[str]:
        return list(self._entries)

    def upsert(self, name: str, data: Mapping[str, Any]) -> ServerEntry:
        """Field-level union of ``data`` into the entry ``name``, creating it if needed.

        An existing entry keeps its position.
        """
        entry = self._entries.get(name)
        if entry is None:
            entry = ServerEntry.from_dict(name, data)
            self._entries[name] = entry
        else:
            entry.update(data)
        return entry

    def copy(self) -> ServerRegistry:
        """Deep copy; edits to the copy never touch this registry."""
        return ServerRegistry(copy.deepcopy(self._entries))

    def replace_with(self, other: ServerRegistry) -> None:
        """Adopt ``other``'s entries wholesale."""
        self._entries = copy.deepcopy(other._entries)

    def to_servers(self) -> dict[str, dict[str, Any]]:
        """The ``{name: {...}}`` wire map, in registry order."""
        return {name: entry.to_dict() for name, entry in self._entries.items()}
