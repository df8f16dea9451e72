# Path resolution for server configs before they are submitted.
# Created: 2026-10-15

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

_RELATIVE_PREFIXES = ("./", "../", ".\\", "..\\")


class PathResolver(Protocol):
    """Turns relative filesystem paths in a raw JSON config into absolute ones."""

    def resolve(self, raw: str) -> str:
        """Return ``raw`` with its relative paths made absolute."""
        ...


class PassthroughResolver:
    """Leaves the config untouched."""

    def resolve(self, raw: str) -> str:
        return raw


class ScriptsDirResolver:
    """Resolves ``./`` and ``../`` paths in command, args and cwd against a base dir."""

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def _abs(self, value: Any) -> Any:
        if isinstance(value, str) and value.startswith(_RELATIVE_PREFIXES):
            return str((self.base_dir / value).resolve())
        return value

    def _resolve_server(self, server: dict[str, Any]) -> None:
        if "command" in server:
            server["command"] = self._abs(server["command"])
        if isinstance(server.get("args"), list):
            server["args"] = [self._abs(a) for a in server["args"]]
        if "cwd" in server:
            server["cwd"] = self._abs(server["cwd"])

    def resolve(self, raw: str) -> str:
        try:
            config = json.loads(raw)
        except json.JSONDecodeError:
            logger.debug("Config is not JSON, leaving paths as-is")
            return raw
        if not isinstance(config, dict):
            return raw

        servers = config.get("servers")
        if not isinstance(servers, dict):
            servers = config
        for server in servers.values():
            if isinstance(server, dict):
                self._resolve_server(server)
        return json.dumps(config)
