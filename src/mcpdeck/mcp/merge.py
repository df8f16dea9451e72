# Config merger: validate a config fragment and union it into a registry.
# Created: 2026-10-14

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from mcpdeck.config import get_settings
from mcpdeck.errors import ConfigSyntaxError, ConfigValidationError
from mcpdeck.mcp.registry import ServerRegistry

logger = logging.getLogger(__name__)

# Fragments may wrap their servers in one of these keys
WRAPPER_KEYS = ("servers", "mcpServers")


@dataclass
class MergeResult:
    registry: ServerRegistry
    accepted: list[str] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)


def is_launchable(data: Mapping[str, Any]) -> bool:
    """A server needs ``command`` plus an ``args`` list, or a ``url``."""
    has_local = bool(data.get("command")) and isinstance(data.get("args"), list)
    return has_local or bool(data.get("url"))


def parse_fragment_text(text: str) -> dict[str, Any]:
    """Parse user-edited config text.

    Text that doesn't open with ``{`` is wrapped in braces first, so
    ``"name": {...}`` pastes work.
    """
    body = text.strip()
    if not body.startswith("{"):
        body = "{" + body + "}"
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as e:
        raise ConfigSyntaxError(f"Invalid JSON: {e.msg} (line {e.lineno})") from e
    if not isinstance(parsed, dict):
        raise ConfigSyntaxError("Config must be a JSON object")
    return parsed


def _is_wrapper(key: str, value: Any) -> bool:
    return key in WRAPPER_KEYS and isinstance(value, Mapping) and not is_launchable(value)


def normalize_fragment(fragment: Mapping[str, Any]) -> dict[str, Any]:
    """Flatten bare and wrapped fragments to one ``{name: config}`` map.

    Wrapped servers come first, then bare top-level entries, each in
    their original order.
    """
    if not isinstance(fragment, Mapping):
        raise ConfigSyntaxError("Config must be a JSON object")

    wrapped: dict[str, Any] = {}
    bare: dict[str, Any] = {}
    for key, value in fragment.items():
        if _is_wrapper(key, value):
            wrapped.update(value)
        else:
            bare[key] = value
    return {**wrapped, **bare}


def validate_entry(name: str, data: Any) -> Mapping[str, Any]:
    """Return ``data`` if it describes a launchable server, else raise."""
    if not isinstance(data, Mapping):
        raise ConfigValidationError(name, "config is not an object")
    if not is_launchable(data):
        raise ConfigValidationError(name)
    return data


def merge_fragment(
    registry: ServerRegistry,
    fragment: Mapping[str, Any],
    *,
    default_transport: str | None = None,
) -> MergeResult:
    """Merge ``fragment`` into a copy of ``registry``.

    Invalid entries are dropped and listed in ``MergeResult.rejected``; the
    merge itself still succeeds. Accepted entries are unioned field by field,
    get the default transport when they have a url but no transport, and
    default to enabled.

    Raises:
        ConfigSyntaxError: ``fragment`` is not a mapping.
    """
    if default_transport is None:
        default_transport = get_settings().default_transport

    merged = registry.copy()
    result = MergeResult(registry=merged)

    for name, data in normalize_fragment(fragment).items():
        try:
            candidate = validate_entry(name, data)
        except ConfigValidationError as e:
            logger.warning("%s, dropped", e)
            result.rejected.append(name)
            continue

        entry = merged.upsert(name, candidate)
        if entry.url and not entry.transport:
            entry.transport = default_transport
        result.accepted.append(name)

    logger.debug(
        "Merged MCP config: %d accepted, %d rejected",
        len(result.accepted),
        len(result.rejected),
    )
    return result
