# Endpoint client: HTTP access to the host app's tool and MCP config API.
# Created: 2026-10-15

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from mcpdeck.config import Settings, get_settings
from mcpdeck.errors import TransportError
from mcpdeck.mcp.schemas import (
    ConfigReadResponse,
    ConfigWriteResponse,
    StatusResponse,
    ToolListResponse,
)

logger = logging.getLogger(__name__)

_TOOLS_PATH = "/api/tools"
_RESTORE_TOOLS_PATH = "/api/tools/restore-defaults"
_MCP_CONFIG_PATH = "/api/config/mcpserver"

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class McpConfigClient:
    """Async client for the tool-listing and MCP server config endpoints.

    Every failure to get a usable answer (connection error, HTTP error
    status, non-JSON body, unexpected shape) is raised as TransportError.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        model: type[ResponseT],
        **kwargs: Any,
    ) -> ResponseT:
        try:
            async with httpx.AsyncClient(
                base_url=self.settings.api_base_url,
                timeout=self.settings.request_timeout,
                transport=self._transport,
            ) as client:
                resp = await client.request(method, path, **kwargs)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise TransportError(f"Request to {path} failed: {e}") from e
        except ValueError as e:
            logger.error("%s %s returned invalid JSON: %s", method, path, e)
            raise TransportError(f"Invalid response from {path}") from e

        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error("%s %s returned an unexpected payload: %s", method, path, e)
            raise TransportError(f"Unexpected response from {path}") from e

    async def list_tools(self) -> ToolListResponse:
        """Fetch the servers (and their tools) that are currently live."""
        return await self._request("GET", _TOOLS_PATH, ToolListResponse)

    async def read_config(self) -> ConfigReadResponse:
        return await self._request("GET", _MCP_CONFIG_PATH, ConfigReadResponse)

    async def write_config(
        self, payload: dict[str, Any], force: bool = False
    ) -> ConfigWriteResponse:
        """Submit the full server config.

        Args:
            payload: ``{"servers": {name: {...}}}``.
            force: Ask the host to restart servers that are already running.
        """
        params = {"force": "1"} if force else None
        return await self._request(
            "POST", _MCP_CONFIG_PATH, ConfigWriteResponse, json=payload, params=params
        )

    async def restore_default_tools(self) -> StatusResponse:
        return await self._request("POST", _RESTORE_TOOLS_PATH, StatusResponse)
