# Wire schemas for the host application's tool and MCP config endpoints.
# Created: 2026-10-15

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SubToolInfo(BaseModel):
    name: str
    description: str | None = None
    enabled: bool = True


class LiveTool(BaseModel):
    """A server as currently reported by the tool-listing endpoint."""

    name: str
    description: str | None = None
    icon: str | None = None
    enabled: bool = False
    tools: list[SubToolInfo] | None = None


class ToolListResponse(BaseModel):
    success: bool = False
    tools: list[LiveTool] = []
    message: str | None = None


class ConfigReadResponse(BaseModel):
    success: bool = False
    config: dict[str, Any] | None = None
    message: str | None = None

    def servers(self) -> dict[str, Any]:
        """The server map, whichever key the endpoint used for it."""
        if not self.config:
            return {}
        for key in ("servers", "mcpServers"):
            value = self.config.get(key)
            if isinstance(value, dict) and value:
                return value
        return {}


class ServerErrorItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    server_name: str = Field(alias="serverName")
    error: str = ""

    @field_validator("error", mode="before")
    @classmethod
    def _error_as_text(cls, value: Any) -> str:
        # Hosts sometimes send the raw JSON-RPC error object
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False)


class ConfigWriteResponse(BaseModel):
    success: bool = False
    errors: list[ServerErrorItem] | None = None
    message: str | None = None


class StatusResponse(BaseModel):
    success: bool = False
    message: str | None = None
