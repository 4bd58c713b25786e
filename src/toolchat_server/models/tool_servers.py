"""Pydantic models for tool server API requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, HttpUrl


class ConnectServerRequest(BaseModel):
    """Request body for connecting a tool server."""

    name: str = Field(..., min_length=1, max_length=255, description="Server name")
    base_url: HttpUrl = Field(..., description="Base URL of the tool server")
    api_key: str | None = Field(None, description="Optional bearer credential")
    description: str | None = Field(None, description="Optional description")


class ToolServerResponse(BaseModel):
    """A registered tool server. The API key is never returned."""

    id: int
    name: str
    base_url: str
    description: str | None = None
    is_active: bool
    created_at: str

    model_config = ConfigDict(from_attributes=True)


class DiscoveredToolResponse(BaseModel):
    """A tool advertised by a server at connection time."""

    tool_name: str
    tool_description: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ConnectServerResponse(BaseModel):
    """Response for a successful server connection."""

    server: ToolServerResponse
    tools_discovered: int
    tools: list[DiscoveredToolResponse] = Field(default_factory=list)


class ToolServerListItem(ToolServerResponse):
    """A tool server in a listing, with its tool count."""

    tool_count: int = 0


class ToolServerListResponse(BaseModel):
    """Response for listing tool servers."""

    servers: list[ToolServerListItem] = Field(default_factory=list)


class ToolResponse(BaseModel):
    """A stored tool."""

    id: int
    server_id: int
    name: str
    description: str | None = None
    input_schema: dict[str, Any] | None = None
    is_enabled: bool
    created_at: str

    model_config = ConfigDict(from_attributes=True)


class ToolListResponse(BaseModel):
    """A server and its tools."""

    server: ToolServerResponse
    tools: list[ToolResponse] = Field(default_factory=list)
