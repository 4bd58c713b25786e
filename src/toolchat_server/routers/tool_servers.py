"""Tool server endpoints.

This module provides REST API endpoints for:
- Connecting a tool server (discovering and storing its tools)
- Listing connected tool servers
- Listing the tools of one server
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from toolchat_server.dependencies import get_owner, get_tool_registry
from toolchat_server.errors import (
    DuplicateToolServerError,
    StoreError,
    ToolServerConnectionError,
    ToolServerNotFoundError,
)
from toolchat_server.models.errors import api_error
from toolchat_server.models.tool_servers import (
    ConnectServerRequest,
    ConnectServerResponse,
    DiscoveredToolResponse,
    ToolListResponse,
    ToolResponse,
    ToolServerListItem,
    ToolServerListResponse,
    ToolServerResponse,
)
from toolchat_server.services import ToolRegistryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tool-servers", tags=["tool-servers"])


@router.post(
    "",
    response_model=ConnectServerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Connect a tool server",
)
async def connect_server(
    request: ConnectServerRequest,
    owner: Annotated[str, Depends(get_owner)],
    registry: Annotated[ToolRegistryService, Depends(get_tool_registry)],
) -> ConnectServerResponse:
    """Connect a tool server and store the tools it advertises.

    Raises:
        HTTPException: 400 if the name is taken or the server can't be reached
        HTTPException: 500 if the server can't be saved
    """
    try:
        registration = await registry.connect_server(
            owner=owner,
            name=request.name,
            base_url=str(request.base_url).rstrip("/"),
            api_key=request.api_key,
            description=request.description,
        )
    except (DuplicateToolServerError, ToolServerConnectionError) as e:
        raise api_error(status.HTTP_400_BAD_REQUEST, e.code, e.message)
    except StoreError as e:
        logger.error(f"Failed to save tool server for {owner}: {e}")
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR, e.code, "Failed to save tool server"
        )

    return ConnectServerResponse(
        server=ToolServerResponse.model_validate(registration.server),
        tools_discovered=len(registration.tools),
        tools=[DiscoveredToolResponse.model_validate(t) for t in registration.tools],
    )


@router.get("", response_model=ToolServerListResponse, summary="List tool servers")
async def list_servers(
    owner: Annotated[str, Depends(get_owner)],
    registry: Annotated[ToolRegistryService, Depends(get_tool_registry)],
) -> ToolServerListResponse:
    """List the user's tool servers, newest first, with their tool counts."""
    try:
        summaries = registry.list_servers(owner)
    except StoreError as e:
        logger.error(f"Failed to fetch tool servers for {owner}: {e}")
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR, e.code, "Failed to fetch tool servers"
        )

    return ToolServerListResponse(
        servers=[
            ToolServerListItem(
                **ToolServerResponse.model_validate(summary.server).model_dump(),
                tool_count=summary.tool_count,
            )
            for summary in summaries
        ]
    )


@router.get(
    "/{server_id}/tools",
    response_model=ToolListResponse,
    summary="List the tools of a server",
)
async def list_tools(
    server_id: int,
    owner: Annotated[str, Depends(get_owner)],
    registry: Annotated[ToolRegistryService, Depends(get_tool_registry)],
) -> ToolListResponse:
    """List all tools of one of the user's servers, ordered by name."""
    try:
        server, tools = registry.list_tools(owner, server_id)
    except ToolServerNotFoundError as e:
        raise api_error(
            status.HTTP_404_NOT_FOUND, e.code, e.message, {"server_id": server_id}
        )
    except StoreError as e:
        logger.error(f"Failed to fetch tools for server {server_id}: {e}")
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR, e.code, "Failed to fetch tools"
        )

    return ToolListResponse(
        server=ToolServerResponse.model_validate(server),
        tools=[ToolResponse.model_validate(tool) for tool in tools],
    )
