"""Tool server registration and lookup service.

This module provides the ToolRegistryService class which handles:
- Connecting a new tool server and storing its discovered tools
- Listing a user's servers with tool counts
- Listing the tools of one server
- Resolving the active, enabled tools offered to the model
"""

import logging
from dataclasses import dataclass

from toolchat_server.errors import (
    DuplicateToolServerError,
    StoreError,
    ToolServerConnectionError,
    ToolServerNotFoundError,
    UniqueConstraintError,
)
from toolchat_server.gemini.types import ToolSchema
from toolchat_server.mcp import DiscoveredTool, ToolServerClient
from toolchat_server.store import (
    TOOL_SERVERS_TABLE,
    TOOLS_TABLE,
    RecordStore,
    Tool,
    ToolServer,
    utc_timestamp,
)

logger = logging.getLogger(__name__)


@dataclass
class ActiveTool:
    """An enabled tool together with the active server that hosts it."""

    tool: Tool
    server: ToolServer


@dataclass
class ServerRegistration:
    """Result of connecting a tool server."""

    server: ToolServer
    tools: list[DiscoveredTool]


@dataclass
class ServerSummary:
    """A registered server and how many tools it has."""

    server: ToolServer
    tool_count: int


class ToolRegistryService:
    """Manages the tool servers and tools registered by each user."""

    def __init__(self, store: RecordStore, tool_client: ToolServerClient | None = None):
        """Initialize the ToolRegistryService.

        Args:
            store: Record store holding servers and tools
            tool_client: Client used for discovery when connecting servers
        """
        self.store = store
        self.tool_client = tool_client

    def list_active_tools_for_user(self, owner: str) -> list[ActiveTool]:
        """Resolve the tools the model may call for this user.

        Only tools that are enabled and whose server is active are returned,
        servers in id order and tools in id order within each server.

        Raises:
            StoreError: If the store cannot be read
        """
        active: list[ActiveTool] = []

        server_rows = self.store.query(
            TOOL_SERVERS_TABLE,
            filters={"owner": owner, "is_active": True},
            order_by="id",
        )
        for server_row in server_rows:
            server = ToolServer.from_row(server_row)
            tool_rows = self.store.query(
                TOOLS_TABLE,
                filters={"server_id": server.id, "is_enabled": True},
                order_by="id",
            )
            active.extend(
                ActiveTool(tool=Tool.from_row(row), server=server) for row in tool_rows
            )

        logger.debug(f"Resolved {len(active)} active tools for {owner}")
        return active

    @staticmethod
    def build_tool_schemas(active_tools: list[ActiveTool]) -> list[ToolSchema]:
        """Build the tool schemas advertised to the model."""
        return [
            ToolSchema(
                name=entry.tool.name,
                description=entry.tool.description,
                input_schema=entry.tool.input_schema,
            )
            for entry in active_tools
        ]

    async def connect_server(
        self,
        owner: str,
        name: str,
        base_url: str,
        api_key: str | None = None,
        description: str | None = None,
    ) -> ServerRegistration:
        """Register a tool server after discovering its tools.

        Args:
            owner: The user registering the server
            name: Server name, unique per user
            base_url: Base URL of the tool server
            api_key: Optional bearer credential for the server
            description: Optional description

        Returns:
            The stored server and the tools it advertised

        Raises:
            DuplicateToolServerError: If the user already has a server with this name
            ToolServerConnectionError: If tool discovery fails
            StoreError: If the server row cannot be written
        """
        if self.store.count(TOOL_SERVERS_TABLE, filters={"owner": owner, "name": name}):
            raise DuplicateToolServerError(name)

        if self.tool_client is None:
            raise ToolServerConnectionError(base_url, "Tool server client not initialized")

        discovery = await self.tool_client.discover_tools(base_url, api_key)
        if not discovery.success:
            raise ToolServerConnectionError(base_url, discovery.error or "unknown error")

        server = ToolServer(
            owner=owner,
            name=name,
            base_url=base_url,
            api_key=api_key or None,
            description=description or None,
            is_active=True,
            created_at=utc_timestamp(),
        )
        try:
            row = self.store.insert(TOOL_SERVERS_TABLE, server.to_row())
        except UniqueConstraintError as e:
            # Lost a race with a concurrent registration of the same name
            raise DuplicateToolServerError(name) from e
        server = ToolServer.from_row(row)
        logger.info(f"Connected tool server {server.id} ({name}) for {owner}")

        now = utc_timestamp()
        try:
            for discovered in discovery.tools:
                tool = Tool(
                    server_id=server.id or 0,
                    name=discovered.tool_name,
                    description=discovered.tool_description,
                    input_schema=discovered.input_schema,
                    is_enabled=True,
                    created_at=now,
                )
                self.store.insert(TOOLS_TABLE, tool.to_row())
        except StoreError as e:
            logger.error(f"Failed to store tools for server {server.id}: {e}")

        return ServerRegistration(server=server, tools=discovery.tools)

    def list_servers(self, owner: str) -> list[ServerSummary]:
        """List the user's servers, newest first, with their tool counts."""
        rows = self.store.query(
            TOOL_SERVERS_TABLE,
            filters={"owner": owner},
            order_by=("created_at", "id"),
            descending=True,
        )
        summaries = []
        for row in rows:
            server = ToolServer.from_row(row)
            tool_count = self.store.count(TOOLS_TABLE, filters={"server_id": server.id})
            summaries.append(ServerSummary(server=server, tool_count=tool_count))
        return summaries

    def get_server(self, owner: str, server_id: int) -> ToolServer:
        """Get one of the user's servers.

        Raises:
            ToolServerNotFoundError: If the server doesn't exist or isn't the user's
        """
        rows = self.store.query(
            TOOL_SERVERS_TABLE, filters={"id": server_id, "owner": owner}, limit=1
        )
        if not rows:
            raise ToolServerNotFoundError(server_id)
        return ToolServer.from_row(rows[0])

    def list_tools(self, owner: str, server_id: int) -> tuple[ToolServer, list[Tool]]:
        """Get a server and all of its tools ordered by name.

        Raises:
            ToolServerNotFoundError: If the server doesn't exist or isn't the user's
        """
        server = self.get_server(owner, server_id)
        rows = self.store.query(
            TOOLS_TABLE, filters={"server_id": server_id}, order_by="name"
        )
        return server, [Tool.from_row(row) for row in rows]
