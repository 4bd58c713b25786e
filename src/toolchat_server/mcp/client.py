"""Async HTTP client for external tool servers.

This module talks to tool servers that expose ``GET /tools`` for discovery
and ``POST /tools/{name}`` for execution. Every failure, whether an HTTP
status, a malformed body, a timeout or a transport error, is returned as a
failed result rather than raised.
"""

import logging

import httpx

from toolchat_server.mcp.types import (
    DiscoveredTool,
    DiscoveryResult,
    ToolCall,
    ToolResult,
)
from toolchat_server.store.records import Tool, ToolServer

logger = logging.getLogger(__name__)


def _headers(api_key: str | None) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


class ToolServerClient:
    """Async client for discovering and invoking tools on tool servers.

    One instance is shared by all requests; it owns a single httpx.AsyncClient
    whose timeout bounds every outbound call.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the tool server client.

        Args:
            timeout: Timeout in seconds for each request
            transport: Optional httpx transport (used by tests)
        """
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        logger.info(f"ToolServerClient initialized with timeout: {timeout}s")

    async def discover_tools(
        self, server_url: str, api_key: str | None = None
    ) -> DiscoveryResult:
        """List the tools a server exposes.

        Args:
            server_url: Base URL of the tool server
            api_key: Optional bearer credential

        Returns:
            DiscoveryResult: The tools on success, or a diagnostic on failure.
            A success response without a ``tools`` list yields no tools.
        """
        url = f"{server_url.rstrip('/')}/tools"

        try:
            response = await self._client.get(url, headers=_headers(api_key))
        except httpx.TimeoutException:
            logger.warning(f"Tool discovery timed out for {server_url}")
            return DiscoveryResult.fail("timeout")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Error discovering tools at {server_url}: {e}")
            return DiscoveryResult.fail(str(e) or type(e).__name__)

        if not response.is_success:
            logger.warning(
                f"Tool discovery at {server_url} returned {response.status_code}"
            )
            return DiscoveryResult.fail(
                f"Failed to discover tools: {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Tool discovery at {server_url} returned invalid JSON: {e}")
            return DiscoveryResult.fail(f"Invalid JSON in tool listing: {e}")

        listing = data.get("tools") if isinstance(data, dict) else None
        if not isinstance(listing, list):
            listing = []

        tools = []
        for entry in listing:
            tool = DiscoveredTool.from_listing(entry)
            if tool is None:
                logger.warning(f"Skipping malformed tool entry from {server_url}")
                continue
            tools.append(tool)

        logger.info(f"Discovered {len(tools)} tools at {server_url}")
        return DiscoveryResult.ok(tools)

    async def invoke_tool(
        self, server: ToolServer, tool: Tool, call: ToolCall
    ) -> ToolResult:
        """Invoke one tool on its server.

        Args:
            server: The server the tool belongs to
            tool: The tool to run
            call: The call arguments from the model

        Returns:
            ToolResult: The decoded JSON result, or the failure reason
        """
        url = f"{server.base_url.rstrip('/')}/tools/{tool.name}"

        try:
            response = await self._client.post(
                url,
                headers=_headers(server.api_key),
                json={"arguments": call.arguments},
            )
        except httpx.TimeoutException:
            logger.warning(f"Tool {tool.name} timed out")
            return ToolResult.fail("timeout")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Error invoking tool {tool.name}: {e}")
            return ToolResult.fail(str(e) or type(e).__name__)

        if not response.is_success:
            logger.error(
                f"Tool invocation failed for {tool.name}: "
                f"{response.status_code} {response.text}"
            )
            return ToolResult.fail(
                f"Tool execution failed: {response.status_code} {response.reason_phrase}"
            )

        try:
            result = response.json()
        except ValueError as e:
            logger.error(f"Tool {tool.name} returned invalid JSON: {e}")
            return ToolResult.fail(f"Invalid JSON in tool response: {e}")

        logger.debug(f"Tool {tool.name} completed successfully")
        return ToolResult.ok(result)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
        logger.debug("ToolServerClient closed")
