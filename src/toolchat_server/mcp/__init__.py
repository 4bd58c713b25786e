"""Tool server discovery and invocation layer.

This package provides the async HTTP client for external tool servers and
the tagged result types it returns.
"""

from toolchat_server.mcp.client import ToolServerClient
from toolchat_server.mcp.types import (
    DiscoveredTool,
    DiscoveryResult,
    ToolCall,
    ToolResult,
)

__all__ = [
    "ToolServerClient",
    "DiscoveredTool",
    "DiscoveryResult",
    "ToolCall",
    "ToolResult",
]
