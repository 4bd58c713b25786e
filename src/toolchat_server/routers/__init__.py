"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
Each router module defines endpoints for a specific domain (health, chat,
messages, tool servers).
"""

from toolchat_server.routers import chat, health, messages, tool_servers

__all__ = [
    "chat",
    "health",
    "messages",
    "tool_servers",
]
