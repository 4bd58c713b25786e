"""Business logic services for toolchat-server.

This package contains service classes that implement core business logic
for message persistence, the tool registry, and the tool-augmented
conversation loop.
"""

from toolchat_server.services.conversation import (
    ConversationResult,
    ConversationService,
)
from toolchat_server.services.messages import MessageService
from toolchat_server.services.tool_registry import (
    ActiveTool,
    ServerRegistration,
    ServerSummary,
    ToolRegistryService,
)

__all__ = [
    "ActiveTool",
    "ConversationResult",
    "ConversationService",
    "MessageService",
    "ServerRegistration",
    "ServerSummary",
    "ToolRegistryService",
]
