"""Typed exceptions raised by the store, the clients and the services.

Routers catch these and translate them into HTTP responses. Each error
carries a stable numeric ``code`` that is returned to API callers so they
can tell failure sites apart.
"""


class ToolchatError(Exception):
    """Base exception for all toolchat-server errors."""

    code: int = 7000

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# --- Record store ---


class StoreError(ToolchatError):
    """The record store failed to read or write."""


class UniqueConstraintError(StoreError):
    """An insert violated a unique constraint of a table."""

    def __init__(self, table: str, columns: tuple[str, ...]) -> None:
        super().__init__(
            f"Duplicate value for unique key ({', '.join(columns)}) in '{table}'"
        )
        self.table = table
        self.columns = columns


# --- Model provider ---


class ModelResponseError(ToolchatError):
    """The model provider was unreachable or returned no usable reply."""


# --- Tool registry ---


class DuplicateToolServerError(ToolchatError):
    """A tool server with this name is already registered for the owner."""

    code = 4001

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool server '{name}' is already connected")
        self.name = name


class ToolServerConnectionError(ToolchatError):
    """Tool discovery against a new server failed."""

    code = 4002

    def __init__(self, base_url: str, reason: str) -> None:
        super().__init__(f"Failed to connect to tool server: {reason}")
        self.base_url = base_url
        self.reason = reason


class ToolServerNotFoundError(ToolchatError):
    """The tool server does not exist or belongs to another owner."""

    code = 4040

    def __init__(self, server_id: int) -> None:
        super().__init__(f"Tool server {server_id} not found")
        self.server_id = server_id


class MessageNotFoundError(ToolchatError):
    """The message does not exist or belongs to another owner."""

    code = 4041

    def __init__(self, message_id: int) -> None:
        super().__init__(f"Message {message_id} not found")
        self.message_id = message_id


# --- Conversation run ---


class ConversationError(ToolchatError):
    """An orchestration run was aborted.

    Attributes:
        user_message_saved: True when the user's message had already been
            persisted before the failing step.
    """

    user_message_saved: bool = True


class UserMessagePersistError(ConversationError):
    """Saving the incoming user message failed; nothing was persisted."""

    code = 7001
    user_message_saved = False


class ModelCallError(ConversationError):
    """The first model call failed after the user message was saved."""

    code = 7002


class BotMessagePersistError(ConversationError):
    """Saving the assistant reply failed."""

    code = 7003


class FollowUpModelCallError(ConversationError):
    """The model call folding tool results back in failed."""

    code = 7004
