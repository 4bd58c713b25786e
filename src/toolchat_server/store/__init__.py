"""Record persistence for toolchat-server.

This package provides the generic record store interface, its JSON-file
implementation, and the record dataclasses stored in it.
"""

from toolchat_server.store.backend import JsonRecordStore, RecordStore
from toolchat_server.store.records import (
    MESSAGES_TABLE,
    STATUS_ERROR,
    STATUS_PENDING,
    STATUS_SUCCESS,
    TOOL_INVOCATIONS_TABLE,
    TOOL_SERVERS_TABLE,
    TOOLS_TABLE,
    Message,
    Tool,
    ToolInvocationRecord,
    ToolServer,
    utc_timestamp,
)

UNIQUE_KEYS: dict[str, list[tuple[str, ...]]] = {
    TOOL_SERVERS_TABLE: [("owner", "name")],
}

__all__ = [
    # Store
    "RecordStore",
    "JsonRecordStore",
    "UNIQUE_KEYS",
    # Tables
    "MESSAGES_TABLE",
    "TOOL_SERVERS_TABLE",
    "TOOLS_TABLE",
    "TOOL_INVOCATIONS_TABLE",
    # Records
    "Message",
    "ToolServer",
    "Tool",
    "ToolInvocationRecord",
    "STATUS_SUCCESS",
    "STATUS_ERROR",
    "STATUS_PENDING",
    "utc_timestamp",
]
