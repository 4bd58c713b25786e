"""Message and tool invocation persistence service.

This module provides the MessageService class, the thin layer between the
record store and the routers/conversation service for everything stored per
chat message.
"""

import logging

from toolchat_server.errors import MessageNotFoundError
from toolchat_server.store import (
    MESSAGES_TABLE,
    TOOL_INVOCATIONS_TABLE,
    Message,
    RecordStore,
    ToolInvocationRecord,
    utc_timestamp,
)

logger = logging.getLogger(__name__)

_ORDER = ("timestamp", "id")


class MessageService:
    """CRUD operations for chat messages and their tool invocation records."""

    def __init__(self, store: RecordStore):
        self.store = store

    def recent_history(self, owner: str, limit: int) -> list[Message]:
        """Get the owner's most recent messages, oldest first.

        Args:
            owner: The user the messages belong to
            limit: Maximum number of messages to return

        Returns:
            Up to ``limit`` messages in chronological order
        """
        rows = self.store.query(
            MESSAGES_TABLE,
            filters={"owner": owner},
            order_by=_ORDER,
            descending=True,
            limit=limit,
        )
        rows.reverse()
        return [Message.from_row(row) for row in rows]

    def add_message(self, owner: str, text: str, own: bool) -> Message:
        """Persist a new message stamped with the current time.

        Raises:
            StoreError: If the store write fails
        """
        message = Message(owner=owner, timestamp=utc_timestamp(), own=own, text=text)
        row = self.store.insert(MESSAGES_TABLE, message.to_row())
        saved = Message.from_row(row)
        logger.info(
            f"Saved {'user' if own else 'bot'} message {saved.id} for {owner}"
        )
        return saved

    def list_messages(
        self, owner: str, limit: int = 50, offset: int = 0
    ) -> tuple[list[Message], int]:
        """List the owner's messages newest first.

        Returns:
            Tuple of (page of messages, total message count)
        """
        total = self.store.count(MESSAGES_TABLE, filters={"owner": owner})
        rows = self.store.query(
            MESSAGES_TABLE,
            filters={"owner": owner},
            order_by=_ORDER,
            descending=True,
            limit=limit,
            offset=offset,
        )
        return [Message.from_row(row) for row in rows], total

    def get_message(self, owner: str, message_id: int) -> Message:
        """Get one of the owner's messages.

        Raises:
            MessageNotFoundError: If no such message belongs to the owner
        """
        rows = self.store.query(
            MESSAGES_TABLE, filters={"id": message_id, "owner": owner}, limit=1
        )
        if not rows:
            raise MessageNotFoundError(message_id)
        return Message.from_row(rows[0])

    def clear_messages(self, owner: str) -> int:
        """Delete all of the owner's messages and return how many were removed."""
        deleted = self.store.delete(MESSAGES_TABLE, filters={"owner": owner})
        logger.info(f"Cleared {deleted} messages for {owner}")
        return deleted

    def record_invocation(self, record: ToolInvocationRecord) -> ToolInvocationRecord:
        """Persist a tool invocation audit record."""
        row = self.store.insert(TOOL_INVOCATIONS_TABLE, record.to_row())
        return ToolInvocationRecord.from_row(row)

    def list_invocations(
        self, owner: str, message_id: int
    ) -> list[ToolInvocationRecord]:
        """List the tool invocations triggered by one of the owner's messages.

        Raises:
            MessageNotFoundError: If no such message belongs to the owner
        """
        self.get_message(owner, message_id)
        rows = self.store.query(
            TOOL_INVOCATIONS_TABLE, filters={"message_id": message_id}, order_by="id"
        )
        return [ToolInvocationRecord.from_row(row) for row in rows]
