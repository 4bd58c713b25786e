"""Message history endpoints.

This module provides endpoints for listing and clearing a user's messages
and for reading the tool invocation records of one message.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from toolchat_server.dependencies import get_message_service, get_owner
from toolchat_server.errors import MessageNotFoundError, StoreError
from toolchat_server.models.chat import MessageResponse
from toolchat_server.models.errors import api_error
from toolchat_server.models.messages import (
    ClearMessagesResponse,
    MessagesResponse,
    ToolInvocationResponse,
    ToolInvocationsResponse,
)
from toolchat_server.services import MessageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


@router.get("", response_model=MessagesResponse, summary="List messages")
async def list_messages(
    owner: Annotated[str, Depends(get_owner)],
    message_service: Annotated[MessageService, Depends(get_message_service)],
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> MessagesResponse:
    """List the user's messages, newest first."""
    try:
        messages, total = message_service.list_messages(owner, limit, offset)
    except StoreError as e:
        logger.error(f"Failed to fetch messages for {owner}: {e}")
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR, e.code, "Failed to fetch messages"
        )

    return MessagesResponse(
        messages=[MessageResponse.model_validate(msg) for msg in messages],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.delete("", response_model=ClearMessagesResponse, summary="Clear messages")
async def clear_messages(
    owner: Annotated[str, Depends(get_owner)],
    message_service: Annotated[MessageService, Depends(get_message_service)],
) -> ClearMessagesResponse:
    """Delete all of the user's messages."""
    try:
        deleted = message_service.clear_messages(owner)
    except StoreError as e:
        logger.error(f"Failed to clear messages for {owner}: {e}")
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR, e.code, "Failed to clear messages"
        )

    return ClearMessagesResponse(
        message="All messages cleared successfully",
        deleted_count=deleted,
    )


@router.get(
    "/{message_id}/tool-invocations",
    response_model=ToolInvocationsResponse,
    summary="List tool invocations for a message",
)
async def list_tool_invocations(
    message_id: int,
    owner: Annotated[str, Depends(get_owner)],
    message_service: Annotated[MessageService, Depends(get_message_service)],
) -> ToolInvocationsResponse:
    """List the audit records of the tools run while answering a message."""
    try:
        records = message_service.list_invocations(owner, message_id)
    except MessageNotFoundError as e:
        raise api_error(
            status.HTTP_404_NOT_FOUND,
            e.code,
            e.message,
            {"message_id": message_id},
        )
    except StoreError as e:
        logger.error(f"Failed to fetch tool invocations for {message_id}: {e}")
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            e.code,
            "Failed to fetch tool invocations",
        )

    return ToolInvocationsResponse(
        message_id=message_id,
        invocations=[ToolInvocationResponse.model_validate(r) for r in records],
    )
