"""Chat API endpoint.

This module provides the endpoint that sends one user message through the
tool-augmented conversation loop and returns the persisted exchange.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from toolchat_server.dependencies import get_conversation_service, get_owner
from toolchat_server.errors import (
    ConversationError,
    FollowUpModelCallError,
    ModelCallError,
)
from toolchat_server.models.chat import (
    MessageResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from toolchat_server.models.errors import api_error
from toolchat_server.services import ConversationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])


@router.post(
    "",
    response_model=SendMessageResponse,
    response_model_exclude_none=True,
    summary="Send a message and get the model's reply",
)
async def send_message(
    request_body: SendMessageRequest,
    owner: Annotated[str, Depends(get_owner)],
    conversation_service: Annotated[
        ConversationService, Depends(get_conversation_service)
    ],
) -> SendMessageResponse:
    """Send a message and receive the model's reply.

    The model may call the user's registered tools before answering. Both
    the user message and the reply are saved.

    Raises:
        HTTPException: 502 if a model call fails (the user message is saved)
        HTTPException: 500 if saving a message fails
    """
    try:
        result = await conversation_service.send_message(owner, request_body.text)
    except (ModelCallError, FollowUpModelCallError) as e:
        raise api_error(
            status.HTTP_502_BAD_GATEWAY,
            e.code,
            e.message,
            {"user_message_saved": e.user_message_saved},
        )
    except ConversationError as e:
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            e.code,
            e.message,
            {"user_message_saved": e.user_message_saved},
        )

    return SendMessageResponse(
        user_message=MessageResponse.model_validate(result.user_message),
        bot_message=MessageResponse.model_validate(result.bot_message),
        tools_used=result.tools_used,
    )
