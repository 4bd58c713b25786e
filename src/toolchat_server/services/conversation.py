"""Tool-augmented conversation service.

This module turns one user utterance into a persisted exchange:

1. Gather the recent history and the user's active tools
2. Save the user message
3. Ask the model, offering the tools
4. Run any tools the model called, one at a time, recording each invocation
5. If tools were called, ask the model again with the tool results folded in
6. Save the model's final answer

Failures to gather context degrade to an empty history or tool set. Failures
of a model call or of saving a message abort the run with a distinct
ConversationError; anything already saved stays saved.
"""

import json
import logging
from dataclasses import dataclass

from toolchat_server.errors import (
    BotMessagePersistError,
    FollowUpModelCallError,
    ModelCallError,
    ModelResponseError,
    StoreError,
    UserMessagePersistError,
)
from toolchat_server.gemini import (
    ROLE_MODEL,
    ROLE_USER,
    ConversationTurn,
    FunctionCallPart,
    GeminiClient,
    all_function_calls,
    first_text,
)
from toolchat_server.mcp import ToolCall, ToolServerClient
from toolchat_server.services.messages import MessageService
from toolchat_server.services.tool_registry import ActiveTool, ToolRegistryService
from toolchat_server.store import (
    STATUS_ERROR,
    STATUS_SUCCESS,
    Message,
    ToolInvocationRecord,
    utc_timestamp,
)

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I'm sorry, I couldn't generate a response."
FOLLOW_UP_INSTRUCTION = (
    "Based on the tool results above, provide a final response to the user."
)


@dataclass
class ConversationResult:
    """Outcome of a completed run.

    Attributes:
        user_message: The persisted user message
        bot_message: The persisted model reply
        tools_used: Names of the tools actually invoked, or None if none were
    """

    user_message: Message
    bot_message: Message
    tools_used: list[str] | None = None


class ConversationService:
    """Runs a single user utterance through the model and any requested tools."""

    def __init__(
        self,
        message_service: MessageService,
        tool_registry: ToolRegistryService,
        gemini_client: GeminiClient,
        tool_client: ToolServerClient,
        history_limit: int = 20,
    ):
        """Initialize the ConversationService.

        Args:
            message_service: Persistence for messages and invocation records
            tool_registry: Resolves the user's active tools
            gemini_client: Model completion client
            tool_client: Tool server client used to run tool calls
            history_limit: Number of recent messages sent as history
        """
        self.message_service = message_service
        self.tool_registry = tool_registry
        self.gemini_client = gemini_client
        self.tool_client = tool_client
        self.history_limit = history_limit

    def _load_history(self, owner: str) -> list[ConversationTurn]:
        try:
            messages = self.message_service.recent_history(owner, self.history_limit)
        except StoreError as e:
            logger.warning(f"Failed to load history for {owner}, continuing without: {e}")
            return []

        return [
            ConversationTurn(role=ROLE_USER if msg.own else ROLE_MODEL, text=msg.text)
            for msg in messages
        ]

    def _load_tools(self, owner: str) -> list[ActiveTool]:
        try:
            return self.tool_registry.list_active_tools_for_user(owner)
        except StoreError as e:
            logger.warning(f"Failed to load tools for {owner}, continuing without: {e}")
            return []

    async def _dispatch_tools(
        self,
        user_message: Message,
        function_calls: list[FunctionCallPart],
        active_tools: list[ActiveTool],
    ) -> tuple[list[str], list[str]]:
        """Run the model's function calls sequentially.

        Calls naming a tool outside ``active_tools`` are skipped. A failing tool
        does not stop the remaining calls.

        Returns:
            Tuple of (names of invoked tools, one result line per invoked tool)
        """
        tools_used: list[str] = []
        results: list[str] = []

        for call in function_calls:
            match = next(
                (entry for entry in active_tools if entry.tool.name == call.name),
                None,
            )
            if match is None:
                logger.warning(f"Model called unknown tool '{call.name}', skipping")
                continue

            tools_used.append(call.name)
            logger.info(f"Invoking tool {call.name} on server {match.server.name}")

            result = await self.tool_client.invoke_tool(
                match.server,
                match.tool,
                ToolCall(tool_name=call.name, arguments=call.args),
            )
            completed_at = utc_timestamp()

            if result.success:
                output = json.dumps(result.result, separators=(",", ":"), ensure_ascii=False)
                results.append(f"Tool {call.name} returned: {output}")
            else:
                logger.warning(f"Tool {call.name} failed: {result.error}")
                results.append(f"Tool {call.name} failed: {result.error}")

            record = ToolInvocationRecord(
                message_id=user_message.id or 0,
                tool_id=match.tool.id or 0,
                input=call.args,
                output=result.result if result.success else None,
                status=STATUS_SUCCESS if result.success else STATUS_ERROR,
                error_message=result.error,
                invoked_at=completed_at,
                completed_at=completed_at,
            )
            try:
                self.message_service.record_invocation(record)
            except StoreError as e:
                logger.error(f"Failed to record invocation of {call.name}: {e}")

        return tools_used, results

    async def send_message(self, owner: str, text: str) -> ConversationResult:
        """Process one user utterance end to end.

        Args:
            owner: The user sending the message
            text: The message text (already validated by the caller)

        Returns:
            ConversationResult with both persisted messages

        Raises:
            UserMessagePersistError: If the user message could not be saved
            ModelCallError: If the first model call failed
            FollowUpModelCallError: If the model call after tool use failed
            BotMessagePersistError: If the model reply could not be saved
        """
        history = self._load_history(owner)
        active_tools = self._load_tools(owner)

        try:
            user_message = self.message_service.add_message(owner, text, own=True)
        except StoreError as e:
            logger.error(f"Error saving user message for {owner}: {e}")
            raise UserMessagePersistError("Failed to save user message") from e

        tool_schemas = ToolRegistryService.build_tool_schemas(active_tools)
        logger.debug(
            f"Starting run for {owner}: {len(history)} history turns, "
            f"{len(tool_schemas)} tools"
        )

        try:
            reply = await self.gemini_client.complete(
                text, history, tool_schemas or None
            )
        except ModelResponseError as e:
            logger.error(f"Model call failed for {owner}: {e}")
            raise ModelCallError("Failed to get AI response") from e

        tools_used: list[str] = []
        function_calls = all_function_calls(reply)

        if function_calls:
            tools_used, results = await self._dispatch_tools(
                user_message, function_calls, active_tools
            )

            follow_up_history = [
                *history,
                ConversationTurn(role=ROLE_USER, text=text),
                ConversationTurn(
                    role=ROLE_MODEL, text=f"Used tools: {', '.join(results)}"
                ),
            ]

            try:
                reply = await self.gemini_client.complete(
                    FOLLOW_UP_INSTRUCTION, follow_up_history
                )
            except ModelResponseError as e:
                logger.error(f"Follow-up model call failed for {owner}: {e}")
                raise FollowUpModelCallError(
                    "Failed to get AI response after tool use"
                ) from e

        bot_text = first_text(reply) or FALLBACK_REPLY

        try:
            bot_message = self.message_service.add_message(owner, bot_text, own=False)
        except StoreError as e:
            logger.error(f"Error saving bot message for {owner}: {e}")
            raise BotMessagePersistError("Failed to save bot response") from e

        logger.info(
            f"Completed run for {owner}: {len(tools_used)} tools used, "
            f"{len(bot_text)} characters"
        )

        return ConversationResult(
            user_message=user_message,
            bot_message=bot_message,
            tools_used=tools_used or None,
        )
