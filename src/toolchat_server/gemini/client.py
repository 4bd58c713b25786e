"""Async Gemini client wrapper.

This module provides an async client for the Gemini generateContent REST
endpoint. The client is designed to be created once at startup and reused;
it owns a single httpx.AsyncClient.
"""

import logging
from typing import Any

import httpx

from toolchat_server.errors import ModelResponseError
from toolchat_server.gemini.types import (
    ROLE_USER,
    ConversationTurn,
    ModelReply,
    ToolSchema,
    build_function_declarations,
)

logger = logging.getLogger(__name__)


class GeminiClient:
    """Async client for the Gemini API.

    Attributes:
        api_url: Base models URL (e.g., ".../v1beta/models")
        model: Model name (e.g., "gemini-2.0-flash-lite")
        _client: The underlying httpx.AsyncClient instance
    """

    def __init__(
        self,
        api_key: str,
        api_url: str,
        model: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: Provider API key, sent as the ``key`` query parameter
            api_url: Base models URL
            model: Model name
            timeout: Timeout in seconds for each request
            transport: Optional httpx transport (used by tests)
        """
        self.api_url = api_url.rstrip("/")
        self.model = model
        self._api_key = api_key
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        logger.info(f"GeminiClient initialized with model: {model}")

    @property
    def generate_url(self) -> str:
        return f"{self.api_url}/{self.model}:generateContent"

    async def check_connection(self) -> bool:
        """Check if the configured model is reachable with the configured key.

        Returns:
            bool: True if the model metadata endpoint answers with success
        """
        if not self._api_key:
            logger.debug("Gemini connection check skipped: no API key configured")
            return False

        try:
            response = await self._client.get(
                f"{self.api_url}/{self.model}",
                params={"key": self._api_key},
            )
            connected = response.is_success
            logger.debug(f"Gemini connection check: status={response.status_code}")
            return connected
        except httpx.HTTPError as e:
            logger.warning(f"Gemini connection check failed: {e}")
            return False

    def build_request(
        self,
        user_utterance: str,
        history: list[ConversationTurn],
        tools: list[ToolSchema] | None = None,
    ) -> dict[str, Any]:
        """Build a generateContent request body.

        Args:
            user_utterance: Text of the final user turn
            history: Earlier turns, oldest first
            tools: Optional tools to offer as function declarations

        Returns:
            dict: Request body with ``contents`` and, if tools are offered, ``tools``
        """
        contents = [turn.to_content() for turn in history]
        contents.append(
            ConversationTurn(role=ROLE_USER, text=user_utterance).to_content()
        )

        body: dict[str, Any] = {"contents": contents}

        declarations = build_function_declarations(tools or [])
        if declarations is not None:
            body["tools"] = [declarations]

        return body

    async def complete(
        self,
        user_utterance: str,
        history: list[ConversationTurn],
        tools: list[ToolSchema] | None = None,
    ) -> ModelReply:
        """Send a conversation to Gemini and decode the reply.

        Args:
            user_utterance: Text of the final user turn
            history: Earlier turns, oldest first
            tools: Optional tools the model may call

        Returns:
            ModelReply: Decoded parts of the first candidate

        Raises:
            ModelResponseError: If the request fails, times out, returns a
                non-success status, or yields no candidates
        """
        body = self.build_request(user_utterance, history, tools)
        logger.debug(
            f"Sending {len(body['contents'])} turns to {self.model} "
            f"with {len(tools or [])} tools"
        )

        try:
            response = await self._client.post(
                self.generate_url,
                params={"key": self._api_key},
                json=body,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Gemini request timed out: {e}")
            raise ModelResponseError("Gemini API request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed: {e}")
            raise ModelResponseError(f"Gemini API request failed: {e}") from e

        if not response.is_success:
            logger.error(f"Gemini API error {response.status_code}: {response.text}")
            raise ModelResponseError(
                f"Gemini API request failed: {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Gemini returned invalid JSON: {e}")
            raise ModelResponseError("Gemini API returned invalid JSON") from e

        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not isinstance(candidates, list) or not candidates:
            raise ModelResponseError("No response from Gemini API")

        reply = ModelReply.from_response(data)
        logger.debug(
            f"Gemini reply: {len(reply.parts)} parts, finish_reason={reply.finish_reason}"
        )
        return reply

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
        logger.debug("GeminiClient closed")
