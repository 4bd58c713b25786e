"""Type definitions for the Gemini integration.

This module contains the conversation turn shape sent to the model, the
tool schemas offered to it, and the decoded reply with its tagged parts.
"""

from dataclasses import dataclass, field
from typing import Any

ROLE_USER = "user"
ROLE_MODEL = "model"

EMPTY_OBJECT_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}


@dataclass
class ConversationTurn:
    """One role-tagged utterance in the history sent to the model."""

    role: str  # user | model
    text: str

    def to_content(self) -> dict[str, Any]:
        return {"role": self.role, "parts": [{"text": self.text}]}


@dataclass
class ToolSchema:
    """A tool as advertised to the model.

    Attributes:
        name: Tool name the model must use in a function call
        description: Optional human-readable description
        input_schema: Opaque JSON schema of the tool's arguments
    """

    name: str
    description: str | None = None
    input_schema: dict[str, Any] | None = None


@dataclass
class TextPart:
    """A plain-text fragment of a model reply."""

    text: str


@dataclass
class FunctionCallPart:
    """A structured request from the model to run a named tool."""

    name: str
    args: dict[str, Any] = field(default_factory=dict)


ReplyPart = TextPart | FunctionCallPart


@dataclass
class ModelReply:
    """Decoded reply of the first candidate of a generateContent response."""

    parts: list[ReplyPart] = field(default_factory=list)
    finish_reason: str | None = None

    @staticmethod
    def from_response(data: dict[str, Any]) -> "ModelReply":
        """Decode a generateContent response body.

        Args:
            data: Parsed JSON response containing a non-empty ``candidates`` list

        Returns:
            ModelReply: The first candidate's parts, decoded in order
        """
        candidate = data["candidates"][0]
        if not isinstance(candidate, dict):
            return ModelReply()
        content = candidate.get("content")
        raw_parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(raw_parts, list):
            raw_parts = []

        parts: list[ReplyPart] = []
        for raw_part in raw_parts:
            part = _decode_part(raw_part)
            if part is not None:
                parts.append(part)

        return ModelReply(parts=parts, finish_reason=candidate.get("finishReason"))


def _decode_part(raw_part: Any) -> ReplyPart | None:
    """Decode one response part into a TextPart or FunctionCallPart.

    Parts of any other kind (inline data, executable code, ...) yield None.
    """
    if not isinstance(raw_part, dict):
        return None

    function_call = raw_part.get("functionCall")
    if isinstance(function_call, dict) and function_call.get("name"):
        return FunctionCallPart(
            name=function_call["name"],
            args=function_call.get("args") or {},
        )

    text = raw_part.get("text")
    if isinstance(text, str):
        return TextPart(text=text)

    return None


def first_text(reply: ModelReply) -> str | None:
    """Return the first text part of a reply, or None if it has none."""
    for part in reply.parts:
        if isinstance(part, TextPart):
            return part.text
    return None


def all_function_calls(reply: ModelReply) -> list[FunctionCallPart]:
    """Return every function-call part of a reply, in response order."""
    return [part for part in reply.parts if isinstance(part, FunctionCallPart)]


def build_function_declarations(tools: list[ToolSchema]) -> dict[str, Any] | None:
    """Translate tool schemas into a Gemini ``function_declarations`` block.

    Args:
        tools: Tools to offer to the model

    Returns:
        The tool block, or None when there are no tools
    """
    if not tools:
        return None

    return {
        "function_declarations": [
            {
                "name": tool.name,
                "description": tool.description or f"Tool: {tool.name}",
                "parameters": tool.input_schema or dict(EMPTY_OBJECT_SCHEMA),
            }
            for tool in tools
        ]
    }
