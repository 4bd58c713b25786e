"""Type definitions for the tool server protocol.

Both client operations return a tagged result instead of raising, so callers
handle transport errors and protocol errors the same way.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class DiscoveredTool:
    """A tool entry from a server's ``GET /tools`` listing."""

    tool_name: str
    tool_description: str | None = None
    input_schema: dict[str, Any] | None = None

    @staticmethod
    def from_listing(entry: Any) -> "DiscoveredTool | None":
        """Parse one listing entry, returning None if it has no usable name."""
        if not isinstance(entry, dict):
            return None
        name = entry.get("tool_name")
        if not isinstance(name, str) or not name:
            return None

        description = entry.get("tool_description")
        input_schema = entry.get("input_schema")
        return DiscoveredTool(
            tool_name=name,
            tool_description=description if isinstance(description, str) else None,
            input_schema=input_schema if isinstance(input_schema, dict) else None,
        )


@dataclass
class DiscoveryResult:
    """Outcome of tool discovery against one server."""

    success: bool
    tools: list[DiscoveredTool] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def ok(cls, tools: list[DiscoveredTool]) -> "DiscoveryResult":
        return cls(success=True, tools=tools)

    @classmethod
    def fail(cls, error: str) -> "DiscoveryResult":
        return cls(success=False, error=error)


@dataclass
class ToolCall:
    """A request to run one tool with the given arguments."""

    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass
class ToolResult:
    """Outcome of a single tool invocation."""

    success: bool
    result: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, result: Any) -> "ToolResult":
        return cls(success=True, result=result)

    @classmethod
    def fail(cls, error: str) -> "ToolResult":
        return cls(success=False, error=error)
