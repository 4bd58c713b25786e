"""Data types for persisted records.

Each dataclass maps to one table of the record store. Rows travel through
the store as plain dicts; ``from_row`` and ``to_row`` convert between the two.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from typing import Any

MESSAGES_TABLE = "messages"
TOOL_SERVERS_TABLE = "tool_servers"
TOOLS_TABLE = "tools"
TOOL_INVOCATIONS_TABLE = "tool_invocations"

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"
STATUS_PENDING = "pending"


def utc_timestamp() -> str:
    """Return the current UTC time as a fixed-width ISO 8601 string ending in Z.

    Microseconds are always included so timestamps sort correctly as strings.
    """
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="microseconds").replace("+00:00", "Z")


class _Record:
    """Conversion helpers shared by all record dataclasses."""

    @classmethod
    def from_row(cls, row: dict[str, Any]):
        names = {f.name for f in fields(cls)}  # type: ignore[arg-type]
        return cls(**{key: value for key, value in row.items() if key in names})

    def to_row(self) -> dict[str, Any]:
        """Convert the record to a store row, leaving out an unassigned id."""
        row = asdict(self)  # type: ignore[call-overload]
        if row.get("id") is None:
            row.pop("id", None)
        return row


@dataclass
class Message(_Record):
    """A chat message. ``own`` is True for user-authored messages."""

    id: int | None = None
    owner: str = ""
    timestamp: str = ""
    own: bool = True
    text: str = ""


@dataclass
class ToolServer(_Record):
    """An external tool server registered by a user."""

    id: int | None = None
    owner: str = ""
    name: str = ""
    base_url: str = ""
    api_key: str | None = None
    description: str | None = None
    is_active: bool = True
    created_at: str = ""


@dataclass
class Tool(_Record):
    """A tool discovered on a tool server.

    ``input_schema`` is an opaque JSON schema document forwarded to the model
    unchanged.
    """

    id: int | None = None
    server_id: int = 0
    name: str = ""
    description: str | None = None
    input_schema: dict[str, Any] | None = None
    is_enabled: bool = True
    created_at: str = ""


@dataclass
class ToolInvocationRecord(_Record):
    """Audit record for one executed tool call. Written once, never updated."""

    id: int | None = None
    message_id: int = 0
    tool_id: int = 0
    input: dict[str, Any] = field(default_factory=dict)
    output: Any = None
    status: str = STATUS_PENDING  # success | error | pending
    error_message: str | None = None
    invoked_at: str = ""
    completed_at: str = ""
