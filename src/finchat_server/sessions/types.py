"""Data types for session management.

This module defines the core data structures for conversation turns,
tool invocations and their outcomes.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

Role = Literal["user", "assistant"]


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO 8601 string with a Z suffix."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ToolInvocation:
    """A tool call requested by the model."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "arguments": dict(self.arguments)}


@dataclass(frozen=True)
class ToolOutcome:
    """The result of executing one ToolInvocation.

    Exactly one of ``result`` and ``error`` is meaningful: when ``error`` is
    set the invocation failed and ``result`` is None.
    """

    name: str
    result: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, name: str, result: Any) -> "ToolOutcome":
        return cls(name=name, result=result)

    @classmethod
    def failure(cls, name: str, error: str) -> "ToolOutcome":
        return cls(name=name, error=error)

    def to_response(self) -> dict[str, Any]:
        """Payload sent back to the model for this outcome."""
        if self.error is not None:
            return {"error": self.error}
        return {"result": self.result}

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "result": self.result, "error": self.error}


@dataclass(frozen=True)
class Turn:
    """One message unit in the conversation log.

    Turns are immutable once created. Assistant turns that answered with the
    help of tools carry both the requested invocations and their outcomes,
    in the same order.
    """

    turn_id: int
    role: Role
    content: str
    timestamp: str = field(default_factory=utc_timestamp)
    tool_calls: tuple[ToolInvocation, ...] | None = None
    tool_results: tuple[ToolOutcome, ...] | None = None

    def __post_init__(self) -> None:
        if self.role not in ("user", "assistant"):
            raise ValueError(f"Unknown turn role: {self.role}")
        calls = self.tool_calls or ()
        results = self.tool_results or ()
        if len(calls) != len(results):
            raise ValueError(
                f"Turn {self.turn_id} has {len(calls)} tool calls "
                f"but {len(results)} tool results"
            )
        if calls and not self.content.strip():
            raise ValueError(f"Turn {self.turn_id} used tools but has no final text")

    def to_dict(self) -> dict[str, Any]:
        return {
            "turn_id": self.turn_id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp,
            "tool_calls": (
                [call.to_dict() for call in self.tool_calls]
                if self.tool_calls
                else None
            ),
            "tool_results": (
                [outcome.to_dict() for outcome in self.tool_results]
                if self.tool_results
                else None
            ),
        }


@dataclass
class SessionMetadata:
    """Metadata for a chat session."""

    session_id: str
    model: str
    created_at: str
    updated_at: str
    turn_count: int = 0
