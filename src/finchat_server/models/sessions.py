"""Pydantic models for session API requests and responses."""

from typing import Any

from pydantic import BaseModel, Field

from finchat_server.sessions.session import ChatSession
from finchat_server.sessions.types import Turn


class CreateSessionRequest(BaseModel):
    """Request body for creating a new session."""

    model: str | None = Field(
        None, description="The LLM model to use (defaults to the configured model)"
    )


class ToolInvocationResponse(BaseModel):
    """A tool call requested by the model."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolOutcomeResponse(BaseModel):
    """The outcome of one tool call."""

    name: str
    result: Any = None
    error: str | None = None


class TurnResponse(BaseModel):
    """Response model for a single conversation turn."""

    turn_id: int
    role: str
    content: str
    timestamp: str
    tool_calls: list[ToolInvocationResponse] | None = None
    tool_results: list[ToolOutcomeResponse] | None = None

    @classmethod
    def from_turn(cls, turn: Turn) -> "TurnResponse":
        return cls.model_validate(turn.to_dict())


class SessionResponse(BaseModel):
    """Response model for a single session (metadata only)."""

    session_id: str
    model: str
    created_at: str
    updated_at: str
    turn_count: int
    is_loading: bool = False
    error: str | None = None

    @classmethod
    def from_session(cls, session: ChatSession) -> "SessionResponse":
        return cls(
            session_id=session.session_id,
            model=session.model,
            created_at=session.metadata.created_at,
            updated_at=session.metadata.updated_at,
            turn_count=session.metadata.turn_count,
            is_loading=session.is_loading,
            error=session.error,
        )


class SessionListItem(SessionResponse):
    """A session item in the list response."""

    preview: str = Field("", description="Preview of first user turn")


class SessionListResponse(BaseModel):
    """Response model for listing sessions."""

    sessions: list[SessionListItem]


class SessionDetailResponse(SessionResponse):
    """Response model for a session with full turn history."""

    turns: list[TurnResponse]


class TurnsResponse(BaseModel):
    """Response model for getting session turns."""

    turns: list[TurnResponse]
