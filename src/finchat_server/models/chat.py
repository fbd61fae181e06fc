"""Pydantic models for chat API requests and responses.

This module defines the request and response schemas for the chat endpoints,
including the Server-Sent Events emitted by the streaming endpoint.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from finchat_server.models.sessions import TurnResponse


class ChatRequest(BaseModel):
    """Request body for chat endpoints.

    Used by both POST /api/v1/chat/{session_id} (non-streaming)
    and POST /api/v1/chat/{session_id}/stream (streaming).
    """

    message: str = Field(description="The user message to send.")

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"message": "Sum 25 and 37"},
                {"message": "Is 97 a prime number?"},
            ]
        }
    )


class ChatResponse(BaseModel):
    """Response body for the non-streaming chat endpoint.

    ``turn`` is null when the message was empty and nothing was sent, or
    when the session was cleared before the cycle finished.
    """

    session_id: str = Field(description="Session identifier")
    turn: TurnResponse | None = Field(
        default=None, description="The assistant turn produced by this cycle"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "session_id": "a1b2c3d4e5",
                "turn": {
                    "turn_id": 2,
                    "role": "assistant",
                    "content": "25 plus 37 is 62.",
                    "timestamp": "2025-01-15T10:35:00.000000Z",
                    "tool_calls": [
                        {"name": "sum", "arguments": {"num1": 25, "num2": 37}}
                    ],
                    "tool_results": [{"name": "sum", "result": 62, "error": None}],
                },
            }
        }
    )


class StateEvent(BaseModel):
    """SSE event: the cycle moved to a new state."""

    state: str


class ToolCallEvent(BaseModel):
    """SSE event: the model requested a tool call."""

    index: int
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolResultEvent(BaseModel):
    """SSE event: a tool call finished."""

    index: int
    name: str
    result: Any = None
    error: str | None = None


class MessageCompleteEvent(BaseModel):
    """SSE event: the assistant turn was appended."""

    session_id: str
    turn: TurnResponse


class ErrorEvent(BaseModel):
    """SSE event: the cycle failed."""

    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class DoneEvent(BaseModel):
    """SSE event: the stream is complete."""

    session_id: str
