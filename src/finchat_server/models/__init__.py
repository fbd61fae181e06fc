"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from finchat_server.models.chat import ChatRequest, ChatResponse
from finchat_server.models.health import HealthResponse
from finchat_server.models.sessions import (
    CreateSessionRequest,
    SessionDetailResponse,
    SessionListResponse,
    SessionResponse,
    TurnResponse,
    TurnsResponse,
)
from finchat_server.models.tools import ToolListResponse, ToolSpecResponse

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "CreateSessionRequest",
    "HealthResponse",
    "SessionDetailResponse",
    "SessionListResponse",
    "SessionResponse",
    "ToolListResponse",
    "ToolSpecResponse",
    "TurnResponse",
    "TurnsResponse",
]
