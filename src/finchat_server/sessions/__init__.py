"""Session management for finchat-server.

This package provides the in-memory conversation store: turns, tool
invocations and outcomes, and CRUD operations for chat sessions.
"""

from finchat_server.sessions.manager import SessionManager
from finchat_server.sessions.session import ChatSession
from finchat_server.sessions.types import (
    SessionMetadata,
    ToolInvocation,
    ToolOutcome,
    Turn,
)

__all__ = [
    # Core classes
    "ChatSession",
    "SessionManager",
    # Conversation types
    "Turn",
    "ToolInvocation",
    "ToolOutcome",
    "SessionMetadata",
]
