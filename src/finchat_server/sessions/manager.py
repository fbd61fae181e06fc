"""SessionManager for in-memory chat sessions.

This module provides the SessionManager class which handles:
- Creating new sessions
- Listing sessions sorted by last update
- Retrieving a session by id
- Deleting sessions

Sessions are not persisted; they live for the lifetime of the process.
"""

import logging

from finchat_server.errors import SessionNotFoundError
from finchat_server.sessions.session import ChatSession

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns every chat session of the running server."""

    def __init__(self, default_model: str):
        """Initialize the SessionManager.

        Args:
            default_model: Model used when a session is created without one
        """
        self.default_model = default_model
        self._sessions: dict[str, ChatSession] = {}

    def create_session(self, model: str | None = None) -> ChatSession:
        """Create and register a new chat session.

        Args:
            model: Optional model name, defaults to the configured model

        Returns:
            The newly created ChatSession
        """
        session_id = ChatSession.generate_session_id()
        while session_id in self._sessions:
            session_id = ChatSession.generate_session_id()

        session = ChatSession(session_id=session_id, model=model or self.default_model)
        self._sessions[session_id] = session

        logger.info(f"Created new session {session_id} with model {session.model}")
        return session

    def list_sessions(self) -> list[ChatSession]:
        """List all sessions, sorted by updated_at descending."""
        sessions = sorted(
            self._sessions.values(),
            key=lambda s: s.metadata.updated_at,
            reverse=True,
        )
        logger.debug(f"Listed {len(sessions)} sessions")
        return sessions

    def get_session(self, session_id: str) -> ChatSession:
        """Get a specific session by ID.

        Raises:
            SessionNotFoundError: If session doesn't exist
        """
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def delete_session(self, session_id: str) -> ChatSession:
        """Remove a session and return it.

        Raises:
            SessionNotFoundError: If session doesn't exist
        """
        try:
            session = self._sessions.pop(session_id)
        except KeyError:
            raise SessionNotFoundError(session_id) from None
        logger.info(f"Deleted session {session_id}")
        return session
