"""ChatSession class for managing an individual conversation.

This module provides the ChatSession class which handles:
- Appending user and assistant turns to the conversation log
- Flattening history into the role+text form sent to the model
- Clearing the conversation and any pending error state
- Tracking loading state and the generation counter used for cancellation
"""

import itertools
import logging
import uuid
from typing import Any

from finchat_server.sessions.types import (
    SessionMetadata,
    ToolInvocation,
    ToolOutcome,
    Turn,
    utc_timestamp,
)

logger = logging.getLogger(__name__)


class ChatSession:
    """Represents a single chat session with an append-only turn log.

    Sessions live in memory only. Turns are never edited once appended; the
    only way to remove them is ``clear()``, which drops all of them at once.
    """

    def __init__(self, session_id: str, model: str):
        """Initialize a ChatSession.

        Args:
            session_id: Unique session identifier (10-char hex)
            model: The LLM model name for this session
        """
        self.session_id = session_id
        self.model = model
        self.turns: list[Turn] = []
        self.is_loading = False
        self.error: str | None = None
        self.generation = 0
        self._turn_ids = itertools.count(1)

        now = utc_timestamp()
        self.metadata = SessionMetadata(
            session_id=session_id,
            model=model,
            created_at=now,
            updated_at=now,
        )

    def _append(self, turn: Turn) -> Turn:
        self.turns.append(turn)
        self.metadata.turn_count = len(self.turns)
        self.metadata.updated_at = turn.timestamp
        return turn

    def add_user_turn(self, content: str) -> Turn:
        """Append a user turn and return it.

        Args:
            content: The user's message text
        """
        turn = Turn(turn_id=next(self._turn_ids), role="user", content=content)
        logger.debug(f"Session {self.session_id}: appended user turn {turn.turn_id}")
        return self._append(turn)

    def add_assistant_turn(
        self,
        content: str,
        tool_calls: list[ToolInvocation] | None = None,
        tool_results: list[ToolOutcome] | None = None,
    ) -> Turn:
        """Append an assistant turn and return it.

        Args:
            content: The final assistant text
            tool_calls: Tool invocations requested in this cycle, if any
            tool_results: Outcomes matching ``tool_calls`` one-to-one

        Raises:
            ValueError: If the number of calls and results differ
        """
        turn = Turn(
            turn_id=next(self._turn_ids),
            role="assistant",
            content=content,
            tool_calls=tuple(tool_calls) if tool_calls else None,
            tool_results=tuple(tool_results) if tool_results else None,
        )
        logger.debug(
            f"Session {self.session_id}: appended assistant turn {turn.turn_id}"
        )
        return self._append(turn)

    def history(self) -> tuple[Turn, ...]:
        """Return a snapshot of the conversation log."""
        return tuple(self.turns)

    def flattened_history(self) -> list[dict[str, Any]]:
        """Flatten turns to role+text messages in Ollama format.

        Tool invocations and outcomes of earlier turns are not resent; only
        the synthesized assistant text is.
        """
        return [{"role": turn.role, "content": turn.content} for turn in self.turns]

    def clear(self) -> None:
        """Drop all turns and any pending error state.

        Bumps the generation so that a cycle started before the clear can
        detect that its results must be discarded.
        """
        self.turns = []
        self.error = None
        self.generation += 1
        self.metadata.turn_count = 0
        self.metadata.updated_at = utc_timestamp()
        logger.info(f"Cleared session {self.session_id}")

    def get_preview(self, max_length: int = 100) -> str:
        """Get a preview of the session (first user turn).

        Args:
            max_length: Maximum length of the preview

        Returns:
            Preview string, truncated if necessary
        """
        for turn in self.turns:
            if turn.role == "user":
                content = turn.content
                if len(content) > max_length:
                    return content[: max_length - 3] + "..."
                return content
        return ""

    @staticmethod
    def generate_session_id() -> str:
        """Generate a new unique session ID.

        Returns:
            10-character hexadecimal string
        """
        return uuid.uuid4().hex[:10]
