"""Caller-facing chat service.

ChatService wraps the orchestrator with the session-level state callers
observe: the loading flag, the last cycle error, and at most one in-flight
cycle per session. Clearing or deleting a session cancels its running
cycle.
"""

import asyncio
import logging

from finchat_server.errors import CycleAbortError, CycleCancelledError, SessionBusyError
from finchat_server.services.orchestrator import EventCallback, Orchestrator
from finchat_server.sessions.manager import SessionManager
from finchat_server.sessions.types import Turn

logger = logging.getLogger(__name__)


class ChatService:
    """Runs orchestration cycles on behalf of API callers."""

    def __init__(self, session_manager: SessionManager, orchestrator: Orchestrator):
        self.session_manager = session_manager
        self.orchestrator = orchestrator
        self._in_flight: dict[str, asyncio.Task] = {}

    def is_busy(self, session_id: str) -> bool:
        return self.session_manager.get_session(session_id).is_loading

    async def send_message(
        self,
        session_id: str,
        text: str,
        on_event: EventCallback | None = None,
    ) -> Turn | None:
        """Send a user message and wait for the assistant turn.

        Args:
            session_id: Target session
            text: The user's message
            on_event: Optional async callback receiving cycle progress events

        Returns:
            The assistant Turn, or None if the input was empty or the session
            was cleared before the cycle finished

        Raises:
            SessionNotFoundError: If the session does not exist
            SessionBusyError: If a cycle is already running for the session
            CycleAbortError: If the model call failed; also recorded in
                ``session.error``
        """
        session = self.session_manager.get_session(session_id)

        if not text or not text.strip():
            logger.debug(f"Session {session_id}: empty input rejected")
            return None

        if session.is_loading:
            raise SessionBusyError(session_id)

        session.is_loading = True
        session.error = None
        generation = session.generation

        task = asyncio.create_task(self.orchestrator.handle(session, text, on_event))
        self._in_flight[session_id] = task

        try:
            return await task
        except CycleAbortError as e:
            logger.error(f"Cycle aborted for session {session_id}: {e}")
            if session.generation == generation:
                session.error = str(e)
            raise
        except CycleCancelledError:
            logger.info(f"Discarded cycle result for cleared session {session_id}")
            return None
        except asyncio.CancelledError:
            if session.generation != generation:
                logger.info(f"Cancelled in-flight cycle for session {session_id}")
                return None
            raise
        finally:
            if self._in_flight.get(session_id) is task:
                del self._in_flight[session_id]
                session.is_loading = False

    def clear_session(self, session_id: str) -> None:
        """Drop all turns and error state, abandoning any in-flight cycle.

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        session = self.session_manager.get_session(session_id)
        session.clear()
        self._cancel(session_id)
        session.is_loading = False

    def delete_session(self, session_id: str) -> None:
        """Clear and remove a session.

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        self.clear_session(session_id)
        self.session_manager.delete_session(session_id)

    async def shutdown(self) -> None:
        """Cancel every in-flight cycle."""
        tasks = list(self._in_flight.values())
        self._in_flight.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"Cancelled {len(tasks)} in-flight cycles on shutdown")

    def _cancel(self, session_id: str) -> None:
        task = self._in_flight.pop(session_id, None)
        if task is not None and not task.done():
            task.cancel()
            logger.debug(f"Cancelled cycle task for session {session_id}")
