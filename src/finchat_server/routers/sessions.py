"""Sessions router for chat session operations.

This module provides REST API endpoints for:
- Creating new sessions
- Listing all sessions
- Retrieving session details and turns
- Clearing a session's conversation
- Deleting sessions
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from finchat_server.dependencies import get_chat_service, get_session_manager
from finchat_server.errors import SessionNotFoundError
from finchat_server.models.sessions import (
    CreateSessionRequest,
    SessionDetailResponse,
    SessionListItem,
    SessionListResponse,
    SessionResponse,
    TurnResponse,
    TurnsResponse,
)
from finchat_server.services import ChatService
from finchat_server.sessions import ChatSession, SessionManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


def session_not_found(session_id: str) -> HTTPException:
    """Build the 404 error used by every session-scoped endpoint."""
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error": {
                "code": "session_not_found",
                "message": f"Session {session_id} not found",
                "details": {"session_id": session_id},
            }
        },
    )


def _load_session(session_manager: SessionManager, session_id: str) -> ChatSession:
    try:
        return session_manager.get_session(session_id)
    except SessionNotFoundError:
        raise session_not_found(session_id)


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new session",
)
async def create_session(
    request: CreateSessionRequest,
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> SessionResponse:
    """Create a new chat session.

    Args:
        request: Session creation parameters
        session_manager: Injected SessionManager

    Returns:
        Created session metadata
    """
    session = session_manager.create_session(model=request.model)
    return SessionResponse.from_session(session)


@router.get(
    "",
    response_model=SessionListResponse,
    summary="List all sessions",
)
async def list_sessions(
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> SessionListResponse:
    """List all chat sessions, sorted by most recently updated."""
    items = [
        SessionListItem(
            **SessionResponse.from_session(session).model_dump(),
            preview=session.get_preview(),
        )
        for session in session_manager.list_sessions()
    ]
    return SessionListResponse(sessions=items)


@router.get(
    "/{session_id}",
    response_model=SessionDetailResponse,
    summary="Get session details",
)
async def get_session(
    session_id: str,
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> SessionDetailResponse:
    """Get a session with its full turn history, loading flag and last error.

    Raises:
        HTTPException: 404 if session not found
    """
    session = _load_session(session_manager, session_id)
    return SessionDetailResponse(
        **SessionResponse.from_session(session).model_dump(),
        turns=[TurnResponse.from_turn(turn) for turn in session.history()],
    )


@router.get(
    "/{session_id}/turns",
    response_model=TurnsResponse,
    summary="Get session turns",
)
async def get_turns(
    session_id: str,
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
) -> TurnsResponse:
    """Get the ordered turns of a session.

    Raises:
        HTTPException: 404 if session not found
    """
    session = _load_session(session_manager, session_id)
    return TurnsResponse(
        turns=[TurnResponse.from_turn(turn) for turn in session.history()]
    )


@router.delete(
    "/{session_id}/turns",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear a session",
)
async def clear_session(
    session_id: str,
    chat_service: Annotated[ChatService, Depends(get_chat_service)],
) -> Response:
    """Drop all turns and pending error state, abandoning any running cycle.

    Raises:
        HTTPException: 404 if session not found
    """
    try:
        chat_service.clear_session(session_id)
    except SessionNotFoundError:
        raise session_not_found(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a session",
)
async def delete_session(
    session_id: str,
    chat_service: Annotated[ChatService, Depends(get_chat_service)],
) -> Response:
    """Delete a session, abandoning any running cycle.

    Raises:
        HTTPException: 404 if session not found
    """
    try:
        chat_service.delete_session(session_id)
    except SessionNotFoundError:
        raise session_not_found(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
