"""Chat API endpoints.

This module provides endpoints that run one orchestration cycle per user
message, either returning the final assistant turn or streaming the
cycle's progress via SSE.
"""

import asyncio
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from sse_starlette.sse import EventSourceResponse

from finchat_server.dependencies import get_chat_service
from finchat_server.errors import (
    CycleAbortError,
    SessionBusyError,
    SessionNotFoundError,
)
from finchat_server.models.chat import (
    ChatRequest,
    ChatResponse,
    DoneEvent,
    ErrorEvent,
    MessageCompleteEvent,
    StateEvent,
    ToolCallEvent,
    ToolResultEvent,
)
from finchat_server.models.sessions import TurnResponse
from finchat_server.routers.sessions import session_not_found
from finchat_server.services import ChatService, CycleEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])

_EVENT_MODELS = {
    "state": StateEvent,
    "tool_call": ToolCallEvent,
    "tool_result": ToolResultEvent,
}


def _session_busy(session_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "error": {
                "code": "session_busy",
                "message": f"Session {session_id} is already processing a message",
                "details": {"session_id": session_id},
            }
        },
    )


def _model_error(session_id: str, error: CycleAbortError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail={
            "error": {
                "code": "model_error",
                "message": str(error),
                "details": {"session_id": session_id},
            }
        },
    )


def _sse(event: str, payload: Any) -> dict[str, str]:
    return {"event": event, "data": payload.model_dump_json()}


def cycle_event_to_sse(event: CycleEvent) -> dict[str, str]:
    """Convert an orchestrator CycleEvent into an SSE message."""
    model = _EVENT_MODELS[event.kind]
    return _sse(event.kind, model.model_validate(event.data))


@router.post("/{session_id}", response_model=ChatResponse)
async def chat_non_streaming(
    session_id: str,
    request_body: ChatRequest,
    chat_service: Annotated[ChatService, Depends(get_chat_service)],
) -> ChatResponse:
    """Send a message to a session and receive the final assistant turn.

    Empty messages are ignored and answered with a null turn.

    Args:
        session_id: The session ID to chat with
        request_body: Chat request containing the message
        chat_service: Injected ChatService

    Returns:
        ChatResponse with the assistant turn

    Raises:
        HTTPException: 404 if session not found, 409 if the session is busy,
            502 if the model call fails
    """
    try:
        turn = await chat_service.send_message(session_id, request_body.message)
    except SessionNotFoundError:
        raise session_not_found(session_id)
    except SessionBusyError:
        raise _session_busy(session_id)
    except CycleAbortError as e:
        raise _model_error(session_id, e)

    return ChatResponse(
        session_id=session_id,
        turn=TurnResponse.from_turn(turn) if turn is not None else None,
    )


@router.post("/{session_id}/stream")
async def chat_streaming(
    session_id: str,
    request_body: ChatRequest,
    chat_service: Annotated[ChatService, Depends(get_chat_service)],
) -> EventSourceResponse:
    """Stream an orchestration cycle via Server-Sent Events (SSE).

    SSE Events:
        - state: The cycle entered a new state
        - tool_call: The model requested a tool call
        - tool_result: A tool call finished (result or error)
        - message_complete: The assistant turn was appended
        - error: The cycle failed
        - done: Stream is complete

    Raises:
        HTTPException: 404 if session not found, 409 if the session is busy
    """
    try:
        busy = chat_service.is_busy(session_id)
    except SessionNotFoundError:
        raise session_not_found(session_id)
    if busy:
        raise _session_busy(session_id)

    queue: asyncio.Queue[dict[str, str] | None] = asyncio.Queue()

    async def on_event(event: CycleEvent) -> None:
        await queue.put(cycle_event_to_sse(event))

    async def run_cycle() -> None:
        try:
            turn = await chat_service.send_message(
                session_id, request_body.message, on_event=on_event
            )
            if turn is not None:
                complete = MessageCompleteEvent(
                    session_id=session_id, turn=TurnResponse.from_turn(turn)
                )
                await queue.put(_sse("message_complete", complete))
        except SessionBusyError as e:
            await queue.put(
                _sse("error", ErrorEvent(code="session_busy", message=str(e)))
            )
        except SessionNotFoundError as e:
            await queue.put(
                _sse("error", ErrorEvent(code="session_not_found", message=str(e)))
            )
        except CycleAbortError as e:
            error_event = ErrorEvent(
                code="model_error",
                message=str(e),
                details={"session_id": session_id},
            )
            await queue.put(_sse("error", error_event))
        finally:
            await queue.put(None)

    async def event_generator():
        """Relay cycle events until the cycle finishes."""
        task = asyncio.create_task(run_cycle())
        try:
            while True:
                item = await queue.get()
                if item is None:
                    break
                yield item
            yield _sse("done", DoneEvent(session_id=session_id))
        finally:
            if not task.done():
                logger.warning(
                    f"Client disconnected during streaming for session {session_id}"
                )
                task.cancel()

    return EventSourceResponse(event_generator())
