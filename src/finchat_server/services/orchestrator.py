"""Tool-augmented conversation orchestration.

One call to ``Orchestrator.handle`` runs one cycle:

    AWAITING_FIRST_RESPONSE -> DIRECT_ANSWER -> DONE
    AWAITING_FIRST_RESPONSE -> AWAITING_TOOL_OUTCOMES
        -> AWAITING_SECOND_RESPONSE -> DONE

The first model call sees the flattened history, the new user text and the
advertised tools. If it requests tools, every requested call is executed
independently and the outcomes, in request order, are sent back in a second
call on the same context whose text becomes the assistant turn.

At every transition the cycle checks that its session has not been cleared
since it started; a stale cycle raises CycleCancelledError and appends
nothing.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable

from finchat_server.errors import CycleAbortError, CycleCancelledError
from finchat_server.ollama.client import OllamaClient
from finchat_server.ollama.types import ModelReply
from finchat_server.services.prompts import DEFAULT_SYSTEM_PROMPT
from finchat_server.sessions.session import ChatSession
from finchat_server.sessions.types import ToolInvocation, ToolOutcome, Turn
from finchat_server.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class CycleState(str, Enum):
    AWAITING_FIRST_RESPONSE = "awaiting_first_response"
    DIRECT_ANSWER = "direct_answer"
    AWAITING_TOOL_OUTCOMES = "awaiting_tool_outcomes"
    AWAITING_SECOND_RESPONSE = "awaiting_second_response"
    DONE = "done"


@dataclass(frozen=True)
class CycleEvent:
    """Progress notification emitted while a cycle runs.

    Attributes:
        kind: "state", "tool_call" or "tool_result"
        data: JSON-compatible payload
    """

    kind: str
    data: dict[str, Any] = field(default_factory=dict)


EventCallback = Callable[[CycleEvent], Awaitable[None]]


def _assistant_tool_call_message(reply: ModelReply) -> dict[str, Any]:
    return {
        "role": "assistant",
        "content": reply.content,
        "tool_calls": [
            {"function": {"name": call.name, "arguments": dict(call.arguments)}}
            for call in reply.tool_calls
        ],
    }


def _tool_message(outcome: ToolOutcome) -> dict[str, Any]:
    return {
        "role": "tool",
        "tool_name": outcome.name,
        "content": json.dumps(outcome.to_response(), default=str),
    }


class Orchestrator:
    """Drives one request cycle between the model and the tool registry."""

    def __init__(
        self,
        client: OllamaClient,
        registry: ToolRegistry,
        system_prompt: str | None = None,
        model_timeout: float | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: Model service client
            registry: Tools advertised to and executed for the model
            system_prompt: Optional override of the built-in system prompt
            model_timeout: Seconds allowed per model call (None disables it)
        """
        self._client = client
        self._registry = registry
        self._system_prompt = system_prompt or DEFAULT_SYSTEM_PROMPT
        self._model_timeout = model_timeout

    async def handle(
        self,
        session: ChatSession,
        user_input: str,
        on_event: EventCallback | None = None,
    ) -> Turn | None:
        """Turn one user utterance into one assistant turn.

        Args:
            session: Conversation to read from and append to
            user_input: The user's message
            on_event: Optional async callback receiving CycleEvents

        Returns:
            The appended assistant Turn, or None when the input was empty

        Raises:
            CycleAbortError: If a model call fails; the user turn stays
                appended and no assistant turn is added
            CycleCancelledError: If the session was cleared mid-cycle
        """
        if not user_input or not user_input.strip():
            logger.debug(f"Session {session.session_id}: ignoring empty input")
            return None

        generation = session.generation
        prior_messages = session.flattened_history()
        session.add_user_turn(user_input)

        messages: list[dict[str, Any]] = [
            {"role": "system", "content": self._system_prompt},
            *prior_messages,
            {"role": "user", "content": user_input},
        ]
        tools = self._registry.ollama_tools()

        await self._transition(
            session, generation, CycleState.AWAITING_FIRST_RESPONSE, on_event
        )
        first = await self._call_model(session, messages, tools)

        if not first.wants_tools:
            await self._transition(
                session, generation, CycleState.DIRECT_ANSWER, on_event
            )
            turn = session.add_assistant_turn(first.content)
            logger.info(f"Session {session.session_id}: answered directly")
            await self._emit(on_event, CycleEvent("state", {"state": CycleState.DONE.value}))
            return turn

        invocations = list(first.tool_calls)
        await self._transition(
            session, generation, CycleState.AWAITING_TOOL_OUTCOMES, on_event
        )
        outcomes = await self._run_tools(invocations, on_event)

        await self._transition(
            session, generation, CycleState.AWAITING_SECOND_RESPONSE, on_event
        )
        follow_up = [
            *messages,
            _assistant_tool_call_message(first),
            *(_tool_message(outcome) for outcome in outcomes),
        ]
        final = await self._call_model(session, follow_up, tools)
        if not final.content.strip():
            raise CycleAbortError("Model returned no answer after tool execution")

        self._ensure_current(session, generation)
        turn = session.add_assistant_turn(
            final.content, tool_calls=invocations, tool_results=outcomes
        )
        failed = sum(1 for outcome in outcomes if not outcome.ok)
        logger.info(
            f"Session {session.session_id}: answered with {len(outcomes)} tool calls "
            f"({failed} failed)"
        )
        await self._emit(on_event, CycleEvent("state", {"state": CycleState.DONE.value}))
        return turn

    async def _run_tools(
        self, invocations: list[ToolInvocation], on_event: EventCallback | None
    ) -> list[ToolOutcome]:
        for index, invocation in enumerate(invocations):
            await self._emit(
                on_event,
                CycleEvent("tool_call", {"index": index, **invocation.to_dict()}),
            )

        outcomes = await self._registry.execute_all(invocations)

        for index, outcome in enumerate(outcomes):
            await self._emit(
                on_event,
                CycleEvent("tool_result", {"index": index, **outcome.to_dict()}),
            )
        return outcomes

    async def _call_model(
        self,
        session: ChatSession,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
    ) -> ModelReply:
        try:
            return await asyncio.wait_for(
                self._client.chat(model=session.model, messages=messages, tools=tools),
                timeout=self._model_timeout,
            )
        except TimeoutError as e:
            raise CycleAbortError(
                f"Model did not respond within {self._model_timeout} seconds"
            ) from e
        except Exception as e:
            raise CycleAbortError(f"Failed to get response from model: {e}") from e

    async def _transition(
        self,
        session: ChatSession,
        generation: int,
        state: CycleState,
        on_event: EventCallback | None,
    ) -> None:
        logger.debug(f"Session {session.session_id}: cycle state {state.value}")
        await self._emit(on_event, CycleEvent("state", {"state": state.value}))
        self._ensure_current(session, generation)

    @staticmethod
    def _ensure_current(session: ChatSession, generation: int) -> None:
        if session.generation != generation:
            raise CycleCancelledError(
                f"Session {session.session_id} was cleared during the cycle"
            )

    @staticmethod
    async def _emit(on_event: EventCallback | None, event: CycleEvent) -> None:
        if on_event is not None:
            await on_event(event)
