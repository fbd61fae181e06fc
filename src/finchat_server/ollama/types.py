"""Type definitions for Ollama integration.

This module contains the dataclass representing one model reply and the
helpers that normalize Ollama's chat response into it.
"""

from dataclasses import dataclass, field
from typing import Any

from finchat_server.sessions.types import ToolInvocation


def _get_value(obj: Any, key: str, default: Any = None) -> Any:
    """Read a value from either an object attribute or a dict key."""
    if isinstance(obj, dict):
        return obj.get(key, default)
    if hasattr(obj, key):
        return getattr(obj, key, default)
    return default


@dataclass
class ModelReply:
    """One response from the model.

    Attributes:
        content: Text content of the reply (may be empty when tools are requested)
        tool_calls: Tool invocations requested by the model, in model order
        model: Name of the model that produced the reply
        eval_count: Number of tokens generated
        prompt_eval_count: Number of tokens in the prompt
    """

    content: str = ""
    tool_calls: list[ToolInvocation] = field(default_factory=list)
    model: str = ""
    eval_count: int | None = None
    prompt_eval_count: int | None = None

    @property
    def wants_tools(self) -> bool:
        return bool(self.tool_calls)

    @staticmethod
    def from_ollama_response(response: Any) -> "ModelReply":
        """Create a ModelReply from an Ollama chat response.

        Args:
            response: ChatResponse object or dict returned by ollama.AsyncClient.chat

        Returns:
            ModelReply: Normalized reply
        """
        if hasattr(response, "model_dump"):
            response = response.model_dump()

        message = _get_value(response, "message", {}) or {}
        invocations: list[ToolInvocation] = []
        for call in _get_value(message, "tool_calls", None) or []:
            function = _get_value(call, "function", {}) or {}
            name = _get_value(function, "name")
            if not name:
                continue
            arguments = _get_value(function, "arguments", {}) or {}
            invocations.append(ToolInvocation(name=name, arguments=dict(arguments)))

        return ModelReply(
            content=_get_value(message, "content", "") or "",
            tool_calls=invocations,
            model=_get_value(response, "model", "") or "",
            eval_count=_get_value(response, "eval_count"),
            prompt_eval_count=_get_value(response, "prompt_eval_count"),
        )
