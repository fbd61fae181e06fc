"""Tool registry, schema advertisement and isolated dispatch.

The registry maps a tool name to its ToolSpec (what the model is told),
its typed argument model (what the model must send) and its handler (what
runs). It is assembled once at startup and is read-only afterwards.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterable, Literal

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from finchat_server.config import FinchatServerSettings
from finchat_server.errors import ToolError, ToolExecutionError, ToolNotFoundError
from finchat_server.sessions.types import ToolInvocation, ToolOutcome

logger = logging.getLogger(__name__)

ParameterType = Literal["number", "integer", "string", "boolean"]


class ToolArguments(BaseModel):
    """Base class for the typed argument model of a tool.

    Unknown fields are rejected so that a malformed call fails validation
    instead of being passed through to the handler.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


@dataclass(frozen=True)
class ToolParameter:
    """One named parameter of a tool."""

    name: str
    type: ParameterType
    description: str
    required: bool = True


@dataclass(frozen=True)
class ToolSpec:
    """Machine-readable advertisement of a tool."""

    name: str
    description: str
    parameters: tuple[ToolParameter, ...] = ()

    @property
    def required(self) -> list[str]:
        return [param.name for param in self.parameters if param.required]

    def to_ollama(self) -> dict[str, Any]:
        """Convert to the function-tool format accepted by Ollama."""
        parameters: dict[str, Any] = {
            "type": "object",
            "properties": {
                param.name: {"type": param.type, "description": param.description}
                for param in self.parameters
            },
        }
        if self.required:
            parameters["required"] = self.required

        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": parameters,
            },
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": [
                {
                    "name": param.name,
                    "type": param.type,
                    "description": param.description,
                    "required": param.required,
                }
                for param in self.parameters
            ],
        }


@dataclass(frozen=True)
class ToolContext:
    """Shared resources handed to every tool handler."""

    settings: FinchatServerSettings
    http: httpx.AsyncClient | None = None


ToolHandler = Callable[[Any, ToolContext], Awaitable[Any]]


@dataclass(frozen=True)
class Tool:
    """A registered capability: spec, argument model and handler."""

    spec: ToolSpec
    arguments: type[ToolArguments]
    handler: ToolHandler = field(repr=False)

    @property
    def name(self) -> str:
        return self.spec.name


def _to_jsonable(value: Any) -> Any:
    """Normalize a handler result into a JSON-compatible value."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_jsonable(item) for key, item in value.items()}
    return value


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "arguments"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


class ToolRegistry:
    """Read-only mapping of tool names to executable capabilities.

    Attributes:
        context: Shared resources passed to every handler
        timeout: Per-call timeout in seconds (None disables it)
    """

    def __init__(
        self,
        tools: Iterable[Tool],
        context: ToolContext,
        timeout: float | None = None,
    ) -> None:
        entries: dict[str, Tool] = {}
        for tool in tools:
            if tool.name in entries:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            entries[tool.name] = tool

        self._tools = MappingProxyType(entries)
        self.context = context
        self.timeout = timeout
        logger.info(f"Tool registry initialized with {len(entries)} tools")

    @property
    def tools(self) -> MappingProxyType:
        return self._tools

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def names(self) -> list[str]:
        return list(self._tools)

    def specs(self) -> list[ToolSpec]:
        """Return every ToolSpec in registration order."""
        return [tool.spec for tool in self._tools.values()]

    def ollama_tools(self) -> list[dict[str, Any]]:
        """Return every ToolSpec in the format advertised to the model."""
        return [spec.to_ollama() for spec in self.specs()]

    async def dispatch(self, name: str, args: Any) -> Any:
        """Validate arguments and run a tool.

        Args:
            name: Registered tool name
            args: Argument mapping as produced by the model

        Returns:
            The tool result, normalized to JSON-compatible data

        Raises:
            ToolNotFoundError: If ``name`` is not registered
            ToolExecutionError: If the arguments are invalid, the call times
                out, or the handler fails
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)

        try:
            parsed = tool.arguments.model_validate(args if args is not None else {})
        except ValidationError as e:
            raise ToolExecutionError(
                f"Invalid arguments for {name}: {_format_validation_error(e)}"
            ) from e

        logger.debug(f"Dispatching tool {name}")
        try:
            result = await asyncio.wait_for(
                tool.handler(parsed, self.context), timeout=self.timeout
            )
        except ToolError:
            raise
        except TimeoutError as e:
            raise ToolExecutionError(
                f"Tool {name} timed out after {self.timeout} seconds"
            ) from e
        except Exception as e:
            logger.warning(f"Tool {name} raised {type(e).__name__}")
            raise ToolExecutionError(f"Tool {name} failed") from e

        return _to_jsonable(result)

    async def execute(self, invocation: ToolInvocation) -> ToolOutcome:
        """Run one invocation and capture its outcome.

        This is the isolation boundary: every tool failure is converted into
        an error outcome and never propagates to sibling invocations.
        """
        try:
            result = await self.dispatch(invocation.name, invocation.arguments)
        except ToolError as e:
            logger.warning(f"Tool {invocation.name} failed: {e}")
            return ToolOutcome.failure(invocation.name, str(e))

        logger.debug(f"Tool {invocation.name} succeeded")
        return ToolOutcome.success(invocation.name, result)

    async def execute_all(
        self, invocations: list[ToolInvocation]
    ) -> list[ToolOutcome]:
        """Run invocations concurrently, returning outcomes in request order."""
        outcomes = await asyncio.gather(
            *(self.execute(invocation) for invocation in invocations)
        )
        return list(outcomes)
