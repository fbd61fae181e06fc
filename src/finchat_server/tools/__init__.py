"""Tool registry, schema advertisement and execution layer.

This package provides the read-only tool registry, the typed argument
validation that guards it, and the six built-in tools.
"""

import httpx

from finchat_server.config import FinchatServerSettings
from finchat_server.tools.builtin import BUILTIN_TOOLS
from finchat_server.tools.registry import (
    Tool,
    ToolArguments,
    ToolContext,
    ToolParameter,
    ToolRegistry,
    ToolSpec,
)


def build_default_registry(
    settings: FinchatServerSettings,
    http_client: httpx.AsyncClient | None = None,
) -> ToolRegistry:
    """Assemble the registry of built-in tools.

    Args:
        settings: Settings providing credentials, endpoints and the tool timeout
        http_client: Shared client used by network-backed tools
    """
    context = ToolContext(settings=settings, http=http_client)
    return ToolRegistry(BUILTIN_TOOLS, context=context, timeout=settings.tool_timeout)


__all__ = [
    "Tool",
    "ToolArguments",
    "ToolContext",
    "ToolParameter",
    "ToolRegistry",
    "ToolSpec",
    "build_default_registry",
]
