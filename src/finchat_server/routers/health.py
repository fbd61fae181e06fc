"""Health check endpoint router."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from finchat_server import __version__
from finchat_server.dependencies import get_ollama_client
from finchat_server.models.health import HealthResponse
from finchat_server.ollama import OllamaClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    request: Request,
    ollama_client: Annotated[OllamaClient | None, Depends(get_ollama_client)],
) -> HealthResponse:
    """Health check endpoint.

    Returns the current health status and version of the finchat-server,
    the number of registered tools, and connectivity to the Ollama server if
    the client is initialized.

    Args:
        request: The FastAPI request object.
        ollama_client: The Ollama client, or None before startup.

    Returns:
        HealthResponse: Health status and version information.
    """
    ollama_connected = None
    ollama_host = None

    if ollama_client is not None:
        ollama_host = ollama_client.host

        try:
            ollama_connected = await ollama_client.check_connection()
            logger.debug(f"Ollama connectivity check: {ollama_connected}")
        except Exception as e:
            logger.warning(f"Ollama connectivity check failed: {e}")
            ollama_connected = False

    registry = getattr(request.app.state, "tool_registry", None)

    return HealthResponse(
        status="ok",
        version=__version__,
        ollama_connected=ollama_connected,
        ollama_host=ollama_host,
        tool_count=len(registry) if registry is not None else 0,
    )
