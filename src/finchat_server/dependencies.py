"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings and services.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from finchat_server.config import FinchatServerSettings
from finchat_server.ollama import OllamaClient
from finchat_server.services import ChatService
from finchat_server.sessions import SessionManager
from finchat_server.tools import ToolRegistry


@lru_cache
def get_settings() -> FinchatServerSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the FINCHAT_ prefix.

    Returns:
        FinchatServerSettings: The application configuration settings.
    """
    return FinchatServerSettings()


def _from_state(request: Request, name: str, label: str):
    if not hasattr(request.app.state, name):
        raise HTTPException(
            status_code=503,
            detail=f"{label} not initialized",
        )
    return getattr(request.app.state, name)


def get_ollama_client(request: Request) -> OllamaClient | None:
    """Get the Ollama client from app state, or None before startup."""
    return getattr(request.app.state, "ollama_client", None)


def get_tool_registry(request: Request) -> ToolRegistry:
    """Get the tool registry built at startup.

    Raises:
        HTTPException: If the registry is not initialized (503 Service Unavailable).
    """
    return _from_state(request, "tool_registry", "Tool registry")


def get_session_manager(request: Request) -> SessionManager:
    """Get the process-wide SessionManager.

    Raises:
        HTTPException: If the manager is not initialized (503 Service Unavailable).
    """
    return _from_state(request, "session_manager", "Session manager")


def get_chat_service(request: Request) -> ChatService:
    """Get the ChatService that runs orchestration cycles.

    Raises:
        HTTPException: If the service is not initialized (503 Service Unavailable).
    """
    return _from_state(request, "chat_service", "Chat service")
