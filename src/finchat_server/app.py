"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finchat_server import __version__
from finchat_server.config import FinchatServerSettings
from finchat_server.ollama import OllamaClient
from finchat_server.routers import chat, health, sessions, tools
from finchat_server.services import ChatService, Orchestrator
from finchat_server.sessions import SessionManager
from finchat_server.tools import build_default_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    Expensive and process-wide objects (the Ollama client, the shared HTTP
    client for tool providers, the tool registry, the session store and the
    chat service) are created once at startup and stored in app.state.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: FinchatServerSettings = app.state.settings

    app.state.ollama_client = OllamaClient(host=settings.ollama_host)
    logger.info(f"Initialized Ollama client with host: {settings.ollama_host}")

    connected = await app.state.ollama_client.check_connection()
    if connected:
        logger.info("Successfully connected to Ollama")
    else:
        logger.warning("Could not connect to Ollama - check if server is running")

    app.state.http_client = httpx.AsyncClient(timeout=settings.tool_timeout)
    app.state.tool_registry = build_default_registry(
        settings, http_client=app.state.http_client
    )
    app.state.session_manager = SessionManager(default_model=settings.model)
    orchestrator = Orchestrator(
        client=app.state.ollama_client,
        registry=app.state.tool_registry,
        system_prompt=settings.system_prompt,
        model_timeout=settings.model_timeout,
    )
    app.state.chat_service = ChatService(app.state.session_manager, orchestrator)

    yield

    # Shutdown: abandon running cycles, then release clients
    await app.state.chat_service.shutdown()
    await app.state.http_client.aclose()
    logger.info("Tool provider HTTP client closed")
    await app.state.ollama_client.close()
    logger.info("Ollama client closed")


def create_app(settings: FinchatServerSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a FastAPI instance with all routers,
    middleware, and configuration applied. It can accept an optional
    settings object for testing or explicit configuration.

    Args:
        settings: Optional FinchatServerSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from finchat_server.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="finchat-server",
        description="Headless FastAPI server for tool-augmented LLM conversations via Ollama",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(tools.router)
    app.include_router(sessions.router)
    app.include_router(chat.router)

    return app
