"""Pytest configuration and shared fixtures for finchat-server tests.

This module provides common fixtures used across all test modules,
including test app creation, async client setup and a scripted model.
"""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from finchat_server import create_app
from finchat_server.config import FinchatServerSettings
from finchat_server.ollama import ModelReply
from finchat_server.sessions import ToolInvocation
from finchat_server.tools import build_default_registry


@pytest.fixture
def test_settings():
    """Create test settings with provider credentials and short timeouts.

    Returns:
        FinchatServerSettings: Settings instance configured for testing.
    """
    return FinchatServerSettings(
        host="127.0.0.1",
        port=8000,
        ollama_host="http://localhost:11434",
        model="llama3.2:latest",
        model_timeout=5.0,
        tool_timeout=5.0,
        news_api_key="test-news-key",
        alpha_vantage_api_key="test-av-key",
        exchange_rate_api_key="test-fx-key",
        coingecko_base_url="https://coingecko.test/api/v3",
        news_api_base_url="https://newsapi.test/v2",
        alpha_vantage_base_url="https://alphavantage.test",
        exchange_rate_base_url="https://exchangerate.test/v6",
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


@pytest.fixture
def registry(test_settings):
    """Built-in tool registry without an HTTP client (pure tools only)."""
    return build_default_registry(test_settings)


@pytest.fixture
def model_client():
    """A mocked model client; set ``chat.side_effect`` to script replies."""
    client = AsyncMock()
    client.host = "http://localhost:11434"
    return client


@pytest.fixture
def text_reply():
    """Factory for a model reply that answers directly."""

    def make(content: str) -> ModelReply:
        return ModelReply(content=content, model="llama3.2:latest")

    return make


@pytest.fixture
def tool_reply():
    """Factory for a model reply requesting (name, arguments) tool calls."""

    def make(*calls: tuple[str, dict]) -> ModelReply:
        return ModelReply(
            content="",
            tool_calls=[
                ToolInvocation(name=name, arguments=args) for name, args in calls
            ],
            model="llama3.2:latest",
        )

    return make
