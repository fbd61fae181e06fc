"""Pytest configuration for integration tests.

This module provides integration-test-specific fixtures: a mocked model
client wired in through the app lifespan and an SSE body parser.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest


@pytest.fixture(autouse=True)
def mock_ollama_client():
    """Mock OllamaClient for all integration tests.

    This fixture patches the OllamaClient class before the app is created,
    ensuring the lifespan uses our mock instead of creating a real client.
    Tests script replies through ``mock_ollama_client.chat.side_effect``.
    """
    with patch("finchat_server.app.OllamaClient") as mock_client_class:
        mock_instance = AsyncMock()
        mock_instance.host = "http://localhost:11434"
        mock_instance.check_connection.return_value = True
        mock_instance.close = AsyncMock()

        mock_client_class.return_value = mock_instance

        yield mock_instance


@pytest.fixture
def parse_sse():
    """Parse an SSE response body into a list of {"event", "data"} dicts."""

    def parse(text: str) -> list[dict]:
        events = []
        normalized_text = text.replace("\r\n", "\n")
        for chunk in normalized_text.strip().split("\n\n"):
            event_type = None
            event_data = None
            for part in chunk.split("\n"):
                if part.startswith("event:"):
                    event_type = part.split(":", 1)[1].strip()
                elif part.startswith("data:"):
                    event_data = part.split(":", 1)[1].strip()
            if event_type and event_data:
                events.append({"event": event_type, "data": json.loads(event_data)})
        return events

    return parse


@pytest.fixture
def create_session(async_client):
    """Create a session through the API and return its id."""

    async def create(model: str | None = None) -> str:
        body = {"model": model} if model else {}
        response = await async_client.post("/api/v1/sessions", json=body)
        assert response.status_code == 201
        return response.json()["session_id"]

    return create
