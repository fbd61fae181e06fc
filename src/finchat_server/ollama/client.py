"""Async Ollama client wrapper.

This module provides an async wrapper around the ollama.AsyncClient for
communicating with the Ollama API. The client is created once at startup
and reused for every orchestration cycle.
"""

import logging
from typing import Any

import ollama

from finchat_server.ollama.types import ModelReply

logger = logging.getLogger(__name__)


class OllamaClient:
    """Async client for tool-calling chat against the Ollama API.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(self, host: str) -> None:
        """Initialize the Ollama client.

        Args:
            host: The Ollama server URL
        """
        self.host = host
        self._client = ollama.AsyncClient(host=host)
        logger.info(f"OllamaClient initialized with host: {host}")

    async def check_connection(self) -> bool:
        """Check if the Ollama server is reachable.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            await self._client.list()
            logger.debug("Ollama connection check: successful")
            return True
        except Exception as e:
            logger.warning(f"Ollama connection check failed: {e}")
            return False

    async def chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        options: dict[str, Any] | None = None,
    ) -> ModelReply:
        """Send one chat request and return the complete reply.

        Tool calling is not combined with streaming: the reply either
        carries text or a list of requested tool invocations.

        Args:
            model: The model name to use for the chat
            messages: List of message dicts in Ollama format:
                      [{"role": "user", "content": "..."}, ...]
            tools: Tool definitions in Ollama function format
            options: Optional model parameters (temperature, etc.)

        Returns:
            ModelReply: The normalized reply

        Raises:
            Exception: If the Ollama API request fails
        """
        logger.debug(
            f"Sending chat request to {model}: {len(messages)} messages, "
            f"{len(tools or [])} tools"
        )
        try:
            response = await self._client.chat(
                model=model,
                messages=messages,
                tools=tools or None,
                stream=False,
                options=options,
            )
        except Exception as e:
            logger.error(f"Chat request failed: {e}")
            raise

        reply = ModelReply.from_ollama_response(response)
        logger.debug(
            f"Received reply: content_length={len(reply.content)}, "
            f"tool_calls={len(reply.tool_calls)}"
        )
        return reply

    async def close(self) -> None:
        """Close the client and clean up resources.

        ollama.AsyncClient doesn't require explicit cleanup in current
        versions; its httpx transport is released with the client.
        """
        logger.debug("OllamaClient closed")
