"""Ollama client wrapper and integration layer.

This package provides the async client wrapper used as the model service
boundary of the orchestrator.
"""

from finchat_server.ollama.client import OllamaClient
from finchat_server.ollama.types import ModelReply

__all__ = ["OllamaClient", "ModelReply"]
