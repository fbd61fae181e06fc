"""finchat-server: Headless FastAPI server for tool-augmented LLM conversations.

This package provides a REST API and SSE streaming interface for chat
sessions in which an Ollama model can call arithmetic, market-data, news,
valuation and currency tools before answering.
"""

__version__ = "0.1.0"

from finchat_server.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]
