"""CLI entry point for finchat-server.

This module provides the command-line interface for starting the finchat-server.
It can be invoked as `finchat-server` (via the script entry point) or
`python -m finchat_server`.
"""

import argparse
import logging
import os
import sys

import uvicorn

from finchat_server import __version__, create_app
from finchat_server.config import FinchatServerSettings


def configure_logging(level: str) -> None:
    """Configure root logging for the server process.

    httpx logs full request URLs at INFO, and some tool providers take their
    credential in the URL, so its logger is capped at WARNING.
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main() -> None:
    """Main entry point for the finchat-server CLI.

    Parses command-line arguments and starts the uvicorn server with the
    FastAPI application.
    """
    parser = argparse.ArgumentParser(
        prog="finchat-server",
        description="Headless FastAPI server for tool-augmented LLM conversations via Ollama",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"finchat-server {__version__}",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via FINCHAT_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via FINCHAT_PORT)",
    )

    parser.add_argument(
        "--ollama-host",
        type=str,
        default=None,
        help="Ollama server URL (default: http://localhost:11434, can be set via FINCHAT_OLLAMA_HOST)",
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Default model for new sessions (default: llama3.2:latest, can be set via FINCHAT_MODEL)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via FINCHAT_LOG_LEVEL)",
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development (uvicorn --reload)",
    )

    args = parser.parse_args()

    # Build settings, CLI args override environment variables
    settings_kwargs = {}
    if args.host is not None:
        settings_kwargs["host"] = args.host
    if args.port is not None:
        settings_kwargs["port"] = args.port
    if args.ollama_host is not None:
        settings_kwargs["ollama_host"] = args.ollama_host
    if args.model is not None:
        settings_kwargs["model"] = args.model
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    settings = FinchatServerSettings(**settings_kwargs)
    configure_logging(settings.log_level)

    if args.reload:
        # The reloader builds the app in a child process from FINCHAT_* variables
        for name, value in settings_kwargs.items():
            os.environ[f"FINCHAT_{name.upper()}"] = str(value)

        uvicorn.run(
            "finchat_server.app:create_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            reload=True,
        )
        return

    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    sys.exit(main())
