"""Business logic services for finchat-server.

This package contains the orchestration loop and the caller-facing chat
service built on top of it.
"""

from finchat_server.services.chat import ChatService
from finchat_server.services.orchestrator import CycleEvent, CycleState, Orchestrator

__all__ = [
    "ChatService",
    "CycleEvent",
    "CycleState",
    "Orchestrator",
]
