"""Exception hierarchy for finchat-server.

Tool errors are recovered at the registry boundary and reported inline in
the tool's outcome. Cycle errors abort an orchestration cycle and are
surfaced to the caller. Session errors describe invalid caller requests.
"""


class FinchatError(Exception):
    """Base class for all finchat-server errors."""


class ToolError(FinchatError):
    """Base class for failures that belong to a single tool invocation."""


class ToolNotFoundError(ToolError):
    """Raised when the model requests a tool that is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool {name} not found")


class ToolExecutionError(ToolError):
    """Raised when a tool ran but could not produce a result."""


class ConfigurationError(ToolExecutionError):
    """Raised when a tool is missing a required credential."""


class CycleAbortError(FinchatError):
    """Raised when the model call itself fails and the cycle cannot complete."""


class CycleCancelledError(FinchatError):
    """Raised when the session was cleared while a cycle was in flight."""


class SessionNotFoundError(FinchatError, LookupError):
    """Raised when a session id is unknown."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")


class SessionBusyError(FinchatError):
    """Raised when a message is sent while a cycle is already running."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session {session_id} is already processing a message")
