"""Exceptions raised by the memory runtime."""


class MemoryRuntimeError(Exception):
    """Base class for all memory runtime errors."""


class SessionNotFound(MemoryRuntimeError):
    """
    Exception raised when a session id has no persisted state.
    """

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class InvalidEventType(MemoryRuntimeError):
    """
    Exception raised when an event type is outside the closed set of event types.
    """

    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(f"Invalid event type: {event_type}")


class StoreFailure(MemoryRuntimeError):
    """
    Exception raised when the underlying store fails.

    The original store error is chained as ``__cause__``.
    """

    def __init__(self, operation: str, session_id: str | None = None, reason: str | None = None):
        self.operation = operation
        self.session_id = session_id
        self.reason = reason
        message = f"Store operation '{operation}' failed"
        if session_id:
            message += f" (session_id: {session_id})"
        if reason:
            message += f": {reason}"
        super().__init__(message)
