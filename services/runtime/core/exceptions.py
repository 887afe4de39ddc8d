"""
Custom exception classes.

Represent failures of the runtime itself, as opposed to failures raised by
the application handler.
"""


class LambdaRuntimeError(Exception):
    """Base exception class for the runtime."""

    pass


class EnvelopeDecodeError(LambdaRuntimeError):
    """Raised when an event envelope cannot be turned into a RequestModel."""

    pass


class ResponseEncodeError(LambdaRuntimeError):
    """Raised when a handler result cannot be encoded for the Runtime API."""

    pass


class RuntimeApiError(LambdaRuntimeError):
    """Failed to talk to the Runtime API (network error or non-2xx status)."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Runtime API {operation} failed: {cause}")


class HandlerLoadError(LambdaRuntimeError):
    """Raised when the configured handler cannot be imported."""

    def __init__(self, handler_path: str, reason: str):
        self.handler_path = handler_path
        super().__init__(f"Cannot load handler '{handler_path}': {reason}")
