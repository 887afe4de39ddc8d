"""
RequestContext management.
ContextVars carrying the identifiers of the invocation being processed,
read by the JSON log formatter.
"""

from contextvars import ContextVar
from typing import Optional

from .trace import TraceId


# Context variable for Trace ID (full header format).
_trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)
# Context variable for the AWS request id of the current invocation.
_request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_trace_id() -> Optional[str]:
    """Get the current Trace ID."""
    return _trace_id_var.get()


def get_request_id() -> Optional[str]:
    """Get the current Request ID."""
    return _request_id_var.get()


def set_request_id(request_id: str) -> str:
    _request_id_var.set(request_id)
    return request_id


def set_trace_id(trace_id_str: str) -> str:
    """
    Set the Trace ID.

    Args:
        trace_id_str: Lambda-Runtime-Trace-Id header string

    Returns:
        The full Trace ID string that was set
    """
    trace = TraceId.parse(trace_id_str)
    _trace_id_var.set(str(trace))
    return str(trace)


def clear_request_context() -> None:
    """Clear both identifiers once an invocation is finished."""
    _trace_id_var.set(None)
    _request_id_var.set(None)
