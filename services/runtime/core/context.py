"""
Invocation context.

Per-invocation metadata handed to the application handler next to the
RequestModel. Built fresh for every event and never reused.
"""

import time
from dataclasses import dataclass
from typing import Mapping, Optional

FALLBACK_REMAINING_TIME_MS = 30000
FALLBACK_MEMORY_LIMIT_MB = 256
DEFAULT_FUNCTION_VERSION = "$LATEST"


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class InvocationContext:
    """
    Mirrors the attribute names of the context object AWS passes to Python
    handlers (aws_request_id, get_remaining_time_in_millis, ...).
    """

    aws_request_id: str
    deadline_ms: Optional[str] = None
    invoked_function_arn: str = ""
    trace_id: Optional[str] = None
    function_name: str = ""
    function_version: str = DEFAULT_FUNCTION_VERSION
    log_group_name: str = ""
    log_stream_name: str = ""
    memory_limit: Optional[str] = None

    def get_remaining_time_in_millis(self, now_ms: Optional[int] = None) -> int:
        """
        Milliseconds until the invocation deadline, never negative.

        A missing, malformed or non-positive deadline yields
        FALLBACK_REMAINING_TIME_MS instead of an error.
        """
        deadline = _parse_int(self.deadline_ms)
        if deadline is None or deadline <= 0:
            return FALLBACK_REMAINING_TIME_MS

        if now_ms is None:
            now_ms = int(time.time() * 1000)
        return max(0, deadline - now_ms)

    @property
    def memory_limit_in_mb(self) -> int:
        memory = _parse_int(self.memory_limit)
        if memory is None:
            return FALLBACK_MEMORY_LIMIT_MB
        return memory


def build_context(
    request_id: str,
    deadline_header: Optional[str],
    function_arn_header: Optional[str],
    environ: Mapping[str, str],
    trace_id: Optional[str] = None,
) -> InvocationContext:
    """Assemble the context from Runtime API headers and the process environment."""
    return InvocationContext(
        aws_request_id=request_id,
        deadline_ms=deadline_header,
        invoked_function_arn=function_arn_header or "",
        trace_id=trace_id,
        function_name=environ.get("AWS_LAMBDA_FUNCTION_NAME", ""),
        function_version=environ.get("AWS_LAMBDA_FUNCTION_VERSION", DEFAULT_FUNCTION_VERSION),
        log_group_name=environ.get("AWS_LAMBDA_LOG_GROUP_NAME", ""),
        log_stream_name=environ.get("AWS_LAMBDA_LOG_STREAM_NAME", ""),
        memory_limit=environ.get("AWS_LAMBDA_FUNCTION_MEMORY_SIZE"),
    )
