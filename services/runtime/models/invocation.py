"""
Invocation models.

Raw result of a GET /invocation/next call, before any decoding.
"""

from dataclasses import dataclass
from typing import Optional

UNKNOWN_REQUEST_ID = "unknown"


@dataclass(frozen=True)
class NextInvocation:
    request_id: str
    deadline_ms: Optional[str]
    invoked_function_arn: str
    trace_id: Optional[str]
    payload: bytes
