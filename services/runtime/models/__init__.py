"""
Data model definitions package.

Aggregates the models exchanged between the runtime loop and handlers.
"""

from .http import RequestModel, ResponseModel
from .invocation import UNKNOWN_REQUEST_ID, NextInvocation

__all__ = [
    "RequestModel",
    "ResponseModel",
    "NextInvocation",
    "UNKNOWN_REQUEST_ID",
]
