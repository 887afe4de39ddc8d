"""
Core logic package.

Provides the envelope codec, invocation context, Runtime API client and the
invocation loop.
"""

from .client import RuntimeApiClient, build_base_url
from .codec import decode, decode_request, encode_response, parse_envelope
from .context import InvocationContext, build_context
from .loop import LoopState, RuntimeLoop, Transition

__all__ = [
    "RuntimeApiClient",
    "build_base_url",
    "decode",
    "decode_request",
    "encode_response",
    "parse_envelope",
    "InvocationContext",
    "build_context",
    "LoopState",
    "RuntimeLoop",
    "Transition",
]
