"""
Runtime loop.

State machine with a single state, AWAITING_NEXT_EVENT. Each step fetches one
event, processes it to completion and takes one of the transitions below,
all of which lead back to AWAITING_NEXT_EVENT:

- PROCESSED: handler result posted to /invocation/{id}/response
- REPORTED_ERROR: decode, handler, encode or post failure reported to
  /invocation/{id}/error (a failed report is only logged)
- FETCH_FAILED: /invocation/next itself failed; nothing to report against

The loop only ends when the process does, or after max_iterations steps.
"""

import logging
import os
import time
from enum import Enum
from typing import Callable, Dict, Mapping, Optional

from services.common.core import request_context
from services.runtime.core.client import RuntimeApiClient
from services.runtime.core.codec import decode, dumps, encode_response
from services.runtime.core.context import InvocationContext, build_context
from services.runtime.core.exceptions import RuntimeApiError
from services.runtime.models.http import RequestModel, ResponseModel
from services.runtime.models.invocation import NextInvocation

logger = logging.getLogger("runtime.loop")

Handler = Callable[[RequestModel, InvocationContext], ResponseModel]

TRACE_ENV_VAR = "_X_AMZN_TRACE_ID"
UNKNOWN_ERROR_MESSAGE = "Unknown error"


class LoopState(str, Enum):
    AWAITING_NEXT_EVENT = "awaiting_next_event"


class Transition(str, Enum):
    PROCESSED = "processed"
    REPORTED_ERROR = "reported_error"
    FETCH_FAILED = "fetch_failed"


class RuntimeLoop:
    def __init__(
        self,
        api: RuntimeApiClient,
        handler: Handler,
        environ: Optional[Mapping[str, str]] = None,
        fetch_retry_delay: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            api: Runtime API client shared for the process lifetime
            handler: Application handler (request, context) -> response
            environ: Environment read for context fields (default os.environ)
            fetch_retry_delay: Pause after a failed fetch (seconds)
            sleep: Sleep function, replaceable in tests
        """
        self.api = api
        self.handler = handler
        self.environ = environ if environ is not None else os.environ
        self.fetch_retry_delay = fetch_retry_delay
        self.sleep = sleep
        self.state = LoopState.AWAITING_NEXT_EVENT
        self.stats: Dict[Transition, int] = {t: 0 for t in Transition}

    def run(self, max_iterations: Optional[int] = None) -> int:
        """
        Process events until the process exits, or for max_iterations steps.

        Returns:
            Number of steps taken
        """
        logger.info("Entering invocation loop")
        iterations = 0
        while max_iterations is None or iterations < max_iterations:
            self.step()
            iterations += 1
        return iterations

    def step(self) -> Transition:
        """Fetch and fully process exactly one event."""
        try:
            invocation = self.api.next_invocation()
        except RuntimeApiError as e:
            logger.error(f"Failed to fetch next invocation: {e}")
            if self.fetch_retry_delay > 0:
                self.sleep(self.fetch_retry_delay)
            return self._record(Transition.FETCH_FAILED)

        request_context.set_request_id(invocation.request_id)
        self._bind_trace(invocation.trace_id)
        try:
            return self._record(self._process(invocation))
        finally:
            request_context.clear_request_context()
            os.environ.pop(TRACE_ENV_VAR, None)

    def _process(self, invocation: NextInvocation) -> Transition:
        request_id = invocation.request_id
        start = time.monotonic()

        try:
            request = decode(invocation.payload)
            context = build_context(
                request_id,
                invocation.deadline_ms,
                invocation.invoked_function_arn,
                self.environ,
                trace_id=invocation.trace_id,
            )
            response = self.handler(request, context)
            payload = dumps(encode_response(response))
            self.api.post_response(request_id, payload)
        except Exception as e:
            logger.error(f"Error processing event: {e}", exc_info=True)
            self._report_error(request_id, e)
            return Transition.REPORTED_ERROR

        logger.info(
            "Processed invocation",
            extra={
                "status_code": response.status_code,
                "duration_ms": round((time.monotonic() - start) * 1000, 2),
            },
        )
        return Transition.PROCESSED

    def _report_error(self, request_id: str, exc: Exception) -> None:
        error_type = type(exc).__name__
        message = str(exc) or UNKNOWN_ERROR_MESSAGE
        try:
            self.api.post_error(request_id, error_type, message)
        except Exception as report_exc:
            logger.error(f"Failed to report error: {report_exc}")

    def _bind_trace(self, trace_id: Optional[str]) -> None:
        if trace_id:
            request_context.set_trace_id(trace_id)
            os.environ[TRACE_ENV_VAR] = trace_id
        else:
            os.environ.pop(TRACE_ENV_VAR, None)

    def _record(self, transition: Transition) -> Transition:
        self.stats[transition] += 1
        self.state = LoopState.AWAITING_NEXT_EVENT
        return transition
