"""
Runtime API client.

Thin synchronous wrapper over the Lambda Runtime API endpoints. One instance
(and one httpx.Client) serves the whole process; invocations are sequential
so no locking is needed.
"""

import logging
from typing import Any, Dict

import httpx

from services.runtime.core.codec import dumps
from services.runtime.core.exceptions import RuntimeApiError
from services.runtime.models.invocation import UNKNOWN_REQUEST_ID, NextInvocation

logger = logging.getLogger("runtime.client")

REQUEST_ID_HEADER = "Lambda-Runtime-Aws-Request-Id"
DEADLINE_HEADER = "Lambda-Runtime-Deadline-Ms"
FUNCTION_ARN_HEADER = "Lambda-Runtime-Invoked-Function-Arn"
TRACE_ID_HEADER = "Lambda-Runtime-Trace-Id"

JSON_HEADERS = {"Content-Type": "application/json"}


def build_base_url(runtime_api: str, api_version: str = "2018-06-01") -> str:
    """
    Build the Runtime API base URL from AWS_LAMBDA_RUNTIME_API (host:port).
    """
    host = runtime_api.strip().rstrip("/")
    if not host.startswith(("http://", "https://")):
        host = f"http://{host}"
    return f"{host}/{api_version}/runtime"


def error_body(error_type: str, message: str) -> Dict[str, Any]:
    return {"errorMessage": message, "errorType": error_type}


class RuntimeApiClient:
    def __init__(self, client: httpx.Client, base_url: str, post_timeout: float = 10.0):
        """
        Args:
            client: Shared httpx.Client
            base_url: {scheme}://{host:port}/{version}/runtime
            post_timeout: Timeout for response/error posts (seconds)
        """
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.post_timeout = post_timeout

    def next_invocation(self) -> NextInvocation:
        """
        Block until the Runtime API hands out the next event.

        Raises:
            RuntimeApiError: transport failure or non-2xx status
        """
        url = f"{self.base_url}/invocation/next"
        try:
            # Long poll: the call returns only when an event is available.
            response = self.client.get(url, timeout=httpx.Timeout(None))
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RuntimeApiError("next", e) from e

        headers = response.headers
        request_id = headers.get(REQUEST_ID_HEADER) or UNKNOWN_REQUEST_ID
        if request_id == UNKNOWN_REQUEST_ID:
            logger.warning(f"{REQUEST_ID_HEADER} missing from next invocation")

        return NextInvocation(
            request_id=request_id,
            deadline_ms=headers.get(DEADLINE_HEADER),
            invoked_function_arn=headers.get(FUNCTION_ARN_HEADER, ""),
            trace_id=headers.get(TRACE_ID_HEADER),
            payload=response.content,
        )

    def post_response(self, request_id: str, payload: bytes) -> None:
        self._post(f"/invocation/{request_id}/response", payload, "response")

    def post_error(self, request_id: str, error_type: str, message: str) -> None:
        self._post(
            f"/invocation/{request_id}/error", dumps(error_body(error_type, message)), "error"
        )

    def post_init_error(self, error_type: str, message: str) -> None:
        self._post("/init/error", dumps(error_body(error_type, message)), "init error")

    def _post(self, path: str, payload: bytes, operation: str) -> None:
        url = f"{self.base_url}{path}"
        try:
            response = self.client.post(
                url,
                content=payload,
                headers=JSON_HEADERS,
                timeout=self.post_timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(
                f"Runtime API {operation} post failed",
                extra={
                    "target_url": url,
                    "error_type": type(e).__name__,
                    "error_detail": str(e),
                },
            )
            raise RuntimeApiError(operation, e) from e
