import pytest

from services.common.core import request_context


@pytest.fixture(autouse=True)
def isolate_invocation_state(monkeypatch):
    """Restore _X_AMZN_TRACE_ID and the logging context after each test."""
    monkeypatch.setenv("_X_AMZN_TRACE_ID", "")
    yield
    request_context.clear_request_context()
