"""
Lambda custom runtime entry point.

Talks directly to the Lambda Runtime API: loads the configured handler, then
hands control to the invocation loop, which only returns when the process is
terminated.
"""

import logging
import sys
from typing import Optional

from pydantic import ValidationError

from services.common.core.http_client import HttpClientFactory
from services.common.core.logging_config import setup_logging
from services.runtime.config import RuntimeConfig, load_config
from services.runtime.core.client import RuntimeApiClient, build_base_url
from services.runtime.core.exceptions import HandlerLoadError, RuntimeApiError
from services.runtime.core.loader import load_handler
from services.runtime.core.loop import RuntimeLoop

logger = logging.getLogger("runtime.main")

EXIT_STARTUP_FAILURE = 1


def bootstrap(config: RuntimeConfig, max_iterations: Optional[int] = None) -> int:
    """
    Build the client, load the handler and run the loop.

    Returns:
        0 when the loop stopped after max_iterations, EXIT_STARTUP_FAILURE
        when the handler could not be loaded
    """
    base_url = build_base_url(config.AWS_LAMBDA_RUNTIME_API, config.RUNTIME_API_VERSION)
    factory = HttpClientFactory(config)

    with factory.create_sync_client() as http_client:
        api = RuntimeApiClient(http_client, base_url, post_timeout=config.RUNTIME_POST_TIMEOUT)

        try:
            handler = load_handler(config.RUNTIME_HANDLER)
        except HandlerLoadError as e:
            logger.error(f"Handler initialization failed: {e}", exc_info=True)
            try:
                api.post_init_error(type(e).__name__, str(e))
            except RuntimeApiError as report_exc:
                logger.error(f"Failed to report init error: {report_exc}")
            return EXIT_STARTUP_FAILURE

        logger.info(f"Handler initialized, runtime API at {base_url}")
        loop = RuntimeLoop(api, handler, fetch_retry_delay=config.RUNTIME_FETCH_RETRY_DELAY)
        loop.run(max_iterations=max_iterations)
    return 0


def main() -> None:
    try:
        config = load_config()
    except ValidationError:
        sys.exit(EXIT_STARTUP_FAILURE)

    setup_logging(config.LOG_CONFIG_PATH, config.LOG_LEVEL)
    sys.exit(bootstrap(config))


if __name__ == "__main__":
    main()
