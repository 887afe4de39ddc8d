"""
Runtime configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys

from pydantic import Field

from services.common.core.config import BaseAppConfig


class RuntimeConfig(BaseAppConfig):
    """
    Configuration management for the runtime process.
    """

    # Runtime API (host:port, injected by the Lambda service; required)
    AWS_LAMBDA_RUNTIME_API: str = Field(..., min_length=1, description="Runtime API host:port")
    RUNTIME_API_VERSION: str = Field(default="2018-06-01", description="Runtime API version")

    # Application handler
    RUNTIME_HANDLER: str = Field(
        default="services.products.handler:handle",
        description="Handler import path (module:function)",
    )

    # Transport
    RUNTIME_POST_TIMEOUT: float = Field(
        default=10.0, description="Timeout for response/error posts (seconds)"
    )
    RUNTIME_FETCH_RETRY_DELAY: float = Field(
        default=0.5, ge=0, description="Pause after a failed next-invocation fetch (seconds)"
    )

    # model_config is inherited


def load_config() -> RuntimeConfig:
    """
    Build the config, failing fast with a diagnostic on stderr.
    """
    try:
        return RuntimeConfig()
    except Exception as e:
        sys.stderr.write(f"Failed to load configuration: {e}\n")
        raise
