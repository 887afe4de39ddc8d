"""
Handler loading.

Resolves the RUNTIME_HANDLER setting to a callable. Both the
"package.module:function" form and the AWS-style "module.function" form are
accepted.
"""

import importlib
import logging
from typing import Callable

from services.runtime.core.exceptions import HandlerLoadError

logger = logging.getLogger("runtime.loader")


def _split(handler_path: str):
    if ":" in handler_path:
        module_name, _, attr = handler_path.partition(":")
    else:
        module_name, _, attr = handler_path.rpartition(".")
    if not module_name or not attr:
        raise HandlerLoadError(handler_path, "expected 'module:function' or 'module.function'")
    return module_name, attr


def load_handler(handler_path: str) -> Callable:
    module_name, attr = _split(handler_path.strip())

    try:
        module = importlib.import_module(module_name)
    except Exception as e:
        # Module-level code of the handler may raise anything.
        raise HandlerLoadError(handler_path, f"import failed: {e}") from e

    handler = getattr(module, attr, None)
    if handler is None:
        raise HandlerLoadError(handler_path, f"module '{module_name}' has no attribute '{attr}'")
    if not callable(handler):
        raise HandlerLoadError(handler_path, f"'{attr}' is not callable")

    logger.info(f"Loaded handler {module_name}.{attr}")
    return handler
