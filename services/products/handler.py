"""
Product API handler.

Sample application served by the runtime: a small REST API over the
in-memory ProductStore. Domain failures (not found, bad input) are regular
responses with a 4xx status; only a bug escaping the router becomes a 500.
"""

import base64
import binascii
import json
import logging
import platform
import re
import time
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from services.runtime.core.context import InvocationContext
from services.runtime.models.http import RequestModel, ResponseModel

from .models import ProductInput
from .store import ProductStore

logger = logging.getLogger("products.handler")

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

_PRODUCT_PATH = re.compile(r"^/products/(?P<id>.+)$")


def build_response(status_code: int, body: str) -> ResponseModel:
    return ResponseModel(status_code=status_code, headers=dict(CORS_HEADERS), body=body)


def ok_json(data: Any, message: str = "OK") -> str:
    return json.dumps({"success": True, "message": message, "data": data}, default=str)


def error_json(message: str) -> str:
    return json.dumps({"success": False, "message": message})


class ProductApiHandler:
    def __init__(self, store: Optional[ProductStore] = None):
        self.store = store if store is not None else ProductStore()
        logger.info("ProductApiHandler initialized")

    def __call__(self, request: RequestModel, context: InvocationContext) -> ResponseModel:
        logger.info(f"Received: {request.method} {request.path}")
        start = time.monotonic()
        try:
            response = self.route(request)
        except Exception as e:
            logger.error(f"Error: {e}", exc_info=True)
            return build_response(500, error_json(f"Internal server error: {e}"))

        logger.info(
            f"Processed in {int((time.monotonic() - start) * 1000)}ms",
            extra={"remaining_ms": context.get_remaining_time_in_millis()},
        )
        return response

    def route(self, request: RequestModel) -> ResponseModel:
        method = request.method.upper()
        path = request.path or "/"

        if method == "OPTIONS":
            return build_response(200, '"ok"')
        if method == "GET":
            return self.handle_get(path, request)
        if method == "POST":
            return self.handle_post(path, request)
        if method == "DELETE":
            return self.handle_delete(path)
        return build_response(405, error_json(f"Method not allowed: {request.method}"))

    def handle_get(self, path: str, request: RequestModel) -> ResponseModel:
        if path == "/products":
            category = request.query("category")
            if category is not None:
                products = self.store.search_by_category(category)
                return build_response(
                    200,
                    ok_json([p.to_dict() for p in products], f"Found {len(products)} products"),
                )
            return build_response(200, ok_json([p.to_dict() for p in self.store.list_all()]))

        match = _PRODUCT_PATH.match(path)
        if match:
            product_id = match.group("id")
            product = self.store.get(product_id)
            if product is None:
                return build_response(404, error_json(f"Product not found: {product_id}"))
            return build_response(200, ok_json(product.to_dict()))

        if path == "/health":
            health = {
                "status": "healthy",
                "runtime": "python custom runtime",
                "python": platform.python_version(),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
            return build_response(200, ok_json(health, "Service is healthy"))

        return build_response(404, error_json(f"Not found: {path}"))

    def handle_post(self, path: str, request: RequestModel) -> ResponseModel:
        if path != "/products":
            return build_response(404, error_json(f"Not found: {path}"))

        raw = request.body
        if raw and request.is_base64_encoded:
            try:
                raw = base64.b64decode(raw, validate=True).decode("utf-8")
            except (binascii.Error, UnicodeDecodeError) as e:
                return build_response(400, error_json(f"Validation error: undecodable body ({e})"))
        if raw is None or not raw.strip():
            return build_response(400, error_json("Request body is required"))

        try:
            data = ProductInput.model_validate(json.loads(raw))
        except json.JSONDecodeError as e:
            return build_response(400, error_json(f"Validation error: invalid JSON ({e.msg})"))
        except ValidationError as e:
            first = e.errors()[0]
            return build_response(400, error_json(f"Validation error: {first['msg']}"))

        created = self.store.create(data)
        return build_response(201, ok_json(created.to_dict(), "Product created"))

    def handle_delete(self, path: str) -> ResponseModel:
        match = _PRODUCT_PATH.match(path)
        if not match:
            return build_response(404, error_json(f"Not found: {path}"))

        product_id = match.group("id")
        product = self.store.delete(product_id)
        if product is None:
            return build_response(404, error_json(f"Product not found: {product_id}"))
        return build_response(200, ok_json(product.to_dict(), "Product deleted"))


# Module-level instance used by RUNTIME_HANDLER=services.products.handler:handle.
handle = ProductApiHandler()
