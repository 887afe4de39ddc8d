"""
Envelope codec.

Translates between the schema-less JSON envelopes exchanged with the Runtime
API and the typed RequestModel / ResponseModel. Every field is projected by
hand from the generic mapping: there is no per-field metadata and no model
validation of the raw event, so any envelope shape can be decoded.
"""

import json
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union

from services.runtime.core.exceptions import EnvelopeDecodeError, ResponseEncodeError
from services.runtime.models.http import RequestModel, ResponseModel

DEFAULT_PATH = "/"


# ===========================================
# Decode
# ===========================================


def parse_envelope(raw: Union[bytes, str]) -> Dict[str, Any]:
    """
    Parse a raw payload into a generic mapping.

    Raises:
        EnvelopeDecodeError: the payload is not JSON, or is JSON but not an object
    """
    try:
        envelope = json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise EnvelopeDecodeError(f"Invalid JSON event payload: {e}") from e

    if not isinstance(envelope, dict):
        raise EnvelopeDecodeError(
            f"Event payload must be a JSON object, got {type(envelope).__name__}"
        )
    return envelope


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_scalar_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    # JSON spelling: true/false rather than True/False.
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return None


def _as_mapping(value: Any) -> Optional[Mapping]:
    return value if isinstance(value, Mapping) else None


def _str_map(value: Any) -> Dict[str, str]:
    source = _as_mapping(value)
    if source is None:
        return {}

    result: Dict[str, str] = {}
    for key, item in source.items():
        text = _as_scalar_str(item)
        if text is not None:
            result[str(key)] = text
    return result


def _multi_map(value: Any) -> Dict[str, List[str]]:
    source = _as_mapping(value)
    if source is None:
        return {}

    result: Dict[str, List[str]] = {}
    for key, items in source.items():
        if isinstance(items, list):
            values = [text for text in map(_as_scalar_str, items) if text is not None]
        else:
            text = _as_scalar_str(items)
            values = [text] if text is not None else []
        result[str(key)] = values
    return result


def _resolve_method(envelope: Mapping, request_context: Mapping) -> str:
    http = _as_mapping(request_context.get("http")) or {}
    for candidate in (
        envelope.get("httpMethod"),
        request_context.get("httpMethod"),
        http.get("method"),
    ):
        method = _as_str(candidate)
        if method:
            return method
    raise EnvelopeDecodeError("Event envelope has no httpMethod")


def _resolve_path(envelope: Mapping, request_context: Mapping) -> str:
    http = _as_mapping(request_context.get("http")) or {}
    for candidate in (envelope.get("path"), http.get("path"), envelope.get("rawPath")):
        path = _as_str(candidate)
        if path:
            return path
    return DEFAULT_PATH


def decode_request(envelope: Mapping) -> RequestModel:
    """
    Project a generic event mapping onto a RequestModel.

    Absent or wrong-typed fields fall back to the model defaults. Mapping-typed
    fields are copied only when the source value is itself a mapping.

    Raises:
        EnvelopeDecodeError: no HTTP method can be found in the envelope
    """
    request_context = _as_mapping(envelope.get("requestContext")) or {}
    is_base64 = envelope.get("isBase64Encoded")

    return RequestModel(
        method=_resolve_method(envelope, request_context),
        path=_resolve_path(envelope, request_context),
        resource=_as_str(envelope.get("resource")),
        body=_as_str(envelope.get("body")),
        headers=_str_map(envelope.get("headers")),
        multi_value_headers=_multi_map(envelope.get("multiValueHeaders")),
        query_string_parameters=_str_map(envelope.get("queryStringParameters")),
        multi_value_query_string_parameters=_multi_map(
            envelope.get("multiValueQueryStringParameters")
        ),
        path_parameters=_str_map(envelope.get("pathParameters")),
        stage_variables=_str_map(envelope.get("stageVariables")),
        request_context=dict(request_context),
        is_base64_encoded=is_base64 if isinstance(is_base64, bool) else False,
    )


def decode(raw: Union[bytes, str]) -> RequestModel:
    """Parse and decode a raw event payload in one step."""
    return decode_request(parse_envelope(raw))


# ===========================================
# Encode
# ===========================================


def encode_response(response: ResponseModel) -> Dict[str, Any]:
    """
    Convert a ResponseModel into the proxy response envelope.

    statusCode and body are always present; the remaining keys only when set.
    """
    if not isinstance(response, ResponseModel):
        raise ResponseEncodeError(
            f"Handler returned {type(response).__name__}, expected ResponseModel"
        )

    envelope: Dict[str, Any] = {
        "statusCode": response.status_code,
        "body": response.body,
    }
    if response.headers is not None:
        envelope["headers"] = dict(response.headers)
    if response.is_base64_encoded is not None:
        envelope["isBase64Encoded"] = response.is_base64_encoded
    if response.multi_value_headers is not None:
        envelope["multiValueHeaders"] = {
            key: list(values) for key, values in response.multi_value_headers.items()
        }
    return envelope


def dumps(envelope: Mapping) -> bytes:
    """Serialize an envelope to compact UTF-8 JSON."""
    try:
        return json.dumps(envelope, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ResponseEncodeError(f"Response is not JSON serializable: {e}") from e
