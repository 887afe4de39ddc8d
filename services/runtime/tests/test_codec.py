import json

import pytest

from services.runtime.core.codec import (
    decode,
    decode_request,
    dumps,
    encode_response,
    parse_envelope,
)
from services.runtime.core.exceptions import EnvelopeDecodeError, ResponseEncodeError
from services.runtime.models.http import ResponseModel


class TestDecode:
    def test_method_only_envelope_defaults_path(self):
        """{"httpMethod":"GET"} decodes with path "/" and empty collections."""
        request = decode('{"httpMethod":"GET"}')

        assert request.method == "GET"
        assert request.path == "/"
        assert request.body is None
        assert request.headers == {}
        assert request.query_string_parameters == {}
        assert request.multi_value_query_string_parameters == {}
        assert request.path_parameters == {}
        assert request.is_base64_encoded is False

    def test_full_proxy_event(self):
        envelope = {
            "resource": "/products/{id}",
            "path": "/products/prod-001",
            "httpMethod": "DELETE",
            "headers": {"Content-Type": "application/json"},
            "multiValueHeaders": {"Accept": ["a", "b"]},
            "queryStringParameters": {"category": "Electronics"},
            "multiValueQueryStringParameters": {"tag": ["x", "y"]},
            "pathParameters": {"id": "prod-001"},
            "stageVariables": {"env": "dev"},
            "requestContext": {"requestId": "req-1", "stage": "prod"},
            "body": '{"name": "Webcam"}',
            "isBase64Encoded": False,
        }

        request = decode_request(envelope)

        assert request.method == "DELETE"
        assert request.path == "/products/prod-001"
        assert request.resource == "/products/{id}"
        assert request.header("content-type") == "application/json"
        assert request.multi_value_headers == {"Accept": ["a", "b"]}
        assert request.query("category") == "Electronics"
        assert request.multi_value_query_string_parameters == {"tag": ["x", "y"]}
        assert request.path_parameters == {"id": "prod-001"}
        assert request.stage_variables == {"env": "dev"}
        assert request.request_context["requestId"] == "req-1"
        assert request.body == '{"name": "Webcam"}'

    def test_unknown_fields_are_ignored(self):
        request = decode('{"httpMethod":"POST","path":"/x","somethingElse":{"deep":[1,2]}}')
        assert request.method == "POST"
        assert request.path == "/x"

    @pytest.mark.parametrize(
        "field,attr",
        [
            ("headers", "headers"),
            ("queryStringParameters", "query_string_parameters"),
            ("pathParameters", "path_parameters"),
            ("multiValueHeaders", "multi_value_headers"),
            ("multiValueQueryStringParameters", "multi_value_query_string_parameters"),
            ("stageVariables", "stage_variables"),
        ],
    )
    @pytest.mark.parametrize("bad_value", ["a string", 42, ["list"], True, None])
    def test_non_mapping_field_is_treated_as_absent(self, field, attr, bad_value):
        request = decode_request({"httpMethod": "GET", field: bad_value})
        assert getattr(request, attr) == {}

    def test_wrong_typed_scalars_fall_back_to_defaults(self):
        request = decode_request(
            {"httpMethod": "GET", "path": 12, "body": {"a": 1}, "isBase64Encoded": "yes"}
        )

        assert request.path == "/"
        assert request.body is None
        assert request.is_base64_encoded is False

    def test_non_string_map_values_are_stringified_or_dropped(self):
        request = decode_request(
            {
                "httpMethod": "GET",
                "headers": {"X-Count": 3, "X-Flag": True, "X-Null": None, "X-Obj": {"a": 1}},
                "multiValueHeaders": {"X-One": "single", "X-Many": ["a", 1, None]},
            }
        )

        assert request.headers == {"X-Count": "3", "X-Flag": "true"}
        assert request.multi_value_headers == {"X-One": ["single"], "X-Many": ["a", "1"]}

    def test_http_api_v2_method_and_path_fallback(self):
        envelope = {
            "rawPath": "/raw",
            "requestContext": {"http": {"method": "PUT", "path": "/products"}},
        }

        request = decode_request(envelope)

        assert request.method == "PUT"
        assert request.path == "/products"

    def test_missing_method_is_a_decode_error(self):
        with pytest.raises(EnvelopeDecodeError):
            decode('{"path": "/products"}')

    def test_non_string_method_is_a_decode_error(self):
        with pytest.raises(EnvelopeDecodeError):
            decode_request({"httpMethod": 1})


class TestParseEnvelope:
    def test_truncated_json_is_a_decode_error(self):
        with pytest.raises(EnvelopeDecodeError) as exc_info:
            parse_envelope(b'{"httpMethod": "GET", "path": "/pro')
        assert "Invalid JSON" in str(exc_info.value)

    def test_empty_payload_is_a_decode_error(self):
        with pytest.raises(EnvelopeDecodeError):
            parse_envelope(b"")

    @pytest.mark.parametrize("payload", ["[]", '"text"', "42", "null"])
    def test_non_object_json_is_a_decode_error(self, payload):
        with pytest.raises(EnvelopeDecodeError) as exc_info:
            parse_envelope(payload)
        assert "JSON object" in str(exc_info.value)

    def test_bytes_payload(self):
        assert parse_envelope('{"a": "ü"}'.encode("utf-8")) == {"a": "ü"}

    def test_deeply_nested_json_is_a_decode_error(self):
        payload = b'{"httpMethod":"GET","body":' + b"[" * 100000 + b"]" * 100000 + b"}"

        with pytest.raises(EnvelopeDecodeError) as exc_info:
            decode(payload)
        assert "Invalid JSON" in str(exc_info.value)


class TestEncode:
    def test_status_and_body_only(self):
        """Only statusCode and body survive a trip through a generic JSON parser."""
        response = ResponseModel(status_code=200, body='{"ok":true}')

        parsed = json.loads(dumps(encode_response(response)))

        assert parsed == {"statusCode": 200, "body": '{"ok":true}'}

    def test_body_is_emitted_even_when_absent(self):
        envelope = encode_response(ResponseModel(status_code=204))
        assert envelope == {"statusCode": 204, "body": None}

    def test_optional_fields_emitted_when_set(self):
        headers = {"Access-Control-Allow-Origin": "*", "Content-Type": "application/json"}
        response = ResponseModel(
            status_code=201,
            headers=headers,
            body="x",
            is_base64_encoded=False,
            multi_value_headers={"Set-Cookie": ["a=1", "b=2"]},
        )

        envelope = encode_response(response)

        assert envelope["headers"] == headers
        assert envelope["isBase64Encoded"] is False
        assert envelope["multiValueHeaders"] == {"Set-Cookie": ["a=1", "b=2"]}

    def test_encoding_is_deterministic(self):
        response = ResponseModel(status_code=200, headers={"b": "2", "a": "1"}, body="x")
        assert dumps(encode_response(response)) == dumps(encode_response(response))

    def test_non_response_result_is_an_encode_error(self):
        with pytest.raises(ResponseEncodeError) as exc_info:
            encode_response({"statusCode": 200})
        assert "dict" in str(exc_info.value)

    def test_dumps_rejects_unserializable_values(self):
        with pytest.raises(ResponseEncodeError):
            dumps({"statusCode": 200, "body": object()})
