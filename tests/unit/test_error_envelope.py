from ara_common.errors import REDACT_TOKEN, error_from_exception, typed_error
from ara_mcp.errors import HttpError


def test_typed_error_shape():
    assert typed_error("upstream_error", "Error: HTTP 500") == {
        "error": {"code": "upstream_error", "message": "Error: HTTP 500"}
    }


def test_error_from_exception_uses_class_name():
    err = error_from_exception(HttpError(502, "Bad Gateway", "http://ara.test/api/v1/plays"))
    assert err["error"]["code"] == "HttpError"
    assert err["error"]["message"] == "HTTP 502: Bad Gateway - URL: http://ara.test/api/v1/plays"


def test_redact_token():
    assert REDACT_TOKEN == "***redacted***"
