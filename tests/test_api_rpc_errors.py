import pytest

from designmcp.api.rpc.codec import encode_envelope
from designmcp.api.rpc.errors import (
    UNSET,
    Violation,
    error_from_exception,
    error_response,
    format_violations,
    invalid_params_response,
    is_error_envelope,
    parse_error_response,
    success_response,
)
from designmcp.utils.exceptions import InvalidParamsError, RateLimitedError, RpcErrorCode


def test_error_response_omits_data_when_not_supplied():
    env = error_response(7, RpcErrorCode.METHOD_NOT_FOUND)
    assert env == {"jsonrpc": "2.0", "id": 7, "error": {"code": -32601, "message": "Method not found"}}
    assert "data" not in env["error"]


def test_error_response_keeps_explicit_null_data():
    env = error_response("a", RpcErrorCode.INTERNAL_ERROR, data=None)
    assert "data" in env["error"]
    assert env["error"]["data"] is None


def test_error_response_rejects_codes_outside_known_space():
    with pytest.raises(ValueError):
        error_response(1, -31000)
    with pytest.raises(ValueError):
        error_response(1, -32100)


def test_error_response_accepts_server_band():
    env = error_response(1, -32050, "custom")
    assert env["error"] == {"code": -32050, "message": "custom"}


def test_parse_error_uses_null_id():
    env = parse_error_response()
    assert env["id"] is None
    assert env["error"]["code"] == -32700
    assert env["error"]["message"] == "Parse error"


def test_format_violations_preserves_order_and_root():
    violations = [
        Violation(path=("name",), message="Required"),
        Violation(path=(), message="Expected object"),
        Violation(path=("items", 0, "id"), message="Input should be a valid string"),
    ]
    assert format_violations(violations) == (
        "name: Required; root: Expected object; items.0.id: Input should be a valid string"
    )


def test_invalid_params_response_carries_structured_data():
    env = invalid_params_response(2, [Violation(path=("name",), message="Required")])
    assert env["id"] == 2
    assert env["error"]["code"] == -32602
    assert env["error"]["message"] == "name: Required"
    assert env["error"]["data"] == [{"path": ["name"], "message": "Required"}]


def test_same_failure_formats_to_identical_frames():
    v = [Violation(path=("name",), message="Required")]
    first = encode_envelope(invalid_params_response(9, v))
    second = encode_envelope(invalid_params_response(9, v))
    assert first == second


def test_error_from_exception_uses_exception_code_and_data():
    env = error_from_exception(3, RateLimitedError(data={"retryAfterMs": 10}))
    assert env["error"] == {"code": -32000, "message": "Rate limit exceeded", "data": {"retryAfterMs": 10}}

    env = error_from_exception(4, InvalidParamsError("arguments.componentName: Required"))
    assert "data" not in env["error"]
    assert env["error"]["message"] == "arguments.componentName: Required"


def test_success_and_error_envelopes_are_exclusive():
    ok = success_response(1, {"x": 1})
    assert "error" not in ok and not is_error_envelope(ok)
    bad = error_response(1, RpcErrorCode.INTERNAL_ERROR)
    assert "result" not in bad and is_error_envelope(bad)


def test_unset_sentinel_repr():
    assert repr(UNSET) == "UNSET"
