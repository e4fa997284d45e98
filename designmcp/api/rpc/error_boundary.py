"""Common RPC error-boundary helpers for dispatch."""

from __future__ import annotations

from typing import Any, Callable

from designmcp.api.rpc.context_models import RpcRequest
from designmcp.api.rpc.errors import error_from_exception, error_response, invalid_params_response, Violation
from designmcp.gateway.rate_limit import RateLimitDecision
from designmcp.utils.exceptions import (
    DesignMcpError,
    ErrorCategory,
    RpcError,
    RpcErrorCode,
    classify_exception,
    sanitize_error_message,
)


Envelope = dict[str, Any]


def method_not_found_result(request: RpcRequest) -> Envelope:
    """Build standardized unknown-method response."""
    return error_response(request.id, RpcErrorCode.METHOD_NOT_FOUND, f"Method not found: {request.method}")


def rate_limited_result(request: RpcRequest, decision: RateLimitDecision) -> Envelope:
    return error_response(
        request.id,
        RpcErrorCode.RATE_LIMITED,
        "Rate limit exceeded",
        {"retryAfterMs": decision.retry_after_ms},
    )


def invalid_params_result(request: RpcRequest, violations: list[Violation]) -> Envelope:
    return invalid_params_response(request.id, violations)


def validator_fault_result(
    *,
    request: RpcRequest,
    fault: str,
    log_error: Callable[[str, Any, Any], None],
) -> Envelope:
    log_error("Params validation failed internally method={}: {}", request.method, fault)
    return error_response(request.id, RpcErrorCode.INTERNAL_ERROR, data={"errorCode": "VALIDATION_ENGINE_FAULT"})


def rpc_exception_result(
    *,
    request: RpcRequest,
    exc: RpcError,
    log_warning: Callable[[str, Any, Any, Any], None],
) -> Envelope:
    """Pass typed protocol errors raised by handlers through with their own code."""
    log_warning("RPC method {} failed with {}: {}", request.method, exc.rpc_code, exc.message)
    return error_from_exception(request.id, exc)


def handler_timeout_result(
    *,
    request: RpcRequest,
    timeout_s: float,
    log_warning: Callable[[str, Any, Any], None],
) -> Envelope:
    log_warning("RPC method {} timed out after {}s", request.method, timeout_s)
    return error_response(
        request.id,
        RpcErrorCode.INTERNAL_ERROR,
        data={"errorCode": "TIMEOUT", "category": ErrorCategory.TIMEOUT.value},
    )


def unhandled_exception_result(
    *,
    request: RpcRequest,
    exc: Exception,
    log_exception: Callable[[str, Any, Any, Any], None],
) -> Envelope:
    """Map unexpected exceptions to a generic INTERNAL_ERROR with sanitized diagnostics."""
    code, category, _ = classify_exception(exc)
    sanitized = sanitize_error_message(str(exc))
    log_exception("RPC method {} failed with [{}]: {}", request.method, code, sanitized)
    data = {"errorCode": code, "category": category.value}
    if sanitized:
        data["detail"] = sanitized
    return error_response(request.id, RpcErrorCode.INTERNAL_ERROR, data=data)


def classify_http_status(exc: Exception) -> int:
    """Map exception to appropriate HTTP status code."""
    category_to_status = {
        ErrorCategory.VALIDATION: 400,
        ErrorCategory.NOT_FOUND: 404,
        ErrorCategory.PERMISSION: 403,
        ErrorCategory.TIMEOUT: 504,
        ErrorCategory.RATE_LIMIT: 429,
        ErrorCategory.RETRYABLE: 503,
    }
    if isinstance(exc, DesignMcpError):
        return category_to_status.get(exc.category, 500)
    _, category, _ = classify_exception(exc)
    return category_to_status.get(category, 500)
