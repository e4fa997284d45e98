"""Utility functions for designmcp."""

from designmcp.utils.exceptions import (
    DesignMcpError,
    ConfigError,
    SessionNotFoundError,
    RpcError,
    RpcErrorCode,
    ParseError,
    InvalidRequestError,
    MethodNotFoundError,
    InvalidParamsError,
    InternalRpcError,
    RateLimitedError,
    ErrorCategory,
    classify_exception,
    sanitize_error_message,
)

__all__ = [
    "DesignMcpError",
    "ConfigError",
    "SessionNotFoundError",
    "RpcError",
    "RpcErrorCode",
    "ParseError",
    "InvalidRequestError",
    "MethodNotFoundError",
    "InvalidParamsError",
    "InternalRpcError",
    "RateLimitedError",
    "ErrorCategory",
    "classify_exception",
    "sanitize_error_message",
]
