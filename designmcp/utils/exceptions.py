"""
Exception hierarchy and error handling utilities for designmcp.

Provides:
- A base exception class with error codes and categories
- JSON-RPC protocol errors carrying their wire code
- Safe error message formatting (no sensitive data leak)
- Exception classification for logs and diagnostic payloads
"""

from __future__ import annotations

import asyncio
import json
import re
from enum import Enum, IntEnum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    RECOVERABLE = "recoverable"
    RETRYABLE = "retryable"
    FATAL = "fatal"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERMISSION = "permission"
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"


class RpcErrorCode(IntEnum):
    """JSON-RPC 2.0 reserved codes plus the codes this server allocates."""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    # Server-defined codes must stay inside SERVER_ERROR_MIN..SERVER_ERROR_MAX.
    RATE_LIMITED = -32000


SERVER_ERROR_MIN = -32099
SERVER_ERROR_MAX = -32000

RESERVED_CODES = frozenset(
    {
        RpcErrorCode.PARSE_ERROR,
        RpcErrorCode.INVALID_REQUEST,
        RpcErrorCode.METHOD_NOT_FOUND,
        RpcErrorCode.INVALID_PARAMS,
        RpcErrorCode.INTERNAL_ERROR,
    }
)


def is_server_error_code(code: int) -> bool:
    """True when code lies in the band reserved for server-defined errors."""
    return SERVER_ERROR_MIN <= code <= SERVER_ERROR_MAX


def is_known_error_code(code: int) -> bool:
    return code in RESERVED_CODES or is_server_error_code(code)


def _code_name(code: int) -> str:
    try:
        return RpcErrorCode(code).name
    except ValueError:
        return "SERVER_ERROR"


class DesignMcpError(Exception):
    """Base exception for all designmcp errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigError(DesignMcpError):
    """Configuration could not be loaded."""

    def __init__(self, message: str, path: str | None = None):
        details = {"path": path} if path else {}
        super().__init__(message, code="CONFIG_ERROR", category=ErrorCategory.FATAL, details=details)


class SessionNotFoundError(DesignMcpError):
    """Ingress frame addressed to a stream that is not open."""

    def __init__(self, session_id: str):
        super().__init__(
            f"session not found: {session_id}",
            code="SESSION_NOT_FOUND",
            category=ErrorCategory.NOT_FOUND,
            details={"session_id": session_id},
        )


class RpcError(DesignMcpError):
    """A failure that is reported to the client as a JSON-RPC error object.

    ``data`` is kept apart from ``details``: it is only sent on the wire when
    it was explicitly supplied.
    """

    rpc_code: int = RpcErrorCode.INTERNAL_ERROR
    default_message: str = "Internal error"
    category: ErrorCategory = ErrorCategory.FATAL

    _NO_DATA: Any = object()

    def __init__(
        self,
        message: str | None = None,
        data: Any = _NO_DATA,
        *,
        rpc_code: int | None = None,
    ):
        code = self.rpc_code if rpc_code is None else int(rpc_code)
        if not is_known_error_code(code):
            raise ValueError(f"error code {code} is neither reserved nor in the server band")
        super().__init__(
            message or self.default_message,
            code=_code_name(code),
            category=type(self).category,
        )
        self.rpc_code = code
        self.data = data

    @property
    def has_data(self) -> bool:
        return self.data is not RpcError._NO_DATA


class ParseError(RpcError):
    rpc_code = RpcErrorCode.PARSE_ERROR
    default_message = "Parse error"
    category = ErrorCategory.VALIDATION


class InvalidRequestError(RpcError):
    rpc_code = RpcErrorCode.INVALID_REQUEST
    default_message = "Invalid Request"
    category = ErrorCategory.VALIDATION


class MethodNotFoundError(RpcError):
    rpc_code = RpcErrorCode.METHOD_NOT_FOUND
    default_message = "Method not found"
    category = ErrorCategory.NOT_FOUND


class InvalidParamsError(RpcError):
    rpc_code = RpcErrorCode.INVALID_PARAMS
    default_message = "Invalid params"
    category = ErrorCategory.VALIDATION


class InternalRpcError(RpcError):
    rpc_code = RpcErrorCode.INTERNAL_ERROR
    default_message = "Internal error"
    category = ErrorCategory.FATAL


class RateLimitedError(RpcError):
    rpc_code = RpcErrorCode.RATE_LIMITED
    default_message = "Rate limit exceeded"
    category = ErrorCategory.RATE_LIMIT


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"[a-zA-Z0-9]{32,}"),
    re.compile(r"sk-[a-zA-Z0-9]{20,}"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def classify_exception(exc: BaseException) -> tuple[str, ErrorCategory, bool]:
    """
    Classify an exception and return (error_code, category, should_retry).

    Returns:
        Tuple of (error_code, category, should_retry)
    """
    exc_str = str(exc).lower()

    if isinstance(exc, DesignMcpError):
        return exc.code, exc.category, exc.category in (ErrorCategory.RETRYABLE, ErrorCategory.RATE_LIMIT)

    if isinstance(exc, FileNotFoundError):
        return "FILE_NOT_FOUND", ErrorCategory.NOT_FOUND, False

    if isinstance(exc, PermissionError):
        return "PERMISSION_DENIED", ErrorCategory.PERMISSION, False

    if isinstance(exc, asyncio.TimeoutError):
        return "TIMEOUT", ErrorCategory.TIMEOUT, True

    if isinstance(exc, ConnectionError):
        return "CONNECTION_ERROR", ErrorCategory.RETRYABLE, True

    if isinstance(exc, json.JSONDecodeError):
        return "JSON_PARSE_ERROR", ErrorCategory.VALIDATION, False

    if isinstance(exc, ValueError):
        return "INVALID_VALUE", ErrorCategory.VALIDATION, False

    if isinstance(exc, KeyError):
        return "MISSING_KEY", ErrorCategory.VALIDATION, False

    if isinstance(exc, TypeError):
        return "TYPE_ERROR", ErrorCategory.VALIDATION, False

    if "rate limit" in exc_str or "429" in exc_str:
        return "RATE_LIMIT", ErrorCategory.RATE_LIMIT, True

    if "timeout" in exc_str or "timed out" in exc_str:
        return "TIMEOUT", ErrorCategory.TIMEOUT, True

    if "not found" in exc_str or "404" in exc_str:
        return "NOT_FOUND", ErrorCategory.NOT_FOUND, False

    return "INTERNAL_ERROR", ErrorCategory.FATAL, False
