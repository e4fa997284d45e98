"""JSON-RPC 2.0 envelope builders and error formatting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from designmcp.utils.exceptions import RpcError, RpcErrorCode, is_known_error_code

JSONRPC_VERSION = "2.0"

RequestId = str | int | None

DEFAULT_MESSAGES: dict[int, str] = {
    RpcErrorCode.PARSE_ERROR: "Parse error",
    RpcErrorCode.INVALID_REQUEST: "Invalid Request",
    RpcErrorCode.METHOD_NOT_FOUND: "Method not found",
    RpcErrorCode.INVALID_PARAMS: "Invalid params",
    RpcErrorCode.INTERNAL_ERROR: "Internal error",
    RpcErrorCode.RATE_LIMITED: "Rate limit exceeded",
}


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


@dataclass(frozen=True, slots=True)
class Violation:
    """One schema violation: where it happened and what was wrong."""

    path: tuple[str | int, ...]
    message: str

    def render(self) -> str:
        location = ".".join(str(part) for part in self.path) or "root"
        return f"{location}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {"path": list(self.path), "message": self.message}


def format_violations(violations: Iterable[Violation]) -> str:
    """Render violations as ``path: message`` segments joined by ``; ``, in order."""
    return "; ".join(v.render() for v in violations)


def success_response(request_id: RequestId, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(
    request_id: RequestId,
    code: int,
    message: str | None = None,
    data: Any = UNSET,
) -> dict[str, Any]:
    """Build an error envelope. ``data`` is left out entirely unless supplied."""
    code = int(code)
    if not is_known_error_code(code):
        raise ValueError(f"unknown JSON-RPC error code: {code}")
    error: dict[str, Any] = {"code": code, "message": message or DEFAULT_MESSAGES.get(code, "Server error")}
    if data is not UNSET:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}


def error_from_exception(request_id: RequestId, exc: RpcError) -> dict[str, Any]:
    data = exc.data if exc.has_data else UNSET
    return error_response(request_id, exc.rpc_code, exc.message, data)


def parse_error_response(data: Any = UNSET) -> dict[str, Any]:
    return error_response(None, RpcErrorCode.PARSE_ERROR, data=data)


def invalid_params_response(request_id: RequestId, violations: list[Violation]) -> dict[str, Any]:
    return error_response(
        request_id,
        RpcErrorCode.INVALID_PARAMS,
        format_violations(violations),
        [v.to_dict() for v in violations],
    )


def is_error_envelope(envelope: dict[str, Any]) -> bool:
    return "error" in envelope
