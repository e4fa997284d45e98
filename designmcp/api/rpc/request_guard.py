"""RPC request guard: envelope shape validation before dispatch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, StringConstraints, ValidationError

from designmcp.api.rpc.context_models import RpcRequest
from designmcp.api.rpc.errors import error_response, format_violations
from designmcp.api.rpc.schemas import violations_from_error
from designmcp.utils.exceptions import RpcErrorCode


class JsonRpcRequestModel(BaseModel):
    """Wire shape of a single JSON-RPC 2.0 request."""

    model_config = ConfigDict(strict=True, extra="ignore")

    jsonrpc: Literal["2.0"]
    id: StrictStr | StrictInt | None = None
    method: Annotated[str, StringConstraints(min_length=1, max_length=100)]
    params: dict[str, Any] | list[Any] | None = None


@dataclass(slots=True)
class RpcRequestGuardResult:
    """Prepared request after the shape check, or the error envelope to send instead."""

    request: RpcRequest | None
    error: dict[str, Any] | None


def _salvage_id(frame: Any) -> str | int | None:
    if not isinstance(frame, dict):
        return None
    raw = frame.get("id")
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (str, int)):
        return raw
    return None


def prepare_rpc_request(frame: Any) -> RpcRequestGuardResult:
    """Validate one request frame. Invalid frames always get an error, even without an id."""
    if not isinstance(frame, dict):
        return RpcRequestGuardResult(
            request=None,
            error=error_response(None, RpcErrorCode.INVALID_REQUEST, data="request must be an object"),
        )
    try:
        model = JsonRpcRequestModel.model_validate(frame)
    except ValidationError as e:
        return RpcRequestGuardResult(
            request=None,
            error=error_response(
                _salvage_id(frame),
                RpcErrorCode.INVALID_REQUEST,
                data=format_violations(violations_from_error(e)),
            ),
        )
    return RpcRequestGuardResult(
        request=RpcRequest(
            method=model.method,
            params=model.params,
            id=model.id,
            is_notification=model.id is None,
        ),
        error=None,
    )
