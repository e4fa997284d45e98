"""Method dispatch: lookup, admission, validation, invocation."""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import BaseModel

from designmcp.api.rpc.codec import encode_envelope
from designmcp.api.rpc.context_models import DispatchScope, RpcRequest
from designmcp.api.rpc.dispatch_pipeline import run_handler_pipeline
from designmcp.api.rpc.error_boundary import (
    handler_timeout_result,
    invalid_params_result,
    method_not_found_result,
    rate_limited_result,
    rpc_exception_result,
    unhandled_exception_result,
    validator_fault_result,
)
from designmcp.api.rpc.errors import error_response, is_error_envelope, success_response
from designmcp.api.rpc.registry import MethodRegistry, MethodSpec
from designmcp.api.rpc.request_guard import prepare_rpc_request
from designmcp.api.rpc.schemas import SchemaValidator
from designmcp.gateway.rate_limit import FixedWindowRateLimiter
from designmcp.utils.exceptions import RpcError, RpcErrorCode
from designmcp.utils.helpers import generate_request_id

Envelope = dict[str, Any]


@dataclass(slots=True)
class _DispatchCall:
    request: RpcRequest
    scope: DispatchScope
    spec: MethodSpec | None = None
    params: Any = None


class MethodDispatcher:
    """Turns one request into at most one response envelope. Never raises past this boundary."""

    def __init__(
        self,
        registry: MethodRegistry,
        *,
        rate_limiter: FixedWindowRateLimiter,
        validator: SchemaValidator | None = None,
        handler_timeout_s: float | None = None,
        max_batch_size: int = 100,
    ):
        self._registry = registry
        self._rate_limiter = rate_limiter
        self._validator = validator or SchemaValidator()
        self._handler_timeout_s = handler_timeout_s
        self._max_batch_size = max_batch_size

    @property
    def registry(self) -> MethodRegistry:
        return self._registry

    async def handle_payload(self, payload: Any, scope: DispatchScope) -> Envelope | list[Envelope] | None:
        """Dispatch a parsed ingress payload: a single request or a batch."""
        if isinstance(payload, list):
            return await self.dispatch_batch(payload, scope)
        return await self.dispatch_frame(payload, scope)

    async def dispatch_batch(self, frames: list[Any], scope: DispatchScope) -> Envelope | list[Envelope] | None:
        if not frames:
            return error_response(None, RpcErrorCode.INVALID_REQUEST, data="empty batch")
        if len(frames) > self._max_batch_size:
            return error_response(
                None,
                RpcErrorCode.INVALID_REQUEST,
                data=f"batch exceeds {self._max_batch_size} requests",
            )
        results = await asyncio.gather(*(self.dispatch_frame(frame, scope) for frame in frames))
        responses = [r for r in results if r is not None]
        return responses or None

    async def dispatch_frame(self, frame: Any, scope: DispatchScope) -> Envelope | None:
        guard = prepare_rpc_request(frame)
        if guard.error is not None:
            logger.warning("RPC invalid request connection={} data={}", scope.connection_id, guard.error["error"].get("data"))
            return guard.error
        return await self.dispatch(guard.request, scope)

    async def dispatch(self, request: RpcRequest, scope: DispatchScope) -> Envelope | None:
        log = logger.bind(request_id=generate_request_id(), method=request.method, connection=scope.connection_id)
        call = _DispatchCall(request=request, scope=scope)
        response = await run_handler_pipeline(
            [
                lambda: self._resolve_method(call),
                lambda: self._admit(call),
                lambda: self._validate(call),
                lambda: self._invoke(call),
            ]
        )
        ok = response is not None and not is_error_envelope(response)
        if request.is_notification:
            if response is not None and not ok:
                log.warning(
                    "RPC notification failed method={} code={} message={}",
                    request.method,
                    response["error"]["code"],
                    response["error"]["message"],
                )
            return None
        log.info("RPC request method={} ok={} client={}", request.method, ok, scope.connection_id)
        return response

    def _resolve_method(self, call: _DispatchCall) -> Envelope | None:
        call.spec = self._registry.get(call.request.method)
        if call.spec is None:
            return method_not_found_result(call.request)
        return None

    async def _admit(self, call: _DispatchCall) -> Envelope | None:
        decision = await self._rate_limiter.admit(call.scope.bucket)
        if not decision.allowed:
            logger.warning(
                "RPC rate limited method={} client={} retry_after_ms={}",
                call.request.method,
                call.scope.connection_id,
                decision.retry_after_ms,
            )
            return rate_limited_result(call.request, decision)
        return None

    def _validate(self, call: _DispatchCall) -> Envelope | None:
        outcome = self._validator.validate(call.spec.params_schema, call.request.params)
        if outcome.fault is not None:
            return validator_fault_result(request=call.request, fault=outcome.fault, log_error=logger.error)
        if outcome.violations:
            return invalid_params_result(call.request, outcome.violations)
        call.params = outcome.params
        return None

    async def _invoke(self, call: _DispatchCall) -> Envelope:
        request = call.request
        try:
            result = await self._run_handler(call.spec, call.params)
        except asyncio.TimeoutError:
            return handler_timeout_result(
                request=request,
                timeout_s=self._handler_timeout_s or 0,
                log_warning=logger.warning,
            )
        except RpcError as e:
            return rpc_exception_result(request=request, exc=e, log_warning=logger.warning)
        except Exception as e:
            return unhandled_exception_result(request=request, exc=e, log_exception=logger.exception)

        if isinstance(result, BaseModel):
            result = result.model_dump(mode="json", exclude_none=True)
        response = success_response(request.id, result)
        try:
            encode_envelope(response)
        except (TypeError, ValueError) as e:
            return unhandled_exception_result(request=request, exc=e, log_exception=logger.exception)
        return response

    async def _run_handler(self, spec: MethodSpec, params: Any) -> Any:
        """Await the handler under the timeout. Sync handlers run on a worker thread so the loop stays free."""

        async def _call() -> Any:
            if inspect.iscoroutinefunction(spec.handler):
                return await spec.handler(params)
            outcome = await asyncio.to_thread(spec.handler, params)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            return outcome

        if self._handler_timeout_s is None:
            return await _call()
        return await asyncio.wait_for(_call(), timeout=self._handler_timeout_s)
