import asyncio
import time

import pytest

from designmcp.api.rpc.context_models import DispatchScope, RpcRequest
from designmcp.api.rpc.dispatcher import MethodDispatcher
from designmcp.api.rpc.registry import MethodRegistry
from designmcp.api.rpc.schemas import ParamsModel, SchemaValidator, ValidationOutcome
from designmcp.gateway.rate_limit import FixedWindowRateLimiter, RateLimitBucket
from designmcp.services.design_system import DesignSystemCatalog
from designmcp.utils.exceptions import InvalidParamsError


class GetComponentParams(ParamsModel):
    name: str


def _registry() -> MethodRegistry:
    catalog = DesignSystemCatalog()
    registry = MethodRegistry()

    @registry.method("getComponent", params=GetComponentParams)
    def get_component(params: GetComponentParams):
        return catalog.get_component(params.name)

    @registry.method("boom")
    def boom(_):
        raise RuntimeError("exploded with token=s3cr3t")

    @registry.method("stuck")
    def stuck(_):
        time.sleep(0.5)
        return "late"

    @registry.method("slow")
    async def slow(_):
        await asyncio.sleep(5)
        return "late"

    @registry.method("typed")
    def typed(_):
        raise InvalidParamsError("arguments.componentName: Required")

    @registry.method("unencodable")
    def unencodable(_):
        return {"bad": object()}

    @registry.method("echo")
    async def echo(params):
        return params

    return registry.freeze()


def _dispatcher(*, max_requests: int = 100, timeout: float | None = None, validator=None) -> MethodDispatcher:
    return MethodDispatcher(
        _registry(),
        rate_limiter=FixedWindowRateLimiter(max_requests=max_requests, window_ms=60_000),
        validator=validator,
        handler_timeout_s=timeout,
        max_batch_size=3,
    )


def _scope() -> DispatchScope:
    return DispatchScope(connection_id="conn-1", bucket=RateLimitBucket())


def _frame(id_, method, params=None):
    frame = {"jsonrpc": "2.0", "method": method}
    if id_ is not None:
        frame["id"] = id_
    if params is not None:
        frame["params"] = params
    return frame


@pytest.mark.asyncio
async def test_registered_method_returns_success_envelope():
    res = await _dispatcher().dispatch_frame(_frame(1, "getComponent", {"name": "Button"}), _scope())
    assert res["id"] == 1
    assert res["result"]["name"] == "Button"
    assert "error" not in res


@pytest.mark.asyncio
async def test_missing_required_param_is_invalid_params():
    res = await _dispatcher().dispatch_frame(_frame(2, "getComponent", {}), _scope())
    assert res["id"] == 2
    assert res["error"]["code"] == -32602
    assert res["error"]["message"] == "name: Required"


@pytest.mark.asyncio
async def test_unknown_method_is_method_not_found_with_request_id():
    res = await _dispatcher().dispatch_frame(_frame("abc", "nope"), _scope())
    assert res["id"] == "abc"
    assert res["error"]["code"] == -32601
    assert res["error"]["message"] == "Method not found: nope"


@pytest.mark.asyncio
async def test_rate_limited_requests_get_server_band_error():
    dispatcher = _dispatcher(max_requests=2)
    scope = _scope()
    results = [await dispatcher.dispatch_frame(_frame(i, "echo", {}), scope) for i in range(3)]
    assert "result" in results[0] and "result" in results[1]
    assert results[2]["id"] == 2
    assert results[2]["error"]["code"] == -32000
    assert results[2]["error"]["data"]["retryAfterMs"] > 0


@pytest.mark.asyncio
async def test_unknown_method_does_not_consume_rate_limit():
    dispatcher = _dispatcher(max_requests=1)
    scope = _scope()
    await dispatcher.dispatch_frame(_frame(1, "nope"), scope)
    res = await dispatcher.dispatch_frame(_frame(2, "echo", {}), scope)
    assert "result" in res


@pytest.mark.asyncio
async def test_handler_failure_is_generic_internal_error_without_secrets():
    res = await _dispatcher().dispatch_frame(_frame(3, "boom"), _scope())
    assert res["error"]["code"] == -32603
    assert res["error"]["message"] == "Internal error"
    assert "s3cr3t" not in str(res["error"]["data"])
    assert "jsonrpc" not in res["error"]["data"]


@pytest.mark.asyncio
async def test_typed_protocol_error_passes_through():
    res = await _dispatcher().dispatch_frame(_frame(4, "typed"), _scope())
    assert res["error"] == {"code": -32602, "message": "arguments.componentName: Required"}


@pytest.mark.asyncio
async def test_handler_timeout_becomes_internal_error():
    res = await _dispatcher(timeout=0.01).dispatch_frame(_frame(5, "slow"), _scope())
    assert res["id"] == 5
    assert res["error"]["code"] == -32603
    assert res["error"]["data"]["errorCode"] == "TIMEOUT"


@pytest.mark.asyncio
async def test_blocking_sync_handler_times_out_without_stalling_the_loop():
    dispatcher = _dispatcher(timeout=0.05)
    started = time.monotonic()
    stuck, echoed = await asyncio.gather(
        dispatcher.dispatch_frame(_frame(7, "stuck"), _scope()),
        dispatcher.dispatch_frame(_frame(8, "echo", {"x": 1}), _scope()),
    )
    assert time.monotonic() - started < 0.4
    assert stuck["id"] == 7
    assert stuck["error"]["code"] == -32603
    assert stuck["error"]["data"]["errorCode"] == "TIMEOUT"
    assert echoed["result"] == {"x": 1}


@pytest.mark.asyncio
async def test_unencodable_result_becomes_internal_error():
    res = await _dispatcher().dispatch_frame(_frame(6, "unencodable"), _scope())
    assert res["error"]["code"] == -32603


@pytest.mark.asyncio
async def test_validator_fault_becomes_internal_error():
    class _FaultyValidator(SchemaValidator):
        def validate(self, schema, raw):
            return ValidationOutcome(fault="engine down")

    res = await _dispatcher(validator=_FaultyValidator()).dispatch_frame(
        _frame(7, "getComponent", {"name": "Button"}), _scope()
    )
    assert res["error"]["code"] == -32603
    assert res["error"]["data"] == {"errorCode": "VALIDATION_ENGINE_FAULT"}


@pytest.mark.asyncio
async def test_notifications_never_produce_output():
    dispatcher = _dispatcher()
    assert await dispatcher.dispatch_frame(_frame(None, "echo", {}), _scope()) is None
    assert await dispatcher.dispatch_frame(_frame(None, "nope"), _scope()) is None
    assert await dispatcher.dispatch_frame(_frame(None, "boom"), _scope()) is None
    assert await dispatcher.dispatch(RpcRequest(method="getComponent", params={}, is_notification=True), _scope()) is None


@pytest.mark.asyncio
async def test_invalid_envelope_is_invalid_request():
    res = await _dispatcher().dispatch_frame({"jsonrpc": "2.0", "id": 8}, _scope())
    assert res["id"] == 8
    assert res["error"]["code"] == -32600


@pytest.mark.asyncio
async def test_batch_returns_only_non_notification_responses():
    res = await _dispatcher().handle_payload(
        [_frame(1, "echo", {"a": 1}), _frame(None, "echo", {}), _frame(2, "nope")],
        _scope(),
    )
    assert sorted(r["id"] for r in res) == [1, 2]


@pytest.mark.asyncio
async def test_batch_of_notifications_produces_nothing():
    res = await _dispatcher().handle_payload([_frame(None, "echo", {})], _scope())
    assert res is None


@pytest.mark.asyncio
async def test_empty_and_oversize_batches_are_invalid_request():
    dispatcher = _dispatcher()
    empty = await dispatcher.handle_payload([], _scope())
    assert empty["id"] is None and empty["error"]["code"] == -32600
    big = await dispatcher.handle_payload([_frame(i, "echo", {}) for i in range(4)], _scope())
    assert big["id"] is None and big["error"]["code"] == -32600


def test_registry_rejects_duplicates_and_late_registration():
    registry = MethodRegistry()
    registry.register("a", lambda p: p)
    with pytest.raises(ValueError):
        registry.register("a", lambda p: p)
    registry.freeze()
    with pytest.raises(RuntimeError):
        registry.register("b", lambda p: p)
    assert "a" in registry and len(registry) == 1
