import asyncio
import json

import pytest

from designmcp.api.rpc.dispatcher import MethodDispatcher
from designmcp.api.rpc.registry import MethodRegistry
from designmcp.api.rpc.sse_transport import PING_FRAME, SseTransport, format_sse_event
from designmcp.gateway.rate_limit import FixedWindowRateLimiter
from designmcp.utils.exceptions import SessionNotFoundError


def _transport(*, idle: float = 30.0, keepalive: float = 30.0, started: list | None = None) -> SseTransport:
    registry = MethodRegistry()

    @registry.method("sleep")
    async def sleep(params):
        if started is not None:
            started.append(params["ms"])
        await asyncio.sleep(params["ms"] / 1000)
        return params["ms"]

    @registry.method("echo")
    def echo(params):
        return params

    dispatcher = MethodDispatcher(
        registry.freeze(),
        rate_limiter=FixedWindowRateLimiter(max_requests=1000, window_ms=60_000),
    )
    return SseTransport(dispatcher, idle_timeout_s=idle, keepalive_interval_s=keepalive)


def _body(id_, method, params=None) -> bytes:
    frame = {"jsonrpc": "2.0", "method": method, "params": params or {}}
    if id_ is not None:
        frame["id"] = id_
    return json.dumps(frame).encode()


async def _next_frame(conn, timeout: float = 1.0):
    raw = await asyncio.wait_for(conn.outbound.get(), timeout=timeout)
    return None if raw is None else json.loads(raw)


def test_format_sse_event():
    assert format_sse_event("message", '{"a":1}') == 'event: message\ndata: {"a":1}\n\n'


@pytest.mark.asyncio
async def test_malformed_body_gets_parse_error_with_null_id():
    transport = _transport()
    conn = transport.open("127.0.0.1")
    await transport.submit(conn.connection_id, b'{"jsonrpc": "2.0", "id": 1,')
    frame = await _next_frame(conn)
    assert frame["id"] is None
    assert frame["error"]["code"] == -32700


@pytest.mark.asyncio
async def test_concurrent_requests_each_answered_once_out_of_order():
    transport = _transport()
    conn = transport.open()
    delays = {1: 60, 2: 40, 3: 20, 4: 0, 5: 30}
    for request_id, ms in delays.items():
        await transport.submit(conn.connection_id, _body(request_id, "sleep", {"ms": ms}))
    frames = [await _next_frame(conn) for _ in delays]
    assert sorted(f["id"] for f in frames) == sorted(delays)
    assert all(f["result"] == delays[f["id"]] for f in frames)
    # The fastest handler finishes first even though it was submitted fourth.
    assert frames[0]["id"] == 4
    assert conn.outbound.empty()
    assert not conn.in_flight_ids


@pytest.mark.asyncio
async def test_notification_produces_no_frame():
    transport = _transport()
    conn = transport.open()
    await transport.submit(conn.connection_id, _body(None, "echo", {"x": 1}))
    await transport.submit(conn.connection_id, _body(9, "echo", {"x": 2}))
    frame = await _next_frame(conn)
    assert frame["id"] == 9
    assert conn.outbound.empty()


@pytest.mark.asyncio
async def test_duplicate_in_flight_id_is_rejected_without_reusing_the_id():
    transport = _transport()
    conn = transport.open()
    await transport.submit(conn.connection_id, _body(1, "sleep", {"ms": 50}))
    await transport.submit(conn.connection_id, _body(1, "sleep", {"ms": 0}))
    rejected = await _next_frame(conn)
    assert rejected["id"] is None
    assert rejected["error"]["code"] == -32600
    answered = await _next_frame(conn)
    assert answered == {"jsonrpc": "2.0", "id": 1, "result": 50}


@pytest.mark.asyncio
async def test_batch_response_is_one_frame():
    transport = _transport()
    conn = transport.open()
    body = json.dumps(
        [
            {"jsonrpc": "2.0", "id": "a", "method": "echo", "params": {}},
            {"jsonrpc": "2.0", "id": "b", "method": "missing"},
        ]
    )
    await transport.submit(conn.connection_id, body)
    frame = await _next_frame(conn)
    assert isinstance(frame, list)
    assert {f["id"] for f in frame} == {"a", "b"}


@pytest.mark.asyncio
async def test_close_cancels_in_flight_dispatches_without_responses():
    started: list = []
    transport = _transport(started=started)
    conn = transport.open()
    await transport.submit(conn.connection_id, _body(1, "sleep", {"ms": 5000}))
    await transport.submit(conn.connection_id, _body(2, "sleep", {"ms": 5000}))
    while len(started) < 2:
        await asyncio.sleep(0)
    tasks = list(conn.tasks)
    transport.close(conn)
    await asyncio.gather(*tasks, return_exceptions=True)
    assert all(t.cancelled() for t in tasks)
    assert await _next_frame(conn) is None
    assert conn.outbound.empty()
    assert transport.session_count == 0
    with pytest.raises(SessionNotFoundError):
        await transport.submit(conn.connection_id, _body(3, "echo"))


@pytest.mark.asyncio
async def test_unknown_session_is_rejected():
    with pytest.raises(SessionNotFoundError):
        await _transport().submit("nope", _body(1, "echo"))


@pytest.mark.asyncio
async def test_stream_emits_endpoint_then_messages():
    transport = _transport()
    conn = transport.open()
    stream = transport.stream(conn, f"http://localhost:3000/messages?sessionId={conn.connection_id}")
    try:
        first = await stream.__anext__()
        assert conn.start_deadline.cancelled()
        assert first == f"event: endpoint\ndata: http://localhost:3000/messages?sessionId={conn.connection_id}\n\n"
        await transport.submit(conn.connection_id, _body(1, "echo", {"v": "é"}))
        event = await asyncio.wait_for(stream.__anext__(), timeout=1)
        assert event == 'event: message\ndata: {"jsonrpc":"2.0","id":1,"result":{"v":"é"}}\n\n'
    finally:
        await stream.aclose()
    assert conn.closed
    assert transport.session_count == 0


@pytest.mark.slow
@pytest.mark.asyncio
async def test_stream_sends_keepalive_ping():
    transport = _transport(keepalive=0.02)
    conn = transport.open()
    stream = transport.stream(conn, "http://localhost/messages?sessionId=x")
    try:
        await stream.__anext__()
        assert await asyncio.wait_for(stream.__anext__(), timeout=1) == PING_FRAME
    finally:
        await stream.aclose()


@pytest.mark.slow
@pytest.mark.asyncio
async def test_idle_connection_is_closed():
    transport = _transport(idle=0.05)
    conn = transport.open()
    stream = transport.stream(conn, "http://localhost/messages?sessionId=x")
    await stream.__anext__()
    with pytest.raises(StopAsyncIteration):
        await stream.__anext__()
    assert conn.closed
    assert transport.session_count == 0


@pytest.mark.slow
@pytest.mark.asyncio
async def test_connection_whose_stream_never_starts_is_released():
    transport = _transport(idle=0.05)
    conn = transport.open("127.0.0.1")
    assert transport.session_count == 1
    await asyncio.sleep(0.2)
    assert conn.closed
    assert transport.session_count == 0
    with pytest.raises(SessionNotFoundError):
        await transport.submit(conn.connection_id, _body(1, "echo"))


@pytest.mark.asyncio
async def test_stream_of_an_already_released_connection_ends_at_once():
    transport = _transport()
    conn = transport.open()
    transport.close(conn, reason="never-started")
    chunks = [chunk async for chunk in transport.stream(conn, "http://localhost/messages?sessionId=x")]
    assert chunks == []


@pytest.mark.asyncio
async def test_aclose_all_closes_every_session():
    transport = _transport()
    a = transport.open()
    b = transport.open()
    await transport.submit(a.connection_id, _body(1, "sleep", {"ms": 5000}))
    await transport.aclose_all()
    assert a.closed and b.closed
    assert not a.tasks
    assert transport.session_count == 0
