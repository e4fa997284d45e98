"""Server-Sent Events transport: one long-lived stream per client, requests via a paired ingress.

Each connection owns an outbound queue. The stream generator is the only
consumer of that queue and the only writer to the wire, so every envelope
leaves as one whole SSE event. Dispatches run as independent tasks and may
finish in any order.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from typing import Any, AsyncIterator

from loguru import logger

from designmcp.api.rpc.codec import encode_envelope, parse_frame
from designmcp.api.rpc.context_models import ConnectionState
from designmcp.api.rpc.dispatcher import MethodDispatcher
from designmcp.api.rpc.errors import error_from_exception, error_response
from designmcp.utils.exceptions import ParseError, RpcErrorCode, SessionNotFoundError

PING_FRAME = ": ping\n\n"


def format_sse_event(event: str, data: str) -> str:
    """One SSE event. ``data`` must be a single line."""
    return f"event: {event}\ndata: {data}\n\n"


def _request_ids(payload: Any) -> list[str | int]:
    items = payload if isinstance(payload, list) else [payload]
    ids: list[str | int] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        raw = item.get("id")
        if isinstance(raw, bool) or not isinstance(raw, (str, int)):
            continue
        ids.append(raw)
    return ids


class SseTransport:
    """Open streams keyed by session id, plus the ingress that feeds them."""

    def __init__(
        self,
        dispatcher: MethodDispatcher,
        *,
        idle_timeout_s: float = 300.0,
        keepalive_interval_s: float = 15.0,
        outbound_queue_size: int = 256,
    ):
        self._dispatcher = dispatcher
        self._idle_timeout_s = idle_timeout_s
        self._keepalive_interval_s = keepalive_interval_s
        self._outbound_queue_size = outbound_queue_size
        self._sessions: dict[str, ConnectionState] = {}

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def open(self, client_host: str | None = None) -> ConnectionState:
        connection_id = uuid.uuid4().hex
        conn = ConnectionState(
            connection_id=connection_id,
            client_host=client_host,
            outbound=asyncio.Queue(maxsize=self._outbound_queue_size),
        )
        self._sessions[connection_id] = conn
        # A stream whose body is never iterated would otherwise stay registered forever.
        conn.start_deadline = asyncio.get_running_loop().call_later(
            self._idle_timeout_s, self._reap_unstarted, conn
        )
        logger.info("SSE connection opened session={} client={}", connection_id, client_host)
        return conn

    def _reap_unstarted(self, conn: ConnectionState) -> None:
        if not conn.streaming:
            self.close(conn, reason="never-started")

    def get(self, connection_id: str | None) -> ConnectionState:
        conn = self._sessions.get(connection_id or "")
        if conn is None or conn.closed:
            raise SessionNotFoundError(connection_id or "")
        return conn

    async def stream(self, conn: ConnectionState, endpoint_url: str) -> AsyncIterator[str]:
        """Yield SSE text for one connection until it closes, idles out, or the client goes away."""
        reason = "closed"
        try:
            conn.streaming = True
            if conn.start_deadline is not None:
                conn.start_deadline.cancel()
            if conn.closed:
                return
            yield format_sse_event("endpoint", endpoint_url)
            last_write = time.monotonic()
            while True:
                now = time.monotonic()
                idle_left = self._idle_timeout_s - conn.idle_for(now)
                if idle_left <= 0:
                    reason = "idle"
                    break
                ping_left = self._keepalive_interval_s - (now - last_write)
                if ping_left <= 0:
                    yield PING_FRAME
                    last_write = time.monotonic()
                    continue
                try:
                    frame = await asyncio.wait_for(conn.outbound.get(), timeout=min(idle_left, ping_left))
                except asyncio.TimeoutError:
                    continue
                if frame is None:
                    break
                yield format_sse_event("message", frame)
                last_write = time.monotonic()
        except asyncio.CancelledError:
            reason = "disconnect"
            raise
        except Exception as e:
            reason = "error"
            logger.error("SSE stream error session={}: {}", conn.connection_id, e)
            raise
        finally:
            self.close(conn, reason=reason)

    async def submit(self, connection_id: str | None, body: bytes | str) -> None:
        """Accept one ingress body for an open stream; the answer arrives on the stream."""
        conn = self.get(connection_id)
        conn.touch()
        try:
            payload = parse_frame(body)
        except ParseError as e:
            logger.warning("SSE ingress parse error session={}", conn.connection_id)
            await self._emit(conn, error_from_exception(None, e))
            return

        ids = _request_ids(payload)
        clashing = [i for i in ids if i in conn.in_flight_ids]
        if clashing or len(set(ids)) != len(ids):
            logger.warning("SSE duplicate request id session={} ids={}", conn.connection_id, clashing or ids)
            await self._emit(
                conn,
                error_response(
                    None,
                    RpcErrorCode.INVALID_REQUEST,
                    data=f"request id already in flight: {(clashing or ids)[0]!r}",
                ),
            )
            return

        task = asyncio.create_task(self._run(conn, payload))
        conn.tasks.add(task)
        conn.in_flight_ids.update(ids)
        task.add_done_callback(lambda t: self._forget(conn, t, ids))

    async def _run(self, conn: ConnectionState, payload: Any) -> None:
        response = await self._dispatcher.handle_payload(payload, conn.scope)
        if response is not None:
            await self._emit(conn, response)

    async def _emit(self, conn: ConnectionState, envelope: dict[str, Any] | list[dict[str, Any]]) -> bool:
        if conn.closed:
            return False
        await conn.outbound.put(encode_envelope(envelope))
        conn.touch()
        return True

    def _forget(self, conn: ConnectionState, task: asyncio.Task[Any], ids: list[str | int]) -> None:
        conn.tasks.discard(task)
        for request_id in ids:
            conn.in_flight_ids.discard(request_id)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("SSE dispatch task failed session={}: {}", conn.connection_id, exc)

    def close(self, conn: ConnectionState, *, reason: str = "closed") -> None:
        """Drop the connection: cancel in-flight dispatches and wake the stream writer."""
        if conn.closed:
            return
        conn.closed = True
        self._sessions.pop(conn.connection_id, None)
        if conn.start_deadline is not None:
            conn.start_deadline.cancel()
        pending = len(conn.tasks)
        for task in list(conn.tasks):
            task.cancel()
        conn.in_flight_ids.clear()
        while not conn.outbound.empty():
            conn.outbound.get_nowait()
        conn.outbound.put_nowait(None)
        logger.info(
            "SSE connection closed session={} reason={} cancelled={}",
            conn.connection_id,
            reason,
            pending,
        )

    async def aclose_all(self) -> None:
        """Close every open stream and wait for their dispatches to unwind."""
        conns = list(self._sessions.values())
        tasks = [t for c in conns for t in c.tasks]
        for conn in conns:
            self.close(conn, reason="shutdown")
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
