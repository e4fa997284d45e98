"""HTTP helpers for the SSE stream, its paired ingress, and the stateless RPC endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from loguru import logger

from designmcp.api.rpc.codec import parse_frame
from designmcp.api.rpc.context_models import DispatchScope
from designmcp.api.rpc.dispatcher import MethodDispatcher
from designmcp.api.rpc.errors import error_from_exception
from designmcp.api.rpc.sse_transport import SseTransport
from designmcp.gateway.host_validator import HostValidator, build_endpoint_url
from designmcp.gateway.rate_limit import ClientBucketStore, client_ip_from_headers
from designmcp.utils.exceptions import ParseError, SessionNotFoundError

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def request_client_ip(request: Request) -> str:
    peer = request.client.host if request.client else None
    return client_ip_from_headers(request.headers.get("x-forwarded-for"), peer)


def build_sse_stream_response(
    *,
    request: Request,
    transport: SseTransport,
    host_validator: HostValidator,
) -> StreamingResponse:
    """Open one stream; its first event advertises the ingress URL for this session."""
    host = host_validator.validate(request.headers.get("host"))
    conn = transport.open(client_host=request_client_ip(request))
    endpoint_url = f"{build_endpoint_url(host)}?sessionId={conn.connection_id}"
    return StreamingResponse(
        transport.stream(conn, endpoint_url),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


async def accept_ingress(
    *,
    request: Request,
    transport: SseTransport,
    session_id: str | None,
) -> Response:
    """Hand one ingress body to its stream. The RPC answer travels on the stream, not here."""
    if not session_id:
        raise HTTPException(status_code=400, detail="Missing sessionId query parameter")
    body = await request.body()
    try:
        await transport.submit(session_id, body)
    except SessionNotFoundError as e:
        logger.warning("Ingress for unknown session={}", session_id)
        raise HTTPException(status_code=404, detail=e.message) from e
    return Response(status_code=202, content="Accepted", media_type="text/plain")


async def handle_stateless_rpc(
    *,
    request: Request,
    dispatcher: MethodDispatcher,
    buckets: ClientBucketStore,
) -> Response:
    """Answer a single request or batch in the HTTP response itself."""
    client_ip = request_client_ip(request)
    body = await request.body()
    try:
        payload = parse_frame(body)
    except ParseError as e:
        logger.warning("Stateless RPC parse error client={}", client_ip)
        return JSONResponse(status_code=200, content=error_from_exception(None, e))
    scope = DispatchScope(connection_id=f"http:{client_ip}", bucket=buckets.bucket_for(client_ip), client_host=client_ip)
    response: Any = await dispatcher.handle_payload(payload, scope)
    if response is None:
        return Response(status_code=204)
    return JSONResponse(status_code=200, content=response)
