"""FastAPI server: SSE stream, paired ingress, stateless JSON-RPC endpoint and health check.

Runtime objects (transport, dispatcher, buckets) live on ``app.state`` and are
built once per application from the loaded config.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from designmcp import __version__
from designmcp.api.http.health_methods import health_payload, root_payload
from designmcp.api.http.stream_methods import (
    accept_ingress,
    build_sse_stream_response,
    handle_stateless_rpc,
)
from designmcp.api.rpc.dispatcher import MethodDispatcher
from designmcp.api.rpc.error_boundary import classify_http_status
from designmcp.api.rpc.mcp_methods import build_mcp_registry
from designmcp.api.rpc.registry import MethodRegistry
from designmcp.api.rpc.sse_transport import SseTransport
from designmcp.config.access import get_config as get_cached_config
from designmcp.config.schema import Config
from designmcp.gateway.host_validator import HostValidator
from designmcp.gateway.rate_limit import ClientBucketStore, FixedWindowRateLimiter
from designmcp.utils.exceptions import DesignMcpError, classify_exception, sanitize_error_message


def build_runtime(config: Config, registry: MethodRegistry | None = None) -> dict[str, Any]:
    """Wire limiter, dispatcher and transport from config."""
    if registry is None:
        registry = build_mcp_registry(server_name=config.server.service_name, server_version=__version__)
    if not registry.frozen:
        registry.freeze()
    limiter = FixedWindowRateLimiter(
        max_requests=config.rate_limit.max_requests,
        window_ms=config.rate_limit.window_ms,
        enabled=config.rate_limit.enabled,
    )
    dispatcher = MethodDispatcher(
        registry,
        rate_limiter=limiter,
        handler_timeout_s=config.transport.handler_timeout_s,
        max_batch_size=config.transport.max_batch_size,
    )
    transport = SseTransport(
        dispatcher,
        idle_timeout_s=config.transport.idle_timeout_s,
        keepalive_interval_s=config.transport.keepalive_interval_s,
        outbound_queue_size=config.transport.outbound_queue_size,
    )
    return {
        "config": config,
        "registry": registry,
        "rate_limiter": limiter,
        "dispatcher": dispatcher,
        "transport": transport,
        "buckets": ClientBucketStore(limiter, max_buckets=config.rate_limit.max_buckets),
        "host_validator": HostValidator(
            allowed_hosts=config.server.allowed_hosts,
            default_host=config.server.default_host,
            preview_pattern=config.server.preview_host_pattern,
        ),
    }


def create_app(config: Config | None = None, registry: MethodRegistry | None = None) -> FastAPI:
    config = config or get_cached_config()
    runtime = build_runtime(config, registry)
    service_name = config.server.service_name

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "designmcp API server starting methods={} rate_limit={}/{}ms",
            len(runtime["registry"]),
            config.rate_limit.max_requests,
            config.rate_limit.window_ms,
        )
        yield
        await runtime["transport"].aclose_all()
        logger.info("designmcp API server stopped")

    app = FastAPI(
        title="Design System MCP",
        description="JSON-RPC 2.0 control plane for design-system queries",
        version=__version__,
        lifespan=lifespan,
    )
    for key, value in runtime.items():
        setattr(app.state, key, value)

    @app.exception_handler(DesignMcpError)
    async def designmcp_exception_handler(request: Request, exc: DesignMcpError):
        return JSONResponse(status_code=classify_http_status(exc), content=exc.to_dict())

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        code, _, _ = classify_exception(exc)
        sanitized = sanitize_error_message(str(exc))
        logger.exception("Unhandled exception [{}]: {}", code, sanitized)
        return JSONResponse(
            status_code=500,
            content={"error": "INTERNAL_ERROR", "message": "An unexpected error occurred", "code": code},
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Authorization"],
    )

    @app.get("/")
    async def root():
        """Service banner."""
        return root_payload(service=service_name, version=__version__, sessions=runtime["transport"].session_count)

    @app.get("/health")
    async def health():
        return JSONResponse(
            content=health_payload(service=service_name, version=__version__),
            headers={"Access-Control-Allow-Origin": "*"},
        )

    @app.get("/sse")
    @app.get("/api/sse")
    async def open_stream(request: Request):
        """Open a server-push stream. The first event names the ingress URL."""
        return build_sse_stream_response(
            request=request,
            transport=runtime["transport"],
            host_validator=runtime["host_validator"],
        )

    @app.post("/messages")
    @app.post("/sse")
    async def post_message(request: Request, sessionId: str | None = None):
        """Ingress channel paired with an open stream."""
        return await accept_ingress(request=request, transport=runtime["transport"], session_id=sessionId)

    @app.post("/mcp")
    async def stateless_rpc(request: Request):
        """JSON-RPC answered in the HTTP response; notifications get 204."""
        return await handle_stateless_rpc(
            request=request,
            dispatcher=runtime["dispatcher"],
            buckets=runtime["buckets"],
        )

    return app
