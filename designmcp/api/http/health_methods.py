"""Health and banner payloads."""

from __future__ import annotations

from typing import Any

from designmcp.utils.helpers import utc_now_iso


def health_payload(*, service: str, version: str) -> dict[str, Any]:
    return {
        "status": "ok",
        "service": service,
        "version": version,
        "timestamp": utc_now_iso(),
    }


def root_payload(*, service: str, version: str, sessions: int) -> dict[str, Any]:
    return {
        "service": service,
        "version": version,
        "status": "running",
        "sessions": sessions,
        "endpoints": {"sse": "/sse", "messages": "/messages", "mcp": "/mcp", "health": "/health"},
    }
