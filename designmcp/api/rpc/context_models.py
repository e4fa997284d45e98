"""Shared dataclass models for RPC dispatch and connection state."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any

from designmcp.gateway.rate_limit import RateLimitBucket


@dataclass(slots=True)
class RpcRequest:
    """A request envelope that passed the shape check."""

    method: str
    params: dict[str, Any] | list[Any] | None = None
    id: str | int | None = None
    is_notification: bool = False


@dataclass(slots=True)
class DispatchScope:
    """Who a request belongs to: the identity used for logs and its rate-limit bucket."""

    connection_id: str
    bucket: RateLimitBucket
    client_host: str | None = None


@dataclass(eq=False)
class ConnectionState:
    """State of one open stream. Owned by the transport; dropped on close."""

    connection_id: str
    client_host: str | None = None
    opened_at: float = field(default_factory=time.monotonic)
    last_activity: float = field(default_factory=time.monotonic)
    bucket: RateLimitBucket = field(default_factory=RateLimitBucket)
    in_flight_ids: set[str | int] = field(default_factory=set)
    tasks: set[asyncio.Task[Any]] = field(default_factory=set)
    outbound: asyncio.Queue[str | None] = field(default_factory=asyncio.Queue)
    # Set once the stream writer runs; until then the start deadline may reap the connection.
    streaming: bool = False
    start_deadline: asyncio.TimerHandle | None = None
    closed: bool = False

    def touch(self) -> None:
        self.last_activity = time.monotonic()

    def idle_for(self, now: float | None = None) -> float:
        return (now if now is not None else time.monotonic()) - self.last_activity

    @property
    def scope(self) -> DispatchScope:
        return DispatchScope(connection_id=self.connection_id, bucket=self.bucket, client_host=self.client_host)
