"""In-memory fixed-window rate limiter for RPC request admission."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass
class RateLimitBucket:
    """Counter for one client identity. Only FixedWindowRateLimiter mutates it."""

    count: int = 0
    window_start: float | None = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)


@dataclass
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_at_ms: int
    retry_after_ms: int


class FixedWindowRateLimiter:
    """Admit at most ``max_requests`` per ``window_ms`` for each bucket."""

    def __init__(
        self,
        *,
        max_requests: int = 100,
        window_ms: int = 60_000,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1 or window_ms < 1:
            raise ValueError("max_requests and window_ms must be positive")
        self._max_requests = max_requests
        self._window_ms = window_ms
        self._enabled = enabled
        self._clock = clock

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def _window_expired(self, bucket: RateLimitBucket, now: float) -> bool:
        if bucket.window_start is None:
            return True
        return (now - bucket.window_start) * 1000.0 >= self._window_ms

    def _reset_at_ms(self, bucket: RateLimitBucket) -> int:
        start = bucket.window_start or 0.0
        return int(start * 1000.0 + self._window_ms)

    async def admit(self, bucket: RateLimitBucket) -> RateLimitDecision:
        if not self._enabled:
            return RateLimitDecision(allowed=True, remaining=self._max_requests, reset_at_ms=0, retry_after_ms=0)
        async with bucket.lock:
            now = self._clock()
            if self._window_expired(bucket, now):
                bucket.window_start = now
                bucket.count = 0
            if bucket.count >= self._max_requests:
                reset_at_ms = self._reset_at_ms(bucket)
                return RateLimitDecision(
                    allowed=False,
                    remaining=0,
                    reset_at_ms=reset_at_ms,
                    retry_after_ms=max(0, reset_at_ms - int(now * 1000.0)),
                )
            bucket.count += 1
            return RateLimitDecision(
                allowed=True,
                remaining=self._max_requests - bucket.count,
                reset_at_ms=self._reset_at_ms(bucket),
                retry_after_ms=0,
            )

    def is_stale(self, bucket: RateLimitBucket, now: float | None = None) -> bool:
        return self._window_expired(bucket, self._clock() if now is None else now)


class ClientBucketStore:
    """Buckets keyed by client IP, for requests that arrive without a stream."""

    def __init__(self, limiter: FixedWindowRateLimiter, *, max_buckets: int = 10_000):
        self._limiter = limiter
        self._max_buckets = max_buckets
        self._buckets: dict[str, RateLimitBucket] = {}

    def _key(self, client_ip: str | None) -> str:
        return (client_ip or "").strip() or "unknown"

    def _prune(self) -> None:
        for key in [k for k, b in self._buckets.items() if self._limiter.is_stale(b)]:
            self._buckets.pop(key, None)

    def bucket_for(self, client_ip: str | None) -> RateLimitBucket:
        key = self._key(client_ip)
        bucket = self._buckets.get(key)
        if bucket is None:
            if len(self._buckets) >= self._max_buckets:
                self._prune()
            bucket = self._buckets.setdefault(key, RateLimitBucket())
        return bucket

    def size(self) -> int:
        return len(self._buckets)


def client_ip_from_headers(forwarded_for: str | None, fallback: str | None = None) -> str:
    """First hop of X-Forwarded-For, else the socket peer."""
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return (fallback or "").strip() or "unknown"
