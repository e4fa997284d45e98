"""Host header validation for the advertised ingress endpoint."""

from __future__ import annotations

import re

from loguru import logger


class HostValidator:
    """Accept allow-listed hosts and preview deployments; fall back to a default host."""

    def __init__(self, *, allowed_hosts: list[str], default_host: str, preview_pattern: str | None = None):
        self._allowed = {h.strip().lower() for h in allowed_hosts if h and h.strip()}
        self._default_host = default_host
        self._preview = re.compile(preview_pattern) if preview_pattern else None

    @property
    def default_host(self) -> str:
        return self._default_host

    def validate(self, host: str | None) -> str:
        """Return the host when trusted, otherwise the default host."""
        if not host:
            return self._default_host
        normalized = host.strip().lower()
        if normalized in self._allowed:
            return host.strip()
        if self._preview is not None and self._preview.match(normalized):
            return host.strip()
        logger.warning("Invalid host header rejected host={}", host)
        return self._default_host


def build_endpoint_url(validated_host: str, path: str = "/messages") -> str:
    """Build the absolute ingress URL for a validated host."""
    is_local = "localhost" in validated_host or "127.0.0.1" in validated_host
    scheme = "http" if is_local else "https"
    return f"{scheme}://{validated_host}{path}"
