"""Small shared helpers."""

from __future__ import annotations

import secrets
import string
import time
from datetime import datetime, timezone

_BASE36 = string.digits + string.ascii_lowercase


def generate_request_id() -> str:
    """Unique id for tracing one request through the logs, e.g. ``req_1718000000000_k3j9x0a``."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(7))
    return f"req_{int(time.time() * 1000)}_{suffix}"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
