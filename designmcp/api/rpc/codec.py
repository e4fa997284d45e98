"""Frame codec: raw ingress bodies in, compact JSON text frames out."""

from __future__ import annotations

import json
from typing import Any

from designmcp.utils.exceptions import ParseError


def parse_frame(raw: bytes | str) -> Any:
    """Decode one ingress body. Raises ParseError when it is not well-formed JSON."""
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(data="body is not valid UTF-8") from e
    if not raw.strip():
        raise ParseError(data="empty body")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseError(data=f"{e.msg} at line {e.lineno} column {e.colno}") from e


def encode_envelope(envelope: dict[str, Any] | list[dict[str, Any]]) -> str:
    """Serialize one envelope (or batch) deterministically as a single line."""
    return json.dumps(envelope, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
