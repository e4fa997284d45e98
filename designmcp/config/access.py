"""Process-wide config used by ``serve`` and ``create_app``.

One entry per (file, ``DESIGNMCP_*`` environment) pair: changing an override
variable yields a freshly loaded Config, while repeated calls under the same
environment share one instance.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path

from designmcp.config.loader import get_config_path, load_config
from designmcp.config.schema import ENV_PREFIX, Config

CacheKey = tuple[str, tuple[tuple[str, str], ...]]

_lock = threading.RLock()
_cache: dict[CacheKey, Config] = {}


def env_overrides() -> tuple[tuple[str, str], ...]:
    """The ``DESIGNMCP_*`` variables pydantic-settings will read, sorted."""
    prefix = ENV_PREFIX.upper()
    return tuple(sorted((k, v) for k, v in os.environ.items() if k.upper().startswith(prefix)))


def _resolved(config_path: Path | None) -> Path:
    return Path(config_path or get_config_path()).expanduser().resolve()


def get_config(*, config_path: Path | None = None, force_reload: bool = False) -> Config:
    path = _resolved(config_path)
    key: CacheKey = (str(path), env_overrides())
    with _lock:
        if force_reload or key not in _cache:
            _cache[key] = load_config(path)
        return _cache[key]


def clear_config_cache(*, config_path: Path | None = None) -> None:
    """Forget cached configs for one file, or for every file."""
    with _lock:
        if config_path is None:
            _cache.clear()
            return
        path = str(_resolved(config_path))
        for key in [k for k in _cache if k[0] == path]:
            del _cache[key]
