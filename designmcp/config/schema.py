"""Configuration schema using Pydantic.

The single data model and defaults for the server, persisted to ~/.designmcp/config.json.
"""

from pydantic import BaseModel, Field, ConfigDict
from pydantic_settings import BaseSettings

ENV_PREFIX = "DESIGNMCP_"


class ServerConfig(BaseModel):
    """HTTP server binding and advertised endpoint configuration."""
    host: str = "127.0.0.1"
    port: int = 3000
    # Host used in the advertised ingress URL when the Host header is missing or rejected.
    default_host: str = "www.mcpsystem.design"
    allowed_hosts: list[str] = Field(
        default_factory=lambda: [
            "www.mcpsystem.design",
            "mcpsystem.design",
            "localhost:3000",
            "localhost",
            "127.0.0.1:3000",
            "127.0.0.1",
        ]
    )
    # Preview deployments, e.g. project-git-branch-team.vercel.app
    preview_host_pattern: str = r"^[\w-]+-[\w-]+-[\w-]+\.vercel\.app$"
    service_name: str = "design-system-mcp"


class RateLimitConfig(BaseModel):
    """Fixed-window request admission per connection (or per client IP for stateless POST)."""
    enabled: bool = True
    max_requests: int = Field(default=100, ge=1)
    window_ms: int = Field(default=60_000, ge=1)
    # Prune expired per-IP buckets once the store grows past this size.
    max_buckets: int = Field(default=10_000, ge=1)


class TransportConfig(BaseModel):
    """Streaming transport timing and sizing."""
    idle_timeout_s: float = Field(default=300.0, gt=0)
    keepalive_interval_s: float = Field(default=15.0, gt=0)
    # None disables the per-request handler timeout.
    handler_timeout_s: float | None = 30.0
    max_batch_size: int = Field(default=100, ge=1)
    outbound_queue_size: int = Field(default=256, ge=1)


class Config(BaseSettings):
    """Root configuration for designmcp."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)

    model_config = ConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
    )
