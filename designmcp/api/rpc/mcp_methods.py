"""MCP method set served by the design-system service."""

from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import Field

from designmcp.api.rpc.registry import MethodRegistry
from designmcp.api.rpc.schemas import EmptyParams, ParamsModel
from designmcp.services.design_system.tools import DesignSystemTools

MCP_PROTOCOL_VERSION = "2024-11-05"


class InitializeParams(ParamsModel):
    protocolVersion: str | None = None
    capabilities: dict[str, Any] | None = None
    clientInfo: dict[str, Any] | None = None


class ToolCallParams(ParamsModel):
    name: str = Field(min_length=1, max_length=100)
    arguments: dict[str, Any] | None = None


def register_mcp_methods(
    registry: MethodRegistry,
    tools: DesignSystemTools,
    *,
    server_name: str = "design-system-mcp",
    server_version: str = "1.0.0",
) -> MethodRegistry:
    """Register initialize, ping and the tools/* methods on ``registry``."""

    def initialize(params: InitializeParams) -> dict[str, Any]:
        if params.clientInfo:
            logger.info(
                "MCP initialize client={} requested_version={}",
                params.clientInfo.get("name"),
                params.protocolVersion,
            )
        return {
            "protocolVersion": MCP_PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": server_name, "version": server_version},
        }

    def initialized(_: Any) -> None:
        logger.debug("MCP client initialized")
        return None

    def ping(_: EmptyParams) -> dict[str, Any]:
        return {}

    def tools_list(_: EmptyParams) -> dict[str, Any]:
        return {"tools": tools.definitions()}

    def tools_call(params: ToolCallParams) -> dict[str, Any]:
        return tools.call(params.name, params.arguments)

    registry.register("initialize", initialize, params=InitializeParams, description="Start an MCP session")
    registry.register("notifications/initialized", initialized, description="Client finished initialization")
    registry.register("ping", ping, params=EmptyParams, description="Liveness check")
    registry.register("tools/list", tools_list, params=EmptyParams, description="List design-system tools")
    registry.register("tools/call", tools_call, params=ToolCallParams, description="Run one design-system tool")
    return registry


def build_mcp_registry(
    tools: DesignSystemTools | None = None,
    *,
    server_name: str = "design-system-mcp",
    server_version: str = "1.0.0",
) -> MethodRegistry:
    registry = MethodRegistry()
    register_mcp_methods(
        registry,
        tools or DesignSystemTools(),
        server_name=server_name,
        server_version=server_version,
    )
    return registry.freeze()
