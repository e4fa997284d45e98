"""Design-system content and the tools that query it."""

from designmcp.services.design_system.catalog import DesignSystemCatalog
from designmcp.services.design_system.tools import TOOLS, DesignSystemTools, ToolSpec

__all__ = ["DesignSystemCatalog", "DesignSystemTools", "TOOLS", "ToolSpec"]
