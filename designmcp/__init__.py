"""designmcp - JSON-RPC control plane for querying the design system."""

__version__ = "1.0.0"
__logo__ = "◆"
