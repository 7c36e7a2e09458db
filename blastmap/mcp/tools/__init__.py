"""MCP tools registration.

Provides tool definitions, handlers, and registration functions for
the blastmap MCP server.
"""

from mcp.server import Server

from blastmap.mcp.tools.definitions import (
    ALL_TOOLS,
    ANALYZE_IMPACT_TOOL,
    APPLY_VIEW_MODE_TOOL,
    BATCH_ANALYZE_IMPACT_TOOL,
    COUPLING_METRICS_TOOL,
    DOMAIN_HEALTH_TOOL,
    MANAGE_CACHE_TOOL,
    RELATED_NODES_TOOL,
)
from blastmap.mcp.tools.dispatch import (
    dispatch_tool,
    inject_timing,
    register_graph_tools,
)


def register_tools(server: Server) -> None:
    """Register all MCP tools with the server.

    Args:
        server: The MCP server instance.
    """
    register_graph_tools(server)


__all__ = [
    # Registration
    "register_tools",
    "register_graph_tools",
    # Dispatch
    "dispatch_tool",
    "inject_timing",
    # Tool definitions
    "ALL_TOOLS",
    "RELATED_NODES_TOOL",
    "ANALYZE_IMPACT_TOOL",
    "BATCH_ANALYZE_IMPACT_TOOL",
    "APPLY_VIEW_MODE_TOOL",
    "COUPLING_METRICS_TOOL",
    "DOMAIN_HEALTH_TOOL",
    "MANAGE_CACHE_TOOL",
]
