"""MCP tool registration and dispatch.

Registers all blastmap tools with the MCP server and handles
dispatching tool calls to the appropriate handlers.
"""

import json
from typing import Any

from mcp.server import Server
from mcp.types import TextContent, Tool

from blastmap.logging import log_operation
from blastmap.mcp.tools.definitions import ALL_TOOLS
from blastmap.mcp.tools.handlers import (
    handle_analyze_impact,
    handle_apply_view_mode,
    handle_batch_analyze_impact,
    handle_coupling_metrics,
    handle_domain_health,
    handle_manage_cache,
    handle_related_nodes,
)


def register_graph_tools(server: Server) -> None:
    """Register graph query tools with the MCP server.

    Args:
        server: The MCP server instance.
    """

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available graph query tools."""
        return ALL_TOOLS

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool calls."""
        try:
            result = await dispatch_tool(name, arguments)
            return [TextContent(type="text", text=result)]
        except Exception as e:
            return [
                TextContent(
                    type="text",
                    text=f"Error: {type(e).__name__}: {e}",
                )
            ]


# Handler dispatch table
_HANDLERS = {
    # Query tools
    "related_nodes": handle_related_nodes,
    "analyze_impact": handle_analyze_impact,
    "batch_analyze_impact": handle_batch_analyze_impact,
    "apply_view_mode": handle_apply_view_mode,
    "coupling_metrics": handle_coupling_metrics,
    "domain_health": handle_domain_health,
    # Cache management
    "manage_cache": handle_manage_cache,
}


async def dispatch_tool(name: str, arguments: dict[str, Any]) -> str:
    """Dispatch tool call to appropriate handler.

    All tool responses include a 'timing' field with performance metrics.

    Args:
        name: Tool name.
        arguments: Tool arguments.

    Returns:
        JSON string with tool response and timing.

    Raises:
        ValueError: If tool name is unknown.
    """
    handler = _HANDLERS.get(name)
    if not handler:
        raise ValueError(f"Unknown tool: {name}")

    # Log tool invocation with relevant details
    log_details: dict[str, Any] = {"snapshot": arguments.get("snapshot_path", "N/A")}
    if "node_id" in arguments:
        log_details["node"] = arguments["node_id"]
    if "mode" in arguments:
        log_details["mode"] = arguments["mode"]

    with log_operation(f"tool:{name}", log_details) as timing:
        result_str = await handler(arguments)

    # Inject timing into the response
    return inject_timing(result_str, timing.elapsed_ms)


def inject_timing(result_str: str, elapsed_ms: float) -> str:
    """Inject timing information into a JSON response.

    Args:
        result_str: JSON string from handler.
        elapsed_ms: Elapsed time in milliseconds.

    Returns:
        JSON string with timing field added; non-object JSON and non-JSON
        text are returned unchanged.
    """
    try:
        result = json.loads(result_str)
    except json.JSONDecodeError:
        return result_str
    if not isinstance(result, dict):
        return result_str
    result["timing"] = {"total_ms": round(elapsed_ms, 1)}
    return json.dumps(result, indent=2)
