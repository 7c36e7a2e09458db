"""MCP server implementation for blastmap.

Exposes snapshot queries (related nodes, impact, coupling, view filtering,
domain health, cache management) via the Model Context Protocol over stdio.

Each tool takes a `snapshot_path`. Sessions are kept per snapshot file and
reloaded when the file changes on disk, so re-running a tool after the
indexer rewrites the snapshot reflects the new graph.
"""

import asyncio

from mcp.server import Server
from mcp.server.stdio import stdio_server

from blastmap import __version__
from blastmap.logging import logger
from blastmap.mcp.tools import register_tools

# Server configuration
SERVER_NAME = "blastmap"
SERVER_VERSION = __version__


def create_server() -> Server:
    """Create and configure the MCP server.

    Returns:
        Configured MCP Server instance with all tools registered.
    """
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    # Register all tools
    register_tools(server)

    return server


async def run_server_async() -> None:
    """Run the MCP server with stdio transport."""
    server = create_server()
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        logger.info("MCP server shutdown complete")


def run_server() -> None:
    """Run the MCP server (blocking)."""
    asyncio.run(run_server_async())
