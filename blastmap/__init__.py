"""blastmap - dependency-graph analysis and view filtering for code maps."""

# Load .env so BLASTMAP_* tunables are set for any entry point
# (CLI, MCP server, pytest) that imports blastmap.
from dotenv import load_dotenv

load_dotenv()

# Keep in sync with pyproject.toml [project] version.
__version__ = "0.1.0"


def run_server() -> None:
    """Run the blastmap MCP server (blocking).

    Uses stdio transport for communication with MCP clients.
    """
    from blastmap.mcp.server import run_server as _run_server
    _run_server()
