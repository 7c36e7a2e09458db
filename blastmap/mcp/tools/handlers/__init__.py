"""MCP tool handlers.

Each handler processes tool calls and returns JSON responses.
Handlers are organized by domain:
- core: related_nodes, analyze_impact, batch_analyze_impact, apply_view_mode,
  coupling_metrics, domain_health
- cache: manage_cache (stats, clear)
"""

from blastmap.mcp.tools.handlers.cache import handle_manage_cache
from blastmap.mcp.tools.handlers.core import (
    handle_analyze_impact,
    handle_apply_view_mode,
    handle_batch_analyze_impact,
    handle_coupling_metrics,
    handle_domain_health,
    handle_related_nodes,
)

__all__ = [
    # Core handlers
    "handle_related_nodes",
    "handle_analyze_impact",
    "handle_batch_analyze_impact",
    "handle_apply_view_mode",
    "handle_coupling_metrics",
    "handle_domain_health",
    # Cache management
    "handle_manage_cache",
]
