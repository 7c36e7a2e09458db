"""MCP Tool schema definitions.

Contains all Tool objects that define the MCP interface for blastmap.
Each Tool specifies its name, description, and JSON schema for inputs.
"""

from mcp.types import Tool

_SNAPSHOT_PATH = {
    "type": "string",
    "description": "Absolute path to the graph snapshot JSON file",
}

_NODE_ID = {
    "type": "string",
    "description": (
        "Node identifier: 'domain:<name>', '<domain>:<filePath>' or "
        "'<filePath>:<name>:<startLine>'"
    ),
}

# =============================================================================
# QUERY TOOLS
# =============================================================================

RELATED_NODES_TOOL = Tool(
    name="related_nodes",
    description=(
        "Find nodes related to a focus node: structural parents/children, "
        "same-file siblings, and callers/callees within a hop limit. "
        "Results are cached per snapshot until the file changes."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "snapshot_path": _SNAPSHOT_PATH,
            "node_id": _NODE_ID,
            "depth": {
                "type": "integer",
                "description": "Hop limit for callers/callees (default: 2)",
            },
        },
        "required": ["snapshot_path", "node_id"],
    },
)

ANALYZE_IMPACT_TOOL = Tool(
    name="analyze_impact",
    description=(
        "Compute the blast radius of changing a node. "
        "policy=unbounded (default) walks all upstream and downstream dependencies "
        "and returns a 0-100 severity score with a low/medium/high/critical band. "
        "policy=depth-capped walks only dependents up to max_depth and bands "
        "risk by dependent count."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "snapshot_path": _SNAPSHOT_PATH,
            "node_id": _NODE_ID,
            "policy": {
                "type": "string",
                "enum": ["unbounded", "depth-capped"],
                "description": "Impact policy (default: unbounded)",
                "default": "unbounded",
            },
            "max_depth": {
                "type": "integer",
                "description": "Depth cap for the depth-capped policy (default: 5)",
            },
        },
        "required": ["snapshot_path", "node_id"],
    },
)

BATCH_ANALYZE_IMPACT_TOOL = Tool(
    name="batch_analyze_impact",
    description="Run the unbounded impact analysis independently for several nodes.",
    inputSchema={
        "type": "object",
        "properties": {
            "snapshot_path": _SNAPSHOT_PATH,
            "node_ids": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Node identifiers to analyze",
            },
        },
        "required": ["snapshot_path", "node_ids"],
    },
)

APPLY_VIEW_MODE_TOOL = Tool(
    name="apply_view_mode",
    description=(
        "Compute the visible nodes and edges for a view mode. "
        "architecture: domains and files; codebase: every node; trace: symbols only. "
        "Optional focus dims unrelated nodes; a search query of 3+ characters keeps "
        "only matches and their structural ancestors."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "snapshot_path": _SNAPSHOT_PATH,
            "mode": {
                "type": "string",
                "enum": ["architecture", "codebase", "trace"],
                "description": "View mode (default: architecture)",
                "default": "architecture",
            },
            "focus_node_id": {
                "type": "string",
                "description": "Focus node; nodes unrelated to it are faded",
            },
            "search_query": {
                "type": "string",
                "description": "Case-insensitive search on name, file path, domain and tags",
            },
            "highlight_only": {
                "type": "boolean",
                "description": "Fade non-matching nodes instead of removing them",
                "default": False,
            },
        },
        "required": ["snapshot_path"],
    },
)

COUPLING_METRICS_TOOL = Tool(
    name="coupling_metrics",
    description=(
        "Coupling between objects (in-degree + out-degree) per node, normalized "
        "by the snapshot maximum, with a blue-yellow-red risk color."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "snapshot_path": _SNAPSHOT_PATH,
            "top_n": {
                "type": "integer",
                "description": "Number of most coupled nodes to return (default: 20)",
                "default": 20,
            },
            "all_nodes": {
                "type": "boolean",
                "description": "Include domain and file nodes, not only symbols",
                "default": False,
            },
        },
        "required": ["snapshot_path"],
    },
)

DOMAIN_HEALTH_TOOL = Tool(
    name="domain_health",
    description=(
        "Health score per domain from average complexity and the share of "
        "cross-domain edges (healthy >= 80, warning >= 60, else critical)."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "snapshot_path": _SNAPSHOT_PATH,
        },
        "required": ["snapshot_path"],
    },
)

# =============================================================================
# CACHE MANAGEMENT
# =============================================================================

MANAGE_CACHE_TOOL = Tool(
    name="manage_cache",
    description=(
        "Manage the relationship cache of a snapshot session. "
        "Modes: stats (cache size and keys), clear (invalidate all entries)."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "mode": {
                "type": "string",
                "enum": ["stats", "clear"],
                "description": "Cache management mode",
            },
            "snapshot_path": _SNAPSHOT_PATH,
        },
        "required": ["mode", "snapshot_path"],
    },
)

# List of all tools for registration
ALL_TOOLS = [
    # Query tools
    RELATED_NODES_TOOL,
    ANALYZE_IMPACT_TOOL,
    BATCH_ANALYZE_IMPACT_TOOL,
    APPLY_VIEW_MODE_TOOL,
    COUPLING_METRICS_TOOL,
    DOMAIN_HEALTH_TOOL,
    # Cache management
    MANAGE_CACHE_TOOL,
]

__all__ = [
    # Individual tools
    "RELATED_NODES_TOOL",
    "ANALYZE_IMPACT_TOOL",
    "BATCH_ANALYZE_IMPACT_TOOL",
    "APPLY_VIEW_MODE_TOOL",
    "COUPLING_METRICS_TOOL",
    "DOMAIN_HEALTH_TOOL",
    "MANAGE_CACHE_TOOL",
    # List of all tools
    "ALL_TOOLS",
]
