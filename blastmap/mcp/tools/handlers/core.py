"""Core MCP tool handlers.

Handlers for the snapshot query tools:
- related_nodes: Categorized relationships of a focus node
- analyze_impact: Blast radius under the unbounded or depth-capped policy
- batch_analyze_impact: Unbounded impact for several nodes
- apply_view_mode: Visible node/edge subset for a view context
- coupling_metrics: Most coupled nodes
- domain_health: Health score per domain
"""

import asyncio
import json
from typing import Any

from blastmap.analyzers.constants import get_fade_opacity
from blastmap.analyzers.coupling import coupling_level
from blastmap.mcp.context import get_registry
from blastmap.models.graph import FilterContext
from blastmap.session import GraphSession


def _require(arguments: dict[str, Any], name: str) -> Any:
    value = arguments.get(name)
    if value is None or value == "":
        raise ValueError(f"{name} is required")
    return value


async def _session(arguments: dict[str, Any]) -> GraphSession:
    snapshot_path = _require(arguments, "snapshot_path")
    return await asyncio.to_thread(get_registry().get, snapshot_path)


async def handle_related_nodes(arguments: dict[str, Any]) -> str:
    """Handle related_nodes tool call.

    Args:
        arguments: Tool arguments with snapshot_path, node_id, depth.

    Returns:
        JSON string with the related-node categories.
    """
    node_id = _require(arguments, "node_id")
    depth = arguments.get("depth")
    session = await _session(arguments)

    result = await asyncio.to_thread(session.related_nodes, node_id, depth)
    return json.dumps(
        {
            "node_id": node_id,
            "found": node_id in session.graph,
            **result.model_dump(mode="json"),
        },
        indent=2,
    )


async def handle_analyze_impact(arguments: dict[str, Any]) -> str:
    """Handle analyze_impact tool call.

    Args:
        arguments: Tool arguments with snapshot_path, node_id, policy, max_depth.

    Returns:
        JSON string with the impact analysis or dependents report.
    """
    node_id = _require(arguments, "node_id")
    policy = arguments.get("policy", "unbounded")
    max_depth = arguments.get("max_depth")
    session = await _session(arguments)

    if policy == "depth-capped":
        report = await asyncio.to_thread(session.analyze_dependents, node_id, max_depth)
    elif policy == "unbounded":
        report = await asyncio.to_thread(session.analyze_impact, node_id)
    else:
        raise ValueError(f"Unknown policy: {policy}")

    return json.dumps({"policy": policy, **report.model_dump(mode="json")}, indent=2)


async def handle_batch_analyze_impact(arguments: dict[str, Any]) -> str:
    """Handle batch_analyze_impact tool call."""
    node_ids = _require(arguments, "node_ids")
    if not isinstance(node_ids, list):
        raise ValueError("node_ids must be a list of node identifiers")
    session = await _session(arguments)

    results = await asyncio.to_thread(session.batch_analyze_impact, node_ids)
    return json.dumps(
        {
            "count": len(results),
            "results": {k: v.model_dump(mode="json") for k, v in results.items()},
        },
        indent=2,
    )


async def handle_apply_view_mode(arguments: dict[str, Any]) -> str:
    """Handle apply_view_mode tool call.

    Args:
        arguments: Tool arguments with snapshot_path, mode, focus_node_id,
                   search_query, highlight_only.

    Returns:
        JSON string with visible nodes and edges.
    """
    mode = arguments.get("mode", "architecture")
    focus_id = arguments.get("focus_node_id")
    highlight_only = arguments.get("highlight_only", False)
    session = await _session(arguments)

    related_ids: set[str] = set()
    if focus_id:
        related = await asyncio.to_thread(session.related_nodes, focus_id)
        related_ids = related.all

    context = FilterContext(
        mode=mode,
        focused_node_id=focus_id,
        related_node_ids=related_ids,
        search_query=arguments.get("search_query"),
        fade_opacity=get_fade_opacity(),
    )
    result = await asyncio.to_thread(session.apply_view_mode, context, highlight_only)
    return json.dumps(
        {
            "mode": mode,
            "node_count": len(result.visible_nodes),
            "edge_count": len(result.visible_edges),
            **result.model_dump(mode="json", exclude_none=True),
        },
        indent=2,
    )


async def handle_coupling_metrics(arguments: dict[str, Any]) -> str:
    """Handle coupling_metrics tool call."""
    top_n = arguments.get("top_n", 20)
    all_nodes = arguments.get("all_nodes", False)
    session = await _session(arguments)

    metrics = await asyncio.to_thread(session.coupling_metrics, all_nodes)
    ranked = sorted(metrics.values(), key=lambda m: (-m.cbo, m.node_id))[: max(top_n, 0)]
    return json.dumps(
        {
            "total_nodes": len(metrics),
            "max_cbo": max((m.cbo for m in metrics.values()), default=0),
            "top": [
                {**m.model_dump(), "level": coupling_level(m.normalized_score)}
                for m in ranked
            ],
        },
        indent=2,
    )


async def handle_domain_health(arguments: dict[str, Any]) -> str:
    """Handle domain_health tool call."""
    session = await _session(arguments)
    results = await asyncio.to_thread(session.domain_health)
    return json.dumps(
        {"domains": [h.model_dump() for h in results.values()]},
        indent=2,
    )
