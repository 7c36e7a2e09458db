"""Coupling Between Objects (CBO) metrics.

CBO is in-degree + out-degree over the deduplicated dependency graph.
Scores are normalized by the snapshot's maximum CBO and mapped onto a
blue -> yellow -> red gradient. Output is deterministic for a given edge set.
"""

import math

import networkx as nx

from blastmap.analyzers.constants import (
    COUPLING_HIGH_COLOR,
    COUPLING_LOW_COLOR,
    COUPLING_MID_COLOR,
)
from blastmap.analyzers.graph_model import GraphModel
from blastmap.logging import log_operation
from blastmap.models.graph import CouplingMetric, GraphSnapshot, snapshot_to_digraph


def _hex_to_rgb(color: str) -> tuple[int, int, int]:
    return int(color[1:3], 16), int(color[3:5], 16), int(color[5:7], 16)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +inf (not to even)."""
    return math.floor(value + 0.5)


def interpolate_color(start: str, end: str, t: float) -> str:
    """Linear blend between two '#rrggbb' colors, channel by channel."""
    r1, g1, b1 = _hex_to_rgb(start)
    r2, g2, b2 = _hex_to_rgb(end)
    r = round_half_up(r1 + (r2 - r1) * t)
    g = round_half_up(g1 + (g2 - g1) * t)
    b = round_half_up(b1 + (b2 - b1) * t)
    return f"#{r:02x}{g:02x}{b:02x}"


def color_from_score(score: float) -> str:
    """Map a normalized score to the coupling gradient.

    [0, 0.5) blends blue into yellow and [0.5, 1] blends yellow into red;
    the two halves are independent linear blends.
    """
    score = max(0.0, min(1.0, score))
    if score < 0.5:
        return interpolate_color(COUPLING_LOW_COLOR, COUPLING_MID_COLOR, score * 2)
    return interpolate_color(COUPLING_MID_COLOR, COUPLING_HIGH_COLOR, (score - 0.5) * 2)


def coupling_level(normalized_score: float) -> str:
    """Human-readable coupling band."""
    if normalized_score < 0.2:
        return "Very Low"
    if normalized_score < 0.4:
        return "Low"
    if normalized_score < 0.6:
        return "Medium"
    if normalized_score < 0.8:
        return "High"
    return "Very High"


def _metrics_from_digraph(G: nx.DiGraph) -> dict[str, CouplingMetric]:
    degrees = {node: (G.in_degree(node), G.out_degree(node)) for node in G.nodes()}
    max_cbo = max((i + o for i, o in degrees.values()), default=0)

    metrics: dict[str, CouplingMetric] = {}
    for node, (in_degree, out_degree) in degrees.items():
        cbo = in_degree + out_degree
        score = cbo / max_cbo if max_cbo > 0 else 0.0
        metrics[node] = CouplingMetric(
            node_id=node,
            in_degree=in_degree,
            out_degree=out_degree,
            cbo=cbo,
            normalized_score=score,
            color=color_from_score(score),
        )
    return metrics


def calculate_coupling_metrics(snapshot: GraphSnapshot) -> dict[str, CouplingMetric]:
    """Compute CBO metrics for every symbol of a snapshot.

    Edges between symbols collapse to one per (source, target); edges with
    an endpoint that is not a symbol are skipped.

    Args:
        snapshot: The graph snapshot.

    Returns:
        Dict mapping symbol node ID to its CouplingMetric, in symbol order.
    """
    with log_operation("coupling_metrics", {"symbols": len(snapshot.symbols)}):
        return _metrics_from_digraph(snapshot_to_digraph(snapshot))


def coupling_metrics_for_graph(graph: GraphModel) -> dict[str, CouplingMetric]:
    """Compute CBO metrics over every loaded node, domain and file nodes included."""
    return _metrics_from_digraph(graph.to_digraph())
