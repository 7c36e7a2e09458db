"""Analyzers for dependency-graph exploration."""

from blastmap.analyzers.coupling import (
    calculate_coupling_metrics,
    color_from_score,
    coupling_level,
    coupling_metrics_for_graph,
    interpolate_color,
)
from blastmap.analyzers.graph_algorithms import (
    ancestors_at_depth,
    descendants_at_depth,
    nodes_at_distance,
)
from blastmap.analyzers.graph_model import (
    AdjacencyIndex,
    GraphModel,
    domain_node_id,
    domain_of,
    file_node_id,
    file_path_of,
    symbol_node_id,
)
from blastmap.analyzers.health import compute_domain_health, domain_health_for_snapshot
from blastmap.analyzers.impact import (
    DepthCappedImpact,
    ImpactPolicy,
    UnboundedImpact,
    analyze_dependents,
    analyze_impact,
    batch_analyze_impact,
    calculate_impact_severity,
    dependents_risk_level,
    impact_severity_level,
)
from blastmap.analyzers.relationships import RelationshipCache, RelationshipEngine
from blastmap.analyzers.resolution import (
    DefinitionProvider,
    merge_resolved_edges,
    resolve_definitions,
)
from blastmap.analyzers.view_mode import (
    apply_view_mode,
    domain_color,
    highlight_search_matches,
    node_visibility_state,
    refine_by_search,
)

__all__ = [
    # Graph model
    "AdjacencyIndex",
    "GraphModel",
    "domain_node_id",
    "domain_of",
    "file_node_id",
    "file_path_of",
    "symbol_node_id",
    # Traversal
    "ancestors_at_depth",
    "descendants_at_depth",
    "nodes_at_distance",
    # Relationships
    "RelationshipCache",
    "RelationshipEngine",
    # Impact
    "DepthCappedImpact",
    "ImpactPolicy",
    "UnboundedImpact",
    "analyze_dependents",
    "analyze_impact",
    "batch_analyze_impact",
    "calculate_impact_severity",
    "dependents_risk_level",
    "impact_severity_level",
    # Coupling
    "calculate_coupling_metrics",
    "color_from_score",
    "coupling_level",
    "coupling_metrics_for_graph",
    "interpolate_color",
    # Health
    "compute_domain_health",
    "domain_health_for_snapshot",
    # View modes
    "apply_view_mode",
    "domain_color",
    "highlight_search_matches",
    "node_visibility_state",
    "refine_by_search",
    # Resolution
    "DefinitionProvider",
    "merge_resolved_edges",
    "resolve_definitions",
]
