"""Snapshot session: the query interface over one loaded snapshot.

A GraphSession holds the graph model, the coupling metrics computed at load
time, a relationship engine with its own cache, and both impact policies.
Loading a new snapshot replaces all of them and clears the cache.
"""

from collections.abc import Iterable

from blastmap.analyzers.coupling import calculate_coupling_metrics, coupling_metrics_for_graph
from blastmap.analyzers.graph_model import GraphModel
from blastmap.analyzers.health import domain_health_for_snapshot
from blastmap.analyzers.impact import DepthCappedImpact, UnboundedImpact, batch_analyze_impact
from blastmap.analyzers.relationships import RelationshipEngine
from blastmap.analyzers.view_mode import apply_view_mode, highlight_search_matches, refine_by_search
from blastmap.logging import log_operation
from blastmap.models.graph import (
    CouplingMetric,
    DependentsReport,
    DomainHealth,
    FilterContext,
    FilteredGraph,
    GraphSnapshot,
    ImpactAnalysis,
    RelatedNodes,
)


class GraphSession:
    """Query interface over the currently loaded snapshot.

    Args:
        snapshot: Initial snapshot; an empty graph when omitted.
        max_depth: Depth cap of the dependents walk (None reads
            BLASTMAP_IMPACT_MAX_DEPTH at call time).
    """

    def __init__(self, snapshot: GraphSnapshot | None = None, max_depth: int | None = None) -> None:
        self.relationships = RelationshipEngine()
        self.unbounded = UnboundedImpact()
        self.depth_capped = DepthCappedImpact(max_depth)
        self.snapshot = GraphSnapshot()
        self.metrics: dict[str, CouplingMetric] = {}
        self.graph = GraphModel([], [])
        self.load(snapshot or GraphSnapshot())

    def load(self, snapshot: GraphSnapshot) -> None:
        """Replace the loaded snapshot and invalidate cached relationships."""
        details = {"symbols": len(snapshot.symbols), "edges": len(snapshot.edges)}
        with log_operation("load_graph", details):
            self.snapshot = snapshot
            self.metrics = calculate_coupling_metrics(snapshot)
            self.graph = GraphModel.from_snapshot(snapshot, self.metrics)
            self.relationships.clear_relationship_cache()

    def related_nodes(self, focus_id: str, depth: int | None = None) -> RelatedNodes:
        return self.relationships.related_nodes(focus_id, self.graph, depth)

    def analyze_impact(self, focus_id: str) -> ImpactAnalysis:
        return self.unbounded.analyze(focus_id, self.graph)

    def batch_analyze_impact(self, node_ids: Iterable[str]) -> dict[str, ImpactAnalysis]:
        return batch_analyze_impact(node_ids, self.graph, self.unbounded)

    def analyze_dependents(self, focus_id: str, max_depth: int | None = None) -> DependentsReport:
        """Depth-capped dependents; max_depth overrides the session's cap."""
        policy = self.depth_capped if max_depth is None else DepthCappedImpact(max_depth)
        return policy.analyze(focus_id, self.graph)

    def apply_view_mode(self, context: FilterContext, highlight_only: bool = False) -> FilteredGraph:
        """Filter the loaded graph for a view context.

        Args:
            context: Mode, focus and search inputs.
            highlight_only: Fade non-matching nodes instead of removing them
                during search.
        """
        stage = highlight_search_matches if highlight_only else refine_by_search
        return apply_view_mode(self.graph.nodes, self.graph.edges, context, search_stage=stage)

    def coupling_metrics(self, all_nodes: bool = False) -> dict[str, CouplingMetric]:
        """Symbol coupling metrics, or metrics over every loaded node."""
        if all_nodes:
            return coupling_metrics_for_graph(self.graph)
        return dict(self.metrics)

    def domain_health(self) -> dict[str, DomainHealth]:
        return domain_health_for_snapshot(self.snapshot)

    def clear_relationship_cache(self) -> None:
        self.relationships.clear_relationship_cache()

    def cache_stats(self) -> dict[str, int | list[str]]:
        return self.relationships.cache_stats()
