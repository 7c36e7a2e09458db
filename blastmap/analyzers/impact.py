"""Impact analysis: blast radius of changing a node.

Two policies serve two different callers and deliberately disagree:

- UnboundedImpact walks upstream and downstream without a depth cap and
  scores severity from weighted counts of functions, files and domains
  (bands <25 low, <50 medium, <75 high, else critical).
- DepthCappedImpact walks only "who depends on this" up to max_depth hops
  and classifies risk from the raw dependent count (<=5 low, 6-15 medium,
  >15 high).

Both threshold sets are kept as-is; they are independently tuned.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from blastmap.analyzers.constants import (
    DEFAULT_IMPACT_DEPTH,
    DEPENDENTS_LOW_MAX,
    DEPENDENTS_MEDIUM_MAX,
    DOMAIN_WEIGHT,
    FILE_WEIGHT,
    FUNCTION_WEIGHT,
    IMPACT_DEPTH_PIVOT,
    SEVERITY_CRITICAL,
    SEVERITY_HIGH,
    SEVERITY_MEDIUM,
    get_impact_max_depth,
)
from blastmap.analyzers.graph_algorithms import ancestors_at_depth, descendants_at_depth
from blastmap.analyzers.graph_model import GraphModel, domain_of, file_path_of
from blastmap.logging import progress_bar
from blastmap.models.graph import (
    AffectedNode,
    DependentsReport,
    DependentsRiskLevel,
    ImpactAnalysis,
    ImpactStats,
    RiskLevel,
)


def calculate_impact_severity(stats: ImpactStats, impact_depth: int | None = None) -> float:
    """Severity score (0-100) of an impact.

    Weighted sum of affected functions (x1), files (x5) and domains (x20),
    scaled by impact_depth / 5. A missing impact depth counts as 1, which
    dampens the score to a fifth.

    Args:
        stats: Aggregate counts of the impact.
        impact_depth: External 1-10 risk hint of the focus node.

    Returns:
        Severity clamped to [0, 100].
    """
    multiplier = (impact_depth or DEFAULT_IMPACT_DEPTH) / IMPACT_DEPTH_PIVOT
    score = (
        stats.affected_functions * FUNCTION_WEIGHT
        + stats.affected_files * FILE_WEIGHT
        + stats.affected_domains * DOMAIN_WEIGHT
    ) * multiplier
    return max(0.0, min(100.0, score / 100 * 100))


def impact_severity_level(severity: float) -> RiskLevel:
    """Band a severity score: <25 low, <50 medium, <75 high, else critical."""
    if severity >= SEVERITY_CRITICAL:
        return "critical"
    if severity >= SEVERITY_HIGH:
        return "high"
    if severity >= SEVERITY_MEDIUM:
        return "medium"
    return "low"


def dependents_risk_level(count: int) -> DependentsRiskLevel:
    """Band a dependent count: <=5 low, 6-15 medium, >15 high."""
    if count > DEPENDENTS_MEDIUM_MAX:
        return "high"
    if count > DEPENDENTS_LOW_MAX:
        return "medium"
    return "low"


class ImpactPolicy[R](ABC):
    """Strategy computing the impact of changing one node."""

    name: str

    @abstractmethod
    def analyze(self, focus_id: str, graph: GraphModel) -> R:
        """Analyze the impact of changing focus_id within graph."""


class UnboundedImpact(ImpactPolicy[ImpactAnalysis]):
    """Full transitive upstream/downstream walk with a severity score."""

    name = "unbounded"

    def analyze(self, focus_id: str, graph: GraphModel) -> ImpactAnalysis:
        upstream = list(ancestors_at_depth(graph.index, focus_id))
        downstream = list(descendants_at_depth(graph.index, focus_id))

        affected_files: set[str] = set()
        affected_domains: set[str] = set()
        touched = {focus_id, *upstream, *downstream}
        for node_id in touched:
            node = graph.node(node_id)
            if node is None:
                continue
            file_path = file_path_of(node)
            if file_path:
                affected_files.add(file_path)
            domain = domain_of(node)
            if domain:
                affected_domains.add(domain)

        stats = ImpactStats(
            affected_functions=len(touched) - 1,
            affected_files=len(affected_files),
            affected_domains=len(affected_domains),
            upstream_deps=upstream,
            downstream_deps=downstream,
        )

        focus = graph.node(focus_id)
        severity = calculate_impact_severity(stats, focus.impact_depth if focus else None)

        return ImpactAnalysis(
            node_id=focus_id,
            upstream=upstream,
            downstream=downstream,
            affected_files=affected_files,
            affected_domains=affected_domains,
            stats=stats,
            severity=severity,
            risk_level=impact_severity_level(severity),
        )


class DepthCappedImpact(ImpactPolicy[DependentsReport]):
    """Depth-capped "who depends on this" walk with count-based risk.

    Args:
        max_depth: Hop cap. Defaults to BLASTMAP_IMPACT_MAX_DEPTH (5),
            read when the analysis runs. Values <= 0 skip the walk.
    """

    name = "depth-capped"

    def __init__(self, max_depth: int | None = None) -> None:
        self._max_depth = max_depth

    @property
    def max_depth(self) -> int:
        return self._max_depth if self._max_depth is not None else get_impact_max_depth()

    def analyze(self, focus_id: str, graph: GraphModel) -> DependentsReport:
        source = graph.node(focus_id)
        if source is None:
            return DependentsReport(source_id=focus_id)

        max_depth = self.max_depth
        affected: list[AffectedNode] = []
        visited = {focus_id}
        current_level = [focus_id] if max_depth > 0 else []
        depth = 0

        while current_level and depth < max_depth:
            depth += 1
            next_level: list[str] = []
            for node_id in current_level:
                for caller in graph.index.incoming(node_id):
                    if caller in visited:
                        continue
                    visited.add(caller)
                    node = graph.node(caller)
                    # Unloaded dependents are neither recorded nor expanded
                    if node is None:
                        continue
                    affected.append(
                        AffectedNode(
                            node_id=caller,
                            name=node.label,
                            file_path=file_path_of(node),
                            depth=depth,
                            impact_type="direct" if depth == 1 else "transitive",
                        )
                    )
                    next_level.append(caller)
            current_level = next_level

        affected.sort(key=lambda a: a.depth)

        return DependentsReport(
            source_id=focus_id,
            source_name=source.label,
            affected=affected,
            total_affected=len(affected),
            max_depth=max((a.depth for a in affected), default=0),
            risk_level=dependents_risk_level(len(affected)),
        )

    def impact_node_ids(self, focus_id: str, graph: GraphModel) -> list[tuple[str, int, str]]:
        """(node_id, depth, impact_type) rows for highlighting dependents."""
        report = self.analyze(focus_id, graph)
        return [(a.node_id, a.depth, a.impact_type) for a in report.affected]


def analyze_impact(focus_id: str, graph: GraphModel) -> ImpactAnalysis:
    """Unbounded blast radius of a node. Unknown ids yield an empty result."""
    return UnboundedImpact().analyze(focus_id, graph)


def analyze_dependents(
    focus_id: str,
    graph: GraphModel,
    max_depth: int | None = None,
) -> DependentsReport:
    """Depth-capped dependents of a node."""
    return DepthCappedImpact(max_depth).analyze(focus_id, graph)


def batch_analyze_impact(
    node_ids: Iterable[str],
    graph: GraphModel,
    policy: UnboundedImpact | None = None,
) -> dict[str, ImpactAnalysis]:
    """Run the unbounded analysis independently for each node.

    Args:
        node_ids: Nodes to analyze; duplicates collapse to one entry.
        graph: Loaded graph.
        policy: Policy instance to use (a fresh UnboundedImpact by default).

    Returns:
        Dict mapping node ID to its ImpactAnalysis, in input order.
    """
    policy = policy or UnboundedImpact()
    ids = list(dict.fromkeys(node_ids))
    results: dict[str, ImpactAnalysis] = {}
    for node_id in progress_bar(ids, desc="Analyzing impact", total=len(ids), unit="nodes"):
        results[node_id] = policy.analyze(node_id, graph)
    return results
