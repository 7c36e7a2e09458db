"""Domain health scoring.

Health combines average symbol complexity (70%) with the share of a
domain's edges that cross into other domains (30%).
"""

from collections import defaultdict
from collections.abc import Sequence

from blastmap.analyzers.constants import UNKNOWN_DOMAIN
from blastmap.analyzers.coupling import round_half_up
from blastmap.models.graph import DomainHealth, GraphSnapshot, HealthStatus, Symbol, snapshot_to_digraph

# Average complexity at which the complexity component reaches zero
COMPLEXITY_CEILING = 20
HEALTHY_MIN = 80
WARNING_MIN = 60


def health_status(score: int) -> HealthStatus:
    if score >= HEALTHY_MIN:
        return "healthy"
    if score >= WARNING_MIN:
        return "warning"
    return "critical"


def compute_domain_health(
    domain: str,
    symbols: Sequence[Symbol],
    cross_domain_edges: int,
    total_edges: int,
) -> DomainHealth:
    """Compute the health of one domain.

    Args:
        domain: Domain name.
        symbols: Symbols assigned to the domain.
        cross_domain_edges: Edges linking the domain to another domain.
        total_edges: Edges leaving the domain.

    Returns:
        DomainHealth with avg_complexity rounded to 1 decimal and coupling
        to 2 decimals.
    """
    symbol_count = len(symbols)
    avg_complexity = sum(s.complexity for s in symbols) / symbol_count if symbol_count else 0.0
    coupling = cross_domain_edges / total_edges if total_edges > 0 else 0.0

    complexity_score = max(0.0, 100 - avg_complexity / COMPLEXITY_CEILING * 100)
    coupling_score = max(0.0, 100 - coupling * 100)
    score = round_half_up(complexity_score * 0.7 + coupling_score * 0.3)

    return DomainHealth(
        domain=domain,
        symbol_count=symbol_count,
        avg_complexity=round_half_up(avg_complexity * 10) / 10,
        coupling=round_half_up(coupling * 100) / 100,
        health_score=score,
        status=health_status(score),
    )


def domain_health_for_snapshot(snapshot: GraphSnapshot) -> dict[str, DomainHealth]:
    """Compute health for every domain of a snapshot.

    Domains come from the snapshot's domain list plus the domains of its
    symbols (symbols without one go to 'unknown'). Edges are symbol-level
    and deduplicated; an edge counts only toward its source symbol's
    domain, and as cross-domain when the target's domain differs.

    Returns:
        Dict mapping domain name to DomainHealth, sorted by name.
    """
    by_domain: dict[str, list[Symbol]] = {}
    for info in snapshot.domains:
        by_domain.setdefault(info.domain, [])
    for symbol in snapshot.symbols:
        by_domain.setdefault(symbol.domain or UNKNOWN_DOMAIN, []).append(symbol)

    G = snapshot_to_digraph(snapshot)
    total: dict[str, int] = defaultdict(int)
    cross: dict[str, int] = defaultdict(int)
    for source, target in G.edges():
        if source == target:
            continue
        source_domain = G.nodes[source].get("domain") or UNKNOWN_DOMAIN
        target_domain = G.nodes[target].get("domain") or UNKNOWN_DOMAIN
        total[source_domain] += 1
        if source_domain != target_domain:
            cross[source_domain] += 1

    return {
        domain: compute_domain_health(domain, by_domain[domain], cross[domain], total[domain])
        for domain in sorted(by_domain)
    }
