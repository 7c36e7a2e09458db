"""Traversal primitives over the adjacency index.

Breadth-first walks used by the relationship engine and the impact
analyzer:
- ancestors_at_depth / descendants_at_depth for upstream and downstream
  walks, bounded or unbounded
- nodes_at_distance for exact n-hop neighbor queries

Every walk allocates its own visited set, marks nodes at discovery and never
re-enqueues a visited node, so cyclic graphs terminate and each node is
reported once. The start node is never part of a result.
"""

from collections.abc import Callable, Sequence
from typing import Literal

from blastmap.analyzers.graph_model import AdjacencyIndex

Direction = Literal["upstream", "downstream", "both"]

NeighborFn = Callable[[str], Sequence[str]]


def _walk(
    node: str,
    neighbors: NeighborFn,
    max_depth: int | None,
) -> dict[str, int]:
    """Level-by-level BFS from node.

    Args:
        node: Starting node ID.
        neighbors: Function returning the next hop of a node.
        max_depth: Maximum traversal depth, or None for no cap.

    Returns:
        Dict mapping reached node ID to its depth, in discovery order.
    """
    result: dict[str, int] = {}
    if max_depth is not None and max_depth <= 0:
        return result

    current_level = [node]
    visited = {node}
    depth = 0

    while current_level:
        depth += 1
        if max_depth is not None and depth > max_depth:
            break
        next_level: list[str] = []
        for n in current_level:
            for neighbor in neighbors(n):
                if neighbor not in visited:
                    visited.add(neighbor)
                    result[neighbor] = depth
                    next_level.append(neighbor)
        current_level = next_level

    return result


def ancestors_at_depth(
    index: AdjacencyIndex,
    node: str,
    max_depth: int | None = None,
) -> dict[str, int]:
    """Find all ancestors (callers, transitively) up to a maximum depth.

    Args:
        index: Adjacency index of the graph.
        node: Starting node ID.
        max_depth: Maximum traversal depth; None walks the whole graph.

    Returns:
        Dict mapping ancestor node ID to its depth from the start node.
    """
    return _walk(node, index.incoming, max_depth)


def descendants_at_depth(
    index: AdjacencyIndex,
    node: str,
    max_depth: int | None = None,
) -> dict[str, int]:
    """Find all descendants (callees, transitively) up to a maximum depth.

    Args:
        index: Adjacency index of the graph.
        node: Starting node ID.
        max_depth: Maximum traversal depth; None walks the whole graph.

    Returns:
        Dict mapping descendant node ID to its depth from the start node.
    """
    return _walk(node, index.outgoing, max_depth)


def _neighbors_for(index: AdjacencyIndex, direction: Direction) -> NeighborFn:
    match direction:
        case "upstream":
            return index.incoming
        case "downstream":
            return index.outgoing
        case "both":
            return lambda n: [*index.incoming(n), *index.outgoing(n)]
    raise ValueError(f"Unknown direction: {direction!r}")


def nodes_at_distance(
    index: AdjacencyIndex,
    node: str,
    hops: int,
    direction: Direction = "both",
) -> set[str]:
    """Find nodes exactly `hops` steps away from a node.

    Distance is the BFS discovery depth, so a node reachable by both a short
    and a long path counts only at the short distance.

    Args:
        index: Adjacency index of the graph.
        node: Starting node ID.
        hops: Exact distance; values <= 0 return an empty set.
        direction: Walk incoming edges, outgoing edges, or both.

    Returns:
        Set of node IDs at exactly that distance.
    """
    if hops <= 0:
        return set()
    reached = _walk(node, _neighbors_for(index, direction), hops)
    return {n for n, depth in reached.items() if depth == hops}
