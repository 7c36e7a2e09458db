"""Relationship engine: categorized related-node sets for a focus node.

Structural parents/children and same-file siblings come from linear passes
over the node set; callers/callees come from two independent depth-bounded
BFS walks over the shared adjacency index. Results are memoized per
(focus, depth) in a cache owned by the engine instance.
"""

import threading

from blastmap.analyzers.constants import get_relationship_depth
from blastmap.analyzers.graph_algorithms import ancestors_at_depth, descendants_at_depth
from blastmap.analyzers.graph_model import GraphModel, file_path_of
from blastmap.logging import logger
from blastmap.models.graph import RelatedNodes


class RelationshipCache:
    """Memo of relationship results keyed by 'focus:depth'.

    Entries are only added with put(); invalidate() drops everything at once
    and bumps the generation, so a result computed before the invalidation
    is discarded instead of stored. Reads and writes share one lock, so a
    reader never sees a partially cleared cache. Entries are copied in and
    out, so callers cannot mutate cached sets.
    """

    def __init__(self) -> None:
        self._entries: dict[str, RelatedNodes] = {}
        self._generation = 0
        self._lock = threading.Lock()

    @staticmethod
    def key(focus_id: str, depth: int) -> str:
        return f"{focus_id}:{depth}"

    @property
    def generation(self) -> int:
        """Number of invalidations so far."""
        with self._lock:
            return self._generation

    def get(self, key: str) -> RelatedNodes | None:
        with self._lock:
            entry = self._entries.get(key)
        return entry.model_copy(deep=True) if entry is not None else None

    def put(self, key: str, result: RelatedNodes, generation: int | None = None) -> bool:
        """Store a result unless the cache was invalidated since `generation`.

        Returns:
            True if the result was stored.
        """
        entry = result.model_copy(deep=True)
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            self._entries[key] = entry
            return True

    def invalidate(self) -> None:
        """Drop every cached result."""
        with self._lock:
            self._entries = {}
            self._generation += 1

    def stats(self) -> dict[str, int | list[str]]:
        """Cache size and keys, in insertion order."""
        with self._lock:
            return {"size": len(self._entries), "keys": list(self._entries)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class RelationshipEngine:
    """Computes and memoizes related-node sets over a loaded graph.

    The engine does not watch the graph. Callers must call
    clear_relationship_cache() whenever the node or edge set changes.
    """

    def __init__(self, cache: RelationshipCache | None = None) -> None:
        self.cache = cache if cache is not None else RelationshipCache()

    def related_nodes(
        self,
        focus_id: str,
        graph: GraphModel,
        depth: int | None = None,
    ) -> RelatedNodes:
        """Find nodes related to a focus node.

        Args:
            focus_id: Node to find relationships for.
            graph: Loaded graph (nodes, edges and adjacency index).
            depth: Hop limit for callers/callees. Defaults to
                BLASTMAP_RELATIONSHIP_DEPTH (2). Values <= 0 skip the walks.

        Returns:
            RelatedNodes with parents, children, callers, callees, same_file
            and their union (focus excluded). Empty for an unknown focus.
        """
        if depth is None:
            depth = get_relationship_depth()

        cache_key = RelationshipCache.key(focus_id, depth)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached
        generation = self.cache.generation

        focus = graph.node(focus_id)
        if focus is None:
            logger.debug("Focus node %s not loaded, no relationships", focus_id)
            return RelatedNodes()

        parents: set[str] = set()
        children: set[str] = set()
        for node in graph.nodes:
            if node.parent_id == focus_id:
                children.add(node.id)
            if node.id == focus.parent_id:
                parents.add(node.id)

        same_file: set[str] = set()
        focus_file = file_path_of(focus)
        if focus_file:
            for node in graph.nodes:
                if node.id != focus_id and file_path_of(node) == focus_file:
                    same_file.add(node.id)

        # Each walk keeps its own visited set, so a node can be both caller and callee
        callers = set(ancestors_at_depth(graph.index, focus_id, depth))
        callees = set(descendants_at_depth(graph.index, focus_id, depth))

        related = parents | children | callers | callees | same_file
        related.discard(focus_id)

        result = RelatedNodes(
            parents=parents,
            children=children,
            callers=callers,
            callees=callees,
            same_file=same_file,
            all=related,
        )
        if not self.cache.put(cache_key, result, generation):
            logger.debug("Relationship cache cleared during %s, result not stored", cache_key)
        return result

    def clear_relationship_cache(self) -> None:
        """Invalidate all memoized results."""
        self.cache.invalidate()

    def cache_stats(self) -> dict[str, int | list[str]]:
        """Size and keys of the relationship cache."""
        return self.cache.stats()
