"""Graph model: renderable nodes and the adjacency index.

Normalizes a snapshot (domains, files, symbols, edges) into domain, file and
symbol nodes plus a deduplicated edge list, and builds the adjacency index
once so that every traversal shares it.

Node identifiers:
- domain nodes:  'domain:<name>'
- file nodes:    '<domain>:<filePath>' (parent: the domain node)
- symbol nodes:  '<filePath>:<name>:<startLine>' (parent: the file node)
"""

from collections.abc import Iterable, Sequence
from pathlib import PurePosixPath

import networkx as nx

from blastmap.analyzers.constants import (
    DEFAULT_EDGE_COLOR,
    DOMAIN_PREFIX,
    EDGE_TYPE_COLORS,
    UNKNOWN_DOMAIN,
)
from blastmap.models.graph import (
    CouplingMetric,
    EdgeStyle,
    GraphEdge,
    GraphNode,
    GraphSnapshot,
    NodeKind,
    ViewEdge,
)

_NO_NEIGHBORS: Sequence[str] = ()


def domain_node_id(domain: str) -> str:
    """Node ID of a domain node."""
    return f"{DOMAIN_PREFIX}{domain}"


def file_node_id(domain: str, file_path: str) -> str:
    """Node ID of a file node inside a domain."""
    return f"{domain}:{file_path}"


def symbol_node_id(file_path: str, name: str, start_line: int) -> str:
    """Node ID of a symbol node."""
    return f"{file_path}:{name}:{start_line}"


def base_edge_style(edge_type: str) -> EdgeStyle:
    """Default line treatment for an edge of the given type."""
    return EdgeStyle(
        line_type="smoothstep",
        animated=edge_type == "call",
        stroke=EDGE_TYPE_COLORS.get(edge_type, DEFAULT_EDGE_COLOR),
        stroke_width=1.5,
    )


class AdjacencyIndex:
    """Incoming/outgoing neighbor lists derived from an edge list.

    Built in one linear pass. Duplicate edges are kept, so a neighbor may
    appear more than once; callers that care about degree treat repeats as
    weight. Lookups of unknown ids return an empty sequence.
    """

    __slots__ = ("_incoming", "_outgoing", "_edge_count")

    def __init__(self) -> None:
        self._incoming: dict[str, list[str]] = {}
        self._outgoing: dict[str, list[str]] = {}
        self._edge_count = 0

    @classmethod
    def from_edges(cls, edges: Iterable[GraphEdge | ViewEdge | tuple[str, str]]) -> "AdjacencyIndex":
        """Build the index from edge records or (source, target) tuples."""
        index = cls()
        for edge in edges:
            if isinstance(edge, tuple):
                source, target = edge
            else:
                source, target = edge.source, edge.target
            index._outgoing.setdefault(source, []).append(target)
            index._incoming.setdefault(target, []).append(source)
            index._edge_count += 1
        return index

    def incoming(self, node_id: str) -> Sequence[str]:
        """Sources of edges pointing at node_id (callers)."""
        return self._incoming.get(node_id, _NO_NEIGHBORS)

    def outgoing(self, node_id: str) -> Sequence[str]:
        """Targets of edges leaving node_id (callees)."""
        return self._outgoing.get(node_id, _NO_NEIGHBORS)

    @property
    def edge_count(self) -> int:
        return self._edge_count


class GraphModel:
    """Loaded node set, its visible-edge list and the shared adjacency index.

    Edges whose endpoints are not loaded nodes are dropped before indexing,
    so traversals silently ignore dangling references.
    """

    def __init__(self, nodes: Iterable[GraphNode], edges: Iterable[ViewEdge]) -> None:
        self._nodes: dict[str, GraphNode] = {}
        for node in nodes:
            self._nodes[node.id] = node
        self._edges = [
            e for e in edges if e.source in self._nodes and e.target in self._nodes
        ]
        self.index = AdjacencyIndex.from_edges(self._edges)

    @classmethod
    def from_nodes(cls, nodes: Iterable[GraphNode], edges: Iterable[ViewEdge]) -> "GraphModel":
        """Wrap an already-built node/edge list (the shape a renderer holds)."""
        return cls(nodes, edges)

    @classmethod
    def from_snapshot(
        cls,
        snapshot: GraphSnapshot,
        metrics: dict[str, CouplingMetric] | None = None,
    ) -> "GraphModel":
        """Derive domain, file and symbol nodes and normalized edges.

        Args:
            snapshot: The graph snapshot.
            metrics: Optional coupling metrics keyed by symbol node ID,
                attached to symbol nodes.

        Returns:
            A GraphModel over the derived nodes and edges.
        """
        metrics = metrics or {}
        domains: dict[str, GraphNode] = {}
        files: dict[str, GraphNode] = {}
        symbols: list[GraphNode] = []

        def ensure_domain(domain: str) -> str:
            node_id = domain_node_id(domain)
            if node_id not in domains:
                domains[node_id] = GraphNode(
                    id=node_id,
                    kind=NodeKind.DOMAIN,
                    label=domain,
                    domain=domain,
                    domain_name=domain,
                )
            return node_id

        for info in snapshot.domains:
            ensure_domain(info.domain)

        for symbol in snapshot.symbols:
            domain = symbol.domain or UNKNOWN_DOMAIN
            parent_domain = ensure_domain(domain)

            file_id = file_node_id(domain, symbol.file_path)
            if file_id not in files:
                files[file_id] = GraphNode(
                    id=file_id,
                    kind=NodeKind.FILE,
                    parent_id=parent_domain,
                    label=PurePosixPath(symbol.file_path).name,
                    file_path=symbol.file_path,
                    domain=domain,
                    domain_name=domain,
                )

            key = symbol.key
            symbols.append(
                GraphNode(
                    id=key,
                    kind=NodeKind.SYMBOL,
                    parent_id=file_id,
                    label=symbol.name,
                    file_path=symbol.file_path,
                    domain=symbol.domain,
                    search_tags=list(symbol.search_tags),
                    symbol_type=symbol.type,
                    line=symbol.range.start_line,
                    complexity=symbol.complexity,
                    impact_depth=symbol.impact_depth,
                    coupling=metrics.get(key),
                )
            )

        nodes = [*domains.values(), *files.values(), *symbols]
        node_ids = {n.id for n in nodes}

        edges: list[ViewEdge] = []
        seen: set[tuple[str, str, str]] = set()
        for position, edge in enumerate(snapshot.edges):
            if edge.source == edge.target:
                continue
            if edge.source not in node_ids or edge.target not in node_ids:
                continue
            dedup_key = (edge.source, edge.target, edge.type)
            if dedup_key in seen:
                continue
            seen.add(dedup_key)
            edges.append(
                ViewEdge(
                    id=f"edge-{position}",
                    source=edge.source,
                    target=edge.target,
                    type=edge.type,
                    style=base_edge_style(edge.type),
                )
            )

        return cls(nodes, edges)

    @property
    def nodes(self) -> list[GraphNode]:
        return list(self._nodes.values())

    @property
    def edges(self) -> list[ViewEdge]:
        return list(self._edges)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def node(self, node_id: str) -> GraphNode | None:
        """Look up a node; None if it is not loaded."""
        return self._nodes.get(node_id)

    def to_digraph(self) -> nx.DiGraph:
        """Convert to a NetworkX DiGraph (duplicate edges collapse)."""
        G = nx.DiGraph()
        for node in self._nodes.values():
            G.add_node(
                node.id,
                kind=str(node.kind),
                name=node.label,
                file=node.file_path or "",
                domain=node.domain,
            )
        for edge in self._edges:
            G.add_edge(edge.source, edge.target, type=edge.type)
        return G


def file_path_of(node: GraphNode) -> str | None:
    """Resolved file path of a node: its file_path attribute, else its parent."""
    return node.file_path or node.parent_id


def domain_of(node: GraphNode) -> str | None:
    """Domain node ID a node belongs to, or None for the unknown bucket.

    Resolution order: the node itself when it is a domain node, a
    'domain:'-prefixed structural parent, a 'domain:'-prefixed id, then the
    node's domain attribute.
    """
    if node.kind is NodeKind.DOMAIN:
        return node.id
    if node.parent_id and node.parent_id.startswith(DOMAIN_PREFIX):
        return node.parent_id
    if node.id.startswith(DOMAIN_PREFIX):
        return node.id
    if node.domain:
        return domain_node_id(node.domain)
    return None
