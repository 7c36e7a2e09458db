"""View-mode filter pipeline.

Turns the full graph plus a FilterContext into the node/edge subset to
render. The pipeline is a composition of stages, each taking and returning
a FilteredGraph:

1. base mode stage: node-kind filter per view mode, edge restyling
2. focus stage: dims nodes unrelated to the focused node
3. search stage: refine_by_search removes non-matching nodes (default), or
   highlight_search_matches dims them instead

Every stage returns new node objects when it changes annotations; inputs
are never mutated. Output edges always connect two visible nodes.
"""

from collections.abc import Callable, Iterable
from typing import assert_never

from blastmap.analyzers.constants import DOMAIN_COLORS, SEARCH_MIN_LENGTH, UNKNOWN_DOMAIN
from blastmap.logging import logger
from blastmap.models.graph import (
    EdgeStyle,
    FilterContext,
    FilteredGraph,
    GraphNode,
    NodeKind,
    NodeVisibilityState,
    ViewEdge,
    ViewMode,
)

FilterStage = Callable[[FilteredGraph, FilterContext], FilteredGraph]


def domain_color(domain: str | None) -> str:
    """Palette color of a domain; unknown or missing domains get slate."""
    if not domain:
        return DOMAIN_COLORS[UNKNOWN_DOMAIN]
    return DOMAIN_COLORS.get(domain.lower(), DOMAIN_COLORS[UNKNOWN_DOMAIN])


def structural_edge_style(target_domain: str | None) -> EdgeStyle:
    """Dashed straight edge colored by the target's domain."""
    color = domain_color(target_domain)
    return EdgeStyle(
        line_type="straight",
        animated=False,
        stroke=color,
        stroke_width=1,
        opacity=0.4,
        stroke_dasharray="5,5",
        marker_color=color,
    )


def resolve_mode(mode: str) -> ViewMode | None:
    """ViewMode for a mode string, or None for unrecognized values."""
    try:
        return ViewMode(mode)
    except ValueError:
        return None


def kind_visible(kind: NodeKind, mode: ViewMode) -> bool:
    """Whether nodes of a kind survive the base filter of a mode."""
    match mode:
        case ViewMode.ARCHITECTURE:
            return kind is not NodeKind.SYMBOL
        case ViewMode.CODEBASE:
            return True
        case ViewMode.TRACE:
            return kind is NodeKind.SYMBOL
        case _:
            assert_never(mode)


def _restrict_edges(edges: Iterable[ViewEdge], node_ids: set[str]) -> list[ViewEdge]:
    return [e for e in edges if e.source in node_ids and e.target in node_ids]


def _structural_annotations(node: GraphNode) -> GraphNode:
    if node.opacity == 1.0 and node.disable_heatmap is True and node.is_highlighted is False:
        return node
    return node.model_copy(
        update={
            "opacity": 1.0,
            "is_highlighted": False,
            "glow_color": None,
            "disable_heatmap": True,
        }
    )


def filter_base_mode(
    nodes: list[GraphNode],
    edges: list[ViewEdge],
    context: FilterContext,
) -> FilteredGraph:
    """Apply the node-kind filter of the context's mode.

    Architecture keeps domain and file nodes, codebase keeps every kind and
    trace keeps symbol nodes only. Unknown modes pass every node through,
    keeping only edges between nodes.
    """
    mode = resolve_mode(context.mode)
    if mode is None:
        logger.debug("Unknown view mode %r, passing graph through", context.mode)
        nodes = list(nodes)
        return FilteredGraph(
            visible_nodes=nodes, visible_edges=_restrict_edges(edges, {n.id for n in nodes})
        )

    match mode:
        case ViewMode.ARCHITECTURE | ViewMode.CODEBASE:
            visible = [_structural_annotations(n) for n in nodes if kind_visible(n.kind, mode)]
            visible_ids = {n.id for n in visible}
            node_map = {n.id: n for n in nodes}
            visible_edges = [
                e.model_copy(
                    update={"style": structural_edge_style(node_map[e.target].domain)}
                )
                for e in _restrict_edges(edges, visible_ids)
            ]
            return FilteredGraph(visible_nodes=visible, visible_edges=visible_edges)
        case ViewMode.TRACE:
            visible = [
                n.model_copy(update={"opacity": 1.0, "is_highlighted": False})
                for n in nodes
                if kind_visible(n.kind, mode)
            ]
            visible_ids = {n.id for n in visible}
            return FilteredGraph(
                visible_nodes=visible, visible_edges=_restrict_edges(edges, visible_ids)
            )
        case _:
            assert_never(mode)


def dim_unfocused(graph: FilteredGraph, context: FilterContext) -> FilteredGraph:
    """Fade nodes outside the focus node and its related set.

    No-op unless the focused node is among the visible nodes.
    """
    focus_id = context.focused_node_id
    if focus_id is None or not any(n.id == focus_id for n in graph.visible_nodes):
        return graph

    keep = context.related_node_ids | {focus_id}
    nodes = [
        n.model_copy(update={"opacity": 1.0 if n.id in keep else context.fade_opacity})
        for n in graph.visible_nodes
    ]
    return FilteredGraph(visible_nodes=nodes, visible_edges=graph.visible_edges)


def _search_active(query: str | None) -> bool:
    return bool(query) and len(query) > SEARCH_MIN_LENGTH


def node_matches(node: GraphNode, query: str) -> bool:
    """Case-insensitive substring match on name, file path, domain and tags."""
    q = query.lower()
    domain = node.domain_name or node.domain or ""
    return (
        q in node.label.lower()
        or q in (node.file_path or "").lower()
        or q in domain.lower()
        or any(q in tag.lower() for tag in node.search_tags)
    )


def _matches_and_ancestors(nodes: list[GraphNode], query: str) -> tuple[set[str], set[str]]:
    """Direct matches, and matches plus their structural ancestors."""
    lookup = {n.id: n for n in nodes}
    matches = {n.id for n in nodes if node_matches(n, query)}

    keep: set[str] = set()
    for node_id in matches:
        current: str | None = node_id
        while current is not None and current not in keep:
            keep.add(current)
            parent = lookup.get(current)
            current = parent.parent_id if parent else None
    return matches, keep


def refine_by_search(graph: FilteredGraph, context: FilterContext) -> FilteredGraph:
    """Drop nodes that neither match the search nor are ancestors of a match.

    Ancestors stay so matched children keep their hierarchy. Survivors are
    fully opaque with heat coloring disabled; only direct matches are
    highlighted. Queries of two characters or fewer leave the graph as is.
    """
    if not _search_active(context.search_query):
        return graph

    matches, keep = _matches_and_ancestors(graph.visible_nodes, context.search_query)
    nodes = [
        n.model_copy(
            update={"opacity": 1.0, "is_highlighted": n.id in matches, "disable_heatmap": True}
        )
        for n in graph.visible_nodes
        if n.id in keep
    ]
    kept_ids = {n.id for n in nodes}
    return FilteredGraph(
        visible_nodes=nodes, visible_edges=_restrict_edges(graph.visible_edges, kept_ids)
    )


def highlight_search_matches(graph: FilteredGraph, context: FilterContext) -> FilteredGraph:
    """Non-destructive search: fade non-matching nodes instead of removing them."""
    if not _search_active(context.search_query):
        return graph

    matches, keep = _matches_and_ancestors(graph.visible_nodes, context.search_query)
    nodes = [
        n.model_copy(
            update={
                "opacity": 1.0 if n.id in keep else context.fade_opacity,
                "is_highlighted": n.id in matches,
                "disable_heatmap": True,
            }
        )
        for n in graph.visible_nodes
    ]
    return FilteredGraph(visible_nodes=nodes, visible_edges=graph.visible_edges)


def apply_view_mode(
    nodes: Iterable[GraphNode],
    edges: Iterable[ViewEdge],
    context: FilterContext,
    search_stage: FilterStage = refine_by_search,
) -> FilteredGraph:
    """Compute the visible node/edge subset for a view context.

    Args:
        nodes: All loaded nodes.
        edges: All loaded edges.
        context: Mode, focus and search inputs.
        search_stage: Search stage to run last; refine_by_search removes
            non-matching nodes, highlight_search_matches only fades them.

    Returns:
        FilteredGraph whose nodes are a subset of the input nodes and whose
        edges connect visible nodes only.
    """
    graph = filter_base_mode(list(nodes), list(edges), context)
    for stage in (dim_unfocused, search_stage):
        graph = stage(graph, context)
    return graph


def node_visibility_state(
    node: GraphNode,
    context: FilterContext,
    risk_color: str | None = None,
) -> NodeVisibilityState:
    """Per-node visibility for renderers that style nodes individually.

    Only architecture hides a kind (symbols); trace and codebase report every
    node as visible and leave kind filtering to filter_base_mode.

    Args:
        node: Node to classify.
        context: Current view context.
        risk_color: Glow color to report when heat coloring applies.

    Returns:
        NodeVisibilityState for the node.
    """
    mode = resolve_mode(context.mode)
    visible = mode is not ViewMode.ARCHITECTURE or kind_visible(node.kind, mode)

    opacity = 1.0
    focus_id = context.focused_node_id
    if focus_id is not None and node.id != focus_id and node.id not in context.related_node_ids:
        opacity = context.fade_opacity

    # Structural modes disable heat coloring
    glow = risk_color if mode is ViewMode.TRACE or mode is None else None
    return NodeVisibilityState(
        is_visible=visible, opacity=opacity, is_highlighted=False, glow_color=glow
    )
