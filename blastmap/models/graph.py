"""Graph data models for dependency visualization and impact analysis.

Includes Pydantic models for the snapshot handed over by the indexer, the
renderable node/edge shapes produced by the graph model, analysis results,
and NetworkX conversion utilities.
"""

from enum import StrEnum
from typing import Literal

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

SymbolType = Literal["function", "method", "class", "interface", "enum", "variable", "type"]
RiskLevel = Literal["low", "medium", "high", "critical"]
DependentsRiskLevel = Literal["low", "medium", "high"]
HealthStatus = Literal["healthy", "warning", "critical"]


class NodeKind(StrEnum):
    """Kind of a renderable graph node."""

    DOMAIN = "domain"
    FILE = "file"
    SYMBOL = "symbol"


class ViewMode(StrEnum):
    """Mutually exclusive presentation modes of the graph view."""

    ARCHITECTURE = "architecture"
    CODEBASE = "codebase"
    TRACE = "trace"


# =============================================================================
# Snapshot Models (input)
# =============================================================================


class SourceRange(BaseModel):
    """Source range of a symbol (1-based lines)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    start_line: int = Field(alias="startLine", description="First line of the symbol")
    start_column: int = Field(default=0, alias="startColumn", description="First column")
    end_line: int = Field(alias="endLine", description="Last line of the symbol")
    end_column: int = Field(default=0, alias="endColumn", description="Last column")


class Symbol(BaseModel):
    """A code symbol produced by the indexer."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int = Field(description="Indexer identifier, stable within a snapshot")
    name: str = Field(description="Symbol name")
    type: SymbolType = Field(default="function", description="Kind of code symbol")
    file_path: str = Field(alias="filePath", description="File containing the symbol")
    range: SourceRange = Field(description="Source range")
    complexity: float = Field(default=0, description="Cyclomatic-style complexity score")
    domain: str | None = Field(default=None, description="Functional domain (auth, payment, ...)")
    purpose: str | None = Field(default=None, description="Inferred purpose summary")
    impact_depth: int | None = Field(
        default=None, alias="impactDepth", description="External risk hint (1-10)"
    )
    search_tags: list[str] = Field(
        default_factory=list, alias="searchTags", description="Extra search keywords"
    )
    fragility: str | None = Field(default=None, description="Inferred fragility label")

    @property
    def key(self) -> str:
        """Symbol node identifier: '<filePath>:<name>:<startLine>'."""
        return f"{self.file_path}:{self.name}:{self.range.start_line}"


class GraphEdge(BaseModel):
    """A directed edge between two node identifiers."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    source: str = Field(description="Source node ID")
    target: str = Field(description="Target node ID")
    type: str = Field(default="call", description="Relationship type (call, import, extends, ...)")
    id: int | str | None = Field(default=None, description="Producer edge identifier")
    reason: str | None = Field(default=None, description="Why the edge exists (e.g. 'lsp')")

    @model_validator(mode="before")
    @classmethod
    def _accept_from_to(cls, data: object) -> object:
        # Indexer rows name the endpoints 'from'/'to'
        if isinstance(data, dict) and "source" not in data and "from" in data:
            data = {**data, "source": data["from"], "target": data.get("to")}
            data.pop("from", None)
            data.pop("to", None)
        return data


class GraphFile(BaseModel):
    """An indexed file."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    file_path: str = Field(alias="filePath", description="File path")
    content_hash: str = Field(default="", alias="contentHash", description="Hash of file content")
    last_indexed_at: str = Field(default="", alias="lastIndexedAt", description="Index timestamp")


class DomainHealth(BaseModel):
    """Health metrics for a functional domain."""

    model_config = ConfigDict(populate_by_name=True)

    domain: str = Field(description="Domain name")
    symbol_count: int = Field(default=0, alias="symbolCount", description="Symbols in the domain")
    avg_complexity: float = Field(default=0.0, alias="avgComplexity", description="Mean complexity")
    coupling: float = Field(
        default=0.0, ge=0.0, le=1.0, description="Cross-domain edges / edges leaving the domain"
    )
    health_score: int = Field(default=100, alias="healthScore", description="0-100 health score")
    status: HealthStatus = Field(default="healthy", description="Health band")


class DomainInfo(BaseModel):
    """A domain entry of the snapshot."""

    model_config = ConfigDict(populate_by_name=True)

    domain: str = Field(description="Domain name")
    symbol_count: int = Field(default=0, alias="symbolCount", description="Symbols in the domain")
    health: DomainHealth | None = Field(default=None, description="Precomputed health metrics")


class GraphSnapshot(BaseModel):
    """Full graph handed to the core as one unit."""

    domains: list[DomainInfo] = Field(default_factory=list, description="Domains")
    files: list[GraphFile] = Field(default_factory=list, description="Indexed files")
    symbols: list[Symbol] = Field(default_factory=list, description="Code symbols")
    edges: list[GraphEdge] = Field(default_factory=list, description="Typed edges")


# =============================================================================
# Renderable Graph Models
# =============================================================================


class CouplingMetric(BaseModel):
    """Coupling Between Objects metrics for one node."""

    node_id: str = Field(description="Node ID")
    in_degree: int = Field(description="Distinct incoming neighbors")
    out_degree: int = Field(description="Distinct outgoing neighbors")
    cbo: int = Field(description="in_degree + out_degree")
    normalized_score: float = Field(ge=0.0, le=1.0, description="cbo / max cbo in the snapshot")
    color: str = Field(description="Hex color from the blue-yellow-red gradient")


class GraphNode(BaseModel):
    """A renderable node: domain, file or symbol."""

    id: str = Field(description="Node identifier")
    kind: NodeKind = Field(description="Node kind")
    parent_id: str | None = Field(default=None, description="Structural parent node ID")
    label: str = Field(default="", description="Display name")
    file_path: str | None = Field(default=None, description="Resolved file path")
    domain: str | None = Field(default=None, description="Domain attribute")
    domain_name: str | None = Field(default=None, description="Domain display name")
    search_tags: list[str] = Field(default_factory=list, description="Extra search keywords")
    symbol_type: str | None = Field(default=None, description="Symbol kind for symbol nodes")
    line: int | None = Field(default=None, description="Start line for symbol nodes")
    complexity: float = Field(default=0, description="Complexity score")
    impact_depth: int | None = Field(default=None, description="External risk hint (1-10)")
    coupling: CouplingMetric | None = Field(default=None, description="Coupling metrics")
    # Visibility annotations (None until a filter stage sets them)
    opacity: float | None = Field(default=None, description="Render opacity")
    is_highlighted: bool | None = Field(default=None, description="Direct search match")
    disable_heatmap: bool | None = Field(default=None, description="Suppress risk coloring")
    glow_color: str | None = Field(default=None, description="Risk glow color")


class EdgeStyle(BaseModel):
    """Line treatment of a rendered edge."""

    line_type: str = Field(default="smoothstep", description="Path shape")
    animated: bool = Field(default=False, description="Animated dash flow")
    stroke: str = Field(description="Stroke color")
    stroke_width: float = Field(default=1.5, description="Stroke width")
    opacity: float = Field(default=1.0, description="Stroke opacity")
    stroke_dasharray: str | None = Field(default=None, description="Dash pattern")
    marker_color: str | None = Field(default=None, description="Arrow marker color")


class ViewEdge(BaseModel):
    """A renderable edge."""

    id: str = Field(description="Edge identifier")
    source: str = Field(description="Source node ID")
    target: str = Field(description="Target node ID")
    type: str = Field(default="call", description="Relationship type")
    style: EdgeStyle | None = Field(default=None, description="Line treatment")


class NodeVisibilityState(BaseModel):
    """Per-node visibility used by the renderer."""

    is_visible: bool = Field(description="Whether the node is rendered")
    opacity: float = Field(default=1.0, description="Render opacity")
    is_highlighted: bool = Field(default=False, description="Highlight flag")
    glow_color: str | None = Field(default=None, description="Risk glow color")


class FilterContext(BaseModel):
    """Inputs of the view-mode filter besides the graph itself."""

    mode: str = Field(default=ViewMode.ARCHITECTURE, description="View mode; unknown values pass through")
    focused_node_id: str | None = Field(default=None, description="Focus node")
    related_node_ids: set[str] = Field(default_factory=set, description="Nodes related to the focus")
    search_query: str | None = Field(default=None, description="Search refinement query")
    fade_opacity: float = Field(
        default=0.15, ge=0.0, le=1.0, description="Opacity of nodes unrelated to the focus"
    )

    @field_serializer("related_node_ids")
    def _sorted_ids(self, value: set[str]) -> list[str]:
        return sorted(value)


class FilteredGraph(BaseModel):
    """Visible node/edge subset produced by the view-mode filter."""

    visible_nodes: list[GraphNode] = Field(default_factory=list, description="Visible nodes")
    visible_edges: list[ViewEdge] = Field(default_factory=list, description="Visible edges")


# =============================================================================
# Analysis Result Models
# =============================================================================


class RelatedNodes(BaseModel):
    """Categorized relationships of a focus node."""

    parents: set[str] = Field(default_factory=set, description="Structural parent")
    children: set[str] = Field(default_factory=set, description="Structural children")
    callers: set[str] = Field(default_factory=set, description="Upstream nodes within depth")
    callees: set[str] = Field(default_factory=set, description="Downstream nodes within depth")
    same_file: set[str] = Field(default_factory=set, description="Nodes in the focus node's file")
    all: set[str] = Field(default_factory=set, description="Union of all categories")

    @field_serializer("parents", "children", "callers", "callees", "same_file", "all")
    def _sorted_ids(self, value: set[str]) -> list[str]:
        return sorted(value)


class ImpactStats(BaseModel):
    """Aggregate counts of a blast-radius computation."""

    affected_functions: int = Field(default=0, description="|upstream ∪ downstream|")
    affected_files: int = Field(default=0, description="Distinct files touched")
    affected_domains: int = Field(default=0, description="Distinct domains touched")
    upstream_deps: list[str] = Field(default_factory=list, description="Upstream node IDs")
    downstream_deps: list[str] = Field(default_factory=list, description="Downstream node IDs")


class ImpactAnalysis(BaseModel):
    """Full transitive blast radius of a node."""

    node_id: str = Field(description="Focus node ID")
    upstream: list[str] = Field(
        default_factory=list, description="Who depends on this, in BFS discovery order"
    )
    downstream: list[str] = Field(
        default_factory=list, description="What this depends on, in BFS discovery order"
    )
    affected_files: set[str] = Field(default_factory=set, description="Files touched")
    affected_domains: set[str] = Field(default_factory=set, description="Domains touched")
    stats: ImpactStats = Field(default_factory=ImpactStats, description="Aggregate counts")
    severity: float = Field(default=0.0, ge=0.0, le=100.0, description="Severity score (0-100)")
    risk_level: RiskLevel = Field(default="low", description="Severity band")

    @field_serializer("affected_files", "affected_domains")
    def _sorted_ids(self, value: set[str]) -> list[str]:
        return sorted(value)


class AffectedNode(BaseModel):
    """A dependent found by the depth-capped impact walk."""

    node_id: str = Field(description="Node ID")
    name: str = Field(default="", description="Display name")
    file_path: str | None = Field(default=None, description="File path")
    depth: int = Field(description="Distance from the changed node (1 = direct dependent)")
    impact_type: Literal["direct", "transitive"] = Field(description="direct when depth is 1")


class DependentsReport(BaseModel):
    """Result of the depth-capped "who depends on this" walk."""

    source_id: str = Field(description="Changed node ID")
    source_name: str = Field(default="unknown", description="Changed node display name")
    affected: list[AffectedNode] = Field(default_factory=list, description="Dependents by depth")
    total_affected: int = Field(default=0, description="Number of dependents")
    max_depth: int = Field(default=0, description="Deepest depth reached")
    risk_level: DependentsRiskLevel = Field(default="low", description="Count-based risk band")


# =============================================================================
# Definition Resolution Models
# =============================================================================


class UnresolvedCall(BaseModel):
    """A call site whose target the parser could not resolve."""

    caller_file_path: str = Field(description="File containing the call")
    caller_line: int = Field(description="1-based line of the call")
    caller_column: int = Field(default=0, description="0-based column of the call")
    callee_name: str = Field(description="Called name as written")
    caller_symbol_key: str = Field(description="Symbol node ID of the calling symbol")


class Definition(BaseModel):
    """A definition location returned by a resolution provider."""

    file_path: str = Field(description="File containing the definition")
    line: int = Field(description="1-based line of the definition")
    column: int = Field(default=0, description="0-based column")
    symbol_name: str = Field(default="", description="Name at the definition")


class ResolvedEdge(BaseModel):
    """A call upgraded to a verified target."""

    caller_symbol_key: str = Field(description="Symbol node ID of the caller")
    target_file_path: str = Field(description="File of the resolved definition")
    target_line: int = Field(description="Line of the resolved definition")
    target_name: str = Field(description="Called name")


# NetworkX Conversion Utilities


def snapshot_to_digraph(snapshot: GraphSnapshot) -> nx.DiGraph:
    """Build a symbol-level NetworkX DiGraph from a snapshot.

    Nodes are symbol keys. Edges whose endpoints are not symbols of the
    snapshot are skipped; duplicate edges collapse into one.

    Args:
        snapshot: The graph snapshot.

    Returns:
        NetworkX directed graph.
    """
    G = nx.DiGraph()

    for symbol in snapshot.symbols:
        G.add_node(
            symbol.key,
            name=symbol.name,
            file=symbol.file_path,
            type=symbol.type,
            domain=symbol.domain,
        )

    for edge in snapshot.edges:
        if edge.source in G and edge.target in G:
            G.add_edge(edge.source, edge.target, type=edge.type)

    return G
