"""Pytest configuration and shared fixtures."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from blastmap.analyzers.graph_model import GraphModel
from blastmap.mcp.context import get_registry
from blastmap.models.graph import GraphNode, GraphSnapshot, NodeKind, ViewEdge

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_snapshot_path() -> Path:
    """Path to the sample snapshot fixture (camelCase, as the indexer writes it)."""
    return FIXTURES_DIR / "snapshots" / "sample_snapshot.json"


@pytest.fixture
def sample_snapshot_data(sample_snapshot_path: Path) -> dict:
    """Raw JSON content of the sample snapshot."""
    return json.loads(sample_snapshot_path.read_text(encoding="utf-8"))


@pytest.fixture
def sample_snapshot(sample_snapshot_data: dict) -> GraphSnapshot:
    """Validated sample snapshot.

    Domains auth and payment, five symbols (formatDate has no domain), and
    edges including a duplicate, a self-loop and a dangling target.
    """
    return GraphSnapshot.model_validate(sample_snapshot_data)


@pytest.fixture
def sample_graph(sample_snapshot: GraphSnapshot) -> GraphModel:
    """Graph model derived from the sample snapshot."""
    return GraphModel.from_snapshot(sample_snapshot)


@pytest.fixture
def snapshot_file(tmp_path: Path, sample_snapshot_data: dict) -> Path:
    """Writable copy of the sample snapshot."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(sample_snapshot_data), encoding="utf-8")
    return path


@pytest.fixture
def graph_factory() -> Callable[..., GraphModel]:
    """Build a graph of symbol nodes from (source, target) pairs.

    Every endpoint becomes a symbol node unless `nodes` lists the node IDs
    to load explicitly.
    """

    def build(
        edges: list[tuple[str, str]],
        nodes: list[str] | None = None,
    ) -> GraphModel:
        node_ids = nodes if nodes is not None else list(dict.fromkeys(n for e in edges for n in e))
        graph_nodes = [GraphNode(id=n, kind=NodeKind.SYMBOL, label=n) for n in node_ids]
        graph_edges = [
            ViewEdge(id=f"edge-{i}", source=s, target=t) for i, (s, t) in enumerate(edges)
        ]
        return GraphModel.from_nodes(graph_nodes, graph_edges)

    return build


@pytest.fixture
def clean_registry():
    """Empty MCP session registry before and after a test."""
    registry = get_registry()
    registry.clear()
    yield registry
    registry.clear()
