"""CLI interface for blastmap.

Provides commands for running the MCP server and querying a snapshot file.
Results are printed as JSON on stdout; diagnostics go to stderr.
"""

import json
import sys

import click
from dotenv import load_dotenv

# Load .env before importing other blastmap modules
load_dotenv()

from blastmap import __version__  # noqa: E402
from blastmap.models.graph import ViewMode  # noqa: E402

_SNAPSHOT_ARG = click.Path(exists=True, dir_okay=False, resolve_path=True)


def _open_session(snapshot_path: str):
    """Load a snapshot into a session, exiting with status 1 on failure."""
    from blastmap.session import GraphSession
    from blastmap.utils.snapshots import SnapshotLoadError, load_snapshot

    try:
        return GraphSession(load_snapshot(snapshot_path))
    except SnapshotLoadError as e:
        click.echo(str(e), err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="blastmap")
def cli() -> None:
    """blastmap - blast radius, coupling and view filtering for code graphs."""
    pass


@cli.command()
def serve() -> None:
    """Start the MCP server on stdio."""
    # Import here to avoid slow startup for the query commands
    from blastmap import run_server

    run_server()


@cli.command()
@click.argument("snapshot_path", type=_SNAPSHOT_ARG)
@click.argument("node_id")
@click.option(
    "--policy",
    type=click.Choice(["unbounded", "depth-capped"]),
    default="unbounded",
    help="Unbounded severity analysis or depth-capped dependents walk (default: unbounded)",
)
@click.option(
    "--max-depth",
    type=int,
    default=None,
    help="Depth cap for --policy depth-capped (default: BLASTMAP_IMPACT_MAX_DEPTH or 5)",
)
def impact(snapshot_path: str, node_id: str, policy: str, max_depth: int | None) -> None:
    """Analyze the blast radius of changing a node.

    SNAPSHOT_PATH: Snapshot JSON file.
    NODE_ID: Node identifier, e.g. 'src/auth.ts:login:12'.
    """
    session = _open_session(snapshot_path)
    if node_id not in session.graph:
        click.echo(f"Node not found in snapshot: {node_id}", err=True)

    if policy == "depth-capped":
        report = session.analyze_dependents(node_id, max_depth)
    else:
        report = session.analyze_impact(node_id)
    click.echo(report.model_dump_json(indent=2))


@cli.command("batch-impact")
@click.argument("snapshot_path", type=_SNAPSHOT_ARG)
@click.argument("node_ids", nargs=-1, required=True)
def batch_impact(snapshot_path: str, node_ids: tuple[str, ...]) -> None:
    """Analyze the blast radius of several nodes independently.

    SNAPSHOT_PATH: Snapshot JSON file.
    NODE_IDS: One or more node identifiers.
    """
    session = _open_session(snapshot_path)
    results = session.batch_analyze_impact(node_ids)
    click.echo(
        json.dumps({k: v.model_dump(mode="json") for k, v in results.items()}, indent=2)
    )


@cli.command()
@click.argument("snapshot_path", type=_SNAPSHOT_ARG)
@click.argument("node_id")
@click.option(
    "--depth",
    type=int,
    default=None,
    help="Hops for callers/callees (default: BLASTMAP_RELATIONSHIP_DEPTH or 2)",
)
def related(snapshot_path: str, node_id: str, depth: int | None) -> None:
    """List nodes related to a focus node.

    SNAPSHOT_PATH: Snapshot JSON file.
    NODE_ID: Focus node identifier.
    """
    session = _open_session(snapshot_path)
    result = session.related_nodes(node_id, depth)
    click.echo(result.model_dump_json(indent=2))


@cli.command()
@click.argument("snapshot_path", type=_SNAPSHOT_ARG)
@click.option("--top", type=int, default=20, help="Number of most coupled nodes (default: 20)")
@click.option(
    "--all-nodes",
    is_flag=True,
    help="Include domain and file nodes instead of symbols only",
)
def coupling(snapshot_path: str, top: int, all_nodes: bool) -> None:
    """Rank nodes by coupling between objects (CBO).

    SNAPSHOT_PATH: Snapshot JSON file.
    """
    from blastmap.analyzers.coupling import coupling_level

    session = _open_session(snapshot_path)
    metrics = session.coupling_metrics(all_nodes=all_nodes)
    ranked = sorted(metrics.values(), key=lambda m: (-m.cbo, m.node_id))[: max(top, 0)]
    output = {
        "total_nodes": len(metrics),
        "max_cbo": max((m.cbo for m in metrics.values()), default=0),
        "top": [
            {**m.model_dump(), "level": coupling_level(m.normalized_score)} for m in ranked
        ],
    }
    click.echo(json.dumps(output, indent=2))


@cli.command()
@click.argument("snapshot_path", type=_SNAPSHOT_ARG)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in ViewMode]),
    default=ViewMode.ARCHITECTURE.value,
    help="View mode (default: architecture)",
)
@click.option("--search", "search_query", help="Search refinement query (3+ characters)")
@click.option("--focus", "focus_id", help="Focus node; unrelated nodes are dimmed")
@click.option(
    "--highlight-only",
    is_flag=True,
    help="Fade non-matching nodes instead of removing them during search",
)
def view(
    snapshot_path: str,
    mode: str,
    search_query: str | None,
    focus_id: str | None,
    highlight_only: bool,
) -> None:
    """Compute the visible node/edge subset for a view mode.

    SNAPSHOT_PATH: Snapshot JSON file.
    """
    from blastmap.analyzers.constants import get_fade_opacity
    from blastmap.models.graph import FilterContext

    session = _open_session(snapshot_path)
    related_ids = session.related_nodes(focus_id).all if focus_id else set()
    context = FilterContext(
        mode=mode,
        focused_node_id=focus_id,
        related_node_ids=related_ids,
        search_query=search_query,
        fade_opacity=get_fade_opacity(),
    )
    result = session.apply_view_mode(context, highlight_only=highlight_only)
    click.echo(result.model_dump_json(indent=2, exclude_none=True))


@cli.command()
@click.argument("snapshot_path", type=_SNAPSHOT_ARG)
def health(snapshot_path: str) -> None:
    """Score the health of every domain.

    SNAPSHOT_PATH: Snapshot JSON file.
    """
    session = _open_session(snapshot_path)
    results = session.domain_health()
    click.echo(json.dumps([h.model_dump() for h in results.values()], indent=2))


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
