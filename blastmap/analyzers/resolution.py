"""Definition resolution: upgrade unresolved calls to verified call edges.

A DefinitionProvider (a language server, a compiler front-end, ...) maps a
call site to the location of its definition. Resolution is best-effort:
failures are logged per call and skipped. Resolved edges are merged into a
snapshot before it is handed to the graph model.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from blastmap.logging import logger
from blastmap.models.graph import (
    Definition,
    GraphEdge,
    GraphSnapshot,
    ResolvedEdge,
    Symbol,
    UnresolvedCall,
)

RESOLVED_EDGE_REASON = "lsp"


class DefinitionProvider(Protocol):
    """Anything that can locate the definition behind a call site."""

    def resolve(self, call: UnresolvedCall) -> Definition | None:
        """Return the definition of the called name, or None if unknown."""
        ...


def resolve_definitions(
    calls: Sequence[UnresolvedCall],
    provider: DefinitionProvider,
) -> list[ResolvedEdge]:
    """Resolve a batch of calls, grouped by caller file.

    Args:
        calls: Call sites to resolve.
        provider: Definition lookup backend.

    Returns:
        One ResolvedEdge per call the provider could resolve.
    """
    by_file: dict[str, list[UnresolvedCall]] = {}
    for call in calls:
        by_file.setdefault(call.caller_file_path, []).append(call)

    resolved: list[ResolvedEdge] = []
    for file_path, file_calls in by_file.items():
        for call in file_calls:
            try:
                definition = provider.resolve(call)
            except Exception as e:
                logger.warning(
                    "Failed to resolve %s at %s:%d: %s",
                    call.callee_name,
                    file_path,
                    call.caller_line,
                    e,
                )
                continue
            if definition is None:
                continue
            resolved.append(
                ResolvedEdge(
                    caller_symbol_key=call.caller_symbol_key,
                    target_file_path=definition.file_path,
                    target_line=definition.line,
                    target_name=call.callee_name,
                )
            )

    logger.info("Resolved %d/%d definitions", len(resolved), len(calls))
    return resolved


def _find_target(symbols: Iterable[Symbol], resolved: ResolvedEdge) -> Symbol | None:
    candidates = [
        s
        for s in symbols
        if s.file_path == resolved.target_file_path and s.name == resolved.target_name
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda s: abs(s.range.start_line - resolved.target_line))


def merge_resolved_edges(
    snapshot: GraphSnapshot,
    resolved: Iterable[ResolvedEdge],
) -> GraphSnapshot:
    """Return a copy of the snapshot with resolved call edges added.

    The target symbol is the one with the resolved file and name whose start
    line is nearest the resolved line. Resolutions whose caller or target is
    not a symbol of the snapshot, self-calls, and calls already present as
    edges are skipped.
    """
    keys = {s.key for s in snapshot.symbols}
    existing = {(e.source, e.target, e.type) for e in snapshot.edges}
    added: list[GraphEdge] = []

    for edge in resolved:
        if edge.caller_symbol_key not in keys:
            continue
        target = _find_target(snapshot.symbols, edge)
        if target is None or target.key == edge.caller_symbol_key:
            continue
        triple = (edge.caller_symbol_key, target.key, "call")
        if triple in existing:
            continue
        existing.add(triple)
        added.append(
            GraphEdge(
                source=edge.caller_symbol_key,
                target=target.key,
                type="call",
                reason=RESOLVED_EDGE_REASON,
            )
        )

    if added:
        logger.debug("Merged %d resolved call edges", len(added))
    return snapshot.model_copy(update={"edges": [*snapshot.edges, *added]})
