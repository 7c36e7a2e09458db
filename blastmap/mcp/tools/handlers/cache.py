"""Cache management handler.

Handler for manage_cache tool: relationship cache stats and invalidation
for a snapshot session.
"""

import json
from typing import Any

from blastmap.logging import logger
from blastmap.mcp.context import get_registry


async def handle_manage_cache(arguments: dict[str, Any]) -> str:
    """Handle manage_cache tool call.

    Modes:
    - stats: Size and keys of the session's relationship cache
    - clear: Invalidate the session's relationship cache

    A snapshot that has not been queried yet has no session and reports an
    empty cache; manage_cache never loads a snapshot.

    Args:
        arguments: Tool arguments with mode, snapshot_path.

    Returns:
        JSON string with cache stats or the clear result.

    Raises:
        ValueError: If required parameters are missing or mode is unknown.
    """
    mode = arguments.get("mode")
    snapshot_path = arguments.get("snapshot_path")

    if not mode:
        raise ValueError("mode is required")
    if not snapshot_path:
        raise ValueError("snapshot_path is required")

    session = get_registry().peek(snapshot_path)

    if mode == "stats":
        stats = session.cache_stats() if session else {"size": 0, "keys": []}
        return json.dumps(
            {"snapshot_path": snapshot_path, "loaded": session is not None, **stats},
            indent=2,
        )

    elif mode == "clear":
        cleared = 0
        if session:
            cleared = session.cache_stats()["size"]
            session.clear_relationship_cache()
            logger.info("Cleared %d cached relationship results", cleared)
        return json.dumps(
            {"snapshot_path": snapshot_path, "cleared": cleared},
            indent=2,
        )

    else:
        raise ValueError(f"Unknown mode: {mode}")
