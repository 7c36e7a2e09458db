"""Snapshot file loading.

A snapshot file is the JSON document handed over by the indexer:
{"domains": [...], "files": [...], "symbols": [...], "edges": [...]}
with camelCase field names (snake_case is accepted too).
"""

import json
from pathlib import Path

from pydantic import ValidationError

from blastmap.logging import log_operation
from blastmap.models.graph import GraphSnapshot


class SnapshotLoadError(Exception):
    """Raised when a snapshot file cannot be read or is not a valid snapshot."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot load snapshot {self.path}: {reason}")


def load_snapshot(path: Path | str) -> GraphSnapshot:
    """Load and validate a snapshot JSON file.

    Args:
        path: Path to the snapshot file.

    Returns:
        The validated GraphSnapshot.

    Raises:
        SnapshotLoadError: File is missing, unreadable, not JSON, or does not
            match the snapshot schema.
    """
    path = Path(path)
    with log_operation("load_snapshot", {"path": path.name}):
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise SnapshotLoadError(path, e.strerror or str(e)) from e
        except json.JSONDecodeError as e:
            raise SnapshotLoadError(path, f"invalid JSON: {e.msg} (line {e.lineno})") from e

        try:
            return GraphSnapshot.model_validate(data)
        except ValidationError as e:
            raise SnapshotLoadError(path, f"{e.error_count()} validation error(s)") from e
