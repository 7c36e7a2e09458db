"""Snapshot sessions for the MCP server.

Tools address a snapshot by file path. The registry keeps one GraphSession
per resolved path and reloads it when the file's modification time changes,
so relationship caches survive between calls on an unchanged snapshot.
"""

import threading
from pathlib import Path

from blastmap.logging import logger
from blastmap.session import GraphSession
from blastmap.utils.snapshots import load_snapshot


class SessionRegistry:
    """Sessions keyed by resolved snapshot path."""

    def __init__(self) -> None:
        self._sessions: dict[Path, tuple[float, GraphSession]] = {}
        self._lock = threading.Lock()

    def get(self, snapshot_path: Path | str) -> GraphSession:
        """Session for a snapshot file, (re)loading it if needed.

        Raises:
            SnapshotLoadError: The file cannot be loaded.
        """
        path = Path(snapshot_path).resolve()
        mtime = path.stat().st_mtime if path.exists() else -1.0

        with self._lock:
            entry = self._sessions.get(path)
            if entry is not None and entry[0] == mtime:
                return entry[1]

            snapshot = load_snapshot(path)
            if entry is None:
                session = GraphSession(snapshot)
            else:
                logger.info("Snapshot %s changed, reloading", path.name)
                session = entry[1]
                session.load(snapshot)
            self._sessions[path] = (mtime, session)
            return session

    def peek(self, snapshot_path: Path | str) -> GraphSession | None:
        """Loaded session for a path, without loading or reloading."""
        with self._lock:
            entry = self._sessions.get(Path(snapshot_path).resolve())
            return entry[1] if entry else None

    def clear(self) -> None:
        """Forget every session."""
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


_registry = SessionRegistry()


def get_registry() -> SessionRegistry:
    """Process-wide session registry used by the tool handlers."""
    return _registry


__all__ = ["SessionRegistry", "get_registry"]
