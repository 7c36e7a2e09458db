"""Tests for snapshot loading and the snapshot schema."""

import json
from pathlib import Path

import pytest

from blastmap.models.graph import GraphEdge, GraphSnapshot
from blastmap.utils.snapshots import SnapshotLoadError, load_snapshot


class TestLoadSnapshot:
    """Tests for load_snapshot."""

    def test_loads_camel_case_fixture(self, sample_snapshot_path: Path) -> None:
        snapshot = load_snapshot(sample_snapshot_path)

        assert len(snapshot.domains) == 2
        assert len(snapshot.symbols) == 5
        assert len(snapshot.edges) == 7
        assert snapshot.symbols[0].key == "src/auth/login.ts:login:10"
        assert snapshot.symbols[0].impact_depth == 5
        assert snapshot.symbols[0].search_tags == ["signin"]

    def test_accepts_string_path(self, sample_snapshot_path: Path) -> None:
        assert isinstance(load_snapshot(str(sample_snapshot_path)), GraphSnapshot)

    def test_missing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "missing.json"

        with pytest.raises(SnapshotLoadError) as exc_info:
            load_snapshot(path)

        assert exc_info.value.path == path

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(SnapshotLoadError, match="invalid JSON"):
            load_snapshot(path)

    def test_schema_mismatch(self, tmp_path: Path) -> None:
        """A symbol without a range fails validation."""
        path = tmp_path / "bad.json"
        path.write_text(
            json.dumps({"symbols": [{"id": 1, "name": "f", "filePath": "a.ts"}]}),
            encoding="utf-8",
        )

        with pytest.raises(SnapshotLoadError, match="validation error"):
            load_snapshot(path)

    def test_empty_document(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.json"
        path.write_text("{}", encoding="utf-8")

        snapshot = load_snapshot(path)

        assert snapshot.symbols == []
        assert snapshot.edges == []


class TestSchema:
    """Tests for snapshot model parsing details."""

    def test_edge_accepts_from_to(self) -> None:
        """Indexer rows name edge endpoints from/to."""
        edge = GraphEdge.model_validate({"from": "a", "to": "b", "type": "import"})

        assert edge.source == "a"
        assert edge.target == "b"
        assert edge.type == "import"

    def test_edge_type_defaults_to_call(self) -> None:
        assert GraphEdge(source="a", target="b").type == "call"

    def test_snake_case_fields_accepted(self) -> None:
        snapshot = GraphSnapshot.model_validate(
            {
                "symbols": [
                    {
                        "id": 1,
                        "name": "f",
                        "file_path": "a.ts",
                        "range": {"start_line": 4, "end_line": 9},
                    }
                ]
            }
        )

        assert snapshot.symbols[0].key == "a.ts:f:4"
