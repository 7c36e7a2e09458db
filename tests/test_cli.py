"""Tests for the blastmap CLI."""

import json
from pathlib import Path

from click.testing import CliRunner

from blastmap.cli import cli

LOGIN = "src/auth/login.ts:login:10"
CHARGE = "src/payment/charge.ts:charge:12"
FORMAT = "src/util/format.ts:formatDate:3"


def _invoke(*args: str):
    return CliRunner().invoke(cli, list(args))


class TestImpactCommand:
    """Tests for `blastmap impact` and `blastmap batch-impact`."""

    def test_unbounded_impact(self, sample_snapshot_path: Path) -> None:
        result = _invoke("impact", str(sample_snapshot_path), LOGIN)

        assert result.exit_code == 0
        output = json.loads(result.output)
        assert output["risk_level"] == "high"
        assert output["upstream"] == [CHARGE]

    def test_depth_capped_policy(self, sample_snapshot_path: Path) -> None:
        result = _invoke(
            "impact", str(sample_snapshot_path), FORMAT, "--policy", "depth-capped", "--max-depth", "1"
        )

        assert result.exit_code == 0
        output = json.loads(result.output)
        assert output["total_affected"] == 1
        assert output["source_name"] == "formatDate"

    def test_unknown_node_warns(self, sample_snapshot_path: Path) -> None:
        result = _invoke("impact", str(sample_snapshot_path), "ghost")

        assert result.exit_code == 0
        assert "Node not found in snapshot: ghost" in result.output

    def test_batch_impact(self, sample_snapshot_path: Path) -> None:
        result = _invoke("batch-impact", str(sample_snapshot_path), LOGIN, CHARGE)

        assert result.exit_code == 0
        assert list(json.loads(result.output)) == [LOGIN, CHARGE]

    def test_invalid_snapshot_exits_with_error(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        result = _invoke("impact", str(path), LOGIN)

        assert result.exit_code == 1

    def test_missing_snapshot_is_usage_error(self, tmp_path: Path) -> None:
        result = _invoke("impact", str(tmp_path / "missing.json"), LOGIN)

        assert result.exit_code == 2


class TestQueryCommands:
    """Tests for related, coupling, view and health."""

    def test_related(self, sample_snapshot_path: Path) -> None:
        result = _invoke("related", str(sample_snapshot_path), LOGIN, "--depth", "1")

        assert result.exit_code == 0
        assert json.loads(result.output)["callers"] == [CHARGE]

    def test_coupling_top(self, sample_snapshot_path: Path) -> None:
        result = _invoke("coupling", str(sample_snapshot_path), "--top", "1")

        assert result.exit_code == 0
        output = json.loads(result.output)
        assert output["total_nodes"] == 5
        assert [m["node_id"] for m in output["top"]] == [LOGIN]

    def test_coupling_all_nodes(self, sample_snapshot_path: Path) -> None:
        result = _invoke("coupling", str(sample_snapshot_path), "--all-nodes")

        assert json.loads(result.output)["total_nodes"] == 12

    def test_view_architecture(self, sample_snapshot_path: Path) -> None:
        result = _invoke("view", str(sample_snapshot_path))

        assert result.exit_code == 0
        output = json.loads(result.output)
        assert len(output["visible_nodes"]) == 7
        assert output["visible_edges"] == []

    def test_view_search_highlight_only(self, sample_snapshot_path: Path) -> None:
        result = _invoke(
            "view", str(sample_snapshot_path), "--mode", "codebase", "--search", "charge", "--highlight-only"
        )

        output = json.loads(result.output)
        assert len(output["visible_nodes"]) == 12

    def test_view_rejects_unknown_mode(self, sample_snapshot_path: Path) -> None:
        result = _invoke("view", str(sample_snapshot_path), "--mode", "heatmap")

        assert result.exit_code == 2

    def test_health(self, sample_snapshot_path: Path) -> None:
        result = _invoke("health", str(sample_snapshot_path))

        assert result.exit_code == 0
        assert [h["domain"] for h in json.loads(result.output)] == ["auth", "payment", "unknown"]

    def test_version(self) -> None:
        result = _invoke("--version")

        assert result.exit_code == 0
        assert "blastmap" in result.output
