"""Tests for impact analysis policies and scoring."""

import pytest

from blastmap.analyzers.graph_model import GraphModel
from blastmap.analyzers.impact import (
    DepthCappedImpact,
    UnboundedImpact,
    analyze_dependents,
    analyze_impact,
    batch_analyze_impact,
    calculate_impact_severity,
    dependents_risk_level,
    impact_severity_level,
)
from blastmap.models.graph import ImpactStats

LOGIN = "src/auth/login.ts:login:10"
VALIDATE = "src/auth/login.ts:validateToken:30"
SESSION = "src/auth/session.ts:createSession:5"
CHARGE = "src/payment/charge.ts:charge:12"
FORMAT = "src/util/format.ts:formatDate:3"


class TestSeverityScoring:
    """Tests for the weighted severity score and its bands."""

    def test_weights_scaled_by_impact_depth(self) -> None:
        """(4*1 + 4*5 + 2*20) * 5/5 = 64."""
        stats = ImpactStats(affected_functions=4, affected_files=4, affected_domains=2)

        assert calculate_impact_severity(stats, 5) == pytest.approx(64.0)

    def test_missing_impact_depth_dampens(self) -> None:
        """No impact depth counts as 1, a fifth of the raw score."""
        stats = ImpactStats(affected_functions=4, affected_files=4, affected_domains=2)

        assert calculate_impact_severity(stats) == pytest.approx(12.8)

    def test_clamped_to_100(self) -> None:
        stats = ImpactStats(affected_functions=500, affected_files=50, affected_domains=10)

        assert calculate_impact_severity(stats, 10) == 100.0

    @pytest.mark.parametrize(
        ("severity", "level"),
        [
            (0, "low"),
            (24.9, "low"),
            (25, "medium"),
            (49.9, "medium"),
            (50, "high"),
            (74.9, "high"),
            (75, "critical"),
            (100, "critical"),
        ],
    )
    def test_severity_bands(self, severity: float, level: str) -> None:
        assert impact_severity_level(severity) == level

    @pytest.mark.parametrize(
        ("count", "level"),
        [(0, "low"), (5, "low"), (6, "medium"), (15, "medium"), (16, "high")],
    )
    def test_dependent_count_bands(self, count: int, level: str) -> None:
        assert dependents_risk_level(count) == level


class TestUnboundedImpact:
    """Tests for the full transitive blast radius."""

    def test_login_blast_radius(self, sample_graph: GraphModel) -> None:
        result = analyze_impact(LOGIN, sample_graph)

        assert result.upstream == [CHARGE]
        assert result.downstream == [VALIDATE, SESSION, FORMAT]
        assert result.stats.affected_functions == 4
        assert result.stats.affected_files == 4
        assert result.stats.affected_domains == 2
        assert result.affected_domains == {"domain:auth", "domain:payment"}
        assert result.severity == pytest.approx(64.0)
        assert result.risk_level == "high"

    def test_unannotated_node_uses_default_depth(self, sample_graph: GraphModel) -> None:
        """charge has no impact depth, so its score is dampened."""
        result = analyze_impact(CHARGE, sample_graph)

        assert result.upstream == []
        assert result.stats.affected_functions == 4
        assert result.severity == pytest.approx(12.8)
        assert result.risk_level == "low"

    def test_unknown_node_is_empty(self, sample_graph: GraphModel) -> None:
        result = analyze_impact("missing", sample_graph)

        assert result.upstream == []
        assert result.downstream == []
        assert result.stats.affected_functions == 0
        assert result.severity == 0.0

    def test_cycle_excludes_focus(self, graph_factory) -> None:
        """A node on a cycle is never its own dependent."""
        graph = graph_factory([("A", "B"), ("B", "C"), ("C", "A")])

        result = UnboundedImpact().analyze("A", graph)

        assert set(result.upstream) == {"B", "C"}
        assert set(result.downstream) == {"B", "C"}
        assert result.stats.affected_functions == 2

    def test_batch_runs_each_node_independently(self, sample_graph: GraphModel) -> None:
        results = batch_analyze_impact([LOGIN, CHARGE, LOGIN], sample_graph)

        assert list(results) == [LOGIN, CHARGE]
        assert results[LOGIN].severity == pytest.approx(64.0)
        assert results[CHARGE].severity == pytest.approx(12.8)


class TestDepthCappedImpact:
    """Tests for the depth-capped dependents walk."""

    def test_dependents_of_leaf(self, sample_graph: GraphModel) -> None:
        """formatDate <- createSession <- login <- charge."""
        report = analyze_dependents(FORMAT, sample_graph)

        assert [(a.node_id, a.depth, a.impact_type) for a in report.affected] == [
            (SESSION, 1, "direct"),
            (LOGIN, 2, "transitive"),
            (CHARGE, 3, "transitive"),
        ]
        assert report.source_name == "formatDate"
        assert report.total_affected == 3
        assert report.max_depth == 3
        assert report.risk_level == "low"

    def test_respects_max_depth(self, sample_graph: GraphModel) -> None:
        report = analyze_dependents(FORMAT, sample_graph, max_depth=2)

        assert [a.node_id for a in report.affected] == [SESSION, LOGIN]
        assert report.max_depth == 2

    def test_zero_depth_returns_nothing(self, sample_graph: GraphModel) -> None:
        report = analyze_dependents(FORMAT, sample_graph, max_depth=0)

        assert report.affected == []
        assert report.source_name == "formatDate"

    def test_max_depth_from_environment(
        self, sample_graph: GraphModel, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The default cap is read when the analysis runs."""
        policy = DepthCappedImpact()
        monkeypatch.setenv("BLASTMAP_IMPACT_MAX_DEPTH", "1")

        report = policy.analyze(FORMAT, sample_graph)

        assert [a.node_id for a in report.affected] == [SESSION]

    def test_unknown_source(self, sample_graph: GraphModel) -> None:
        report = analyze_dependents("missing", sample_graph)

        assert report.source_name == "unknown"
        assert report.total_affected == 0

    def test_many_dependents_is_high_risk(self, graph_factory) -> None:
        graph = graph_factory([(f"caller{i}", "core") for i in range(16)])

        report = analyze_dependents("core", graph)

        assert report.total_affected == 16
        assert report.risk_level == "high"

    def test_impact_node_ids(self, sample_graph: GraphModel) -> None:
        rows = DepthCappedImpact(1).impact_node_ids(LOGIN, sample_graph)

        assert rows == [(CHARGE, 1, "direct")]

    def test_policies_disagree_on_risk(self, graph_factory) -> None:
        """Both threshold sets are independent."""
        graph = graph_factory([(f"caller{i}", "core") for i in range(6)])

        dependents = analyze_dependents("core", graph)
        impact = analyze_impact("core", graph)

        assert dependents.risk_level == "medium"
        assert impact.risk_level == "low"
