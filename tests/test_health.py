"""Tests for domain health scoring."""

import pytest

from blastmap.analyzers.health import compute_domain_health, domain_health_for_snapshot, health_status
from blastmap.models.graph import GraphSnapshot, SourceRange, Symbol


def _symbols(*complexities: float) -> list[Symbol]:
    return [
        Symbol(
            id=i,
            name=f"fn{i}",
            file_path="src/a.ts",
            range=SourceRange(start_line=i + 1, end_line=i + 2),
            complexity=c,
        )
        for i, c in enumerate(complexities)
    ]


class TestComputeDomainHealth:
    """Tests for the single-domain score."""

    def test_low_complexity_isolated_domain_is_healthy(self) -> None:
        """avg 4 -> 80 * 0.7 + 100 * 0.3 = 86."""
        health = compute_domain_health("auth", _symbols(4, 2, 6), 0, 4)

        assert health.health_score == 86
        assert health.status == "healthy"
        assert health.avg_complexity == 4.0
        assert health.coupling == 0.0
        assert health.symbol_count == 3

    def test_moderate_complexity_is_warning(self) -> None:
        health = compute_domain_health("core", _symbols(8), 0, 0)

        assert health.health_score == 72
        assert health.status == "warning"

    def test_complexity_and_coupling_floor_at_zero(self) -> None:
        health = compute_domain_health("legacy", _symbols(20, 30), 5, 5)

        assert health.health_score == 0
        assert health.status == "critical"
        assert health.coupling == 1.0

    def test_empty_domain(self) -> None:
        """No symbols and no edges is perfectly healthy."""
        health = compute_domain_health("empty", [], 0, 0)

        assert health.health_score == 100
        assert health.avg_complexity == 0.0

    def test_rounding(self) -> None:
        health = compute_domain_health("d", _symbols(1, 2, 2), 1, 3)

        assert health.avg_complexity == 1.7
        assert health.coupling == 0.33

    @pytest.mark.parametrize(
        ("score", "status"),
        [(100, "healthy"), (80, "healthy"), (79, "warning"), (60, "warning"), (59, "critical")],
    )
    def test_status_bands(self, score: int, status: str) -> None:
        assert health_status(score) == status


class TestDomainHealthForSnapshot:
    """Tests for health over a whole snapshot."""

    def test_sample_domains(self, sample_snapshot: GraphSnapshot) -> None:
        health = domain_health_for_snapshot(sample_snapshot)

        assert list(health) == ["auth", "payment", "unknown"]
        assert health["auth"].health_score == 76
        assert health["auth"].status == "warning"
        assert health["auth"].coupling == 0.33
        assert health["auth"].avg_complexity == 4.0
        assert health["payment"].health_score == 35
        assert health["payment"].status == "critical"
        assert health["unknown"].health_score == 93
        assert health["unknown"].coupling == 0.0

    def test_listed_domain_without_symbols(self) -> None:
        snapshot = GraphSnapshot.model_validate({"domains": [{"domain": "ui"}]})

        health = domain_health_for_snapshot(snapshot)

        assert health["ui"].symbol_count == 0
        assert health["ui"].status == "healthy"

    def test_edges_count_toward_source_domain_only(self) -> None:
        """A domain that is only called from outside keeps zero coupling."""
        snapshot = GraphSnapshot.model_validate(
            {
                "symbols": [
                    {
                        "id": 1,
                        "name": "a",
                        "filePath": "src/auth/a.ts",
                        "range": {"startLine": 1, "endLine": 2},
                        "domain": "auth",
                    },
                    {
                        "id": 2,
                        "name": "b",
                        "filePath": "src/payment/b.ts",
                        "range": {"startLine": 1, "endLine": 2},
                        "domain": "payment",
                    },
                ],
                "edges": [{"source": "src/auth/a.ts:a:1", "target": "src/payment/b.ts:b:1"}],
            }
        )

        health = domain_health_for_snapshot(snapshot)

        assert health["auth"].coupling == 1.0
        assert health["auth"].health_score == 70
        assert health["payment"].coupling == 0.0
        assert health["payment"].health_score == 100
        assert health["payment"].status == "healthy"
