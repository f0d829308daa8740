"""
Unit tests for Mantissa Tenet causal risk attribution.

Tests cover:
- Empty inputs
- Attribution along contamination paths
- Contribution cap and ordering
"""

from __future__ import annotations

from tenet.engine import CausalImpactEngine, analyze_impact, calculate_risk_score
from tenet.models import Severity


class TestCausalImpact:
    """Tests for CausalImpactEngine.analyze."""

    def test_no_conflicts(self):
        """Test no conflicts means no impacts."""
        assert CausalImpactEngine().analyze([], 100) == []

    def test_no_penalty(self, make_conflict):
        """Test a perfect risk score means no impacts."""
        assert CausalImpactEngine().analyze([make_conflict(["app", "gpl"])], 100) == []

    def test_single_conflict(self, make_conflict):
        """Test one conflict is fully attributed to its package."""
        impacts = CausalImpactEngine().analyze([make_conflict(["app", "readline"])], 70)

        assert len(impacts) == 1
        impact = impacts[0]
        assert impact.package_name == "readline"
        assert impact.risk_contribution == 100.0
        assert impact.conflicts_removed == 1
        assert impact.risk_score_after_removal == 100
        assert impact.severity_breakdown == {"critical": 1, "high": 0, "medium": 0, "low": 0}

    def test_root_excluded(self, make_conflict):
        """Test the project root never appears as an impact."""
        impacts = CausalImpactEngine().analyze([make_conflict(["app", "web", "gpl"])], 70)
        assert "app" not in [i.package_name for i in impacts]

    def test_shared_intermediate(self, make_conflict):
        """Test an intermediate package is credited with every conflict beneath it."""
        conflicts = [
            make_conflict(["app", "framework", "gpl-lib"], Severity.CRITICAL),
            make_conflict(["app", "framework", "lgpl-lib"], Severity.HIGH, "LGPL-2.1"),
        ]
        score = calculate_risk_score([c.severity for c in conflicts])
        impacts = CausalImpactEngine().analyze(conflicts, score)

        assert score == 55
        assert [i.package_name for i in impacts] == ["framework", "gpl-lib", "lgpl-lib"]
        assert impacts[0].risk_contribution == 100.0
        assert impacts[0].conflicts_removed == 2
        assert impacts[0].risk_score_after_removal == 100
        assert impacts[1].risk_contribution == 66.67
        assert impacts[1].risk_score_after_removal == 85
        assert impacts[2].risk_contribution == 33.33
        assert impacts[2].risk_score_after_removal == 70

    def test_contribution_capped(self, make_conflict):
        """Test contributions never exceed 100 when the score is clamped."""
        conflicts = [make_conflict(["app", "gpl"]) for _ in range(4)]
        impacts = CausalImpactEngine().analyze(conflicts, calculate_risk_score([Severity.CRITICAL] * 4))

        assert impacts[0].risk_contribution == 100.0
        assert impacts[0].conflicts_removed == 4
        assert impacts[0].risk_score_after_removal == 100

    def test_all_contributions_in_range(self, make_conflict):
        """Test every contribution stays within [0, 100]."""
        conflicts = [
            make_conflict(["app", "a", "b"], Severity.CRITICAL),
            make_conflict(["app", "a", "c"], Severity.MEDIUM),
            make_conflict(["app", "d"], Severity.LOW),
        ]
        for impact in CausalImpactEngine().analyze(conflicts, 10):
            assert 0 <= impact.risk_contribution <= 100
            assert impact.risk_score_after_removal <= 100

    def test_ties_sorted_by_name(self, make_conflict):
        """Test equal contributions are ordered by package name."""
        conflicts = [
            make_conflict(["app", "zeta"], Severity.HIGH),
            make_conflict(["app", "alpha"], Severity.HIGH),
        ]
        impacts = CausalImpactEngine().analyze(conflicts, 70)
        assert [i.package_name for i in impacts] == ["alpha", "zeta"]

    def test_deterministic(self, make_conflict):
        """Test repeated analysis yields the same ranking."""
        conflicts = [
            make_conflict(["app", "x", "y"], Severity.HIGH),
            make_conflict(["app", "x", "z"], Severity.LOW),
        ]
        assert analyze_impact(conflicts, 83) == analyze_impact(conflicts, 83)
