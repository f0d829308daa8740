"""
Unit tests for the Mantissa Tenet dynamic risk engine.

Tests cover:
- Proprietary intent grading by copyleft strength and linking
- Open-source intent grading against the project license family
- Undecided intent flexibility grading
- Totality of the decision table
"""

from __future__ import annotations

import pytest

from tenet.engine import DynamicRiskEngine, calculate_severity
from tenet.licenses import default_catalog
from tenet.models import (
    DistributionModel,
    LinkingModel,
    ProjectContext,
    ProjectIntent,
    RiskLevel,
)


@pytest.fixture
def engine() -> DynamicRiskEngine:
    return DynamicRiskEngine()


def _context(intent: ProjectIntent, license: str | None = None, linking=LinkingModel.STATIC):
    return ProjectContext(
        intent=intent,
        distribution_model=DistributionModel.PROPRIETARY,
        linking_model=linking,
        project_license=license,
    )


# =============================================================================
# Proprietary Intent Tests
# =============================================================================


class TestProprietaryIntent:
    """Tests for projects that ship proprietary code."""

    def test_gpl_is_critical(self, engine, proprietary_context):
        """Test strong copyleft is critical."""
        severity = engine.calculate_severity("MIT", "GPL-3.0", proprietary_context)

        assert severity.level == RiskLevel.CRITICAL
        assert "copyleft" in severity.reason.lower()
        assert "proprietary intent" in severity.contextual_explanation

    def test_agpl_is_network_risk(self, engine, proprietary_context):
        """Test network copyleft is named as such."""
        severity = engine.calculate_severity("MIT", "AGPL-3.0", proprietary_context)

        assert severity.level == RiskLevel.CRITICAL
        assert severity.reason == "network copyleft risk"

    def test_mpl_is_medium(self, engine, proprietary_context):
        """Test file-scoped copyleft is medium."""
        severity = engine.calculate_severity("MIT", "MPL-2.0", proprietary_context)

        assert severity.level == RiskLevel.MEDIUM
        assert "modifications" in severity.obligation

    def test_cddl_is_file_scoped(self, engine, proprietary_context):
        """Test CDDL is graded like MPL."""
        assert engine.calculate_severity("MIT", "CDDL-1.0", proprietary_context).level == RiskLevel.MEDIUM

    def test_lgpl_static_is_high(self, engine, proprietary_context):
        """Test weak copyleft with static linking is high."""
        severity = engine.calculate_severity("MIT", "LGPL-2.1", proprietary_context)

        assert severity.level == RiskLevel.HIGH
        assert "source code" in severity.obligation

    @pytest.mark.parametrize("linking", [LinkingModel.DYNAMIC, LinkingModel.RUNTIME, LinkingModel.MICROSERVICE])
    def test_lgpl_non_static_is_medium(self, engine, linking):
        """Test weak copyleft without static linking is medium."""
        context = _context(ProjectIntent.PROPRIETARY, "MIT", linking)
        assert engine.calculate_severity("MIT", "LGPL-2.1", context).level == RiskLevel.MEDIUM

    def test_epl_static_is_high(self, engine, proprietary_context):
        """Test EPL is weak copyleft without file scoping."""
        assert engine.calculate_severity("MIT", "EPL-2.0", proprietary_context).level == RiskLevel.HIGH

    def test_permissive_is_safe(self, engine, proprietary_context):
        """Test permissive licenses are safe."""
        assert engine.calculate_severity("MIT", "Apache-2.0", proprietary_context).level == RiskLevel.SAFE

    def test_unknown_is_medium(self, engine, proprietary_context):
        """Test unrecognized licenses need review."""
        severity = engine.calculate_severity("MIT", "Acme-EULA", proprietary_context)
        assert severity.level == RiskLevel.MEDIUM
        assert "manual review" in severity.reason

    def test_gpl_suffix_variant(self, engine, proprietary_context):
        """Test suffixed GPL ids are strong copyleft."""
        assert engine.calculate_severity("MIT", "GPL-2.0-or-later", proprietary_context).level == RiskLevel.CRITICAL


# =============================================================================
# Open-Source Intent Tests
# =============================================================================


class TestOpenSourceIntent:
    """Tests for open-source projects."""

    def test_no_project_license(self, engine):
        """Test an undeclared project license is low risk."""
        context = _context(ProjectIntent.OPEN_SOURCE)
        severity = engine.calculate_severity(None, "GPL-3.0", context)

        assert severity.level == RiskLevel.LOW
        assert "LICENSE" in severity.intent_impact

    def test_project_license_from_context(self, engine, open_source_context):
        """Test the project license falls back to the context's."""
        severity = engine.calculate_severity(None, "GPL-3.0", open_source_context)
        assert severity.level == RiskLevel.SAFE

    def test_same_license(self, engine, open_source_context):
        """Test identical licenses are safe."""
        severity = engine.calculate_severity("GPL-3.0", "GPL-3.0-only", open_source_context)

        assert severity.level == RiskLevel.SAFE
        assert "same license" in severity.reason

    def test_apache_in_gpl_project(self, engine, open_source_context):
        """Test the GPL / Apache-2.0 patent clause conflict."""
        severity = engine.calculate_severity("GPL-3.0", "Apache-2.0", open_source_context)

        assert severity.level == RiskLevel.HIGH
        assert "incompatible" in severity.reason

    def test_permissive_in_gpl_project(self, engine, open_source_context):
        """Test permissive licenses are safe in GPL projects."""
        assert engine.calculate_severity("GPL-3.0", "MIT", open_source_context).level == RiskLevel.SAFE

    @pytest.mark.parametrize(
        "project,dependency",
        [
            ("GPL-3.0", "AGPL-3.0"),
            ("GPL-3.0", "LGPL-3.0"),
            ("GPL-2.0", "LGPL-2.1"),
            ("AGPL-3.0", "GPL-3.0"),
            ("AGPL-3.0", "GPL-2.0"),
            ("AGPL-3.0", "LGPL-3.0"),
            ("AGPL-3.0", "LGPL-2.1"),
        ],
    )
    def test_gpl_family_compatible(self, engine, open_source_context, project, dependency):
        """Test GPL family members the project license can absorb."""
        assert engine.calculate_severity(project, dependency, open_source_context).level == RiskLevel.SAFE

    def test_gpl3_in_gpl2_project(self, engine, open_source_context):
        """Test GPL-3.0 cannot be absorbed by a GPL-2.0 project."""
        severity = engine.calculate_severity("GPL-2.0", "GPL-3.0", open_source_context)

        assert severity.level == RiskLevel.HIGH
        assert "copyleft contamination" in severity.reason

    def test_gpl_in_mit_project(self, engine, open_source_context):
        """Test strong copyleft in a permissive open-source project."""
        assert engine.calculate_severity("MIT", "GPL-3.0", open_source_context).level == RiskLevel.HIGH

    def test_apache_in_permissive_project(self, engine, open_source_context):
        """Test Apache-2.0 is safe outside the GPL family."""
        assert engine.calculate_severity("MIT", "Apache-2.0", open_source_context).level == RiskLevel.SAFE

    def test_unclear_pair(self, engine, open_source_context):
        """Test weak copyleft outside the family table needs review."""
        assert engine.calculate_severity("MIT", "MPL-2.0", open_source_context).level == RiskLevel.MEDIUM


# =============================================================================
# Undecided Intent Tests
# =============================================================================


class TestUndecidedIntent:
    """Tests for projects that have not chosen a license."""

    def test_gpl_reduces_flexibility(self, engine, undecided_context):
        """Test strong copyleft is a flexibility concern."""
        severity = engine.calculate_severity(None, "GPL-3.0", undecided_context)

        assert severity.level == RiskLevel.MEDIUM
        assert "future flexibility" in severity.reason
        assert "reduces future flexibility" in severity.contextual_explanation

    def test_weak_copyleft_is_low(self, engine, undecided_context):
        """Test weak copyleft is low."""
        assert engine.calculate_severity(None, "LGPL-2.1", undecided_context).level == RiskLevel.LOW

    def test_permissive_is_safe(self, engine, undecided_context):
        """Test permissive licenses are safe."""
        assert engine.calculate_severity(None, "MIT", undecided_context).level == RiskLevel.SAFE

    def test_unknown_is_low(self, engine, undecided_context):
        """Test unrecognized licenses are low."""
        assert engine.calculate_severity(None, "Acme-EULA", undecided_context).level == RiskLevel.LOW


# =============================================================================
# Totality Tests
# =============================================================================


class TestTotality:
    """Tests for the completeness of the decision table."""

    def test_every_combination_graded(self, engine):
        """Test every intent, license and linking model yields a severity."""
        licenses = [r.id for r in default_catalog.list_licenses()] + ["Acme-EULA", "", "UNKNOWN"]
        for intent in ProjectIntent:
            for linking in LinkingModel:
                context = _context(intent, "MIT", linking)
                for dependency in licenses:
                    severity = engine.calculate_severity("MIT", dependency, context)
                    assert isinstance(severity.level, RiskLevel)
                    assert severity.reason
                    assert severity.obligation

    def test_pure(self, engine, proprietary_context):
        """Test grading is deterministic."""
        first = engine.calculate_severity("MIT", "LGPL-3.0", proprietary_context)
        second = engine.calculate_severity("MIT", "LGPL-3.0", proprietary_context)
        assert first == second

    def test_function_surface(self, proprietary_context):
        """Test the module-level function."""
        assert calculate_severity("MIT", "GPL-3.0", proprietary_context).level == RiskLevel.CRITICAL
