"""
Integration tests for Mantissa Tenet scans.

These tests drive the public API end to end: configuration loading,
conflict detection, intent-aware grading, fixes and causal impact.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from tenet import (
    DependencyNode,
    DistributionModel,
    FixSuggestion,
    LinkingModel,
    ProjectIntent,
    RiskLevel,
    ScanConfiguration,
    ScanOrchestrator,
    Severity,
    analyze_impact,
    detect_conflicts,
    generate_fixes,
    run_scan,
)
from tenet.models import FixEffort, FixStrategy


@pytest.fixture
def monorepo_tree() -> DependencyNode:
    """A realistic tree mixing permissive, weak and strong copyleft packages."""
    return DependencyNode.from_dict({
        "name": "storefront",
        "version": "3.2.0",
        "license": "MIT",
        "children": [
            {
                "name": "web-framework",
                "version": "5.0.1",
                "license": "MIT",
                "children": [
                    {"name": "template-engine", "version": "2.0.0", "license": "BSD-3-Clause"},
                    {
                        "name": "markdown-renderer",
                        "version": "1.4.0",
                        "license": "Apache-2.0",
                        "children": [
                            {"name": "gpl-highlighter", "version": "0.9.0", "license": "GPL-3.0"},
                        ],
                    },
                ],
            },
            {"name": "image-codec", "version": "1.1.0", "license": "LGPL-2.1"},
            {"name": "json-schema", "version": "4.0.0", "license": "(MIT OR GPL-2.0)"},
            {"name": "analytics-agent", "version": "7.3.0", "license": "AGPL-3.0"},
            {"name": "lint-rules", "version": "1.0.0", "license": "GPL-3.0", "dev": True},
        ],
    })


def _config(distribution: DistributionModel, **project) -> ScanConfiguration:
    return ScanConfiguration.from_dict({
        "project": {
            "license": project.get("license", "MIT"),
            "intent": project.get("intent", "proprietary"),
            "distribution_model": distribution.value,
            "linking_model": project.get("linking", "static"),
        },
    })


def _stable_view(result) -> dict:
    data = result.to_dict()
    data.pop("scan_id")
    data.pop("timestamp")
    return data


# =============================================================================
# Reference Scenarios
# =============================================================================


class TestReferenceScenarios:
    """Reference scenarios for the compatibility engine."""

    def test_gpl_in_proprietary_static(self):
        """Test GPL-3.0 statically linked into a proprietary MIT project."""
        tree = DependencyNode.from_dict({
            "name": "app",
            "license": "MIT",
            "children": [{"name": "readline", "license": "GPL-3.0"}],
        })
        result = detect_conflicts(tree, _config(DistributionModel.PROPRIETARY))

        assert len(result.conflicts) == 1
        assert result.conflicts[0].severity == Severity.CRITICAL
        assert result.risk_score == 70

    def test_gpl_in_saas(self):
        """Test GPL-3.0 has no SaaS disclosure trigger."""
        tree = DependencyNode.from_dict({
            "name": "app",
            "license": "MIT",
            "children": [{"name": "readline", "license": "GPL-3.0"}],
        })
        result = detect_conflicts(tree, _config(DistributionModel.SAAS))

        assert result.conflicts == []
        assert result.risk_score == 100

    @pytest.mark.parametrize("project_license", ["MIT", "Apache-2.0", "ISC", "GPL-3.0", "Acme-Internal"])
    def test_agpl_in_saas(self, project_license):
        """Test AGPL-3.0 under SaaS distribution is critical for any project license."""
        tree = DependencyNode.from_dict({
            "name": "app",
            "license": project_license,
            "children": [{"name": "analytics-agent", "license": "AGPL-3.0"}],
        })
        result = detect_conflicts(tree, _config(DistributionModel.SAAS, license=project_license))

        assert len(result.conflicts) == 1
        assert result.conflicts[0].severity == Severity.CRITICAL

    def test_gpl2_upgrade_fix(self):
        """Test GPL-2.0 dependencies get a low-effort upgrade suggestion."""
        fixes = generate_fixes("old-lib", "GPL-2.0", "MIT")
        upgrade = [f for f in fixes if f.strategy == FixStrategy.UPGRADE]

        assert len(upgrade) == 1
        assert upgrade[0].effort == FixEffort.LOW
        low = [f for f in fixes if f.effort == FixEffort.LOW]
        assert fixes[: len(low)] == low
        assert all(isinstance(f, FixSuggestion) for f in fixes)

    def test_impact_without_penalty(self):
        """Test no risk penalty means no causal impacts."""
        tree = DependencyNode.from_dict({
            "name": "app",
            "license": "MIT",
            "children": [{"name": "readline", "license": "GPL-3.0"}],
        })
        conflicts = detect_conflicts(tree, _config(DistributionModel.PROPRIETARY)).conflicts

        assert analyze_impact([], 100) == []
        assert analyze_impact(conflicts, 100) == []


# =============================================================================
# End-to-End Scans
# =============================================================================


class TestEndToEnd:
    """End-to-end scans of a realistic tree."""

    def test_proprietary_product(self, monorepo_tree):
        """Test a statically linked proprietary product."""
        result = run_scan(monorepo_tree, _config(DistributionModel.PROPRIETARY))
        by_name = {c.dependency.name: c for c in result.conflicts}

        assert set(by_name) == {"gpl-highlighter", "image-codec", "analytics-agent"}
        assert by_name["gpl-highlighter"].severity == Severity.CRITICAL
        assert by_name["image-codec"].severity == Severity.HIGH
        assert by_name["analytics-agent"].severity == Severity.CRITICAL
        assert result.risk_score == 100 - 30 - 15 - 30
        assert result.summary.total_dependencies == 8

    def test_contamination_path_through_permissive_packages(self, monorepo_tree):
        """Test a deep conflict is traced through its permissive parents."""
        result = run_scan(monorepo_tree, _config(DistributionModel.PROPRIETARY))
        conflict = next(c for c in result.conflicts if c.dependency.name == "gpl-highlighter")
        path = result.conflict_paths[conflict.id]

        assert conflict.contamination_labels() == [
            "storefront (MIT)",
            "web-framework (MIT)",
            "markdown-renderer (Apache-2.0)",
            "gpl-highlighter (GPL-3.0) ← CONFLICT",
        ]
        assert path.path == ["storefront", "web-framework", "markdown-renderer", "gpl-highlighter"]
        assert path.rule_triggered == "copyleft-contamination"

    def test_causal_ranking(self, monorepo_tree):
        """Test packages on the deep path share the conflict's weight."""
        result = run_scan(monorepo_tree, _config(DistributionModel.PROPRIETARY))
        impacts = {i.package_name: i for i in result.causal_impacts}

        assert impacts["web-framework"].risk_contribution == impacts["gpl-highlighter"].risk_contribution
        assert impacts["image-codec"].conflicts_removed == 1
        contributions = [i.risk_contribution for i in result.causal_impacts]
        assert contributions == sorted(contributions, reverse=True)

    def test_hotspot_ranking(self, monorepo_tree):
        """Test the conflicting packages lead the hotspot ranking."""
        result = run_scan(monorepo_tree, _config(DistributionModel.PROPRIETARY))
        top = [(h.name, h.score) for h in result.hotspots.hotspots[:3]]

        assert top == [
            ("gpl-highlighter", 12 + 25 + 15 + 20),
            ("analytics-agent", 30 + 15 + 20),
            ("image-codec", 12 + 15 + 20),
        ]

    def test_replacement_packages(self, monorepo_tree):
        """Test replace suggestions name curated alternatives."""
        result = run_scan(monorepo_tree, _config(DistributionModel.PROPRIETARY))
        fixes = {
            e.conflict.dependency.name: e.fix_suggestions[0]
            for e in result.enhanced_conflicts
        }

        assert fixes["analytics-agent"].alternatives == ["express", "fastify", "fiber"]
        assert fixes["image-codec"].alternatives == ["lodash", "underscore"]

    def test_saas_product(self, monorepo_tree):
        """Test the same tree shipped as SaaS."""
        result = run_scan(monorepo_tree, _config(DistributionModel.SAAS))
        names = {c.dependency.name for c in result.conflicts}

        assert "analytics-agent" in names
        assert "gpl-highlighter" not in names

    def test_open_source_gpl_project(self, monorepo_tree):
        """Test an open-source GPL project regrades copyleft dependencies."""
        config = _config(DistributionModel.OPEN_SOURCE, license="GPL-3.0", intent="open-source")
        result = run_scan(monorepo_tree, config)

        levels = {e.conflict.dependency.name: e.dynamic_severity.level for e in result.enhanced_conflicts}
        assert levels == {
            "image-codec": RiskLevel.MEDIUM,
            "analytics-agent": RiskLevel.SAFE,
        }

    def test_dynamic_linking(self, monorepo_tree):
        """Test dynamic linking clears the LGPL dependency."""
        result = run_scan(monorepo_tree, _config(DistributionModel.PROPRIETARY, linking="dynamic"))
        assert "image-codec" not in {c.dependency.name for c in result.conflicts}

    def test_strict_mode_only_tightens(self, monorepo_tree):
        """Test strict mode never removes conflicts."""
        lenient = _config(DistributionModel.PROPRIETARY, license="Zlib")
        strict = _config(DistributionModel.PROPRIETARY, license="Zlib")
        strict.policy.strict_mode = True

        lenient_names = {c.dependency.name for c in detect_conflicts(monorepo_tree, lenient).conflicts}
        strict_names = {c.dependency.name for c in detect_conflicts(monorepo_tree, strict).conflicts}
        assert lenient_names <= strict_names

    def test_config_file(self, monorepo_tree, tmp_path):
        """Test a scan driven by a YAML configuration file."""
        path = tmp_path / "tenet.yaml"
        path.write_text(
            "project:\n"
            "  license: MIT\n"
            "  intent: proprietary\n"
            "  distribution_model: proprietary\n"
            "  linking_model: static\n"
            "policy:\n"
            "  ignored_packages: ['analytics-*']\n"
            "  fail_on: [critical]\n"
            "deterministic: true\n"
        )
        config = ScanConfiguration.from_file(str(path))
        result = run_scan(monorepo_tree, config)

        assert "analytics-agent" not in {c.dependency.name for c in result.conflicts}
        assert result.base.should_fail(config.policy.fail_on_severities())
        assert result.scan_id == "deterministic-scan-id"


# =============================================================================
# Scan Properties
# =============================================================================


class TestScanProperties:
    """Idempotence and isolation of scans."""

    def test_idempotent(self, monorepo_tree):
        """Test repeated scans agree apart from identifiers."""
        config = _config(DistributionModel.PROPRIETARY)
        assert _stable_view(run_scan(monorepo_tree, config)) == _stable_view(run_scan(monorepo_tree, config))

    def test_tree_not_mutated(self, monorepo_tree):
        """Test scanning leaves the input tree unchanged."""
        before = monorepo_tree.to_dict()
        run_scan(monorepo_tree, _config(DistributionModel.PROPRIETARY))
        assert monorepo_tree.to_dict() == before

    def test_concurrent_scans(self, monorepo_tree):
        """Test independent scans on one orchestrator do not interfere."""
        orchestrator = ScanOrchestrator(_config(DistributionModel.PROPRIETARY))
        expected = _stable_view(orchestrator.scan(monorepo_tree))

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: orchestrator.scan(monorepo_tree), range(8)))

        assert all(_stable_view(r) == expected for r in results)

    def test_context_is_recorded(self, monorepo_tree):
        """Test the result records the context it was graded against."""
        result = run_scan(monorepo_tree, _config(DistributionModel.SAAS))

        assert result.project_context.intent == ProjectIntent.PROPRIETARY
        assert result.project_context.distribution_model == DistributionModel.SAAS
        assert result.project_context.linking_model == LinkingModel.STATIC
