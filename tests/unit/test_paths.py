"""
Unit tests for Mantissa Tenet conflict path resolution.
"""

from __future__ import annotations

import logging

import pytest

from tenet.engine import ConflictDetector, PathResolver
from tenet.engine.paths import (
    COPYLEFT_CONTAMINATION,
    LICENSE_MISMATCH,
    NETWORK_COPYLEFT,
    WEAK_COPYLEFT_STATIC_LINK,
)
from tenet.models import DependencyNode


@pytest.fixture
def resolver() -> PathResolver:
    return PathResolver()


class TestBuildConflictPath:
    """Tests for PathResolver.build_conflict_path."""

    def test_transitive_path(self, resolver, nested_tree):
        """Test the path through an intermediate dependency."""
        path = resolver.build_conflict_path(nested_tree, "gpl-util", "MIT", "GPL-3.0")

        assert path.path == ["app", "web-framework", "gpl-util"]
        assert path.licenses == ["MIT", "MIT", "GPL-3.0"]
        assert path.rule_triggered == COPYLEFT_CONTAMINATION

    def test_explanation(self, resolver, nested_tree):
        """Test the prose explanation excludes the root."""
        path = resolver.build_conflict_path(nested_tree, "gpl-util", "MIT", "GPL-3.0")

        assert path.human_explanation == (
            "Your project uses MIT, but depends on GPL-3.0 through: "
            "web-framework (MIT) → gpl-util (GPL-3.0). "
            "The GPL-3.0 license requires derivative works to also be GPL-3.0, "
            "which conflicts with MIT."
        )

    def test_node_target(self, resolver, simple_tree):
        """Test the target may be given as a node."""
        node = simple_tree.find("readline")
        path = resolver.build_conflict_path(simple_tree, node, "MIT")

        assert path.path == ["app", "readline"]
        assert path.licenses == ["MIT", "GPL-3.0"]

    def test_first_licenses_entry_is_project_license(self, resolver, simple_tree):
        """Test the root entry carries the project license, not the root node's."""
        path = resolver.build_conflict_path(simple_tree, "readline", "Apache-2.0", "GPL-3.0")
        assert path.licenses[0] == "Apache-2.0"

    def test_missing_target_falls_back(self, resolver, simple_tree, caplog):
        """Test an unknown target yields the direct one-hop path."""
        with caplog.at_level(logging.WARNING, logger="tenet"):
            path = resolver.build_conflict_path(simple_tree, "ghost", "MIT")

        assert path.path == ["app", "ghost"]
        assert path.licenses == ["MIT", "UNKNOWN"]
        assert "ghost" in caplog.text

    def test_cycle_terminates(self, resolver, cyclic_tree):
        """Test a cyclic tree does not recurse forever."""
        path = resolver.build_conflict_path(cyclic_tree, "ghost", "MIT")
        assert path.path == ["app", "ghost"]

    def test_target_named_like_root(self, resolver):
        """Test a dependency sharing the root's name is found below the root."""
        root = DependencyNode.from_dict({
            "name": "app",
            "license": "MIT",
            "children": [{"name": "lib", "license": "MIT", "children": [{"name": "app", "license": "GPL-3.0"}]}],
        })
        path = resolver.build_conflict_path(root, "app", "MIT", "GPL-3.0")
        assert path.path == ["app", "lib", "app"]

    def test_for_conflict(self, resolver, nested_tree, mit_config):
        """Test resolving the path of a detector conflict."""
        conflict = ConflictDetector(mit_config).scan(nested_tree).conflicts[0]
        path = resolver.for_conflict(nested_tree, conflict, "MIT")

        assert path.path == conflict.dependency.path
        assert path.licenses[-1] == conflict.dependency.license


class TestIdentifyRule:
    """Tests for conflict classification."""

    @pytest.mark.parametrize(
        "project,dependency,expected",
        [
            ("MIT", "GPL-3.0", COPYLEFT_CONTAMINATION),
            ("MIT", "LGPL-2.1", COPYLEFT_CONTAMINATION),
            ("GPL-3.0", "AGPL-3.0", NETWORK_COPYLEFT),
            ("Apache-2.0", "SSPL-1.0", NETWORK_COPYLEFT),
            ("GPL-3.0", "LGPL-2.1", WEAK_COPYLEFT_STATIC_LINK),
            ("MIT", "MPL-2.0", LICENSE_MISMATCH),
        ],
    )
    def test_identify_rule(self, resolver, project, dependency, expected):
        """Test classification by license pair."""
        assert resolver.identify_rule(project, dependency) == expected


class TestObligations:
    """Tests for obligation extraction."""

    def test_gpl(self, resolver):
        """Test GPL obligations."""
        assert resolver.extract_obligations("GPL-3.0") == [
            "Source code disclosure required",
            "Derivative works must use same license",
            "License and copyright notices must be preserved",
        ]

    def test_agpl_adds_network(self, resolver):
        """Test AGPL adds the network interaction obligation."""
        obligations = resolver.extract_obligations("AGPL-3.0")
        assert len(obligations) == 4
        assert "network" in obligations[-1]

    def test_lgpl(self, resolver):
        """Test LGPL obligations."""
        assert resolver.extract_obligations("LGPL-2.1") == [
            "Allow relinking with modified library versions",
            "Disclose modifications to the library itself",
        ]

    def test_file_scoped(self, resolver):
        """Test file-scoped copyleft obligations."""
        assert resolver.extract_obligations("MPL-2.0") == ["Disclose source of modified files only"]

    def test_permissive(self, resolver):
        """Test permissive licenses carry no conflict obligations."""
        assert resolver.extract_obligations("MIT") == []
