"""
Conflict path resolution for Mantissa Tenet.

Reconstructs the chain of packages from the project root to a
conflicting dependency, classifies the conflict, and explains it in
prose along with the obligations the conflicting license carries.
"""

from __future__ import annotations

import logging

from tenet.licenses.catalog import LicenseCatalog, default_catalog
from tenet.models.conflict import Conflict
from tenet.models.dependency import DependencyNode
from tenet.models.intelligence import ConflictPath

logger = logging.getLogger(__name__)

COPYLEFT_CONTAMINATION = "copyleft-contamination"
NETWORK_COPYLEFT = "network-copyleft"
WEAK_COPYLEFT_STATIC_LINK = "weak-copyleft-static-link"
LICENSE_MISMATCH = "license-mismatch"

_GPL_OBLIGATIONS = [
    "Source code disclosure required",
    "Derivative works must use same license",
    "License and copyright notices must be preserved",
]
_NETWORK_OBLIGATION = "Source code must be offered to users interacting over a network"
_LGPL_OBLIGATIONS = [
    "Allow relinking with modified library versions",
    "Disclose modifications to the library itself",
]
_FILE_SCOPED_OBLIGATION = "Disclose source of modified files only"


class PathResolver:
    """Resolves and explains root-to-conflict dependency paths."""

    def __init__(self, catalog: LicenseCatalog | None = None):
        self._catalog = catalog or default_catalog

    def build_conflict_path(
        self,
        root: DependencyNode,
        conflict_node: DependencyNode | str,
        project_license: str,
        conflict_license: str | None = None,
    ) -> ConflictPath:
        """
        Build the conflict path from the root to a conflicting node.

        The target is located by name. When it cannot be found the
        direct one-hop path [root, target] is returned.

        Args:
            root: Project root node
            conflict_node: Conflicting node or its package name
            project_license: License of the project
            conflict_license: License that caused the conflict. Defaults
                to the node's primary license.

        Returns:
            ConflictPath for the conflict
        """
        if isinstance(conflict_node, DependencyNode):
            target_name = conflict_node.name
            target_license = conflict_license or conflict_node.primary_license
        else:
            target_name = conflict_node
            target_license = conflict_license or "UNKNOWN"

        nodes = self._find_path(root, target_name)
        if nodes is None:
            logger.warning(
                f"Could not locate {target_name} under {root.name}, using direct path"
            )
            names = [root.name, target_name]
            licenses = [project_license, target_license]
        else:
            names = [n.name for n in nodes]
            licenses = [project_license] + [n.primary_license for n in nodes[1:]]
            licenses[-1] = target_license

        return ConflictPath(
            path=names,
            licenses=licenses,
            rule_triggered=self.identify_rule(project_license, target_license),
            human_explanation=self.explain(names, licenses, project_license, target_license),
            obligations=self.extract_obligations(target_license),
        )

    def for_conflict(
        self,
        root: DependencyNode,
        conflict: Conflict,
        project_license: str,
    ) -> ConflictPath:
        """Build the path for a detector conflict from its dependency summary."""
        return self.build_conflict_path(
            root,
            conflict.dependency.name,
            project_license,
            conflict_license=conflict.dependency.license,
        )

    def _find_path(self, root: DependencyNode, target_name: str) -> list[DependencyNode] | None:
        """Depth-first search with a visited-name guard against cycles."""
        visited: set[str] = set()

        def search(node: DependencyNode) -> list[DependencyNode] | None:
            if node.name == target_name:
                return [node]
            if node.name in visited:
                return None
            visited.add(node.name)
            for child in node.children:
                found = search(child)
                if found is not None:
                    return [node, *found]
            return None

        if root.name == target_name:
            # Only a dependency can conflict, never the root itself
            visited.add(root.name)
            for child in root.children:
                found = search(child)
                if found is not None:
                    return [root, *found]
            return None
        return search(root)

    def identify_rule(self, project_license: str, dependency_license: str) -> str:
        """Classify the kind of conflict from the license pair."""
        dep = dependency_license.upper()
        project = (project_license or "").upper()
        if "GPL" in dep and "GPL" not in project:
            return COPYLEFT_CONTAMINATION
        if "AGPL" in dep or self._catalog.is_network_copyleft(dependency_license):
            return NETWORK_COPYLEFT
        if "LGPL" in dep:
            return WEAK_COPYLEFT_STATIC_LINK
        return LICENSE_MISMATCH

    def explain(
        self,
        names: list[str],
        licenses: list[str],
        project_license: str,
        dependency_license: str,
    ) -> str:
        """Build the prose explanation of a conflict chain."""
        chain = " → ".join(f"{name} ({lic})" for name, lic in zip(names[1:], licenses[1:]))
        return (
            f"Your project uses {project_license}, but depends on {dependency_license} "
            f"through: {chain}. The {dependency_license} license requires derivative works "
            f"to also be {dependency_license}, which conflicts with {project_license}."
        )

    def extract_obligations(self, license_id: str) -> list[str]:
        """Obligations carried by the conflicting license."""
        upper = license_id.upper()
        if "LGPL" in upper:
            return list(_LGPL_OBLIGATIONS)
        if "GPL" in upper or self._catalog.is_strong_copyleft(license_id):
            obligations = list(_GPL_OBLIGATIONS)
            if "AGPL" in upper or self._catalog.is_network_copyleft(license_id):
                obligations.append(_NETWORK_OBLIGATION)
            return obligations
        if self._catalog.is_file_scoped(license_id):
            return [_FILE_SCOPED_OBLIGATION]
        return []
