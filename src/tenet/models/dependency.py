"""
Dependency tree model for Mantissa Tenet.

The tree is materialized by external lockfile/manifest parsers and
handed to the engine fully built. Parents own their children; there are
no back-pointers, so paths are accumulated explicitly during traversal.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterator

UNKNOWN_LICENSE = "UNKNOWN"

_OR_SPLIT = re.compile(r"\s+OR\s+", flags=re.IGNORECASE)


def split_license_expression(expression: str | None) -> list[str]:
    """
    Split an SPDX "OR" expression into its alternatives.

    "(MIT OR Apache-2.0)" yields ["MIT", "Apache-2.0"]. Empty input
    yields ["UNKNOWN"].
    """
    if not expression or not expression.strip():
        return [UNKNOWN_LICENSE]
    parts = [p.strip().strip("()").strip() for p in _OR_SPLIT.split(expression.strip())]
    return [p for p in parts if p] or [UNKNOWN_LICENSE]


@dataclass
class DependencyNode:
    """
    A package in the dependency tree.

    Attributes:
        name: Package name
        version: Resolved version
        license: A single license id, an SPDX "A OR B" expression, or an
            explicit list of alternatives (the licensee may pick any one)
        depth: Distance from the project root (root is 0)
        path: Package names from the root to this node, inclusive
        children: Direct dependencies, in declaration order
        dev: Development-only dependency (not shipped to end users)
        resolved: Opaque resolution info from the parser (URL, integrity)
    """

    name: str
    version: str = ""
    license: str | list[str] = UNKNOWN_LICENSE
    depth: int = 0
    path: list[str] = field(default_factory=list)
    children: list[DependencyNode] = field(default_factory=list)
    dev: bool = False
    resolved: str | None = None

    def license_options(self) -> list[str]:
        """Get the alternative-set of licenses for this node."""
        if isinstance(self.license, (list, tuple)):
            options = [str(lic).strip() for lic in self.license if lic and str(lic).strip()]
            return options or [UNKNOWN_LICENSE]
        return split_license_expression(self.license)

    @property
    def primary_license(self) -> str:
        """First license alternative, used for display."""
        return self.license_options()[0]

    @property
    def is_dual_licensed(self) -> bool:
        return len(self.license_options()) > 1

    def walk(self) -> Iterator[tuple[DependencyNode, tuple[DependencyNode, ...]]]:
        """
        Depth-first pre-order traversal.

        Yields (node, lineage) pairs where lineage holds the ancestors from
        the root down to the node's parent. A node object reachable twice
        (a malformed cycle or shared subtree) is only visited once.
        """
        seen: set[int] = set()
        stack: list[tuple[DependencyNode, tuple[DependencyNode, ...]]] = [(self, ())]

        while stack:
            node, lineage = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            yield node, lineage

            child_lineage = lineage + (node,)
            for child in reversed(node.children):
                stack.append((child, child_lineage))

    def find(self, name: str) -> DependencyNode | None:
        """Find the first node with the given name in pre-order."""
        for node, _ in self.walk():
            if node.name == name:
                return node
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "version": self.version,
            "license": list(self.license) if isinstance(self.license, (list, tuple)) else self.license,
            "depth": self.depth,
            "path": list(self.path),
            "dev": self.dev,
            "resolved": self.resolved,
            "children": [child.to_dict() for child in self.children],
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        depth: int = 0,
        parent_path: list[str] | None = None,
    ) -> DependencyNode:
        """
        Create a tree from its dictionary form.

        Missing depth and path fields are derived from the position in
        the tree.
        """
        name = data["name"]
        path = data.get("path") or [*(parent_path or []), name]
        node_depth = data.get("depth", depth)
        return cls(
            name=name,
            version=data.get("version", ""),
            license=data.get("license") or UNKNOWN_LICENSE,
            depth=node_depth,
            path=list(path),
            children=[
                cls.from_dict(child, depth=node_depth + 1, parent_path=list(path))
                for child in data.get("children", [])
            ],
            dev=data.get("dev", False),
            resolved=data.get("resolved"),
        )
