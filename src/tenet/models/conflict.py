"""
Conflict data models for Mantissa Tenet.

This module defines the Conflict record emitted by the conflict
detector and the ScanResult that collects a scan's conflicts, summary
counts and aggregate risk score.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from tenet.models.license import ComplianceObligation, Severity

CONFLICT_MARKER = "← CONFLICT"


class FixType(Enum):
    """Kind of remediation seeded on a conflict."""

    REPLACE = "replace"
    ARCHITECTURAL = "architectural"
    RELICENSE = "relicense"


@dataclass(frozen=True)
class ConflictFix:
    """Candidate fix attached to a conflict by the detector."""

    type: FixType
    description: str
    steps: list[str] = field(default_factory=list)
    automated: bool = False
    alternatives: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "description": self.description,
            "steps": list(self.steps),
            "automated": self.automated,
            "alternatives": list(self.alternatives),
        }


@dataclass(frozen=True)
class TriggeredRule:
    """Traceability metadata for the verdict behind a conflict."""

    id: str
    is_heuristic: bool
    legal_reference: str | None = None
    legal_basis: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "is_heuristic": self.is_heuristic,
            "legal_reference": self.legal_reference,
            "legal_basis": self.legal_basis,
        }


@dataclass(frozen=True)
class ConflictDependency:
    """Summary of the dependency a conflict refers to."""

    name: str
    version: str
    license: str
    path: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "version": self.version,
            "license": self.license,
            "path": list(self.path),
        }


@dataclass(frozen=True)
class ContaminationStep:
    """One hop on the chain from the project root to a conflicting node."""

    name: str
    license: str
    is_conflict: bool = False

    def __str__(self) -> str:
        label = f"{self.name} ({self.license})"
        if self.is_conflict:
            return f"{label} {CONFLICT_MARKER}"
        return label

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "license": self.license,
            "is_conflict": self.is_conflict,
        }


@dataclass(frozen=True)
class Conflict:
    """
    A license conflict on a single dependency node.

    Attributes:
        id: Deterministic conflict identifier
        severity: Static severity from the compatibility verdict
        dependency: The conflicting dependency
        reason: Human readable verdict reason
        contamination_path: Root-to-node chain, last step marked as conflict
        fixes: Candidate fixes seeded by the detector
        triggered_rule: Rule metadata for traceability
        legal_context: Legal background for critical copyleft conflicts
    """

    id: str
    severity: Severity
    dependency: ConflictDependency
    reason: str
    contamination_path: list[ContaminationStep] = field(default_factory=list)
    fixes: list[ConflictFix] = field(default_factory=list)
    triggered_rule: TriggeredRule | None = None
    legal_context: str = ""

    def contamination_labels(self) -> list[str]:
        """Contamination path rendered as text labels."""
        return [str(step) for step in self.contamination_path]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "severity": self.severity.value,
            "dependency": self.dependency.to_dict(),
            "reason": self.reason,
            "legal_context": self.legal_context,
            "contamination_path": self.contamination_labels(),
            "fixes": [fix.to_dict() for fix in self.fixes],
            "triggered_rule": self.triggered_rule.to_dict() if self.triggered_rule else None,
        }


@dataclass(frozen=True)
class ScanSummary:
    """Per-severity conflict counts for a scan."""

    total_dependencies: int = 0
    conflicts: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @classmethod
    def from_severities(
        cls,
        total_dependencies: int,
        severities: Iterable[str],
    ) -> ScanSummary:
        """Count severity values ("critical", "high", ...) into a summary."""
        counts = {"critical": 0, "high": 0, "medium": 0, "low": 0}
        total = 0
        for value in severities:
            total += 1
            if value in counts:
                counts[value] += 1
        return cls(total_dependencies=total_dependencies, conflicts=total, **counts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_dependencies": self.total_dependencies,
            "conflicts": self.conflicts,
            "critical": self.critical,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
        }


@dataclass(frozen=True)
class ScanResult:
    """
    Result of a conflict detection pass.

    The risk score starts at 100 and is reduced by a fixed penalty per
    conflict severity, clamped to [0, 100]. Higher is safer.
    """

    scan_id: str
    timestamp: str
    project_license: str
    risk_score: int
    summary: ScanSummary
    conflicts: list[Conflict] = field(default_factory=list)
    compliance_obligations: list[ComplianceObligation] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    def conflicts_by_severity(self, severity: Severity) -> list[Conflict]:
        """Get conflicts with the given severity."""
        return [c for c in self.conflicts if c.severity == severity]

    def should_fail(self, fail_on: Iterable[Severity | str]) -> bool:
        """
        Check whether any conflict hits one of the failing severities.

        Args:
            fail_on: Severities (enum or string) that should fail a build
        """
        gates = {
            s if isinstance(s, Severity) else Severity.from_string(s)
            for s in fail_on
        }
        return any(c.severity in gates for c in self.conflicts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "scan_id": self.scan_id,
            "timestamp": self.timestamp,
            "project_license": self.project_license,
            "risk_score": self.risk_score,
            "summary": self.summary.to_dict(),
            "conflicts": [c.to_dict() for c in self.conflicts],
            "compliance_obligations": [o.to_dict() for o in self.compliance_obligations],
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)
