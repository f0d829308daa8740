"""
Intent-aware analysis models for Mantissa Tenet.

These records carry the output of the context-aware stages of a scan:
dynamic severities, ranked fix suggestions, resolved conflict paths,
causal risk attribution and risk hotspots.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from tenet.models.conflict import Conflict, ScanResult, ScanSummary
from tenet.models.context import ProjectContext
from tenet.models.license import Severity


class RiskLevel(Enum):
    """Context-aware risk level. SAFE is below every static severity."""

    SAFE = "safe"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Ordering rank, higher is riskier."""
        return _RISK_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RISK_RANK = {
    RiskLevel.SAFE: 0,
    RiskLevel.LOW: 1,
    RiskLevel.MEDIUM: 2,
    RiskLevel.HIGH: 3,
    RiskLevel.CRITICAL: 4,
}


@dataclass(frozen=True)
class DynamicSeverity:
    """
    Severity regraded against the project context.

    Attributes:
        level: Context-aware risk level
        reason: Short reason for the level
        obligation: What the project must do to comply
        contextual_explanation: Explanation in terms of the license pair
        applies_when: Conditions under which the obligation applies
        intent_impact: How the finding relates to the declared intent
    """

    level: RiskLevel
    reason: str
    obligation: str
    contextual_explanation: str
    applies_when: list[str] = field(default_factory=list)
    intent_impact: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "level": self.level.value,
            "reason": self.reason,
            "obligation": self.obligation,
            "contextual_explanation": self.contextual_explanation,
            "applies_when": list(self.applies_when),
            "intent_impact": self.intent_impact,
        }


class FixEffort(Enum):
    """Effort needed to apply a fix."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 1, "medium": 2, "high": 3}[self.value]


class FixStrategy(Enum):
    """Remediation strategy."""

    REPLACE = "replace"
    ISOLATE = "isolate"
    DUAL_LICENSE = "dual-license"
    REMOVE = "remove"
    BOUNDARY_REFACTOR = "boundary-refactor"
    UPGRADE = "upgrade"


@dataclass(frozen=True)
class FixSuggestion:
    """A ranked remediation option for a conflicting dependency."""

    effort: FixEffort
    strategy: FixStrategy
    description: str
    implementation: str
    tradeoffs: list[str] = field(default_factory=list)
    estimated_time: str = ""
    alternatives: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "effort": self.effort.value,
            "strategy": self.strategy.value,
            "description": self.description,
            "implementation": self.implementation,
            "tradeoffs": list(self.tradeoffs),
            "estimated_time": self.estimated_time,
            "alternatives": list(self.alternatives),
        }


@dataclass(frozen=True)
class ConflictPath:
    """
    Resolved root-to-conflict path with explanation and obligations.

    Attributes:
        path: Package names from the root to the conflicting node
        licenses: License of each package on the path
        rule_triggered: Classification of the conflict
        human_explanation: Prose description of the chain
        obligations: Legal obligations carried by the conflicting license
    """

    path: list[str]
    licenses: list[str]
    rule_triggered: str
    human_explanation: str
    obligations: list[str] = field(default_factory=list)

    def render_tree(self, project_name: str | None = None, project_license: str | None = None) -> str:
        """Render the path as an indented ASCII tree."""
        if not self.path:
            return ""
        root_name = project_name or self.path[0]
        root_license = project_license or self.licenses[0]
        lines = [f"{root_name} ({root_license})"]
        last = len(self.path) - 1
        for i in range(1, len(self.path)):
            connector = "└─" if i == last else "├─"
            lines.append(f"{'  ' * i}{connector} {self.path[i]} ({self.licenses[i]})")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "path": list(self.path),
            "licenses": list(self.licenses),
            "rule_triggered": self.rule_triggered,
            "human_explanation": self.human_explanation,
            "obligations": list(self.obligations),
        }


@dataclass(frozen=True)
class CausalImpact:
    """
    How much of the scan's risk penalty removing one package would eliminate.

    Attributes:
        package_name: Package on one or more contamination paths
        risk_contribution: Percentage of the baseline penalty (0-100)
        conflicts_removed: Number of conflicts whose path includes the package
        severity_breakdown: Those conflicts counted per severity
        risk_score_after_removal: Hypothetical risk score without the package
    """

    package_name: str
    risk_contribution: float
    conflicts_removed: int
    severity_breakdown: dict[str, int] = field(default_factory=dict)
    risk_score_after_removal: int = 100

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "package_name": self.package_name,
            "risk_contribution": self.risk_contribution,
            "conflicts_removed": self.conflicts_removed,
            "severity_breakdown": dict(self.severity_breakdown),
            "risk_score_after_removal": self.risk_score_after_removal,
        }


@dataclass(frozen=True)
class EnhancedConflict:
    """A conflict enriched with intent-aware analysis."""

    conflict: Conflict
    dynamic_severity: DynamicSeverity
    fix_suggestions: list[FixSuggestion]
    conflict_path: ConflictPath

    @property
    def id(self) -> str:
        return self.conflict.id

    @property
    def severity(self) -> Severity:
        return self.conflict.severity

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = self.conflict.to_dict()
        data.update({
            "dynamic_severity": self.dynamic_severity.to_dict(),
            "fix_suggestions": [f.to_dict() for f in self.fix_suggestions],
            "conflict_path": self.conflict_path.to_dict(),
        })
        return data


class HotspotFactorType(Enum):
    """Dimension contributing to a package's hotspot score."""

    DEPTH = "depth"
    FAN_OUT = "fan-out"
    LICENSE_RISK = "license-risk"
    TRANSITIVE_IMPACT = "transitive-impact"
    LINKING_MODEL = "linking-model"


@dataclass(frozen=True)
class RiskFactor:
    """One scored reason a package is a risk hotspot."""

    type: HotspotFactorType
    score: int
    description: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "score": self.score,
            "description": self.description,
        }


@dataclass(frozen=True)
class RiskHotspot:
    """
    A package that amplifies license risk across the tree.

    Attributes:
        name: Package name
        version: Package version
        license: Primary license of the package
        score: Sum of the factor scores
        factors: Scored reasons, in evaluation order
        recommendation: Suggested next step for the package
    """

    name: str
    version: str
    license: str
    score: int
    factors: list[RiskFactor] = field(default_factory=list)
    recommendation: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "version": self.version,
            "license": self.license,
            "score": self.score,
            "factors": [f.to_dict() for f in self.factors],
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class HotspotsResult:
    """Ranked risk hotspots of a dependency tree."""

    hotspots: list[RiskHotspot] = field(default_factory=list)
    total_dependencies: int = 0
    high_risk_count: int = 0
    summary: str = "No significant risk hotspots detected."

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hotspots": [h.to_dict() for h in self.hotspots],
            "total_dependencies": self.total_dependencies,
            "high_risk_count": self.high_risk_count,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class IntentScanResult:
    """
    Complete output of an orchestrated scan.

    Attributes:
        base: Conflict detection result (static severities, risk score)
        project_context: Context the conflicts were graded against
        enhanced_conflicts: Conflicts with dynamic severity, fixes and paths
        conflict_paths: Conflict id to resolved path
        dynamic_summary: Conflict counts by dynamic risk level
        dynamic_risk_index: 0-100 index from dynamic levels, higher is riskier
        causal_impacts: Packages ranked by risk contribution
        hotspots: Packages ranked by risk amplification potential
    """

    base: ScanResult
    project_context: ProjectContext
    enhanced_conflicts: list[EnhancedConflict] = field(default_factory=list)
    conflict_paths: dict[str, ConflictPath] = field(default_factory=dict)
    dynamic_summary: ScanSummary = field(default_factory=ScanSummary)
    dynamic_risk_index: int = 0
    causal_impacts: list[CausalImpact] = field(default_factory=list)
    hotspots: HotspotsResult = field(default_factory=HotspotsResult)

    @property
    def scan_id(self) -> str:
        return self.base.scan_id

    @property
    def timestamp(self) -> str:
        return self.base.timestamp

    @property
    def risk_score(self) -> int:
        return self.base.risk_score

    @property
    def summary(self) -> ScanSummary:
        return self.base.summary

    @property
    def conflicts(self) -> list[Conflict]:
        return self.base.conflicts

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = self.base.to_dict()
        data.update({
            "project_context": self.project_context.to_dict(),
            "conflicts": [c.to_dict() for c in self.enhanced_conflicts],
            "conflict_paths": {cid: p.to_dict() for cid, p in self.conflict_paths.items()},
            "dynamic_summary": self.dynamic_summary.to_dict(),
            "dynamic_risk_index": self.dynamic_risk_index,
            "causal_impacts": [i.to_dict() for i in self.causal_impacts],
            "hotspots": self.hotspots.to_dict(),
        })
        return data

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)
