"""
License data models for Mantissa Tenet.

This module defines license categories, static conflict severities,
license catalog records, and the compatibility rule/result records used
by the compatibility matrix.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from tenet.models.context import DistributionModel, LinkingModel

WILDCARD = "*"


class LicenseCategory(Enum):
    """License category classification."""

    PERMISSIVE = "permissive"  # MIT, BSD, Apache, public domain
    WEAK_COPYLEFT = "weak-copyleft"  # LGPL, MPL, EPL
    STRONG_COPYLEFT = "strong-copyleft"  # GPL, AGPL
    PROPRIETARY = "proprietary"
    UNKNOWN = "unknown"

    @classmethod
    def from_string(cls, value: str) -> LicenseCategory:
        """
        Create LicenseCategory from string value.

        Underscores are accepted in place of hyphens.

        Raises:
            ValueError: If value is not a valid category
        """
        value_norm = value.lower().strip().replace("_", "-")
        for category in cls:
            if category.value == value_norm:
                return category
        raise ValueError(f"Invalid license category: {value}")


class Severity(Enum):
    """Static severity of a compatibility verdict or conflict."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Ordering rank, higher is more severe."""
        return _SEVERITY_RANK[self]

    @property
    def penalty(self) -> int:
        """Risk score penalty charged per conflict of this severity."""
        return _SEVERITY_PENALTY[self]

    @classmethod
    def from_string(cls, value: str) -> Severity:
        """
        Create Severity from string value.

        Args:
            value: String representation (case-insensitive)

        Returns:
            Matching Severity enum value

        Raises:
            ValueError: If value is not a valid severity
        """
        value_lower = value.lower()
        for severity in cls:
            if severity.value == value_lower:
                return severity
        raise ValueError(f"Invalid severity: {value}")


_SEVERITY_RANK = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}

_SEVERITY_PENALTY = {
    Severity.CRITICAL: 30,
    Severity.HIGH: 15,
    Severity.MEDIUM: 5,
    Severity.LOW: 2,
}


@dataclass(frozen=True)
class LicenseRecord:
    """
    Catalog entry for a single license.

    Attributes:
        id: Canonical SPDX identifier
        name: Full license name
        category: License category
        obligations: What a licensee must do (attribution, disclose-source, ...)
        permissions: What a licensee may do (commercial-use, modification, ...)
        limitations: What the license disclaims (liability, warranty, ...)
        osi_approved: Whether the license is OSI approved
        network_clause: Copyleft triggered by network interaction (AGPL, SSPL)
        file_scoped: Copyleft applies per file rather than per work (MPL)
    """

    id: str
    name: str
    category: LicenseCategory
    obligations: tuple[str, ...] = ()
    permissions: tuple[str, ...] = ()
    limitations: tuple[str, ...] = ()
    osi_approved: bool = False
    network_clause: bool = False
    file_scoped: bool = False

    @property
    def is_copyleft(self) -> bool:
        return self.category in (
            LicenseCategory.WEAK_COPYLEFT,
            LicenseCategory.STRONG_COPYLEFT,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "obligations": list(self.obligations),
            "permissions": list(self.permissions),
            "limitations": list(self.limitations),
            "osi_approved": self.osi_approved,
            "network_clause": self.network_clause,
            "file_scoped": self.file_scoped,
        }


@dataclass(frozen=True)
class CompatibilityRule:
    """
    Explicit compatibility verdict for a license pair in a given context.

    Either license field may be the wildcard "*".
    """

    project_license: str
    dependency_license: str
    linking_model: LinkingModel
    distribution_model: DistributionModel
    compatible: bool
    severity: Severity
    reason: str
    rule_id: str = ""
    legal_reference: str | None = None
    legal_basis: str | None = None

    @property
    def is_wildcard(self) -> bool:
        return WILDCARD in (self.project_license, self.dependency_license)

    def matches(
        self,
        project_license: str,
        dependency_license: str,
        linking_model: LinkingModel,
        distribution_model: DistributionModel,
        allow_wildcard: bool = False,
    ) -> bool:
        """Check whether this rule applies to the given 4-tuple."""
        if self.linking_model != linking_model:
            return False
        if self.distribution_model != distribution_model:
            return False
        if allow_wildcard:
            project_ok = self.project_license in (project_license, WILDCARD)
            dependency_ok = self.dependency_license in (dependency_license, WILDCARD)
            return project_ok and dependency_ok
        return (
            self.project_license == project_license
            and self.dependency_license == dependency_license
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "rule_id": self.rule_id,
            "project_license": self.project_license,
            "dependency_license": self.dependency_license,
            "linking_model": self.linking_model.value,
            "distribution_model": self.distribution_model.value,
            "compatible": self.compatible,
            "severity": self.severity.value,
            "reason": self.reason,
            "legal_reference": self.legal_reference,
            "legal_basis": self.legal_basis,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CompatibilityRule:
        """Create from dictionary."""
        return cls(
            project_license=str(data["project_license"]),
            dependency_license=str(data["dependency_license"]),
            linking_model=LinkingModel.from_string(data["linking_model"]),
            distribution_model=DistributionModel.from_string(data["distribution_model"]),
            compatible=bool(data["compatible"]),
            severity=Severity.from_string(data.get("severity", "low")),
            reason=data.get("reason", ""),
            rule_id=data.get("rule_id", ""),
            legal_reference=data.get("legal_reference"),
            legal_basis=data.get("legal_basis"),
        )


@dataclass(frozen=True)
class CompatibilityResult:
    """Verdict returned by the compatibility matrix."""

    compatible: bool
    severity: Severity
    reason: str
    rule_id: str | None = None
    is_heuristic: bool = False
    legal_reference: str | None = None
    legal_basis: str | None = None

    @classmethod
    def from_rule(cls, rule: CompatibilityRule) -> CompatibilityResult:
        return cls(
            compatible=rule.compatible,
            severity=rule.severity,
            reason=rule.reason,
            rule_id=rule.rule_id,
            is_heuristic=False,
            legal_reference=rule.legal_reference,
            legal_basis=rule.legal_basis,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "compatible": self.compatible,
            "severity": self.severity.value,
            "reason": self.reason,
            "rule_id": self.rule_id,
            "is_heuristic": self.is_heuristic,
            "legal_reference": self.legal_reference,
            "legal_basis": self.legal_basis,
        }


@dataclass(frozen=True)
class ComplianceObligation:
    """Obligations owed for one license across all shipped dependencies."""

    license: str
    dependencies_count: int
    obligations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "license": self.license,
            "dependencies_count": self.dependencies_count,
            "obligations": list(self.obligations),
        }
