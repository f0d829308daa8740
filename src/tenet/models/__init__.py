"""
Data models for Mantissa Tenet.

This package contains the core data models:
- DependencyNode: A package in the materialized dependency tree
- ProjectContext: How the scanned project is licensed, linked and shipped
- LicenseRecord / CompatibilityRule / CompatibilityResult: License data
- Conflict / ScanResult: Output of conflict detection
- DynamicSeverity / FixSuggestion / ConflictPath / CausalImpact:
  Output of the intent-aware stages
"""

from __future__ import annotations

from tenet.models.conflict import (
    CONFLICT_MARKER,
    Conflict,
    ConflictDependency,
    ConflictFix,
    ContaminationStep,
    FixType,
    ScanResult,
    ScanSummary,
    TriggeredRule,
)
from tenet.models.context import (
    DistributionModel,
    LinkingModel,
    ProjectContext,
    ProjectIntent,
)
from tenet.models.dependency import (
    UNKNOWN_LICENSE,
    DependencyNode,
    split_license_expression,
)
from tenet.models.intelligence import (
    CausalImpact,
    ConflictPath,
    DynamicSeverity,
    EnhancedConflict,
    FixEffort,
    FixStrategy,
    FixSuggestion,
    HotspotFactorType,
    HotspotsResult,
    IntentScanResult,
    RiskFactor,
    RiskHotspot,
    RiskLevel,
)
from tenet.models.license import (
    WILDCARD,
    CompatibilityResult,
    CompatibilityRule,
    ComplianceObligation,
    LicenseCategory,
    LicenseRecord,
    Severity,
)

__all__ = [
    # Context
    "DistributionModel",
    "LinkingModel",
    "ProjectContext",
    "ProjectIntent",
    # Dependency tree
    "UNKNOWN_LICENSE",
    "DependencyNode",
    "split_license_expression",
    # License
    "WILDCARD",
    "CompatibilityResult",
    "CompatibilityRule",
    "ComplianceObligation",
    "LicenseCategory",
    "LicenseRecord",
    "Severity",
    # Conflict
    "CONFLICT_MARKER",
    "Conflict",
    "ConflictDependency",
    "ConflictFix",
    "ContaminationStep",
    "FixType",
    "ScanResult",
    "ScanSummary",
    "TriggeredRule",
    # Intelligence
    "CausalImpact",
    "ConflictPath",
    "DynamicSeverity",
    "EnhancedConflict",
    "FixEffort",
    "FixStrategy",
    "FixSuggestion",
    "HotspotFactorType",
    "HotspotsResult",
    "IntentScanResult",
    "RiskLevel",
    "RiskFactor",
    "RiskHotspot",
]
