"""
License compatibility and risk analysis engine for Mantissa Tenet.

This package provides:
- CompatibilityMatrix: License-pair verdicts with wildcard and heuristic fallback
- ConflictDetector: Tree walk producing conflicts and a risk score
- PathResolver: Root-to-conflict path reconstruction and explanation
- DynamicRiskEngine: Severity regraded against the project context
- CausalImpactEngine: Risk attribution per package
- HotspotAnalyzer: Packages ranked by risk amplification potential
- FixEngine: Effort-ranked remediation suggestions
- ScanOrchestrator: All of the above in a single scan call

The module-level functions are the engine's function surface.
"""

from __future__ import annotations

from tenet.config.scan_config import ScanConfiguration
from tenet.engine.causal_impact import CausalImpactEngine
from tenet.engine.compatibility import (
    HEURISTIC_DEFAULT_CAUTIOUS,
    HEURISTIC_PERMISSIVE,
    HEURISTIC_STRONG_COPYLEFT_PROPRIETARY,
    HEURISTIC_UNKNOWN_LICENSE,
    HEURISTIC_WEAK_COPYLEFT_DYNAMIC,
    STRICT_MODE_RULE_ID,
    CompatibilityMatrix,
    default_matrix,
)
from tenet.engine.detector import (
    DETERMINISTIC_SCAN_ID,
    DETERMINISTIC_TIMESTAMP,
    POLICY_ALLOWED_RULE_ID,
    POLICY_FORBIDDEN_RULE_ID,
    ConflictDetector,
    calculate_risk_score,
)
from tenet.engine.dynamic_risk import DynamicRiskEngine
from tenet.engine.fixes import FixEngine
from tenet.engine.hotspots import HotspotAnalyzer
from tenet.engine.paths import PathResolver
from tenet.engine.rules import BUILTIN_RULES, generate_rule_id
from tenet.engine.scanner import ScanOrchestrator, calculate_dynamic_risk_index
from tenet.models.conflict import Conflict, ScanResult
from tenet.models.context import LinkingModel, ProjectContext
from tenet.models.dependency import DependencyNode
from tenet.models.intelligence import (
    CausalImpact,
    DynamicSeverity,
    FixSuggestion,
    HotspotsResult,
    IntentScanResult,
)


def detect_conflicts(tree: DependencyNode, config: ScanConfiguration) -> ScanResult:
    """Detect license conflicts in a dependency tree."""
    return ConflictDetector(config).scan(tree)


def calculate_severity(
    project_license: str | None,
    dependency_license: str,
    context: ProjectContext,
) -> DynamicSeverity:
    """Grade a dependency license against the project context."""
    return DynamicRiskEngine().calculate_severity(project_license, dependency_license, context)


def analyze_impact(conflicts: list[Conflict], risk_score: int) -> list[CausalImpact]:
    """Rank packages by the risk penalty their removal would eliminate."""
    return CausalImpactEngine().analyze(conflicts, risk_score)


def analyze_hotspots(
    tree: DependencyNode,
    conflicts: list[Conflict] | None = None,
    linking_model: LinkingModel = LinkingModel.STATIC,
) -> HotspotsResult:
    """Rank packages by risk amplification potential."""
    return HotspotAnalyzer().analyze(tree, conflicts, linking_model)


def generate_fixes(
    name: str,
    license: str,
    project_license: str | None = None,
) -> list[FixSuggestion]:
    """Generate effort-ranked fix suggestions for a dependency."""
    return FixEngine().generate_fixes(name, license, project_license)


def run_scan(tree: DependencyNode, config: ScanConfiguration) -> IntentScanResult:
    """Run a complete intent-aware scan."""
    return ScanOrchestrator(config).scan(tree)


__all__ = [
    # Components
    "CausalImpactEngine",
    "CompatibilityMatrix",
    "ConflictDetector",
    "DynamicRiskEngine",
    "FixEngine",
    "HotspotAnalyzer",
    "PathResolver",
    "ScanOrchestrator",
    "default_matrix",
    # Rules
    "BUILTIN_RULES",
    "generate_rule_id",
    "HEURISTIC_DEFAULT_CAUTIOUS",
    "HEURISTIC_PERMISSIVE",
    "HEURISTIC_STRONG_COPYLEFT_PROPRIETARY",
    "HEURISTIC_UNKNOWN_LICENSE",
    "HEURISTIC_WEAK_COPYLEFT_DYNAMIC",
    "POLICY_ALLOWED_RULE_ID",
    "POLICY_FORBIDDEN_RULE_ID",
    "STRICT_MODE_RULE_ID",
    # Scoring
    "DETERMINISTIC_SCAN_ID",
    "DETERMINISTIC_TIMESTAMP",
    "calculate_dynamic_risk_index",
    "calculate_risk_score",
    # Function surface
    "analyze_hotspots",
    "analyze_impact",
    "calculate_severity",
    "detect_conflicts",
    "generate_fixes",
    "run_scan",
]
