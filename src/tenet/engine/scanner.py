"""
Scan orchestration for Mantissa Tenet.

Composes conflict detection with the intent-aware stages (dynamic
severity, fix suggestions, conflict paths, causal impact, hotspots)
into a single scan call.
"""

from __future__ import annotations

import math
import time

from tenet.config.scan_config import ScanConfiguration
from tenet.engine.causal_impact import CausalImpactEngine
from tenet.engine.detector import ConflictDetector, resolve_scan_identity
from tenet.engine.dynamic_risk import DynamicRiskEngine
from tenet.engine.fixes import FixEngine
from tenet.engine.hotspots import HotspotAnalyzer
from tenet.engine.paths import PathResolver
from tenet.licenses.catalog import LicenseCatalog, default_catalog
from tenet.models.conflict import ScanSummary
from tenet.models.context import ProjectContext
from tenet.models.dependency import DependencyNode
from tenet.models.intelligence import (
    DynamicSeverity,
    EnhancedConflict,
    IntentScanResult,
    RiskLevel,
)
from tenet.observability.logging import get_logger

logger = get_logger(__name__)

# Weights for the dynamic risk index
RISK_LEVEL_WEIGHTS = {
    RiskLevel.CRITICAL: 10,
    RiskLevel.HIGH: 5,
    RiskLevel.MEDIUM: 2,
    RiskLevel.LOW: 1,
    RiskLevel.SAFE: 0,
}


def calculate_dynamic_risk_index(severities: list[DynamicSeverity]) -> int:
    """
    Compute the 0-100 dynamic risk index, higher is riskier.

    The index is ten times the mean level weight, rounded half up and
    capped at 100. No findings means an index of 0.
    """
    if not severities:
        return 0
    mean = sum(RISK_LEVEL_WEIGHTS[s.level] for s in severities) / len(severities)
    return min(100, math.floor(mean * 10 + 0.5))


class ScanOrchestrator:
    """
    Runs a complete intent-aware scan.

    Example:
        >>> config = create_default_config()
        >>> result = ScanOrchestrator(config).scan(tree)
        >>> result.risk_score
    """

    def __init__(
        self,
        config: ScanConfiguration,
        catalog: LicenseCatalog | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Scan configuration
            catalog: License catalog shared by every stage
        """
        self.config = config
        catalog = catalog or default_catalog
        self.detector = ConflictDetector(config, catalog=catalog)
        self.risk_engine = DynamicRiskEngine(catalog)
        self.fix_engine = FixEngine(catalog)
        self.path_resolver = PathResolver(catalog)
        self.impact_engine = CausalImpactEngine()
        self.hotspot_analyzer = HotspotAnalyzer(catalog)

    def scan(
        self,
        root: DependencyNode,
        context: ProjectContext | None = None,
        scan_id: str | None = None,
        timestamp: str | None = None,
    ) -> IntentScanResult:
        """
        Scan a dependency tree.

        Args:
            root: Project root node
            context: Project context. Defaults to the configuration's.
            scan_id: Opaque scan identifier
            timestamp: Opaque scan timestamp

        Returns:
            IntentScanResult

        Raises:
            TypeError: If root is None
        """
        if root is None:
            raise TypeError("Dependency tree root must not be None")

        context = context or self.config.project_context()
        project_license = self.config.project_license
        scan_id, timestamp = resolve_scan_identity(self.config, scan_id, timestamp)

        logger.scan_started(scan_id, project_license, strict_mode=self.config.strict_mode)
        started = time.perf_counter()

        base = self.detector.scan(root, scan_id=scan_id, timestamp=timestamp)

        enhanced = []
        paths = {}
        for conflict in base.conflicts:
            logger.conflict_detected(
                conflict.id,
                conflict.severity.value,
                conflict.triggered_rule.id if conflict.triggered_rule else "UNKNOWN",
                conflict.dependency.name,
            )
            dependency_license = conflict.dependency.license
            dynamic = self.risk_engine.calculate_severity(
                context.project_license or project_license,
                dependency_license,
                context,
            )
            fixes = self.fix_engine.generate_fixes(
                conflict.dependency.name,
                dependency_license,
                context.project_license or project_license,
            )
            path = self.path_resolver.for_conflict(root, conflict, project_license)
            paths[conflict.id] = path
            enhanced.append(EnhancedConflict(
                conflict=conflict,
                dynamic_severity=dynamic,
                fix_suggestions=fixes,
                conflict_path=path,
            ))

        dynamic_levels = [e.dynamic_severity for e in enhanced]
        dynamic_summary = ScanSummary.from_severities(
            base.summary.total_dependencies,
            (s.level.value for s in dynamic_levels),
        )

        result = IntentScanResult(
            base=base,
            project_context=context,
            enhanced_conflicts=enhanced,
            conflict_paths=paths,
            dynamic_summary=dynamic_summary,
            dynamic_risk_index=calculate_dynamic_risk_index(dynamic_levels),
            causal_impacts=self.impact_engine.analyze(base.conflicts, base.risk_score),
            hotspots=self.hotspot_analyzer.analyze(root, base.conflicts, context.linking_model),
        )

        logger.scan_completed(
            scan_id,
            dependency_count=base.summary.total_dependencies,
            conflict_count=len(base.conflicts),
            risk_score=base.risk_score,
            duration_seconds=round(time.perf_counter() - started, 3),
        )
        return result
