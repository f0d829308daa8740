"""
Risk hotspot ranking for Mantissa Tenet.

Scores every shipped package on how much it amplifies license risk:
how deep it sits, how much it pulls in, how restrictive its license is,
how many packages depend on it, whether static linking makes its
copyleft bite, and whether it is already in conflict.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from tenet.licenses.catalog import LicenseCatalog, default_catalog, is_gpl_family
from tenet.models.conflict import Conflict
from tenet.models.context import LinkingModel
from tenet.models.dependency import DependencyNode
from tenet.models.intelligence import (
    HotspotFactorType,
    HotspotsResult,
    RiskFactor,
    RiskHotspot,
)
from tenet.models.license import LicenseCategory

logger = logging.getLogger(__name__)

# Packages scoring at or below this are not hotspots
HOTSPOT_THRESHOLD = 10
HIGH_RISK_SCORE = 30
CRITICAL_SCORE = 50
DEFAULT_LIMIT = 10

CONFLICT_BONUS = 20
STATIC_LINKING_SCORE = 15


@dataclass
class _PackageMetrics:
    name: str
    version: str
    license: str
    depth: int
    transitive_count: int
    dependent_count: int = 0


def _half_up(value: float) -> int:
    return math.floor(value + 0.5)


class HotspotAnalyzer:
    """
    Ranks packages by risk amplification potential.

    Example:
        >>> result = HotspotAnalyzer().analyze(tree, conflicts)
        >>> result.hotspots[0].name
    """

    def __init__(self, catalog: LicenseCatalog | None = None, limit: int = DEFAULT_LIMIT):
        self._catalog = catalog or default_catalog
        self.limit = limit

    def analyze(
        self,
        root: DependencyNode,
        conflicts: list[Conflict] | None = None,
        linking_model: LinkingModel = LinkingModel.STATIC,
    ) -> HotspotsResult:
        """
        Rank the packages of a dependency tree.

        Args:
            root: Project root node (never ranked itself)
            conflicts: Conflicts from the detector; their packages score a bonus
            linking_model: How the project links its dependencies

        Returns:
            HotspotsResult with at most `limit` hotspots, highest score first

        Raises:
            TypeError: If root is None
        """
        if root is None:
            raise TypeError("Dependency tree root must not be None")

        metrics = self._build_metrics(root)
        conflict_names = {c.dependency.name for c in conflicts or []}

        hotspots = []
        for metric in metrics.values():
            factors = self._risk_factors(metric, conflict_names, linking_model)
            score = sum(f.score for f in factors)
            if score > HOTSPOT_THRESHOLD:
                hotspots.append(RiskHotspot(
                    name=metric.name,
                    version=metric.version,
                    license=metric.license,
                    score=score,
                    factors=factors,
                    recommendation=self._recommendation(metric, factors),
                ))

        hotspots.sort(key=lambda h: (-h.score, h.name))
        top = hotspots[: self.limit]
        logger.debug(f"{len(hotspots)} hotspots among {len(metrics)} packages")

        return HotspotsResult(
            hotspots=top,
            total_dependencies=len(metrics),
            high_risk_count=sum(1 for h in hotspots if h.score >= HIGH_RISK_SCORE),
            summary=self._summary(top),
        )

    def _build_metrics(self, root: DependencyNode) -> dict[str, _PackageMetrics]:
        """Per-package metrics keyed by name; the first pre-order occurrence wins."""
        dependents: dict[str, int] = {}
        metrics: dict[str, _PackageMetrics] = {}

        for node, lineage in root.walk():
            for child in node.children:
                dependents[child.name] = dependents.get(child.name, 0) + 1
            if node is root or node.dev or node.name in metrics:
                continue
            metrics[node.name] = _PackageMetrics(
                name=node.name,
                version=node.version,
                license=node.primary_license,
                depth=len(lineage),
                transitive_count=sum(1 for _ in node.walk()) - 1,
            )

        for metric in metrics.values():
            metric.dependent_count = dependents.get(metric.name, 0)
        return metrics

    def _risk_factors(
        self,
        metric: _PackageMetrics,
        conflict_names: set[str],
        linking_model: LinkingModel,
    ) -> list[RiskFactor]:
        factors = []

        if metric.depth > 2:
            factors.append(RiskFactor(
                type=HotspotFactorType.DEPTH,
                score=min(20, metric.depth * 4),
                description=f"Depth {metric.depth}: deep transitive dependency",
            ))

        if metric.transitive_count > 5:
            factors.append(RiskFactor(
                type=HotspotFactorType.FAN_OUT,
                score=_half_up(min(25.0, math.log2(metric.transitive_count) * 5)),
                description=f"Fan-out {metric.transitive_count}: many transitive dependencies",
            ))

        license_score, license_description = self._license_risk(metric.license)
        if license_score > 0:
            factors.append(RiskFactor(
                type=HotspotFactorType.LICENSE_RISK,
                score=license_score,
                description=license_description,
            ))

        if metric.dependent_count > 3:
            factors.append(RiskFactor(
                type=HotspotFactorType.TRANSITIVE_IMPACT,
                score=min(20, metric.dependent_count * 3),
                description=f"{metric.dependent_count} packages depend on this",
            ))

        if linking_model == LinkingModel.STATIC and is_gpl_family(metric.license):
            factors.append(RiskFactor(
                type=HotspotFactorType.LINKING_MODEL,
                score=STATIC_LINKING_SCORE,
                description=f"Static linking increases {metric.license} copyleft risk",
            ))

        if metric.name in conflict_names:
            factors.append(RiskFactor(
                type=HotspotFactorType.LICENSE_RISK,
                score=CONFLICT_BONUS,
                description="Already flagged as license conflict",
            ))

        return factors

    def _license_risk(self, license_id: str) -> tuple[int, str]:
        catalog = self._catalog
        if catalog.is_network_copyleft(license_id):
            return 30, f"{license_id}: network copyleft risk"
        if catalog.is_strong_copyleft(license_id):
            return 25, f"{license_id}: strong copyleft contamination risk"
        if catalog.is_file_scoped(license_id):
            return 8, f"{license_id}: file-level copyleft requirements"
        if catalog.is_weak_copyleft(license_id):
            return 12, f"{license_id}: weak copyleft with linking considerations"
        if (
            catalog.category_of(license_id) == LicenseCategory.UNKNOWN
            or catalog.normalize(license_id) == "UNLICENSED"
        ):
            return 15, f"{license_id}: unknown license requires investigation"
        return 0, ""

    def _recommendation(self, metric: _PackageMetrics, factors: list[RiskFactor]) -> str:
        license_risk = any(
            f.type == HotspotFactorType.LICENSE_RISK and f.score >= 20 for f in factors
        )
        fan_out = any(f.type == HotspotFactorType.FAN_OUT for f in factors)
        deep = any(f.type == HotspotFactorType.DEPTH for f in factors)

        if license_risk and fan_out:
            return (
                f"Consider replacing {metric.name} to eliminate "
                f"{metric.transitive_count} transitive risks"
            )
        if license_risk:
            return f"Evaluate {metric.name} for license compliance or replacement"
        if fan_out:
            return f"{metric.name} has high fan-out; monitor for upstream license changes"
        if deep:
            return f"Deep dependency {metric.name}; consider flattening if possible"
        return f"Monitor {metric.name} for risk changes"

    def _summary(self, hotspots: list[RiskHotspot]) -> str:
        if not hotspots:
            return "No significant risk hotspots detected."
        top = hotspots[0]
        critical = sum(1 for h in hotspots if h.score >= CRITICAL_SCORE)
        if critical:
            return f"{critical} critical hotspot(s). Top: {top.name} (score: {top.score})"
        return f"{len(hotspots)} hotspot(s) identified. Top: {top.name} (score: {top.score})"
