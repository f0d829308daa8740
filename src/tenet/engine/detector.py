"""
Conflict detection for Mantissa Tenet.

Walks a dependency tree, checks every shipped dependency against the
project license through the compatibility matrix, and emits Conflict
records with contamination paths, seeded fixes and an aggregate risk
score.
"""

from __future__ import annotations

import fnmatch
import hashlib
import logging
import uuid
from datetime import datetime, timezone

from tenet.config.scan_config import ScanConfiguration
from tenet.engine.compatibility import CompatibilityMatrix
from tenet.licenses.alternatives import AlternativesCatalog, default_alternatives
from tenet.licenses.catalog import LicenseCatalog, default_catalog, is_gpl_family
from tenet.models.conflict import (
    Conflict,
    ConflictDependency,
    ConflictFix,
    ContaminationStep,
    FixType,
    ScanResult,
    ScanSummary,
    TriggeredRule,
)
from tenet.models.context import DistributionModel, LinkingModel
from tenet.models.dependency import DependencyNode
from tenet.models.license import CompatibilityResult, ComplianceObligation, Severity

logger = logging.getLogger(__name__)

POLICY_FORBIDDEN_RULE_ID = "POLICY_FORBIDDEN_LICENSE"
POLICY_ALLOWED_RULE_ID = "POLICY_ALLOWED_LICENSE"

DETERMINISTIC_SCAN_ID = "deterministic-scan-id"
DETERMINISTIC_TIMESTAMP = "2000-01-01T00:00:00+00:00"


def resolve_scan_identity(
    config: ScanConfiguration,
    scan_id: str | None = None,
    timestamp: str | None = None,
) -> tuple[str, str]:
    """
    Resolve the scan id and timestamp for a scan.

    Caller-supplied values win. Otherwise deterministic configurations
    get fixed values and all others get a fresh UUID and the current
    UTC time.
    """
    if config.deterministic:
        return scan_id or DETERMINISTIC_SCAN_ID, timestamp or DETERMINISTIC_TIMESTAMP
    return (
        scan_id or str(uuid.uuid4()),
        timestamp or datetime.now(timezone.utc).isoformat(),
    )


def calculate_risk_score(severities: list[Severity]) -> int:
    """Start at 100, subtract the penalty of every severity, clamp to [0, 100]."""
    score = 100 - sum(s.penalty for s in severities)
    return max(0, min(100, score))


def conflict_id(path: list[str], license_id: str, version: str = "", position: int = 0) -> str:
    """
    Deterministic conflict id.

    The key combines the dependency path, license, version and the
    node's pre-order position, so same-named siblings get distinct ids.
    """
    key = f"{'/'.join(path)}|{license_id}|{version}|{position}"
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
    return f"conflict-{digest[:8]}"


class ConflictDetector:
    """
    Detects license conflicts across a dependency tree.

    The detector is configured once and may scan any number of trees;
    it keeps no state between scans.
    """

    def __init__(
        self,
        config: ScanConfiguration,
        matrix: CompatibilityMatrix | None = None,
        catalog: LicenseCatalog | None = None,
        alternatives: AlternativesCatalog | None = None,
    ):
        """
        Initialize the detector.

        Args:
            config: Scan configuration (project, policy, custom rules)
            matrix: Compatibility matrix. Defaults to one built from the
                configuration's custom rules.
            catalog: License catalog for categories and obligations
            alternatives: Replacement packages named in replace fixes
        """
        self.config = config
        self._catalog = catalog or default_catalog
        self._alternatives = alternatives or default_alternatives
        self._matrix = matrix or CompatibilityMatrix(
            custom_rules=config.rules.custom_rules,
            catalog=self._catalog,
        )
        self._forbidden = {self._catalog.normalize(lic) for lic in config.policy.forbidden_licenses}
        self._allowed = {self._catalog.normalize(lic) for lic in config.policy.allowed_licenses}

    @property
    def matrix(self) -> CompatibilityMatrix:
        return self._matrix

    def scan(
        self,
        root: DependencyNode,
        scan_id: str | None = None,
        timestamp: str | None = None,
    ) -> ScanResult:
        """
        Scan a dependency tree for license conflicts.

        Args:
            root: Project root node
            scan_id: Opaque scan identifier
            timestamp: Opaque scan timestamp

        Returns:
            ScanResult with conflicts, summary and risk score

        Raises:
            TypeError: If root is None
        """
        if root is None:
            raise TypeError("Dependency tree root must not be None")

        scan_id, timestamp = resolve_scan_identity(self.config, scan_id, timestamp)

        conflicts: list[Conflict] = []
        shipped_licenses: list[str] = []
        visited = 0

        for position, (node, lineage) in enumerate(root.walk()):
            if node is root:
                continue
            visited += 1

            if node.dev:
                logger.debug(f"Skipping dev dependency {node.name}")
                continue
            if self._is_ignored(node.name):
                logger.debug(f"Skipping ignored dependency {node.name}")
                continue

            conflict, license_used = self._check_node(node, lineage, position)
            shipped_licenses.append(license_used)
            if conflict is not None:
                logger.debug(
                    f"Conflict on {node.name} ({license_used}): {conflict.severity.value}"
                )
                conflicts.append(conflict)

        summary = ScanSummary.from_severities(visited, (c.severity.value for c in conflicts))
        risk_score = calculate_risk_score([c.severity for c in conflicts])

        logger.info(
            f"Conflict detection complete: {visited} dependencies, "
            f"{len(conflicts)} conflicts, risk score {risk_score}"
        )

        return ScanResult(
            scan_id=scan_id,
            timestamp=timestamp,
            project_license=self.config.project_license,
            risk_score=risk_score,
            summary=summary,
            conflicts=conflicts,
            compliance_obligations=self._compliance_obligations(shipped_licenses),
        )

    def evaluate_license(self, license_id: str) -> CompatibilityResult:
        """
        Evaluate one dependency license against the project.

        Policy lists are applied before the compatibility matrix.
        """
        normalized = self._catalog.normalize(license_id)
        if normalized in self._forbidden:
            return CompatibilityResult(
                compatible=False,
                severity=Severity.CRITICAL,
                reason=f"{license_id} is forbidden by the project license policy.",
                rule_id=POLICY_FORBIDDEN_RULE_ID,
            )
        if normalized in self._allowed:
            return CompatibilityResult(
                compatible=True,
                severity=Severity.LOW,
                reason=f"{license_id} is explicitly allowed by the project license policy.",
                rule_id=POLICY_ALLOWED_RULE_ID,
            )

        project = self.config.project
        return self._matrix.is_compatible(
            project.license,
            license_id,
            project.linking_model,
            project.distribution_model,
            strict_mode=self.config.strict_mode,
        )

    def _is_ignored(self, name: str) -> bool:
        return any(fnmatch.fnmatchcase(name, pattern) for pattern in self.config.policy.ignored_packages)

    def _check_node(
        self,
        node: DependencyNode,
        lineage: tuple[DependencyNode, ...],
        position: int = 0,
    ) -> tuple[Conflict | None, str]:
        """
        Check a node's license alternatives.

        Returns the conflict (None if any alternative is compatible) and
        the license the node is counted under.
        """
        worst: tuple[str, CompatibilityResult] | None = None

        for license_id in node.license_options():
            result = self.evaluate_license(license_id)
            if result.compatible:
                return None, license_id
            if worst is None or result.severity.rank > worst[1].severity.rank:
                worst = (license_id, result)

        license_id, result = worst
        return self._create_conflict(node, lineage, license_id, result, position), license_id

    def _create_conflict(
        self,
        node: DependencyNode,
        lineage: tuple[DependencyNode, ...],
        license_id: str,
        result: CompatibilityResult,
        position: int = 0,
    ) -> Conflict:
        path = node.path or [*(n.name for n in lineage), node.name]
        return Conflict(
            id=conflict_id(path, license_id, node.version, position),
            severity=result.severity,
            dependency=ConflictDependency(
                name=node.name,
                version=node.version,
                license=license_id,
                path=list(path),
            ),
            reason=result.reason,
            contamination_path=self._contamination_path(node, lineage, license_id),
            fixes=self._suggest_fixes(node, license_id),
            triggered_rule=TriggeredRule(
                id=result.rule_id or "UNKNOWN",
                is_heuristic=result.is_heuristic,
                legal_reference=result.legal_reference,
                legal_basis=result.legal_basis,
            ),
            legal_context=self._legal_context(license_id, result.severity),
        )

    def _contamination_path(
        self,
        node: DependencyNode,
        lineage: tuple[DependencyNode, ...],
        license_id: str,
    ) -> list[ContaminationStep]:
        steps = []
        for i, ancestor in enumerate(lineage):
            label = self.config.project_license if i == 0 else ancestor.primary_license
            steps.append(ContaminationStep(name=ancestor.name, license=label))
        steps.append(ContaminationStep(name=node.name, license=license_id, is_conflict=True))
        return steps

    def _legal_context(self, license_id: str, severity: Severity) -> str:
        if severity != Severity.CRITICAL:
            return ""
        if self._catalog.is_network_copyleft(license_id):
            return (
                f"{license_id} Section 13 extends copyleft requirements to software provided "
                f"over a network. Even SaaS use triggers disclosure obligations."
            )
        if is_gpl_family(license_id):
            return (
                f"{license_id} Section 5 requires derivative works to be licensed under "
                f"{license_id}. Linking (static or dynamic) creates a derivative work under "
                f"copyright law."
            )
        return ""

    def _suggest_fixes(self, node: DependencyNode, license_id: str) -> list[ConflictFix]:
        project = self.config.project
        strong = (
            self._catalog.is_strong_copyleft(license_id)
            or self._catalog.is_network_copyleft(license_id)
        )
        copyleft = self._catalog.is_copyleft(license_id) or is_gpl_family(license_id)

        candidates = self._alternatives.package_names(license_id, node.name)
        replace_steps = [f"Replace {node.name} with {candidate}" for candidate in candidates]

        fixes = []
        if strong:
            fixes.append(ConflictFix(
                type=FixType.REPLACE,
                description="Replace with a permissive-licensed alternative",
                steps=replace_steps,
                alternatives=candidates,
            ))
        else:
            fixes.append(ConflictFix(
                type=FixType.REPLACE,
                description=f"Replace with an alternative licensed compatibly with {project.license}",
                steps=replace_steps,
                alternatives=candidates,
            ))

        if copyleft and project.linking_model == LinkingModel.STATIC:
            fixes.append(ConflictFix(
                type=FixType.ARCHITECTURAL,
                description=f"Isolate {license_id} component into a separate service",
                steps=[
                    f"Create new service: {node.name}-service",
                    f"Move {node.name} dependency to the new service",
                    f"License the new service as {license_id}",
                    "Main application communicates with it over a network API",
                ],
            ))

        if copyleft and project.distribution_model == DistributionModel.OPEN_SOURCE:
            fixes.append(ConflictFix(
                type=FixType.RELICENSE,
                description=f"Change project license to {license_id}",
                steps=[
                    f"Update LICENSE file to {license_id}",
                    "Ensure all contributors agree to the license change",
                    "Update the license field in the package manifest",
                ],
            ))

        return fixes

    def _compliance_obligations(self, licenses: list[str]) -> list[ComplianceObligation]:
        counts: dict[str, int] = {}
        for license_id in licenses:
            normalized = self._catalog.normalize(license_id)
            counts[normalized] = counts.get(normalized, 0) + 1

        obligations = []
        for license_id, count in counts.items():
            duties = self._catalog.obligations_of(license_id)
            if duties:
                obligations.append(ComplianceObligation(
                    license=license_id,
                    dependencies_count=count,
                    obligations=duties,
                ))

        obligations.sort(key=lambda o: (-o.dependencies_count, o.license))
        return obligations
