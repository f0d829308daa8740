"""
Causal risk attribution for Mantissa Tenet.

Answers "how much of the risk would go away if this package were
removed?" Each conflict's severity weight is attributed to every
package on its contamination path, so overlapping paths count the same
weight more than once. Contributions are therefore not shares of a
whole and may sum to more than 100.
"""

from __future__ import annotations

from tenet.models.conflict import Conflict
from tenet.models.intelligence import CausalImpact
from tenet.models.license import Severity


class CausalImpactEngine:
    """Ranks packages by the risk penalty their removal would eliminate."""

    def analyze(self, conflicts: list[Conflict], current_risk_score: int) -> list[CausalImpact]:
        """
        Attribute the scan's risk penalty to packages on conflict paths.

        Args:
            conflicts: Conflicts from the detector
            current_risk_score: Risk score of the scan (0-100, higher is safer)

        Returns:
            Impacts sorted by contribution, conflict count, then name.
            Empty when there are no conflicts or no penalty.
        """
        baseline_penalty = max(0, 100 - current_risk_score)
        if not conflicts or baseline_penalty == 0:
            return []

        weights: dict[str, int] = {}
        counts: dict[str, int] = {}
        breakdowns: dict[str, dict[str, int]] = {}

        for conflict in conflicts:
            weight = conflict.severity.penalty
            for name in self._path_packages(conflict):
                if name not in weights:
                    weights[name] = 0
                    counts[name] = 0
                    breakdowns[name] = {s.value: 0 for s in Severity}
                weights[name] += weight
                counts[name] += 1
                breakdowns[name][conflict.severity.value] += 1

        impacts = [
            CausalImpact(
                package_name=name,
                risk_contribution=round(min(100.0, weight / baseline_penalty * 100), 2),
                conflicts_removed=counts[name],
                severity_breakdown=breakdowns[name],
                risk_score_after_removal=min(100, current_risk_score + weight),
            )
            for name, weight in weights.items()
        ]
        impacts.sort(key=lambda i: (-i.risk_contribution, -i.conflicts_removed, i.package_name))
        return impacts

    def _path_packages(self, conflict: Conflict) -> list[str]:
        """Package names on the contamination path, root excluded."""
        names = [step.name for step in conflict.contamination_path[1:] if step.name]
        return names or [conflict.dependency.name]
