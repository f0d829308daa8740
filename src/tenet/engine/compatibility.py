"""
License compatibility matrix for Mantissa Tenet.

Answers whether a dependency license may be used by a project license
under a given linking and distribution model. Lookup is total: every
query resolves to an explicit rule, a wildcard rule, a strict-mode
rejection, or a category heuristic.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from tenet.engine.rules import BUILTIN_RULES, generate_rule_id
from tenet.licenses.catalog import LicenseCatalog, default_catalog
from tenet.models.context import DistributionModel, LinkingModel
from tenet.models.dependency import UNKNOWN_LICENSE
from tenet.models.license import (
    CompatibilityResult,
    CompatibilityRule,
    LicenseCategory,
    Severity,
)

logger = logging.getLogger(__name__)

STRICT_MODE_RULE_ID = "STRICT_MODE_VIOLATION"
HEURISTIC_UNKNOWN_LICENSE = "HEURISTIC_UNKNOWN_LICENSE"
HEURISTIC_PERMISSIVE = "HEURISTIC_PERMISSIVE"
HEURISTIC_STRONG_COPYLEFT_PROPRIETARY = "HEURISTIC_STRONG_COPYLEFT_PROPRIETARY"
HEURISTIC_WEAK_COPYLEFT_DYNAMIC = "HEURISTIC_WEAK_COPYLEFT_DYNAMIC"
HEURISTIC_DEFAULT_CAUTIOUS = "HEURISTIC_DEFAULT_CAUTIOUS"


class CompatibilityMatrix:
    """
    Rule table with wildcard and category-heuristic fallback.

    Custom rules are consulted before built-in rules in both the exact
    and the wildcard phase. The matrix holds no per-call state.
    """

    def __init__(
        self,
        custom_rules: list[CompatibilityRule] | None = None,
        catalog: LicenseCatalog | None = None,
    ):
        """
        Initialize the matrix.

        Args:
            custom_rules: Additional rules, consulted first
            catalog: License catalog for normalization and categories
        """
        self._catalog = catalog or default_catalog
        self._custom_rules = [
            rule if rule.rule_id else _with_custom_id(rule, index)
            for index, rule in enumerate(custom_rules or [], start=1)
        ]
        self._rules = self._custom_rules + list(BUILTIN_RULES)

    @property
    def rules(self) -> list[CompatibilityRule]:
        """All rules in lookup order."""
        return list(self._rules)

    @property
    def catalog(self) -> LicenseCatalog:
        return self._catalog

    def is_compatible(
        self,
        project_license: str,
        dependency_license: str,
        linking_model: LinkingModel,
        distribution_model: DistributionModel,
        strict_mode: bool = False,
    ) -> CompatibilityResult:
        """
        Check whether a dependency license is compatible with a project license.

        Args:
            project_license: License of the consuming project
            dependency_license: License of the dependency
            linking_model: How the dependency is linked
            distribution_model: How the project is distributed
            strict_mode: Reject pairs with no explicit or wildcard rule

        Returns:
            CompatibilityResult, never None
        """
        raw_project = (project_license or "").strip() or UNKNOWN_LICENSE
        raw_dependency = (dependency_license or "").strip() or UNKNOWN_LICENSE
        project = self._catalog.normalize(raw_project)
        dependency = self._catalog.normalize(raw_dependency)

        rule = self.find_rule(
            raw_project, raw_dependency, linking_model, distribution_model,
            normalized=(project, dependency),
        )
        if rule is not None:
            logger.debug(
                f"Rule {rule.rule_id} matched {project} + {dependency} "
                f"({linking_model.value}, {distribution_model.value})"
            )
            return CompatibilityResult.from_rule(rule)

        if strict_mode:
            return CompatibilityResult(
                compatible=False,
                severity=Severity.HIGH,
                reason=(
                    f"No explicit compatibility rule found for {raw_project} + "
                    f"{raw_dependency}. Strict mode requires explicit rules."
                ),
                rule_id=STRICT_MODE_RULE_ID,
                is_heuristic=False,
            )

        return self._heuristic_check(project, dependency, linking_model, distribution_model)

    def find_rule(
        self,
        project_license: str,
        dependency_license: str,
        linking_model: LinkingModel,
        distribution_model: DistributionModel,
        normalized: tuple[str, str] | None = None,
    ) -> CompatibilityRule | None:
        """
        Find the first rule matching a 4-tuple.

        Exact matches on the given ids are tried first, then exact matches
        on the normalized ids, then wildcard matches.
        """
        if normalized is None:
            normalized = (
                self._catalog.normalize(project_license),
                self._catalog.normalize(dependency_license),
            )
        candidates = [(project_license, dependency_license)]
        if normalized != candidates[0]:
            candidates.append(normalized)

        for allow_wildcard in (False, True):
            for project, dependency in candidates:
                for rule in self._rules:
                    if allow_wildcard and not rule.is_wildcard:
                        continue
                    if rule.matches(
                        project, dependency, linking_model, distribution_model,
                        allow_wildcard=allow_wildcard,
                    ):
                        return rule
        return None

    def _heuristic_check(
        self,
        project_license: str,
        dependency_license: str,
        linking_model: LinkingModel,
        distribution_model: DistributionModel,
    ) -> CompatibilityResult:
        """Fallback verdict derived from the dependency's license category."""
        category = self._catalog.category_of(dependency_license)

        if category == LicenseCategory.UNKNOWN:
            # Missing license metadata is usually a permissive package
            # whose lockfile omits the field
            return CompatibilityResult(
                compatible=True,
                severity=Severity.LOW,
                reason=(
                    f'Dependency license "{dependency_license}" is not in the license '
                    f"catalog. Manual review recommended."
                ),
                rule_id=HEURISTIC_UNKNOWN_LICENSE,
                is_heuristic=True,
            )

        if category == LicenseCategory.PERMISSIVE:
            return CompatibilityResult(
                compatible=True,
                severity=Severity.LOW,
                reason=f"{dependency_license} is a permissive license compatible with most projects.",
                rule_id=HEURISTIC_PERMISSIVE,
                is_heuristic=True,
                legal_basis="Permissive licenses grant broad rights without copyleft restrictions.",
            )

        if (
            category == LicenseCategory.STRONG_COPYLEFT
            and distribution_model == DistributionModel.PROPRIETARY
        ):
            return CompatibilityResult(
                compatible=False,
                severity=Severity.CRITICAL,
                reason=(
                    f"{dependency_license} is strong copyleft and requires derivative works "
                    f"to be licensed under {dependency_license}. This conflicts with "
                    f"proprietary distribution."
                ),
                rule_id=HEURISTIC_STRONG_COPYLEFT_PROPRIETARY,
                is_heuristic=True,
                legal_basis="Strong copyleft requires derivative works to use the same license.",
            )

        if (
            category == LicenseCategory.WEAK_COPYLEFT
            and linking_model == LinkingModel.DYNAMIC
        ):
            return CompatibilityResult(
                compatible=True,
                severity=Severity.LOW,
                reason=f"{dependency_license} allows dynamic linking with proprietary code.",
                rule_id=HEURISTIC_WEAK_COPYLEFT_DYNAMIC,
                is_heuristic=True,
                legal_basis="LGPL and similar licenses explicitly permit dynamic linking.",
            )

        return CompatibilityResult(
            compatible=False,
            severity=Severity.MEDIUM,
            reason=(
                f"Potential incompatibility between {project_license} and "
                f"{dependency_license}. Manual review recommended."
            ),
            rule_id=HEURISTIC_DEFAULT_CAUTIOUS,
            is_heuristic=True,
        )


def _with_custom_id(rule: CompatibilityRule, index: int) -> CompatibilityRule:
    generated = generate_rule_id(
        rule.project_license,
        rule.dependency_license,
        rule.linking_model,
        rule.distribution_model,
        index,
    )
    return replace(rule, rule_id=f"CUSTOM_{generated}")


# Shared matrix instance with the built-in rules only
default_matrix = CompatibilityMatrix()
