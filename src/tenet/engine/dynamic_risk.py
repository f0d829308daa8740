"""
Context-aware severity grading for Mantissa Tenet.

The same license pair can be a blocker for a proprietary product, a
non-issue for a GPL project, and a flexibility concern for a project
that has not chosen a license yet. The DynamicRiskEngine regrades a
dependency license against the declared project intent, distribution
and linking model.

The decision table is total: every (intent, license) combination ends
in an explicit DynamicSeverity.
"""

from __future__ import annotations

import re

from tenet.licenses.catalog import LicenseCatalog, default_catalog, is_gpl_family
from tenet.models.context import LinkingModel, ProjectContext, ProjectIntent
from tenet.models.dependency import UNKNOWN_LICENSE
from tenet.models.intelligence import DynamicSeverity, RiskLevel

_VERSION_SUFFIX = re.compile(r"(-only|-or-later|\+)", flags=re.IGNORECASE)

# Project license family -> dependency licenses it can absorb
GPL_FAMILY_COMPATIBILITY: dict[str, frozenset[str]] = {
    "GPL-3.0": frozenset({"GPL-3.0", "AGPL-3.0", "LGPL-3.0"}),
    "GPL-2.0": frozenset({"GPL-2.0", "LGPL-2.1"}),
    "AGPL-3.0": frozenset({"AGPL-3.0", "GPL-3.0", "GPL-2.0", "LGPL-3.0", "LGPL-2.1"}),
}

_UNDECLARED = {"", UNKNOWN_LICENSE.lower(), "none", "noassertion"}


class DynamicRiskEngine:
    """Regrades license findings against the project context."""

    def __init__(self, catalog: LicenseCatalog | None = None):
        self._catalog = catalog or default_catalog

    def calculate_severity(
        self,
        project_license: str | None,
        dependency_license: str,
        context: ProjectContext,
    ) -> DynamicSeverity:
        """
        Calculate the context-aware severity of a dependency license.

        Args:
            project_license: Project license, falls back to the context's
            dependency_license: License of the dependency
            context: Project context (intent, distribution, linking)

        Returns:
            DynamicSeverity with level and explanation
        """
        effective_license = project_license or context.project_license
        dependency_license = (dependency_license or "").strip() or UNKNOWN_LICENSE

        if context.intent == ProjectIntent.PROPRIETARY:
            return self._proprietary_severity(dependency_license, context.linking_model)
        if context.intent == ProjectIntent.OPEN_SOURCE:
            return self._open_source_severity(dependency_license, effective_license)
        return self._undecided_severity(dependency_license)

    # License classification

    def normalize(self, license_id: str) -> str:
        """Normalize a license id, dropping -only/-or-later suffixes."""
        return self._catalog.normalize(_VERSION_SUFFIX.sub("", license_id).strip())

    def is_strong_copyleft(self, license_id: str) -> bool:
        if self._catalog.is_strong_copyleft(license_id):
            return True
        upper = license_id.upper()
        return "GPL" in upper and "LGPL" not in upper

    def is_weak_copyleft(self, license_id: str) -> bool:
        if self._catalog.is_weak_copyleft(license_id):
            return True
        upper = license_id.upper()
        return any(marker in upper for marker in ("LGPL", "MPL", "EPL"))

    def is_permissive(self, license_id: str) -> bool:
        return self._catalog.is_permissive(license_id)

    def is_gpl_compatible(self, dependency_license: str, project_license: str) -> bool:
        """Check the dependency against the project's GPL family table."""
        accepted = GPL_FAMILY_COMPATIBILITY.get(self.normalize(project_license))
        if not accepted:
            return False
        return self.normalize(dependency_license) in accepted

    # Intent branches

    def _proprietary_severity(
        self,
        dep: str,
        linking_model: LinkingModel,
    ) -> DynamicSeverity:
        if self.is_strong_copyleft(dep):
            network = self._catalog.is_network_copyleft(dep) or "AGPL" in dep.upper()
            return DynamicSeverity(
                level=RiskLevel.CRITICAL,
                reason=(
                    "network copyleft risk"
                    if network
                    else "Strong copyleft license incompatible with proprietary distribution"
                ),
                obligation="Requires releasing your entire codebase under the same license",
                contextual_explanation=(
                    f"{dep} requires that any software linking to it must also be {dep}. "
                    f"This conflicts with your proprietary intent."
                ),
                applies_when=["static linking", "dynamic linking", "modification of the dependency"],
                intent_impact=(
                    "Because your project is proprietary, this dependency creates a legal "
                    "incompatibility."
                ),
            )

        if self._catalog.is_file_scoped(dep) or "MPL" in dep.upper():
            return DynamicSeverity(
                level=RiskLevel.MEDIUM,
                reason="File-level copyleft requires source disclosure for modified files only",
                obligation="modifications to the licensed files must be disclosed; your code remains proprietary",
                contextual_explanation=(
                    f"{dep} is file-scoped copyleft. Only modified {dep} files need to be "
                    f"published."
                ),
                applies_when=["if you modify the dependency"],
                intent_impact=(
                    "Compatible with proprietary projects as long as you do not modify the library."
                ),
            )

        if self.is_weak_copyleft(dep) and linking_model == LinkingModel.STATIC:
            return DynamicSeverity(
                level=RiskLevel.HIGH,
                reason="Weak copyleft with static linking creates redistribution obligations",
                obligation="Requires providing object files or source code for relinking",
                contextual_explanation=(
                    f"{dep} allows proprietary use but requires that users can relink with "
                    f"modified versions. Static linking makes this impractical."
                ),
                applies_when=["static linking"],
                intent_impact=(
                    "Your proprietary project can use this, but static linking creates "
                    "practical compliance challenges."
                ),
            )

        if self.is_weak_copyleft(dep):
            return DynamicSeverity(
                level=RiskLevel.MEDIUM,
                reason="Weak copyleft with dynamic linking is compatible but has obligations",
                obligation="Must allow users to replace the library with modified versions",
                contextual_explanation=(
                    f"{dep} allows proprietary use when dynamically linked. You must ensure "
                    f"users can swap the library."
                ),
                applies_when=["dynamic linking", "process separation"],
                intent_impact=(
                    "Compatible with your proprietary intent, but has specific distribution "
                    "requirements."
                ),
            )

        if self.is_permissive(dep):
            return DynamicSeverity(
                level=RiskLevel.SAFE,
                reason="Permissive license fully compatible with proprietary use",
                obligation="Include copyright notice and license text in distributions",
                contextual_explanation=f"{dep} allows unrestricted commercial and proprietary use.",
                applies_when=["always"],
                intent_impact="No restrictions on your proprietary intent.",
            )

        return DynamicSeverity(
            level=RiskLevel.MEDIUM,
            reason="unknown license; manual review recommended",
            obligation="Review license terms manually",
            contextual_explanation=(
                f"{dep} is not a recognized open-source license. Check whether it allows "
                f"proprietary use."
            ),
            applies_when=["unknown"],
            intent_impact="Cannot automatically assess compatibility.",
        )

    def _open_source_severity(self, dep: str, project_license: str | None) -> DynamicSeverity:
        if not project_license or project_license.strip().lower() in _UNDECLARED:
            return DynamicSeverity(
                level=RiskLevel.LOW,
                reason="No project license declared yet",
                obligation="Declare a project license to assess compatibility",
                contextual_explanation=(
                    "Without knowing your project license, conflicts cannot be determined."
                ),
                applies_when=["no project license"],
                intent_impact="Add a LICENSE file to enable accurate analysis.",
            )

        if self.normalize(dep) == self.normalize(project_license):
            return DynamicSeverity(
                level=RiskLevel.SAFE,
                reason="same license compatibility",
                obligation="Continue using the same license for your project",
                contextual_explanation=f"Both your project and this dependency use {project_license}.",
                applies_when=["always"],
                intent_impact="No conflict. This is the intended use case for copyleft licenses.",
            )

        if is_gpl_family(project_license) and self.normalize(dep) == "Apache-2.0":
            return DynamicSeverity(
                level=RiskLevel.HIGH,
                reason="incompatible patent clause between GPL and Apache-2.0",
                obligation=(
                    "Avoid mixing a GPL project with an Apache-2.0 dependency unless "
                    "cleared by legal review"
                ),
                contextual_explanation=(
                    "Apache-2.0 patent termination terms conflict with GPL reciprocity "
                    "expectations."
                ),
                applies_when=["distribution"],
                intent_impact="May require replacing the dependency or changing license.",
            )

        if self.is_permissive(dep):
            return DynamicSeverity(
                level=RiskLevel.SAFE,
                reason="Permissive license compatible with all open-source licenses",
                obligation="Include attribution in your project",
                contextual_explanation=f"{dep} allows use in any open-source project.",
                applies_when=["always"],
                intent_impact="No restrictions.",
            )

        if self.is_gpl_compatible(dep, project_license):
            return DynamicSeverity(
                level=RiskLevel.SAFE,
                reason="Dependency license is compatible with your project license",
                obligation="Continue distributing under your project license",
                contextual_explanation=f"{dep} is compatible with {project_license}.",
                applies_when=["always"],
                intent_impact="No restrictions for open-source projects.",
            )

        if self.is_strong_copyleft(dep):
            return DynamicSeverity(
                level=RiskLevel.HIGH,
                reason="copyleft contamination incompatible with project license",
                obligation=f"Must change project license to {dep} or remove the dependency",
                contextual_explanation=(
                    f"{dep} requires your entire project to be {dep}, but your project is "
                    f"{project_license}."
                ),
                applies_when=["distribution"],
                intent_impact="Your open-source intent is fine, but these specific licenses conflict.",
            )

        return DynamicSeverity(
            level=RiskLevel.MEDIUM,
            reason="License compatibility unclear",
            obligation="Review licenses manually for compatibility",
            contextual_explanation=f"Check whether {dep} is compatible with {project_license}.",
            applies_when=["distribution"],
            intent_impact="May require legal review.",
        )

    def _undecided_severity(self, dep: str) -> DynamicSeverity:
        if self.is_strong_copyleft(dep):
            return DynamicSeverity(
                level=RiskLevel.MEDIUM,
                reason="future flexibility risk from copyleft",
                obligation="If you use this dependency, your project will likely need to be open source",
                contextual_explanation=(
                    f"{dep} is a strong copyleft license. It reduces future flexibility: if you "
                    f"later want a proprietary or permissive license you will need to remove "
                    f"this dependency."
                ),
                applies_when=["if you want proprietary or permissive licensing later"],
                intent_impact="Using this now does not lock you in, but be aware of the implications.",
            )

        if self.is_weak_copyleft(dep):
            return DynamicSeverity(
                level=RiskLevel.LOW,
                reason="Weak copyleft has some obligations but maintains flexibility",
                obligation="Allows proprietary use with dynamic linking",
                contextual_explanation=f"{dep} allows most licensing options if you use dynamic linking.",
                applies_when=["static linking creates obligations"],
                intent_impact="Maintains flexibility for most future licensing choices.",
            )

        if self.is_permissive(dep):
            return DynamicSeverity(
                level=RiskLevel.SAFE,
                reason="Permissive license maintains full licensing flexibility",
                obligation="Include attribution",
                contextual_explanation=f"{dep} allows any future licensing choice.",
                applies_when=["always"],
                intent_impact="No impact on future licensing decisions.",
            )

        return DynamicSeverity(
            level=RiskLevel.LOW,
            reason="License impact on future flexibility unclear",
            obligation="Review before committing to a project license",
            contextual_explanation=f"{dep} should be reviewed before you choose a project license.",
            applies_when=["when deciding project license"],
            intent_impact="May affect licensing options.",
        )
